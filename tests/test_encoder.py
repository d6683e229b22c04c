"""
Tests for the constraint encoder: variable/constraint counts per rule,
the run encoding, the black clue policy and structural guards.
"""

from collections import Counter

import pytest

from puzzle_builders import only_white
from str8ts.constraints.builder import ConstraintBuilder, Sense
from str8ts.constraints.encoder import (
    ConflictingBlackCluesError,
    InvalidCompartmentError,
    check_black_clues,
    check_compartment,
    encode_grid,
)
from str8ts.constraints.indexing import run_starts, s_key, starts_covering, x_key
from str8ts.core.grid_types import Str8tsGrid
from str8ts.core.puzzle_io import parse_grid
from str8ts.features.compartments import Compartment
from str8ts.solver.config import SolverConfig


def constraint_kinds(builder: ConstraintBuilder) -> Counter:
    """Count constraints by name prefix (assign, clue, row, col, run, black)."""
    return Counter(lc.name.split("_")[0] for lc in builder.constraints)


def test_index_helpers():
    assert list(run_starts(3, 9)) == [1, 2, 3, 4, 5, 6, 7]
    assert list(run_starts(9, 9)) == [1]
    assert list(run_starts(10, 9)) == []
    assert starts_covering(1, 3, 9) == [1]
    assert starts_covering(9, 3, 9) == [7]
    assert starts_covering(5, 3, 9) == [3, 4, 5]


def test_all_white_4x4_counts():
    builder = encode_grid(Str8tsGrid(4))

    # 16 cells x 4 digits + 8 compartments x 1 start value
    assert builder.num_variables == 72
    assert constraint_kinds(builder) == Counter({
        "assign": 16,
        "row": 16,
        "col": 16,
        "run": 8 + 8 * 4,
    })
    assert builder.num_constraints == 88


def test_all_black_grid_gives_empty_model():
    builder = encode_grid(only_white(9, []))
    assert builder.num_variables == 0
    assert builder.num_constraints == 0


def test_length_one_compartments_get_no_run_rule():
    builder = encode_grid(only_white(9, [(4, 4)]))

    assert builder.num_variables == 9
    assert all(key[0] == "x" for key in builder.variables)
    assert constraint_kinds(builder) == Counter({"assign": 1})


def test_length_three_run_encoding():
    builder = encode_grid(only_white(9, [(0, 0), (0, 1), (0, 2)]))

    s_keys = [key for key in builder.variables if key[0] == "s"]
    assert s_keys == [s_key(0, low) for low in range(1, 8)]
    assert constraint_kinds(builder) == Counter({"assign": 3, "row": 9, "run": 1 + 9})

    by_name = {lc.name: lc for lc in builder.constraints}
    select = by_name["run_0_select"]
    assert select.sense is Sense.EQ and select.rhs == 1.0
    assert select.keys == s_keys

    # digit 5 is covered by the ranges starting at 3, 4 and 5
    coupling = by_name["run_0_5"]
    assert coupling.sense is Sense.EQ and coupling.rhs == 0.0
    assert coupling.keys == [x_key(0, 0, 5), x_key(0, 1, 5), x_key(0, 2, 5),
                             s_key(0, 3), s_key(0, 4), s_key(0, 5)]
    assert coupling.coeffs == [1.0, 1.0, 1.0, -1.0, -1.0, -1.0]


def test_line_uniqueness_uses_le():
    builder = encode_grid(Str8tsGrid(3))
    rows = [lc for lc in builder.constraints if lc.name.startswith("row_")]

    assert len(rows) == 9
    assert all(lc.sense is Sense.LE and lc.rhs == 1.0 for lc in rows)
    assert rows[0].keys == [x_key(0, 0, 1), x_key(0, 1, 1), x_key(0, 2, 1)]


def test_white_clues_are_fixed():
    grid = parse_grid(". 2 .\n. . .\n3 . .")
    builder = encode_grid(grid)
    clues = {lc.name: lc for lc in builder.constraints if lc.name.startswith("clue_")}

    assert set(clues) == {"clue_0_1", "clue_2_0"}
    assert clues["clue_0_1"].keys == [x_key(0, 1, 2)]
    assert clues["clue_0_1"].rhs == 1.0


def test_black_clues_ignored_by_default():
    grid = parse_grid("#2 . .\n. . .\n. . #")
    default = encode_grid(grid)
    assert "black" not in constraint_kinds(default)
    assert not any(key == ("x", 0, 0, 2) for key in default.variables)


def test_black_clues_in_lines_forbid_digit_in_row_and_column():
    grid = parse_grid("#2 . .\n. . .\n. . #")
    builder = encode_grid(grid, config=SolverConfig(black_clues_in_lines=True))
    forbids = [lc for lc in builder.constraints if lc.name.startswith("black_")]

    # row 0 has 2 white cells, column 0 has 2 white cells
    assert len(forbids) == 4
    assert {tuple(lc.keys) for lc in forbids} == {
        (x_key(0, 1, 2),), (x_key(0, 2, 2),), (x_key(1, 0, 2),), (x_key(2, 0, 2),),
    }
    assert all(lc.rhs == 0.0 for lc in forbids)


def test_compartment_longer_than_grid_fails_fast():
    grid = Str8tsGrid(4)
    too_long = Compartment(0, "row", 0, tuple((0, c) for c in range(5)))

    with pytest.raises(InvalidCompartmentError, match="longer than the grid size"):
        encode_grid(grid, compartments=[too_long])


@pytest.mark.parametrize("cells", [
    (),
    ((0, 0), (0, 0)),
    ((0, 0), (0, 2)),
    ((0, 0), (1, 0)),
    ((0, 3), (0, 4)),
])
def test_malformed_compartments_rejected(cells):
    grid = Str8tsGrid(4)
    with pytest.raises(InvalidCompartmentError):
        check_compartment(Compartment(0, "row", 0, cells), grid)


def test_compartment_with_black_cell_rejected():
    grid = parse_grid(". # .\n. . .\n. . .")
    comp = Compartment(0, "row", 0, ((0, 0), (0, 1), (0, 2)))
    with pytest.raises(InvalidCompartmentError, match="black cell"):
        encode_grid(grid, compartments=[comp])


def test_encoding_does_not_mutate_grid():
    grid = parse_grid("#2 . .\n. 1 .\n. . #")
    before = grid.copy()
    encode_grid(grid, config=SolverConfig(black_clues_in_lines=True))
    assert grid == before


def test_each_encode_builds_a_fresh_model():
    grid = Str8tsGrid(3)
    first = encode_grid(grid)
    second = encode_grid(grid)

    assert first is not second
    assert first.variables == second.variables
    assert first.constraints == second.constraints


def test_builder_rejects_unknown_and_duplicate_variables():
    builder = ConstraintBuilder()
    builder.add_binary_var(x_key(0, 0, 1))
    with pytest.raises(ValueError):
        builder.add_binary_var(x_key(0, 0, 1))
    with pytest.raises(KeyError):
        builder.add_eq([x_key(0, 0, 2)], [1.0], 1.0, "missing")


def test_builder_records_each_sense():
    builder = ConstraintBuilder()
    keys = [x_key(0, 0, 1), x_key(0, 0, 2)]
    for key in keys:
        builder.add_binary_var(key)

    builder.add_eq(keys, [1.0, 1.0], 1.0, "eq")
    builder.add_le(keys, [1.0, 1.0], 1.0, "le")
    builder.add_ge(keys, [1.0, -1.0], 0.0, "ge")

    assert [lc.sense for lc in builder.constraints] == [Sense.EQ, Sense.LE, Sense.GE]
    assert builder.constraints[2].coeffs == [1.0, -1.0]
    assert builder.constraints[2].rhs == 0.0


def test_repeated_black_clue_in_line_is_invalid_under_line_policy():
    grid = parse_grid("#2 . #2\n.  . .\n#2 . .")
    strict = SolverConfig(black_clues_in_lines=True)

    with pytest.raises(ConflictingBlackCluesError, match="row 0: black clue 2"):
        encode_grid(grid, config=strict)

    # Clue-only policy keeps black clues out of the model entirely
    assert "black" not in constraint_kinds(encode_grid(grid))

    column_only = parse_grid("#2 . .\n.  . .\n#2 . .")
    with pytest.raises(ConflictingBlackCluesError, match="col 0: black clue 2"):
        check_black_clues(column_only)

    # Equal digits on different lines are fine
    check_black_clues(parse_grid("#2 . .\n.  #2 .\n.  . ."))
