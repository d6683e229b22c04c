"""
Str8ts rule encoder.

Turns a grid and its compartments into binary variables and linear
constraints in a ConstraintBuilder:

  1. Cell assignment:   sum_d x[c,d] = 1                     for every white cell c
  2. Fixed clue:        x[c,v] = 1                           for every white clue v
  3. Row uniqueness:    sum_{c in row} x[c,d] <= 1           for every row, digit
  4. Column uniqueness: sum_{c in col} x[c,d] <= 1           for every column, digit
  5. Consecutive runs:  sum_low s[k,low] = 1                 for every run k (L >= 2)
                        sum_{c in k} x[c,d]
                          - sum_{low <= d <= low+L-1} s[k,low] = 0   for every digit d

Black cells are outside the white-cell domain. Their clues only enter the
model when SolverConfig.black_clues_in_lines is set, as x[c,v] = 0 for the
white cells sharing their row or column, and two black cells repeating a
digit in one line make the puzzle invalid.

The model has no objective; any feasible assignment is a solution.
"""

import logging
from typing import List, Optional

from str8ts.constraints.builder import ConstraintBuilder
from str8ts.constraints.indexing import digits, run_starts, s_key, starts_covering, x_key
from str8ts.core.grid_types import Coord, OutOfBoundsError, Str8tsError, Str8tsGrid
from str8ts.features.compartments import Compartment, extract_compartments
from str8ts.solver.config import SolverConfig


logger = logging.getLogger(__name__)


class InvalidCompartmentError(Str8tsError):
    """Raised when a compartment breaks the structural assumptions of the encoding."""


class ConflictingBlackCluesError(Str8tsError):
    """Raised when two black clues repeat a digit in one line under black_clues_in_lines."""


def check_compartment(comp: Compartment, grid: Str8tsGrid) -> None:
    """
    Verify a compartment is a non-empty contiguous run of white cells
    no longer than N.

    Raises:
        InvalidCompartmentError: on the first violated assumption
    """
    size = grid.size
    if comp.length == 0:
        raise InvalidCompartmentError(f"Compartment {comp.id} is empty")
    if comp.length > size:
        raise InvalidCompartmentError(
            f"Compartment {comp.id} has length {comp.length}, longer than the grid size {size}"
        )
    if len(set(comp.cells)) != comp.length:
        raise InvalidCompartmentError(f"Compartment {comp.id} repeats a cell")

    for r, c in comp.cells:
        try:
            black = grid.is_black(r, c)
        except OutOfBoundsError as e:
            raise InvalidCompartmentError(f"Compartment {comp.id}: {e}") from e
        if black:
            raise InvalidCompartmentError(
                f"Compartment {comp.id} contains black cell ({r}, {c})"
            )

    # Cells must sit on one line at consecutive positions
    fixed_axis, moving_axis = (0, 1) if comp.orientation == "row" else (1, 0)
    if any(cell[fixed_axis] != comp.line for cell in comp.cells):
        raise InvalidCompartmentError(
            f"Compartment {comp.id} leaves {comp.orientation} {comp.line}"
        )
    positions = sorted(cell[moving_axis] for cell in comp.cells)
    if positions != list(range(positions[0], positions[0] + comp.length)):
        raise InvalidCompartmentError(f"Compartment {comp.id} is not contiguous")


def check_black_clues(grid: Str8tsGrid) -> None:
    """
    Verify no digit is shown by two black cells of the same row or column.

    Only meaningful when black clues take part in line uniqueness.

    Raises:
        ConflictingBlackCluesError: on the first repeated digit
    """
    for orientation, axis in (("row", 0), ("col", 1)):
        seen = {}
        for (r, c), value in grid.black_clue_cells():
            line = (r, c)[axis]
            if (line, value) in seen:
                raise ConflictingBlackCluesError(
                    f"{orientation} {line}: black clue {value} at {seen[line, value]} and {(r, c)}"
                )
            seen[line, value] = (r, c)


def add_cell_variables(builder: ConstraintBuilder, cells: List[Coord], size: int) -> None:
    """Register x[c,d] for every cell and digit."""
    for r, c in cells:
        for d in digits(size):
            builder.add_binary_var(x_key(r, c, d))


def add_assignment_constraints(builder: ConstraintBuilder, cells: List[Coord], size: int) -> None:
    """
    For each cell c enforce sum_d x[c,d] = 1.

    Creates one constraint per cell.
    """
    for r, c in cells:
        keys = [x_key(r, c, d) for d in digits(size)]
        builder.add_eq(keys, [1.0] * size, 1.0, f"assign_{r}_{c}")


def add_clue_constraints(builder: ConstraintBuilder, grid: Str8tsGrid) -> None:
    """Fix every white cell that carries a clue."""
    for r, c in grid.white_cells():
        value = grid.value(r, c)
        if value is not None:
            builder.fix_cell_digit(r, c, value)


def add_line_uniqueness_constraints(builder: ConstraintBuilder, grid: Str8tsGrid) -> None:
    """
    Each digit at most once among the white cells of every row and column.

    Lines with fewer than two white cells are skipped: the constraint would
    be implied by the cell assignment.
    """
    size = grid.size
    black = grid.black_mask

    for r in range(size):
        cells = [(r, c) for c in range(size) if not black[r, c]]
        if len(cells) < 2:
            continue
        for d in digits(size):
            keys = [x_key(rr, cc, d) for rr, cc in cells]
            builder.add_le(keys, [1.0] * len(keys), 1.0, f"row_{r}_{d}")

    for c in range(size):
        cells = [(r, c) for r in range(size) if not black[r, c]]
        if len(cells) < 2:
            continue
        for d in digits(size):
            keys = [x_key(rr, cc, d) for rr, cc in cells]
            builder.add_le(keys, [1.0] * len(keys), 1.0, f"col_{c}_{d}")


def add_black_clue_exclusions(builder: ConstraintBuilder, grid: Str8tsGrid) -> None:
    """
    Forbid each black clue's digit in the white cells of its row and column.
    """
    size = grid.size
    black = grid.black_mask

    for (r, c), value in grid.black_clue_cells():
        line_cells = [(r, cc) for cc in range(size)] + [(rr, c) for rr in range(size)]
        for wr, wc in line_cells:
            if black[wr, wc]:
                continue
            builder.forbid_cell_digit(wr, wc, value, f"black_{r}_{c}_{wr}_{wc}")


def add_run_constraints(builder: ConstraintBuilder, comp: Compartment, size: int) -> None:
    """
    Encode "the cells of comp hold L consecutive digits, in any order".

    One start selector s[k,low] per valid low, exactly one selected; each
    digit is used by the run exactly as often as the selected range covers
    it (0 or 1 times). Which cell gets which digit is left free.
    """
    k, length = comp.id, comp.length
    lows = list(run_starts(length, size))

    for low in lows:
        builder.add_binary_var(s_key(k, low))
    builder.add_eq([s_key(k, low) for low in lows], [1.0] * len(lows), 1.0, f"run_{k}_select")

    for d in digits(size):
        covering = starts_covering(d, length, size)
        keys = [x_key(r, c, d) for r, c in comp.cells] + [s_key(k, low) for low in covering]
        coeffs = [1.0] * length + [-1.0] * len(covering)
        builder.add_eq(keys, coeffs, 0.0, f"run_{k}_{d}")


def encode_grid(
    grid: Str8tsGrid,
    compartments: Optional[List[Compartment]] = None,
    config: Optional[SolverConfig] = None,
) -> ConstraintBuilder:
    """
    Build the complete Str8ts model for a grid.

    Args:
        grid: Puzzle grid (not modified)
        compartments: Compartments of grid; extracted when None
        config: Solver config, only black_clues_in_lines is read here

    Returns:
        ConstraintBuilder holding every variable and constraint. A grid with
        no white cells gives an empty builder.

    Raises:
        InvalidCompartmentError: if any compartment fails check_compartment.
            All compartments are checked before anything is built.
        ConflictingBlackCluesError: with black_clues_in_lines set, if two black
            clues repeat a digit in one row or column

    Example:
        >>> grid = Str8tsGrid(4)
        >>> builder = encode_grid(grid)
        >>> builder.num_variables      # 16 cells * 4 digits + 8 run selectors
        72
    """
    if config is None:
        config = SolverConfig()
    if compartments is None:
        compartments = extract_compartments(grid)

    # 1. Structural checks first, so a bad compartment builds nothing
    for comp in compartments:
        check_compartment(comp, grid)
    if config.black_clues_in_lines:
        check_black_clues(grid)

    size = grid.size
    cells = grid.white_cells()
    builder = ConstraintBuilder()

    # 2. Cell variables and one-hot assignment
    add_cell_variables(builder, cells, size)
    add_assignment_constraints(builder, cells, size)

    # 3. Clues
    add_clue_constraints(builder, grid)
    if config.black_clues_in_lines:
        add_black_clue_exclusions(builder, grid)

    # 4. Row / column uniqueness
    add_line_uniqueness_constraints(builder, grid)

    # 5. Consecutive runs (length-1 compartments carry no run rule)
    runs = [comp for comp in compartments if comp.is_run]
    for comp in runs:
        add_run_constraints(builder, comp, size)

    logger.debug(
        "Encoded %dx%d grid: %d white cells, %d compartments (%d runs), "
        "%d variables, %d constraints",
        size, size, len(cells), len(compartments), len(runs),
        builder.num_variables, builder.num_constraints,
    )
    return builder
