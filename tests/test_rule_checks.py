"""
Tests for the rule checker and the grid mismatch report.
"""

from puzzle_builders import INTERIOR_BLANKS_9, blank_cells, cyclic_solution
from str8ts.core.puzzle_io import parse_grid
from str8ts.features.rule_checks import find_rule_violations
from str8ts.runners.results import compute_grid_mismatches


def test_reference_solutions_are_valid():
    for size in (1, 2, 4, 9):
        assert find_rule_violations(cyclic_solution(size)) == []
        assert find_rule_violations(cyclic_solution(size, black_antidiagonal=False)) == []


def test_empty_white_cell_reported():
    puzzle = blank_cells(cyclic_solution(9), INTERIOR_BLANKS_9[:1])
    violations = find_rule_violations(puzzle)
    assert violations == ["cell (0, 3): empty white cell"]


def test_duplicate_in_row_reported():
    grid = parse_grid("1 1\n2 2")
    violations = find_rule_violations(grid)
    assert any(v.startswith("row 0: digit 1") for v in violations)
    assert any(v.startswith("row 1: digit 2") for v in violations)


def test_black_clues_do_not_count_for_uniqueness():
    grid = parse_grid("#1 1\n1  2")
    assert find_rule_violations(grid) == []


def test_non_consecutive_compartment_reported():
    grid = parse_grid("1 3 #\n3 1 #\n# # #")
    violations = find_rule_violations(grid)
    assert len([v for v in violations if "not 2 consecutive" in v]) == 4


def test_clue_and_layout_checked_against_puzzle():
    solution = cyclic_solution(4, black_antidiagonal=False)
    puzzle = solution.copy()
    puzzle.set_value(0, 0, 2)
    violations = find_rule_violations(solution, puzzle=puzzle)
    assert violations == ["cell (0, 0): clue 2 replaced by 1"]

    puzzle.toggle_color(3, 3)
    assert find_rule_violations(solution, puzzle=puzzle) == ["color layout differs from the puzzle"]


def test_grid_mismatches():
    expected = cyclic_solution(4)
    actual = expected.copy()
    actual.set_value(1, 1, 1)

    assert compute_grid_mismatches(expected, expected.copy()) == []
    assert compute_grid_mismatches(expected, actual) == [
        {"r": 1, "c": 1, "expected": 3, "actual": 1}
    ]
    assert compute_grid_mismatches(expected, cyclic_solution(9)) == [
        {"size_mismatch": True, "expected_size": 4, "actual_size": 9}
    ]
