"""
Str8ts rule checks on filled grids.

find_rule_violations lists every rule a (supposedly) solved grid breaks:
  - a white cell without a digit
  - a digit used twice among the white cells of a row or column
  - a compartment whose digits are not distinct consecutive integers
  - a white clue of the original puzzle that was overwritten

Black clues are never checked against white cells; they carry no rule.
"""

from typing import List, Optional

from str8ts.core.grid_types import Str8tsGrid
from str8ts.features.compartments import extract_compartments


def _line_duplicates(grid: Str8tsGrid, orientation: str) -> List[str]:
    size = grid.size
    black = grid.black_mask
    values = grid.values
    violations = []

    for line in range(size):
        seen = {}
        for pos in range(size):
            r, c = (line, pos) if orientation == "row" else (pos, line)
            if black[r, c] or values[r, c] == 0:
                continue
            digit = int(values[r, c])
            if digit in seen:
                violations.append(
                    f"{orientation} {line}: digit {digit} at {seen[digit]} and {(r, c)}"
                )
            else:
                seen[digit] = (r, c)
    return violations


def find_rule_violations(
    grid: Str8tsGrid,
    puzzle: Optional[Str8tsGrid] = None,
) -> List[str]:
    """
    Check a filled grid against the Str8ts rules.

    Args:
        grid: Grid to check
        puzzle: Original puzzle; when given, its white clues must be kept
            and its color layout must match

    Returns:
        Human-readable violation descriptions, empty for a valid solution

    Example:
        >>> grid = Str8tsGrid(2)
        >>> grid.set_value(0, 0, 1); grid.set_value(0, 1, 2)
        >>> grid.set_value(1, 0, 2); grid.set_value(1, 1, 1)
        >>> find_rule_violations(grid)
        []
    """
    violations = []

    # 1. Every white cell filled
    for r, c in grid.white_cells():
        if grid.value(r, c) is None:
            violations.append(f"cell {(r, c)}: empty white cell")

    # 2. Row / column uniqueness among white cells
    violations.extend(_line_duplicates(grid, "row"))
    violations.extend(_line_duplicates(grid, "col"))

    # 3. Compartments hold consecutive distinct digits
    for comp in extract_compartments(grid):
        if not comp.is_run:
            continue
        cell_values = [grid.value(r, c) for r, c in comp.cells]
        if any(v is None for v in cell_values):
            continue
        used = sorted(cell_values)
        expected = list(range(used[0], used[0] + comp.length))
        if used != expected:
            violations.append(
                f"{comp.orientation} compartment at {comp.cells[0]}: "
                f"digits {used} are not {comp.length} consecutive values"
            )

    # 4. Consistency with the original puzzle
    if puzzle is not None:
        if puzzle.size != grid.size or (puzzle.black_mask != grid.black_mask).any():
            violations.append("color layout differs from the puzzle")
        else:
            for r, c in puzzle.white_cells():
                clue = puzzle.value(r, c)
                if clue is not None and grid.value(r, c) != clue:
                    violations.append(
                        f"cell {(r, c)}: clue {clue} replaced by {grid.value(r, c)}"
                    )

    return violations
