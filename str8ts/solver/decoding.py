"""
Solution decoding from x-indicators to a filled grid.

Given:
  - the original puzzle grid
  - the engine's ModelSolution (x[(r, c), d] -> 0/1 for every white cell)

Returns:
  - a new Str8tsGrid with every white cell set to the unique d where
    x[c,d] = 1, or NoSolution when the engine found no assignment

Decoding: value(c) = 1 + argmax_d x[c, d], after checking each white cell
is exactly one-hot and agrees with its clue.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from str8ts.constraints.indexing import digits, x_key
from str8ts.core.grid_types import Str8tsError, Str8tsGrid
from str8ts.solver.lp_solver import ModelSolution


class InconsistentSolutionError(Str8tsError):
    """Raised when the engine's assignment is not one valid digit per white cell."""


@dataclass(frozen=True)
class NoSolution:
    """
    The puzzle as entered has no valid solution (or the engine gave up).

    Attributes:
        solver_status: Raw backend status string
    """
    solver_status: str = "Infeasible"


SolveResult = Union[Str8tsGrid, NoSolution]


def solution_to_array(solution: ModelSolution, grid: Str8tsGrid) -> np.ndarray:
    """
    Collect the x indicators of every white cell into an (N, N, N) array.

    Entry [r, c, d-1] is x[(r, c), d]. Black cells stay all-zero. A missing
    indicator is read as 0.
    """
    size = grid.size
    x = np.zeros((size, size, size), dtype=int)
    for r, c in grid.white_cells():
        for d in digits(size):
            x[r, c, d - 1] = solution.values.get(x_key(r, c, d), 0)
    return x


def decode_solution(grid: Str8tsGrid, solution: ModelSolution) -> SolveResult:
    """
    Decode an engine verdict into a filled grid.

    Args:
        grid: The puzzle that was encoded (not modified)
        solution: Result of str8ts.solver.lp_solver.solve_model

    Returns:
        New filled Str8tsGrid (colors and black clues copied from grid), or
        NoSolution if the engine found no feasible assignment

    Raises:
        InconsistentSolutionError: if a white cell has zero or several digits
            set, or its decoded digit contradicts its clue

    Example:
        >>> grid = Str8tsGrid(1)
        >>> sol = ModelSolution(EngineStatus.FEASIBLE, "Optimal", {("x", 0, 0, 1): 1})
        >>> decode_solution(grid, sol).value(0, 0)
        1
    """
    if not solution.feasible:
        return NoSolution(solver_status=solution.solver_status)

    white = ~grid.black_mask
    x = solution_to_array(solution, grid)

    # 1. Each white cell must be exactly one-hot
    cell_sums = x.sum(axis=2)
    bad_cells = np.argwhere(white & (cell_sums != 1))
    if bad_cells.size:
        details = ", ".join(
            f"({r}, {c}): {int(cell_sums[r, c])} digits" for r, c in bad_cells
        )
        raise InconsistentSolutionError(f"Assignment is not one-hot at {details}")

    # 2. Argmax per cell to find the digit
    decoded = np.argmax(x, axis=2) + 1

    # 3. Clues must survive
    clue_mask = white & (grid.values > 0)
    clash = np.argwhere(clue_mask & (decoded != grid.values))
    if clash.size:
        r, c = (int(v) for v in clash[0])
        raise InconsistentSolutionError(
            f"Cell ({r}, {c}) decoded as {int(decoded[r, c])} but its clue is {int(grid.values[r, c])}"
        )

    values = np.where(white, decoded, grid.values)
    return Str8tsGrid.from_arrays(grid.black_mask, values)
