"""
Result and diagnostics structures for the Str8ts solver.

This module defines SolveDiagnostics, the single structured object that
captures everything about a solve attempt - especially failures - so an
editor can tell "no solution exists" apart from "invalid puzzle state".

Key components:
  - SolveDiagnostics: Complete solve attempt record (status, model size, violations)
  - compute_grid_mismatches: Per-cell diff between an expected and a solved grid
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

import numpy as np

from str8ts.core.grid_types import Str8tsGrid


# Status type for solve attempts
SolveStatus = Literal["ok", "no_solution", "invalid", "error"]


@dataclass
class SolveDiagnostics:
    """
    Complete diagnostics for a single solve attempt.

    Attributes:
        status: Solve outcome - one of:
            - "ok": a filled grid was produced
            - "no_solution": the engine found no feasible assignment
            - "invalid": a structural error (bad compartment, inconsistent
              engine assignment, other Str8tsError) aborted the solve
            - "error": the engine failed or something unexpected was raised
        solver_status: Raw status string from the backend (e.g. "Optimal", "Infeasible")
        grid_size: N
        num_white_cells: White cells in the puzzle
        num_compartments: Row plus column compartments
        num_run_compartments: Compartments of length >= 2
        num_variables: Binary variables in the model
        num_constraints: Constraints in the model
        rule_violations: Post-decode rule check findings (empty when status is "ok")
        error_message: Optional error message for status "invalid" / "error"
    """
    status: SolveStatus
    solver_status: str

    grid_size: int
    num_white_cells: int = 0
    num_compartments: int = 0
    num_run_compartments: int = 0
    num_variables: int = 0
    num_constraints: int = 0

    rule_violations: List[str] = field(default_factory=list)

    # Debug / error information
    error_message: Optional[str] = None


def compute_grid_mismatches(
    expected: Str8tsGrid,
    actual: Str8tsGrid
) -> List[Dict[str, int]]:
    """
    Compute per-cell value mismatches between two grids.

    1. Sizes match: Returns detailed per-cell differences
       - Each mismatch: {"r": row, "c": col, "expected": v, "actual": v}
         (0 stands for an empty cell)

    2. Sizes differ: Returns a single size mismatch record
       - {"size_mismatch": True, "expected_size": N, "actual_size": N'}

    Args:
        expected: Reference grid (e.g. a known solution)
        actual: Grid produced by the solver

    Returns:
        Empty list if all values agree, otherwise the mismatch records

    Example:
        >>> a = Str8tsGrid(2); a.set_value(0, 1, 2)
        >>> b = Str8tsGrid(2); b.set_value(0, 1, 1)
        >>> compute_grid_mismatches(a, b)
        [{'r': 0, 'c': 1, 'expected': 2, 'actual': 1}]
    """
    if expected.size != actual.size:
        return [{
            "size_mismatch": True,
            "expected_size": expected.size,
            "actual_size": actual.size,
        }]

    mismatch_mask = expected.values != actual.values
    if not mismatch_mask.any():
        return []

    diff_cells = []
    for coord in np.argwhere(mismatch_mask):
        r, c = int(coord[0]), int(coord[1])
        diff_cells.append({
            "r": r,
            "c": c,
            "expected": int(expected.values[r, c]),
            "actual": int(actual.values[r, c]),
        })

    return diff_cells
