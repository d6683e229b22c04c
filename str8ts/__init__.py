"""
Str8ts puzzle solver built on a mixed-integer-programming model.

Typical use:

    >>> from str8ts import parse_grid, solve_puzzle
    >>> result = solve_puzzle(parse_grid(open("puzzles/example_9x9.txt").read()))
"""

from str8ts.core.grid_types import (
    Cell,
    CellColor,
    InvalidDigitError,
    OutOfBoundsError,
    Str8tsError,
    Str8tsGrid,
)
from str8ts.core.puzzle_io import PuzzleFormatError, format_grid, load_grid, parse_grid
from str8ts.constraints.encoder import ConflictingBlackCluesError, InvalidCompartmentError
from str8ts.solver.config import SolverConfig, load_solver_config
from str8ts.solver.decoding import InconsistentSolutionError, NoSolution
from str8ts.solver.lp_solver import SolverEngineError
from str8ts.runners.kernel import solve_puzzle, solve_puzzle_with_diagnostics

__all__ = [
    "Cell",
    "CellColor",
    "ConflictingBlackCluesError",
    "InconsistentSolutionError",
    "InvalidCompartmentError",
    "InvalidDigitError",
    "NoSolution",
    "OutOfBoundsError",
    "PuzzleFormatError",
    "SolverConfig",
    "SolverEngineError",
    "Str8tsError",
    "Str8tsGrid",
    "format_grid",
    "load_grid",
    "load_solver_config",
    "parse_grid",
    "solve_puzzle",
    "solve_puzzle_with_diagnostics",
]
