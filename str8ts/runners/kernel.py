"""
Core kernel runner for the Str8ts solver.

This module provides the main entrypoint for solving a puzzle:
  1. Extract row and column compartments
  2. Encode the Str8ts rules into a fresh ConstraintBuilder
  3. Submit the model to a MIP engine and optimize
  4. Decode x -> filled grid (or NoSolution)
  5. Re-check the filled grid against the rules

Every call builds its own model and engine; nothing is shared between solves.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from str8ts.constraints.encoder import encode_grid
from str8ts.core.grid_types import Str8tsError, Str8tsGrid
from str8ts.features.compartments import extract_compartments
from str8ts.features.rule_checks import find_rule_violations
from str8ts.runners.results import SolveDiagnostics
from str8ts.solver.config import SolverConfig
from str8ts.solver.decoding import InconsistentSolutionError, NoSolution, SolveResult, decode_solution
from str8ts.solver.engine import MIPEngine, make_engine
from str8ts.solver.lp_solver import SolverEngineError, solve_model


logger = logging.getLogger(__name__)

EngineFactory = Callable[[SolverConfig], MIPEngine]


def _run_pipeline(
    grid: Str8tsGrid,
    config: SolverConfig,
    engine_factory: EngineFactory,
    diagnostics: SolveDiagnostics,
) -> SolveResult:
    """Run all pipeline stages, recording model sizes into diagnostics."""
    # 1. Compartments
    compartments = extract_compartments(grid)
    diagnostics.num_white_cells = len(grid.white_cells())
    diagnostics.num_compartments = len(compartments)
    diagnostics.num_run_compartments = sum(1 for comp in compartments if comp.is_run)

    # 2. Encode
    builder = encode_grid(grid, compartments, config)
    diagnostics.num_variables = builder.num_variables
    diagnostics.num_constraints = builder.num_constraints

    # 3. Solve
    solution = solve_model(builder, engine_factory(config))
    diagnostics.solver_status = solution.solver_status

    # 4. Decode
    result = decode_solution(grid, solution)
    if isinstance(result, NoSolution):
        diagnostics.status = "no_solution"
        return result

    # 5. The encoding must only admit valid grids
    violations = find_rule_violations(result, puzzle=grid)
    if violations:
        diagnostics.rule_violations = violations
        raise InconsistentSolutionError(
            f"Decoded grid breaks {len(violations)} rule(s): {violations[0]}"
        )

    diagnostics.status = "ok"
    return result


def solve_puzzle(
    grid: Str8tsGrid,
    config: Optional[SolverConfig] = None,
    engine_factory: Optional[EngineFactory] = None,
) -> SolveResult:
    """
    Solve a Str8ts puzzle.

    Args:
        grid: Puzzle grid; never modified
        config: Solver config (defaults to SolverConfig())
        engine_factory: Builds a fresh MIPEngine from the config; defaults
            to the PuLP engine

    Returns:
        New filled Str8tsGrid, or NoSolution if the puzzle has no valid
        solution as entered

    Raises:
        InvalidCompartmentError: structural problem found while encoding
        InconsistentSolutionError: the engine's assignment is not a valid grid
        SolverEngineError: the engine reported an error

    Example:
        >>> from str8ts.core.puzzle_io import parse_grid
        >>> solved = solve_puzzle(parse_grid(". 2\\n2 ."))
        >>> solved.values.tolist()
        [[1, 2], [2, 1]]
    """
    result, _ = _solve(grid, config, engine_factory, capture_errors=False)
    return result


def solve_puzzle_with_diagnostics(
    grid: Str8tsGrid,
    config: Optional[SolverConfig] = None,
    engine_factory: Optional[EngineFactory] = None,
) -> Tuple[Optional[SolveResult], SolveDiagnostics]:
    """
    Solve a puzzle and return both the result and diagnostics.

    Unlike solve_puzzle this never raises for a failed solve: the failure is
    recorded in diagnostics.status ("invalid" or "error") with an
    error_message, and the result is None.

    Returns:
        Tuple of (result, diagnostics):
          - result: filled grid, NoSolution, or None on failure
          - diagnostics: SolveDiagnostics for the attempt

    Example:
        >>> result, diag = solve_puzzle_with_diagnostics(grid)
        >>> if diag.status == "no_solution":
        ...     print("No solution for this puzzle as entered")
    """
    return _solve(grid, config, engine_factory, capture_errors=True)


def _solve(
    grid: Str8tsGrid,
    config: Optional[SolverConfig],
    engine_factory: Optional[EngineFactory],
    capture_errors: bool,
) -> Tuple[Optional[SolveResult], SolveDiagnostics]:
    if config is None:
        config = SolverConfig()
    if engine_factory is None:
        engine_factory = make_engine

    diagnostics = SolveDiagnostics(status="error", solver_status="Unknown", grid_size=grid.size)
    logger.info("Solving %dx%d puzzle", grid.size, grid.size)

    try:
        result = _run_pipeline(grid, config, engine_factory, diagnostics)

    except SolverEngineError as e:
        logger.error("Solver engine failed: %s", e)
        if not capture_errors:
            raise
        diagnostics.status = "error"
        diagnostics.error_message = str(e)
        return None, diagnostics

    except Str8tsError as e:
        logger.error("Invalid puzzle state: %s: %s", type(e).__name__, e)
        if not capture_errors:
            raise
        diagnostics.status = "invalid"
        diagnostics.error_message = f"{type(e).__name__}: {e}"
        return None, diagnostics

    except Exception as e:
        if not capture_errors:
            raise
        logger.exception("Unexpected error while solving")
        diagnostics.status = "error"
        diagnostics.error_message = f"Unexpected error: {type(e).__name__}: {e}"
        return None, diagnostics

    logger.info(
        "Solve finished: status=%s solver_status=%s (%d variables, %d constraints)",
        diagnostics.status, diagnostics.solver_status,
        diagnostics.num_variables, diagnostics.num_constraints,
    )
    return result, diagnostics
