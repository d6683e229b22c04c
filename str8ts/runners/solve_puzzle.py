"""
Command-line runner: solve a Str8ts puzzle from a text file.

Usage:
    python -m str8ts.runners.solve_puzzle puzzles/example_9x9.txt
    python -m str8ts.runners.solve_puzzle puzzle.txt --time-limit 30 --verbose
    python -m str8ts.runners.solve_puzzle puzzle.txt --config solver.json --black-clues-in-lines

Exit codes:
    0  solved, filled grid printed
    1  no solution for the puzzle as entered
    2  invalid puzzle or solver failure
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from str8ts.core.puzzle_io import format_grid, load_grid
from str8ts.runners.kernel import solve_puzzle_with_diagnostics
from str8ts.solver.config import load_solver_config
from str8ts.solver.decoding import NoSolution


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the solve runner.

    Returns:
        Parsed arguments with puzzle path and solver overrides
    """
    parser = argparse.ArgumentParser(description="Solve a Str8ts puzzle with a MIP solver.")
    parser.add_argument(
        "puzzle",
        type=Path,
        help="Puzzle text file (one row per line, tokens . d # #d)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON solver config; command-line flags override it"
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Backend time limit in seconds"
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Backend threads"
    )
    parser.add_argument(
        "--msg",
        action="store_true",
        help="Show backend solver output"
    )
    parser.add_argument(
        "--black-clues-in-lines",
        action="store_true",
        help="Forbid black clue digits in the white cells of their row and column"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_solver_config(args.config)
        grid = load_grid(args.puzzle)
    except (OSError, ValueError) as e:
        logger.error("Cannot load input: %s", e)
        return 2

    overrides = {}
    if args.time_limit is not None:
        overrides["time_limit"] = args.time_limit
    if args.threads is not None:
        overrides["threads"] = args.threads
    if args.msg:
        overrides["msg"] = True
    if args.black_clues_in_lines:
        overrides["black_clues_in_lines"] = True
    config = dataclasses.replace(config, **overrides)

    result, diagnostics = solve_puzzle_with_diagnostics(grid, config)

    if diagnostics.status == "ok":
        print(format_grid(result))
        return 0

    if isinstance(result, NoSolution):
        print(f"No solution ({diagnostics.solver_status})")
        return 1

    print(f"Solve failed [{diagnostics.status}]: {diagnostics.error_message}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())
