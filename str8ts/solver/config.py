"""
Solver configuration.

SolverConfig holds the few knobs the pipeline exposes: which PuLP backend
to drive, its time/thread limits and output, and the black clue policy.
Configs can be loaded from a JSON object whose keys are a subset of the
dataclass fields:

    {"time_limit": 30, "threads": 2, "black_clues_in_lines": true}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional


@dataclass
class SolverConfig:
    """
    Attributes:
        solver_name: PuLP solver name, resolved with pulp.getSolver
        time_limit: Seconds handed to the backend, None for no limit
        threads: Backend threads, None for the backend default
        msg: Show backend output
        black_clues_in_lines: If True, a black cell holding v also forbids v
            in the white cells of its row and column. Off by default: black
            clues are informational only.
    """
    solver_name: str = "PULP_CBC_CMD"
    time_limit: Optional[float] = None
    threads: Optional[int] = None
    msg: bool = False
    black_clues_in_lines: bool = False


def load_solver_config(path: Path | None) -> SolverConfig:
    """
    Load a SolverConfig from a JSON file.

    Args:
        path: JSON file, or None for the default config

    Returns:
        SolverConfig with the file's values over the defaults

    Raises:
        ValueError: if the file is not a JSON object or names unknown fields
    """
    if path is None:
        return SolverConfig()

    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Solver config {path} must be a JSON object")

    known = {f.name for f in fields(SolverConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown solver config keys in {path}: {unknown}")

    return SolverConfig(**data)
