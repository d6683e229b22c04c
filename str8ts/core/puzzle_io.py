"""
Plain-text puzzle IO.

One grid row per line, whitespace-separated tokens:

    .   or 0   empty white cell
    d          white cell holding clue d
    #          empty black cell
    #d         black cell holding clue d

Blank lines are skipped and lines starting with ';' are comments.
Example (4x4):

    ; small board
    #  .  .  #4
    .  2  .  .
    .  .  #  .
    #1 .  .  .
"""

from pathlib import Path
from typing import List, Tuple

import numpy as np

from str8ts.core.grid_types import InvalidDigitError, Str8tsError, Str8tsGrid


class PuzzleFormatError(Str8tsError, ValueError):
    """Raised when puzzle text cannot be parsed into a grid."""


def _parse_token(token: str, row: int, col: int) -> Tuple[bool, int]:
    """Parse one cell token into (is_black, value), value 0 meaning empty."""
    black = token.startswith("#")
    digits = token[1:] if black else token

    if digits in ("", ".", "0"):
        return black, 0
    if not digits.isdigit():
        raise PuzzleFormatError(f"Bad cell token {token!r} at row {row}, col {col}")
    return black, int(digits)


def parse_grid(text: str) -> Str8tsGrid:
    """
    Parse puzzle text into a Str8tsGrid.

    Args:
        text: puzzle in the format described in the module docstring

    Returns:
        New grid of size N, where N is the number of rows

    Raises:
        PuzzleFormatError: on an empty puzzle, ragged rows, a bad token or a
            clue outside [1, N]
    """
    rows: List[List[str]] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(";"):
            continue
        rows.append(stripped.split())

    if not rows:
        raise PuzzleFormatError("Puzzle text contains no rows")

    size = len(rows)
    for r, tokens in enumerate(rows):
        if len(tokens) != size:
            raise PuzzleFormatError(
                f"Row {r} has {len(tokens)} cells, expected {size} for a square grid"
            )

    black = np.zeros((size, size), dtype=bool)
    values = np.zeros((size, size), dtype=int)
    for r, tokens in enumerate(rows):
        for c, token in enumerate(tokens):
            black[r, c], values[r, c] = _parse_token(token, r, c)

    try:
        return Str8tsGrid.from_arrays(black, values)
    except InvalidDigitError as e:
        raise PuzzleFormatError(str(e)) from e


def load_grid(path: Path) -> Str8tsGrid:
    """Read a puzzle text file and parse it."""
    with open(path, "r", encoding="utf-8") as f:
        return parse_grid(f.read())


def format_grid(grid: Str8tsGrid) -> str:
    """
    Render a grid in the same text format parse_grid reads.

    Columns are padded to a common width so boards line up in a terminal.

    Example:
        >>> grid = Str8tsGrid(2)
        >>> grid.toggle_color(0, 1)
        >>> grid.set_value(1, 0, 2)
        >>> print(format_grid(grid))
        .  #
        2  .
    """
    tokens = []
    for r in range(grid.size):
        row_tokens = []
        for c in range(grid.size):
            cell = grid.cell(r, c)
            text = "" if cell.value is None else str(cell.value)
            if cell.is_black:
                row_tokens.append("#" + text)
            else:
                row_tokens.append(text or ".")
        tokens.append(row_tokens)

    width = max(len(t) for row in tokens for t in row) + 1
    return "\n".join(
        " ".join(t.ljust(width) for t in row).rstrip() for row in tokens
    )


def print_grid(grid: Str8tsGrid) -> None:
    """Print a grid for human inspection."""
    print(format_grid(grid))
