"""
Core grid types for the Str8ts MIP solver.

This module defines the board representation handed over by the editor and
returned (filled) by the solver.

Grid: square (N, N), every cell is WHITE or BLACK and may carry a value in [1, N]
Cells: addressed as (row, col) tuples, 0-based, row-major

Internally the board is two numpy arrays:
  - black: bool mask, True for black cells
  - values: int array, 0 for an empty cell, otherwise the digit
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple, TypeAlias

import numpy as np


Coord: TypeAlias = Tuple[int, int]  # (row, col) in {0, ..., N-1} x {0, ..., N-1}

STANDARD_SIZE = 9


class Str8tsError(Exception):
    """Base class for every error raised by the Str8ts solver."""


class InvalidDigitError(Str8tsError, ValueError):
    """Raised when a cell value lies outside [1, N]."""


class OutOfBoundsError(Str8tsError, IndexError):
    """Raised when a coordinate lies outside the grid."""


class CellColor(Enum):
    WHITE = "white"
    BLACK = "black"


@dataclass(frozen=True)
class Cell:
    """
    Snapshot of a single cell.

    Attributes:
        color: WHITE or BLACK
        value: digit in [1, N], or None for an empty cell
    """
    color: CellColor = CellColor.WHITE
    value: Optional[int] = None

    @property
    def is_black(self) -> bool:
        return self.color is CellColor.BLACK


class Str8tsGrid:
    """
    N x N Str8ts board.

    A new grid is all white with no values. The size is fixed at
    construction. All edits validate their coordinates and digits.

    Example:
        >>> grid = Str8tsGrid(4)
        >>> grid.set_color(0, 3, CellColor.BLACK)
        >>> grid.set_value(0, 0, 2)
        >>> grid.cell(0, 0)
        Cell(color=<CellColor.WHITE: 'white'>, value=2)
        >>> grid.white_cells()[:3]
        [(0, 0), (0, 1), (0, 2)]
    """

    def __init__(self, size: int = STANDARD_SIZE):
        if size < 1:
            raise ValueError(f"Grid size must be at least 1, got {size}")
        self._size = size
        self._black = np.zeros((size, size), dtype=bool)
        self._values = np.zeros((size, size), dtype=int)

    @classmethod
    def from_arrays(cls, black: np.ndarray, values: np.ndarray) -> "Str8tsGrid":
        """
        Build a grid from a black mask and a value array (0 = empty).

        Args:
            black: (N, N) array, truthy for black cells
            values: (N, N) int array with entries in {0, 1, ..., N}

        Returns:
            New Str8tsGrid holding copies of both arrays

        Raises:
            ValueError: if the arrays are not square or their shapes differ
            InvalidDigitError: if any value is not an integer or lies outside
                {0} and [1, N]
        """
        black = np.asarray(black, dtype=bool)
        raw = np.asarray(values)
        if black.ndim != 2 or black.shape[0] != black.shape[1]:
            raise ValueError(f"Black mask must be square, got shape {black.shape}")
        if raw.shape != black.shape:
            raise ValueError(
                f"Value array shape {raw.shape} does not match mask shape {black.shape}"
            )

        # Integral floats (2.0) are accepted; 1.7, NaN, bools and strings are not
        if np.issubdtype(raw.dtype, np.floating):
            fractional = np.argwhere(raw != np.floor(raw))
            if fractional.size:
                r, c = (int(v) for v in fractional[0])
                raise InvalidDigitError(f"Value {raw[r, c]} at ({r}, {c}) is not an integer")
        elif raw.dtype == bool or not np.issubdtype(raw.dtype, np.integer):
            raise InvalidDigitError(f"Cell values must be integers, got dtype {raw.dtype}")
        values = raw.astype(int)

        size = black.shape[0]
        bad = np.argwhere((values < 0) | (values > size))
        if bad.size:
            r, c = (int(v) for v in bad[0])
            raise InvalidDigitError(
                f"Value {values[r, c]} at ({r}, {c}) is outside [1, {size}]"
            )

        grid = cls(size)
        grid._black = black.copy()
        grid._values = values.copy()
        return grid

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    @property
    def black_mask(self) -> np.ndarray:
        """Read-only (N, N) bool view, True for black cells."""
        view = self._black.view()
        view.flags.writeable = False
        return view

    @property
    def values(self) -> np.ndarray:
        """Read-only (N, N) int view, 0 for empty cells."""
        view = self._values.view()
        view.flags.writeable = False
        return view

    def cell(self, row: int, col: int) -> Cell:
        self._check_coord(row, col)
        color = CellColor.BLACK if self._black[row, col] else CellColor.WHITE
        value = int(self._values[row, col])
        return Cell(color=color, value=value or None)

    def is_black(self, row: int, col: int) -> bool:
        self._check_coord(row, col)
        return bool(self._black[row, col])

    def value(self, row: int, col: int) -> Optional[int]:
        self._check_coord(row, col)
        return int(self._values[row, col]) or None

    def iter_cells(self) -> Iterator[Tuple[Coord, Cell]]:
        """Yield ((row, col), Cell) for every cell in row-major order."""
        for r in range(self._size):
            for c in range(self._size):
                yield (r, c), self.cell(r, c)

    def white_cells(self) -> List[Coord]:
        """All white cells in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(~self._black)]

    def black_clue_cells(self) -> List[Tuple[Coord, int]]:
        """All black cells carrying a value, as ((row, col), value), row-major."""
        coords = np.argwhere(self._black & (self._values > 0))
        return [((int(r), int(c)), int(self._values[r, c])) for r, c in coords]

    def is_filled(self) -> bool:
        """True when every white cell holds a value."""
        return bool(np.all(self._values[~self._black] > 0))

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_color(self, row: int, col: int, color: CellColor) -> None:
        self._check_coord(row, col)
        self._black[row, col] = color is CellColor.BLACK

    def toggle_color(self, row: int, col: int) -> None:
        self._check_coord(row, col)
        self._black[row, col] = not self._black[row, col]

    def set_value(self, row: int, col: int, value: Optional[int]) -> None:
        """
        Set (or with None, clear) the value of a cell.

        Raises:
            OutOfBoundsError: if (row, col) is outside the grid
            InvalidDigitError: if value is not None and not in [1, N]
        """
        self._check_coord(row, col)
        if value is None:
            self._values[row, col] = 0
            return
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDigitError(f"Cell value must be an integer, got {value!r}")
        if not 1 <= value <= self._size:
            raise InvalidDigitError(
                f"Value {value} at ({row}, {col}) is outside [1, {self._size}]"
            )
        self._values[row, col] = value

    def clear_value(self, row: int, col: int) -> None:
        self.set_value(row, col, None)

    def clear_values(self) -> None:
        self._values[:, :] = 0

    def clear_all(self) -> None:
        self._black[:, :] = False
        self._values[:, :] = 0

    def copy(self) -> "Str8tsGrid":
        return Str8tsGrid.from_arrays(self._black, self._values)

    # ------------------------------------------------------------------

    def _check_coord(self, row: int, col: int) -> None:
        if not (0 <= row < self._size and 0 <= col < self._size):
            raise OutOfBoundsError(
                f"Cell ({row}, {col}) is outside the {self._size}x{self._size} grid"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Str8tsGrid):
            return NotImplemented
        return (
            self._size == other._size
            and np.array_equal(self._black, other._black)
            and np.array_equal(self._values, other._values)
        )

    def __repr__(self) -> str:
        return (
            f"Str8tsGrid(size={self._size}, black={int(self._black.sum())}, "
            f"filled={int((self._values > 0).sum())})"
        )


if __name__ == "__main__":
    # Self-test: edits, validation and enumeration on a small board
    grid = Str8tsGrid(4)
    grid.set_color(0, 3, CellColor.BLACK)
    grid.set_value(0, 3, 4)
    grid.set_value(1, 1, 2)

    assert grid.cell(0, 3) == Cell(CellColor.BLACK, 4)
    assert len(grid.white_cells()) == 15
    assert grid.black_clue_cells() == [((0, 3), 4)]

    try:
        grid.set_value(0, 0, 5)
        raise AssertionError("Expected InvalidDigitError")
    except InvalidDigitError as e:
        print(f"  ✓ Rejected digit: {e}")

    try:
        grid.cell(4, 0)
        raise AssertionError("Expected OutOfBoundsError")
    except OutOfBoundsError as e:
        print(f"  ✓ Rejected coordinate: {e}")

    print("grid_types.py self-test passed.")
