"""
Compartment extraction for Str8ts grids.

A compartment is a maximal run of white cells inside a single row or a
single column. Black cells and the grid border close a run.

Every white cell belongs to exactly one row compartment and exactly one
column compartment (possibly of length 1). Length-1 compartments are kept
so coverage holds, but only runs of length >= 2 carry the
consecutive-digits rule.

Runs are found with scipy.ndimage.label using a structuring element that
only connects horizontal neighbours; columns are labelled on the transposed
mask with the same element.
"""

from dataclasses import dataclass
from typing import List, Literal, Tuple

import numpy as np
from scipy import ndimage as ndi

from str8ts.core.grid_types import Coord, Str8tsGrid


Orientation = Literal["row", "col"]

# Connects (r, c) with (r, c-1) and (r, c+1) only
_HORIZONTAL_STRUCTURE = np.array([[0, 0, 0],
                                  [1, 1, 1],
                                  [0, 0, 0]], dtype=int)


@dataclass(frozen=True)
class Compartment:
    """
    A maximal run of white cells in one line.

    Attributes:
        id: Index of this compartment in the extraction order (0, 1, 2, ...)
        orientation: "row" or "col"
        line: Row index (orientation "row") or column index (orientation "col")
        cells: Cell coordinates in scan order (left to right, or top to bottom)
    """
    id: int
    orientation: Orientation
    line: int
    cells: Tuple[Coord, ...]

    @property
    def length(self) -> int:
        return len(self.cells)

    @property
    def is_run(self) -> bool:
        """True when the consecutive-digits rule applies (length >= 2)."""
        return len(self.cells) >= 2


def _label_runs(mask: np.ndarray) -> List[Tuple[int, int, int]]:
    """
    Label horizontal runs of True in a 2D mask.

    Returns:
        List of (row, col_start, col_stop) in raster order; col_stop is exclusive
    """
    labels, num_labels = ndi.label(mask, structure=_HORIZONTAL_STRUCTURE)
    if num_labels == 0:
        return []

    runs = []
    for slc in ndi.find_objects(labels):
        row_slice, col_slice = slc
        runs.append((row_slice.start, col_slice.start, col_slice.stop))
    return runs


def row_compartments(grid: Str8tsGrid, start_id: int = 0) -> List[Compartment]:
    """
    Row compartments, rows top to bottom, each scanned left to right.

    Args:
        grid: Puzzle grid
        start_id: id given to the first compartment

    Returns:
        List of Compartment with orientation "row"
    """
    white = ~grid.black_mask
    compartments = []
    for offset, (r, c0, c1) in enumerate(_label_runs(white)):
        cells = tuple((r, c) for c in range(c0, c1))
        compartments.append(Compartment(start_id + offset, "row", r, cells))
    return compartments


def column_compartments(grid: Str8tsGrid, start_id: int = 0) -> List[Compartment]:
    """
    Column compartments, columns left to right, each scanned top to bottom.

    The mask is transposed so columns become rows for labelling.
    """
    white_t = ~grid.black_mask.T
    compartments = []
    for offset, (c, r0, r1) in enumerate(_label_runs(white_t)):
        cells = tuple((r, c) for r in range(r0, r1))
        compartments.append(Compartment(start_id + offset, "col", c, cells))
    return compartments


def extract_compartments(grid: Str8tsGrid) -> List[Compartment]:
    """
    Extract all row compartments followed by all column compartments.

    Ids run 0..K-1 in that order, so the result is deterministic for a
    given color layout.

    Example:
        >>> grid = Str8tsGrid(3)
        >>> grid.toggle_color(1, 1)
        >>> comps = extract_compartments(grid)
        >>> [(c.orientation, c.line, c.length) for c in comps]
        [('row', 0, 3), ('row', 1, 1), ('row', 1, 1), ('row', 2, 3), ('col', 0, 3), ('col', 1, 1), ('col', 1, 1), ('col', 2, 3)]
    """
    rows = row_compartments(grid)
    cols = column_compartments(grid, start_id=len(rows))
    return rows + cols


def run_compartments(compartments: List[Compartment]) -> List[Compartment]:
    """Compartments the consecutive-digits rule applies to (length >= 2)."""
    return [comp for comp in compartments if comp.is_run]


if __name__ == "__main__":
    # Self-test: coverage on a board with a black diagonal
    grid = Str8tsGrid(5)
    for i in range(5):
        grid.toggle_color(i, i)

    comps = extract_compartments(grid)
    rows = [c for c in comps if c.orientation == "row"]
    cols = [c for c in comps if c.orientation == "col"]

    for group in (rows, cols):
        covered = sorted(cell for comp in group for cell in comp.cells)
        assert covered == sorted(grid.white_cells()), "Coverage mismatch"

    print(f"Extracted {len(rows)} row and {len(cols)} column compartments")
    print("compartments.py self-test passed.")
