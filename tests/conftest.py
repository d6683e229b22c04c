import pytest

from puzzle_builders import (
    INTERIOR_BLANKS_9,
    PERMUTATION_BLANKS_4,
    blank_cells,
    cyclic_solution,
)
from str8ts.core.grid_types import Str8tsGrid


@pytest.fixture
def solution_9x9() -> Str8tsGrid:
    return cyclic_solution(9)


@pytest.fixture
def puzzle_9x9(solution_9x9) -> Str8tsGrid:
    return blank_cells(solution_9x9, INTERIOR_BLANKS_9)


@pytest.fixture
def solution_4x4_white() -> Str8tsGrid:
    return cyclic_solution(4, black_antidiagonal=False)


@pytest.fixture
def puzzle_4x4_white(solution_4x4_white) -> Str8tsGrid:
    return blank_cells(solution_4x4_white, PERMUTATION_BLANKS_4)
