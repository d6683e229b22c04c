"""
Variable keys for the Str8ts MIP model.

Two families of binary variables, keyed by tuples rather than by object
identity so a model can be rebuilt from scratch for every solve:

  - x[(r, c), d]: white cell (r, c) holds digit d, d in [1, N]
  - s[k, low]:    run compartment k holds exactly the digits low..low+L-1

Keys carry a leading tag so both families can share one dictionary:

  XKey = ("x", r, c, d)
  SKey = ("s", k, low)

Digits are 1-based, coordinates and compartment ids 0-based.
"""

from typing import List, Tuple, TypeAlias, Union


XKey: TypeAlias = Tuple[str, int, int, int]
SKey: TypeAlias = Tuple[str, int, int]
VarKey: TypeAlias = Union[XKey, SKey]


def x_key(row: int, col: int, digit: int) -> XKey:
    """
    Key of the indicator "cell (row, col) holds digit".

    Example:
        >>> x_key(2, 5, 7)
        ('x', 2, 5, 7)
    """
    return ("x", row, col, digit)


def s_key(compartment_id: int, low: int) -> SKey:
    """
    Key of the indicator "compartment uses the range starting at low".

    Example:
        >>> s_key(3, 4)
        ('s', 3, 4)
    """
    return ("s", compartment_id, low)


def is_x_key(key: VarKey) -> bool:
    return key[0] == "x"


def var_name(key: VarKey) -> str:
    """
    Solver-safe variable name for a key.

    Example:
        >>> var_name(x_key(0, 1, 9))
        'x_0_1_9'
    """
    return "_".join(str(part) for part in key)


def digits(size: int) -> range:
    """All digits on an N x N board: 1..N."""
    return range(1, size + 1)


def run_starts(length: int, size: int) -> range:
    """
    Valid start values for a run of `length` consecutive digits in [1, size].

    The range [low, low + length - 1] must fit inside [1, size], so
    low runs over 1..size-length+1. Empty when length > size.

    Example:
        >>> list(run_starts(3, 9))
        [1, 2, 3, 4, 5, 6, 7]
        >>> list(run_starts(9, 9))
        [1]
    """
    return range(1, size - length + 2)


def starts_covering(digit: int, length: int, size: int) -> List[int]:
    """
    Start values whose run [low, low + length - 1] contains digit.

    Example:
        >>> starts_covering(1, 3, 9)
        [1]
        >>> starts_covering(5, 3, 9)
        [3, 4, 5]
    """
    return [low for low in run_starts(length, size) if low <= digit <= low + length - 1]
