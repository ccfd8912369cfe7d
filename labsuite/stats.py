"""Simple statistics over integer sequences and a generic maximum."""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

INT_MAX = 2**31 - 1
INT_MIN = -(2**31)

T = TypeVar("T")

CompareFunc = Callable[[Any, Any], int]
"""Returns < 0 if a < b, 0 if a and b are equivalent, > 0 if a > b."""

DestroyFunc = Callable[[Any], None]


def find_min(values: Iterable[int]) -> int:
    """Return the smallest value, or INT_MAX when there are none."""
    return min((INT_MAX, *values))


def find_max(values: Iterable[int]) -> int:
    """Return the largest value, or INT_MIN when there are none."""
    return max((INT_MIN, *values))


def generic_max(a: T, b: T, compare: Callable[[T, T], int]) -> T:
    """Return ``a`` if ``compare(a, b)`` is positive, otherwise ``b``."""
    return a if compare(a, b) > 0 else b