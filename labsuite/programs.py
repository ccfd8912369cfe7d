"""Small command-line programs built on the stats module."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Sequence

from .stats import find_max, find_min, generic_max

_ATOI_RE = re.compile(r"\s*([+-]?\d+)")

_GREETING = "hello world!"


@dataclass
class Point2d:
    """A point on the plane."""

    x: float = 0.0
    y: float = 0.0


def compare_ints(a: int, b: int) -> int:
    """Negative, zero or positive according to the order of a and b."""
    return a - b


def compare_strings(a: str, b: str) -> int:
    """Three-way comparison of two strings."""
    return (a > b) - (a < b)


def swap(a, b):
    """Return the two values in reversed order."""
    return b, a


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    return int(match.group(1)) if match else 0


def _args(argv: Sequence[str] | None) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def hello_main(argv: Sequence[str] | None = None) -> int:
    """Greet the world; any arguments are ignored."""
    _args(argv)
    out = sys.stdout
    out.write(f"{_GREETING}\n")
    out.flush()
    return 0


def minmax_main(argv: Sequence[str] | None = None) -> int:
    """Print the smallest and largest of the integer arguments."""
    numbers = [_atoi(arg) for arg in _args(argv)]
    print(f"min: {find_min(numbers)}")
    print(f"max: {find_max(numbers)}")
    return 0


def generic_max_main(argv: Sequence[str] | None = None) -> int:
    """Show generic_max on a pair of integers and a pair of strings."""
    a1, a2 = 1, 5
    print(f"max of {a1}, {a2} is {generic_max(a1, a2, compare_ints)}")

    s1, s2 = "zzz", "aaa"
    print(f"max of {s1} , {s2} is {generic_max(s1, s2, compare_strings)}")
    return 0


def recap_main(argv: Sequence[str] | None = None) -> int:
    """Exercise swap and Point2d."""
    a, b = swap(1, 2)
    if a < b:
        print("Not swapped!")

    point = Point2d(1.2, 1.2)
    print(f"point with coordinates: ({point.x:f}, {point.y:f})")
    return 0