import pytest

from labsuite.programs import (
    Point2d,
    compare_ints,
    compare_strings,
    generic_max_main,
    hello_main,
    minmax_main,
    recap_main,
    swap,
)
from labsuite.stats import INT_MAX, INT_MIN


def test_compare_ints_sign():
    assert compare_ints(1, 5) < 0
    assert compare_ints(5, 1) > 0
    assert compare_ints(3, 3) == 0


def test_compare_strings_sign():
    assert compare_strings("zzz", "aaa") > 0
    assert compare_strings("aaa", "zzz") < 0
    assert compare_strings("abc", "abc") == 0


def test_swap_reverses():
    assert swap(1, 2) == (2, 1)


@pytest.mark.parametrize("pair", [(1, 2), ("a", "b"), (None, 3.5)])
def test_swap_twice_is_identity(pair):
    assert swap(*swap(*pair)) == pair


def test_point2d_fields():
    point = Point2d(1.2, 3.4)
    assert (point.x, point.y) == (1.2, 3.4)
    point.x = 9.0
    assert point == Point2d(9.0, 3.4)


def test_hello(capsys):
    assert hello_main([]) == 0
    assert capsys.readouterr().out == "hello world!\n"


def test_minmax(capsys):
    assert minmax_main(["3", "-7", "12"]) == 0
    assert capsys.readouterr().out == "min: -7\nmax: 12\n"


def test_minmax_atoi_rules(capsys):
    minmax_main(["  12abc", "abc", "+4"])
    out = capsys.readouterr().out
    assert out == "min: 0\nmax: 12\n"


def test_minmax_no_arguments(capsys):
    minmax_main([])
    assert capsys.readouterr().out == f"min: {INT_MAX}\nmax: {INT_MIN}\n"


def test_generic_max_program(capsys):
    assert generic_max_main([]) == 0
    out = capsys.readouterr().out
    assert out == "max of 1, 5 is 5\nmax of zzz , aaa is zzz\n"


def test_recap(capsys):
    assert recap_main([]) == 0
    out = capsys.readouterr().out
    assert "Not swapped!" not in out
    assert out == "point with coordinates: (1.200000, 1.200000)\n"