import pytest

from labsuite.stats import INT_MAX, INT_MIN, find_max, find_min, generic_max


def test_find_min_of_values():
    assert find_min([4, -3, 9, 0]) == -3


def test_find_max_of_values():
    assert find_max([4, -3, 9, 0]) == 9


def test_empty_defaults():
    assert find_min([]) == 2147483647
    assert find_max([]) == -2147483648
    assert find_min([]) == INT_MAX
    assert find_max([]) == INT_MIN


def test_accepts_generators():
    assert find_min(x for x in (7, 5, 6)) == 5
    assert find_max(x for x in (7, 5, 6)) == 7


@pytest.mark.parametrize("values", [[1], [5, 5, 5], [-2, 8, 3, 3, -10]])
def test_min_not_greater_than_max(values):
    assert find_min(values) <= find_max(values)
    assert find_min(values) in values
    assert find_max(values) in values


def test_generic_max_picks_larger():
    assert generic_max(1, 5, lambda a, b: a - b) == 5
    assert generic_max(5, 1, lambda a, b: a - b) == 5


def test_generic_max_equal_returns_second():
    first = [1]
    second = [1]
    result = generic_max(first, second, lambda a, b: 0)
    assert result is second


def test_generic_max_with_strings():
    def cmp(a, b):
        return (a > b) - (a < b)

    assert generic_max("zzz", "aaa", cmp) == "zzz"