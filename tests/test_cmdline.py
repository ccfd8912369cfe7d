from itertools import islice

import pytest

from labsuite.cmdline import Option, OptionFlag, OptionId, parse_options

OPTS = [
    Option("s", "skip", "s"),
    Option(None, "exec", "e", OptionFlag.OPTIONAL_ARG),
    Option("E", "no-exec", "E"),
    Option("t", "time", "t", OptionFlag.OPTIONAL_ARG),
    Option(None, "no-summary", "S"),
    Option("v", "verbose", "v", OptionFlag.OPTIONAL_ARG),
    Option(None, "worker", "w", OptionFlag.REQUIRED_ARG),
    Option("x", "xml-output", "x", OptionFlag.REQUIRED_ARG),
]


def parse(*args):
    return list(parse_options(OPTS, args))


def test_operands():
    assert parse("foo", "bar") == [(OptionId.NONE, "foo"), (OptionId.NONE, "bar")]


def test_single_dash_is_operand():
    assert parse("-") == [(OptionId.NONE, "-")]


def test_double_dash_ends_options():
    assert parse("--", "-s", "--skip") == [
        (OptionId.NONE, "-s"),
        (OptionId.NONE, "--skip"),
    ]


def test_long_options():
    assert parse("--skip", "--verbose=3", "--exec") == [
        ("s", None),
        ("v", "3"),
        ("e", None),
    ]


def test_long_bogus_argument():
    assert parse("--no-summary=1") == [(OptionId.BOGUS_ARG, "--no-summary")]


def test_long_missing_argument():
    assert parse("--worker") == [(OptionId.MISSING_ARG, "--worker")]
    assert parse("--worker=4") == [("w", "4")]


def test_long_prefix_is_not_a_match():
    assert parse("--timer") == [(OptionId.UNKNOWN, "--timer")]


def test_prefix_falls_through_to_later_option():
    opts = [Option("t", "time", "t"), Option(None, "timer", "T")]
    assert list(parse_options(opts, ["--timer"])) == [("T", None)]


def test_unknown_long_strips_argument():
    assert parse("--bogus=value") == [(OptionId.UNKNOWN, "--bogus")]


def test_unknown_long_name_truncated():
    name = "--" + "a" * 40
    result = parse(name + "=1")
    assert result == [(OptionId.UNKNOWN, name[:32])]


def test_unknown_short_keeps_whole_argument():
    assert parse("-zfoo") == [(OptionId.UNKNOWN, "-zfoo")]


@pytest.mark.parametrize(
    "args",
    [["-x", "out.xml"], ["-xout.xml"], ["--xml-output=out.xml"]],
)
def test_required_short_argument_forms(args):
    assert parse(*args) == [("x", "out.xml")]


def test_required_short_missing():
    assert parse("-x") == [(OptionId.MISSING_ARG, "-x")]


def test_short_group():
    assert parse("-svE") == [("s", None), ("v", None), ("E", None)]


def test_short_group_errors():
    assert parse("-sz") == [("s", None), (OptionId.UNKNOWN, "-z")]
    assert parse("-sx") == [("s", None), (OptionId.MISSING_ARG, "-x")]


def test_stopping_early_consumes_nothing_more():
    events = list(islice(parse_options(OPTS, ["--bad", "-s", "foo"]), 1))
    assert events == [(OptionId.UNKNOWN, "--bad")]


def test_option_flags():
    assert Option("x", "xml", "x", OptionFlag.REQUIRED_ARG).requires_arg
    assert not Option("v", "verbose", "v", OptionFlag.OPTIONAL_ARG).requires_arg
    assert Option("v", "verbose", "v", OptionFlag.OPTIONAL_ARG).accepts_arg
    assert not Option("s", "skip", "s").accepts_arg