"""A small command-line option reader with short, long and grouped options."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, Sequence

_AUX_SIZE = 32


class OptionFlag(enum.IntFlag):
    """How an option takes its argument."""

    NONE = 0
    OPTIONAL_ARG = 1
    REQUIRED_ARG = 2


class OptionId(enum.Enum):
    """Special ids reported for non-options and for errors."""

    NONE = 0
    UNKNOWN = -0x7FFFFFFF
    MISSING_ARG = -0x7FFFFFFF + 1
    BOGUS_ARG = -0x7FFFFFFF + 2


@dataclass(frozen=True)
class Option:
    """One recognised option: a short letter and/or a long name."""

    shortname: str | None
    longname: str | None
    id: Hashable
    flags: OptionFlag = OptionFlag.NONE

    @property
    def requires_arg(self) -> bool:
        return bool(self.flags & OptionFlag.REQUIRED_ARG)

    @property
    def accepts_arg(self) -> bool:
        return bool(self.flags & (OptionFlag.OPTIONAL_ARG | OptionFlag.REQUIRED_ARG))


Event = tuple[Hashable, "str | None"]


def _short_group(options: Sequence[Option], group: str) -> Iterator[Event]:
    for char in group:
        opt = next((o for o in options if o.shortname == char), None)
        if opt is not None and not opt.requires_arg:
            yield opt.id, None
        elif opt is not None:
            yield OptionId.MISSING_ARG, "-" + char
        else:
            yield OptionId.UNKNOWN, "-" + char


def _match_long(opt: Option, arg: str) -> list[Event] | None:
    rest = arg[2:]
    if not rest.startswith(opt.longname):
        return None
    tail = rest[len(opt.longname):]
    if tail == "":
        if opt.requires_arg:
            return [(OptionId.MISSING_ARG, arg)]
        return [(opt.id, None)]
    if tail[0] == "=":
        if opt.accepts_arg:
            return [(opt.id, tail[1:])]
        return [(OptionId.BOGUS_ARG, "--" + opt.longname)]
    return None


def parse_options(options: Iterable[Option], args: Iterable[str]) -> Iterator[Event]:
    """Yield ``(id, argument)`` pairs for each option and operand in ``args``.

    Operands are reported with ``OptionId.NONE``; errors with
    ``OptionId.UNKNOWN``, ``OptionId.MISSING_ARG`` or ``OptionId.BOGUS_ARG``
    and the offending option name. Stop iterating to stop parsing.
    """
    options = list(options)
    args = list(args)
    after_double_dash = False
    i = 0
    while i < len(args):
        arg = args[i]
        if after_double_dash or arg == "-":
            yield OptionId.NONE, arg
        elif arg == "--":
            after_double_dash = True
        elif not arg.startswith("-"):
            yield OptionId.NONE, arg
        else:
            handled = False
            for opt in options:
                if opt.longname is not None and arg.startswith("--"):
                    events = _match_long(opt, arg)
                    if events is None:
                        continue
                    yield from events
                    handled = True
                    break
                if opt.shortname and arg[1] == opt.shortname:
                    attached = arg[2:]
                    if opt.requires_arg:
                        if attached:
                            yield opt.id, attached
                        elif i + 1 < len(args):
                            i += 1
                            yield opt.id, args[i]
                        else:
                            yield OptionId.MISSING_ARG, arg
                    else:
                        yield opt.id, None
                        if attached:
                            yield from _short_group(options, attached)
                    handled = True
                    break
            if not handled:
                bad = arg
                if bad.startswith("--") and "=" in bad:
                    bad = bad[: bad.index("=")][:_AUX_SIZE]
                yield OptionId.UNKNOWN, bad
        i += 1