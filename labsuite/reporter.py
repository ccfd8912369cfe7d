"""Console output for unit test runs: test lines, checks, cases, messages and dumps."""

from __future__ import annotations

import enum
import sys
from typing import TextIO

_COLOR_BUFFER = 256
_MSG_MAXSIZE = 1024
_DUMP_MAXSIZE = 1024
_CASE_NAME_SIZE = 64
_BYTES_PER_LINE = 16
_TEST_LINE_WIDTH = 48


class Color(enum.Enum):
    """Output colours, each with its terminal escape sequence."""

    DEFAULT = "\033[0m"
    GREEN = "\033[0;32m"
    RED = "\033[0;31m"
    DEFAULT_INTENSIVE = "\033[1m"
    GREEN_INTENSIVE = "\033[1;32m"
    RED_INTENSIVE = "\033[1;31m"

    @property
    def escape(self) -> str:
        return self.value


def _is_control(byte: int) -> bool:
    return byte < 0x20 or byte == 0x7F


class Reporter:
    """Writes the progress and results of a test run to a text stream.

    It also holds the state of the unit being run: its name and index,
    the current case name and the count of failed conditions.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        *,
        verbose_level: int = 2,
        tap: bool = False,
        colorize: bool = False,
        timer: bool = False,
    ) -> None:
        self.out = out
        self.verbose_level = verbose_level
        self.tap = tap
        self.colorize = colorize
        self.timer = timer

        self.current_unit: str | None = None
        self.current_index = 0
        self.current_failures = 0
        self.current_already_logged = 0
        self.case_current_already_logged = 0
        self.case_name = ""
        self.cond_failed = False

    def _write(self, text: str) -> None:
        (self.out if self.out is not None else sys.stdout).write(text)

    def print_in_color(self, color: Color, text: str) -> int:
        """Write ``text`` (cut to 255 characters) in ``color``; return its length."""
        text = text[: _COLOR_BUFFER - 1]
        if self.colorize:
            self._write(color.escape + text + Color.DEFAULT.escape)
        else:
            self._write(text)
        return len(text)

    def line_indent(self, level: int) -> None:
        """Indent the current line by ``level`` steps of two spaces."""
        n = level * 2
        if self.tap and n > 0:
            n -= 1
            self._write("#")
        self._write(" " * n)

    def begin_test_line(self, name: str) -> None:
        """Start the output line for the test ``name``."""
        if self.tap:
            return
        if self.verbose_level >= 3:
            self.print_in_color(Color.DEFAULT_INTENSIVE, f"Test {name}:\n")
            self.current_already_logged += 1
        elif self.verbose_level >= 1:
            n = self.print_in_color(Color.DEFAULT_INTENSIVE, f"Test {name}... ")
            if n < _TEST_LINE_WIDTH:
                self._write(" " * (_TEST_LINE_WIDTH - n))
        else:
            self.current_already_logged = 1

    def finish_test_line(
        self, result: int, index: int, name: str, duration: float | None = None
    ) -> None:
        """Finish a test's line with its outcome; ``result`` 0 means success."""
        ok = result == 0
        show_time = ok and self.timer and duration is not None
        if self.tap:
            self._write(f"{'ok' if ok else 'not ok'} {index + 1} - {name}\n")
            if show_time:
                self._write(f"# Duration: {duration:.6f} secs\n")
        else:
            color = Color.GREEN_INTENSIVE if ok else Color.RED_INTENSIVE
            self._write("[ ")
            self.print_in_color(color, "OK" if ok else "FAILED")
            self._write(" ]")
            if show_time:
                self._write(f"  {duration:.6f} secs")
            self._write("\n")

    def check(self, cond: object, file: str | None, line: int, message: str) -> bool:
        """Record one condition and report it as verbosity allows; return its truth."""
        passed = bool(cond)
        if passed:
            result_str, result_color, level = "ok", Color.GREEN, 3
        else:
            if not self.current_already_logged and self.current_unit is not None:
                self.finish_test_line(-1, self.current_index, self.current_unit)
            result_str, result_color, level = "failed", Color.RED, 2
            self.current_failures += 1
            self.current_already_logged += 1

        if self.verbose_level >= level:
            if not self.case_current_already_logged and self.case_name:
                self.line_indent(1)
                self.print_in_color(Color.DEFAULT_INTENSIVE, f"Case {self.case_name}:\n")
                self.current_already_logged += 1
                self.case_current_already_logged += 1

            self.line_indent(2 if self.case_name else 1)
            if file is not None:
                base = file.rsplit("/", 1)[-1]
                self._write(f"{base}:{line}: Check ")
            self._write(message)
            self._write("... ")
            self.print_in_color(result_color, result_str)
            self._write("\n")
            self.current_already_logged += 1

        self.cond_failed = not passed
        return passed

    def case(self, name: str | None) -> None:
        """Begin a named case within the current test; ``None`` ends it."""
        if self.verbose_level < 2:
            return
        if self.case_name:
            self.case_current_already_logged = 0
            self.case_name = ""
        if name is None:
            return
        self.case_name = name[: _CASE_NAME_SIZE - 2]
        if self.verbose_level >= 3:
            self.line_indent(1)
            self.print_in_color(Color.DEFAULT_INTENSIVE, f"Case {self.case_name}:\n")
            self.current_already_logged += 1
            self.case_current_already_logged += 1

    def _extra_allowed(self) -> bool:
        return (
            self.verbose_level >= 2
            and self.current_unit is not None
            and self.cond_failed
        )

    def message(self, text: str) -> None:
        """Write extra lines about the most recent condition, if it failed."""
        if not self._extra_allowed():
            return
        text = text[: _MSG_MAXSIZE - 1]
        level = 3 if self.case_name else 2
        *lines, tail = text.split("\n")
        for line in lines:
            self.line_indent(level)
            self._write(line + "\n")
        if tail:
            self.line_indent(level)
            self._write(tail + "\n")

    def dump(self, title: str, data: bytes) -> None:
        """Write a hex dump of ``data`` after a failed condition."""
        if not self._extra_allowed():
            return
        data = bytes(data)
        truncate = max(0, len(data) - _DUMP_MAXSIZE)
        data = data[:_DUMP_MAXSIZE]

        self.line_indent(3 if self.case_name else 2)
        self._write(title + "\n" if title.endswith(":") else title + ":\n")

        inner = 4 if self.case_name else 3
        for start in range(0, len(data), _BYTES_PER_LINE):
            chunk = data[start : start + _BYTES_PER_LINE]
            self.line_indent(inner)
            hex_part = "".join(f" {b:02x}" for b in chunk)
            hex_part += "   " * (_BYTES_PER_LINE - len(chunk))
            text_part = "".join("." if _is_control(b) else chr(b) for b in chunk)
            self._write(f"{start:08x}: {hex_part}  {text_part}\n")

        if truncate > 0:
            self.line_indent(inner)
            self._write(f"           ... (and more {truncate} bytes)\n")

    def error(self, text: str) -> None:
        """Report something that went wrong outside a test's own checks."""
        if self.verbose_level == 0:
            return
        if self.verbose_level >= 2:
            self.line_indent(1)
            if self.verbose_level >= 3:
                self.print_in_color(Color.RED_INTENSIVE, "ERROR: ")
            self._write(text + "\n")
        if self.verbose_level >= 3:
            self._write("\n")