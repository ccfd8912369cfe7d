"""Run a suite of unit tests from the command line and report their results."""

from __future__ import annotations

import inspect
import os
import re
import signal
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence, TextIO
from xml.sax.saxutils import escape

from .cmdline import Option, OptionFlag, OptionId, parse_options
from .reporter import Color, Reporter

_WORD_DELIMITERS = " \t-_."
_ATOI_RE = re.compile(r"\s*([+-]?\d+)")

_OPTIONS = (
    Option("s", "skip", "s"),
    Option(None, "exec", "e", OptionFlag.OPTIONAL_ARG),
    Option("E", "no-exec", "E"),
    Option("t", "time", "t", OptionFlag.OPTIONAL_ARG),
    Option(None, "timer", "t", OptionFlag.OPTIONAL_ARG),
    Option(None, "no-summary", "S"),
    Option(None, "tap", "T"),
    Option("l", "list", "l"),
    Option("v", "verbose", "v", OptionFlag.OPTIONAL_ARG),
    Option("q", "quiet", "q"),
    Option(None, "color", "c", OptionFlag.OPTIONAL_ARG),
    Option(None, "no-color", "C"),
    Option("h", "help", "h"),
    Option(None, "worker", "w", OptionFlag.REQUIRED_ARG),
    Option("x", "xml-output", "x", OptionFlag.REQUIRED_ARG),
)

_SIGNAL_NAMES = {
    getattr(signal, name): name
    for name in ("SIGINT", "SIGHUP", "SIGQUIT", "SIGABRT", "SIGKILL", "SIGSEGV", "SIGILL", "SIGTERM")
    if hasattr(signal, name)
}


class TestAborted(Exception):
    """Raised by :func:`require` to stop the running test."""

    __test__ = False


@dataclass
class TestUnit:
    """A named test function taking no arguments."""

    __test__ = False

    name: str
    func: Callable[[], object]


@dataclass
class _Detail:
    selected: bool = False
    passed: bool | None = None
    duration: float = 0.0


class _Exit(Exception):
    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


_default_reporter = Reporter()
_active: Reporter = _default_reporter


def _caller(depth: int) -> tuple[str, int]:
    frame = inspect.currentframe()
    for _ in range(depth + 1):
        if frame is None:
            break
        frame = frame.f_back
    if frame is None:
        return "<unknown>", 0
    return frame.f_code.co_filename, frame.f_lineno


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    return int(match.group(1)) if match else 0


def name_contains_word(name: str, pattern: str) -> bool:
    """Tell whether ``pattern`` occurs in ``name`` bounded by word delimiters."""
    start = name.find(pattern)
    while start != -1:
        end = start + len(pattern)
        starts_on_boundary = start == 0 or name[start - 1] in _WORD_DELIMITERS
        ends_on_boundary = end == len(name) or name[end] in _WORD_DELIMITERS
        if starts_on_boundary and ends_on_boundary:
            return True
        start = name.find(pattern, start + 1)
    return False


def check(cond: object, message: str | None = None) -> bool:
    """Record a condition of the running test; return whether it holds."""
    file, line = _caller(1)
    return _active.check(cond, file, line, message if message is not None else "condition")


def require(cond: object, message: str | None = None) -> None:
    """Like :func:`check`, but abort the running test if the condition fails."""
    file, line = _caller(1)
    if not _active.check(cond, file, line, message if message is not None else "condition"):
        raise TestAborted(message)


def case(name: str | None) -> None:
    """Name the following part of the running test; ``None`` ends the case."""
    _active.case(name)


def msg(text: str) -> None:
    """Explain the most recent condition, shown only if it failed."""
    _active.message(text)


def dump(title: str, data: bytes) -> None:
    """Hex-dump ``data`` after a failed condition."""
    _active.dump(title, data)


def _tracer_present() -> bool:
    try:
        with open("/proc/self/status", encoding="utf-8", errors="replace") as status:
            for line in status:
                if line.startswith("TracerPid:"):
                    return _atoi(line[len("TracerPid:"):]) != 0
    except OSError:
        return False
    return False


class TestSuite:
    """A list of unit tests with the options that govern how they are run."""

    __test__ = False

    def __init__(
        self,
        units: Iterable[TestUnit | tuple[str, Callable[[], object]]],
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
        prog: str | None = None,
    ) -> None:
        self.units = [u if isinstance(u, TestUnit) else TestUnit(*u) for u in units]
        self.out = out
        self.err = err
        self.prog = prog if prog is not None else (sys.argv[0] if sys.argv and sys.argv[0] else "tests")
        self.reporter = Reporter(out)
        stream = out if out is not None else sys.stdout
        isatty = getattr(stream, "isatty", None)
        self.reporter.colorize = bool(isatty()) if callable(isatty) else False

        self.skip_mode = False
        self.no_exec: bool | None = None
        self.no_summary = False
        self.timer = 0
        self.worker = False
        self.worker_index = 0
        self.xml_output: str | None = None

        self.run_units = 0
        self.failed_units = 0
        self._details = [_Detail() for _ in self.units]
        self._selected_count = 0

    # -- output helpers -------------------------------------------------

    def _write(self, text: str) -> None:
        (self.out if self.out is not None else sys.stdout).write(text)

    def _write_err(self, text: str) -> None:
        (self.err if self.err is not None else sys.stderr).write(text)

    def _flush(self) -> None:
        for stream in (self.out, self.err, sys.stdout, sys.stderr):
            flush = getattr(stream, "flush", None)
            if callable(flush):
                flush()

    def _now(self) -> float:
        return time.process_time() if self.timer == 2 else time.perf_counter()

    # -- selection ------------------------------------------------------

    def _remember(self, index: int) -> None:
        detail = self._details[index]
        if not detail.selected:
            detail.selected = True
            self._selected_count += 1

    def lookup(self, pattern: str) -> int:
        """Select the tests matching ``pattern``; return how many matched.

        An exact name wins; otherwise whole-word matches; otherwise substrings.
        """
        for index, unit in enumerate(self.units):
            if unit.name == pattern:
                self._remember(index)
                return 1

        matchers = (lambda name: name_contains_word(name, pattern), lambda name: pattern in name)
        for matches in matchers:
            found = [i for i, unit in enumerate(self.units) if matches(unit.name)]
            for index in found:
                self._remember(index)
            if found:
                return len(found)
        return 0

    def list_names(self) -> str:
        """Return the listing of the suite's test names."""
        return "Unit tests:\n" + "".join(f"  {unit.name}\n" for unit in self.units)

    def help_text(self, prog: str) -> str:
        """Return the usage text for the command line."""
        lines = [
            f"Usage: {prog} [options] [test...]",
            "",
            "Run the specified unit tests; or if the option '--skip' is used, run all",
            "tests in the suite but those listed.  By default, if no tests are specified",
            "on the command line, all unit tests in the suite are run.",
            "",
            "Options:",
            "  -s, --skip            Execute all unit tests but the listed ones",
            "      --exec[=WHEN]     If supported, execute unit tests as child processes",
            "                          (WHEN is one of 'auto', 'always', 'never')",
            "  -E, --no-exec         Same as --exec=never",
            "  -t, --time            Measure test duration (real time)",
            "      --time=TIMER      Measure test duration, using given timer",
            "                          (TIMER is one of 'real', 'cpu')",
            "      --no-summary      Suppress printing of test results summary",
            "      --tap             Produce TAP-compliant output",
            "  -x, --xml-output=FILE Enable XUnit output to the given file",
            "  -l, --list            List unit tests in the suite and exit",
            "  -v, --verbose         Make output more verbose",
            "      --verbose=LEVEL   Set verbose level to LEVEL:",
            "                          0 ... Be silent",
            "                          1 ... Output one line per test (and summary)",
            "                          2 ... As 1 and failed conditions (this is default)",
            "                          3 ... As 1 and all conditions (and extended summary)",
            "  -q, --quiet           Same as --verbose=0",
            "      --color[=WHEN]    Enable colorized output",
            "                          (WHEN is one of 'auto', 'always', 'never')",
            "      --no-color        Same as --color=never",
            "  -h, --help            Display this help and exit",
        ]
        text = "\n".join(lines) + "\n"
        if len(self.units) < 16:
            text += "\n" + self.list_names()
        return text

    # -- running --------------------------------------------------------

    def _do_run(self, unit: TestUnit, index: int) -> bool:
        """Call the test function in this process; return whether it failed."""
        r = self.reporter
        r.current_unit = unit.name
        r.current_index = index
        r.current_failures = 0
        r.current_already_logged = 0
        r.cond_failed = False
        aborted = False

        r.begin_test_line(unit.name)
        self._flush()

        start = self._now()
        try:
            unit.func()
        except TestAborted:
            aborted = True
        except Exception as exc:  # a failing test must not stop the run
            r.check(False, None, 0, "Threw an exception")
            r.message(f"{type(exc).__name__}: {exc}")
            if r.verbose_level >= 3:
                r.line_indent(1)
                r.print_in_color(Color.RED_INTENSIVE, "FAILED: ")
                self._write("Exception.\n\n")
            r.case(None)
            r.current_unit = None
            return True
        duration = self._now() - start

        if r.verbose_level >= 3:
            r.line_indent(1)
            if r.current_failures == 0:
                r.print_in_color(Color.GREEN_INTENSIVE, "SUCCESS: ")
                self._write("All conditions have passed.\n")
                if self.timer:
                    r.line_indent(1)
                    self._write(f"Duration: {duration:.6f} secs\n")
            else:
                r.print_in_color(Color.RED_INTENSIVE, "FAILED: ")
                if aborted:
                    self._write("Aborted.\n")
                else:
                    n = r.current_failures
                    self._write(
                        f"{n} condition{'' if n == 1 else 's'} "
                        f"{'has' if n == 1 else 'have'} failed.\n"
                    )
            self._write("\n")
        elif r.verbose_level >= 1 and r.current_failures == 0:
            r.finish_test_line(0, index, unit.name, duration)

        r.case(None)
        r.current_unit = None
        return r.current_failures != 0

    def _run_forked(self, unit: TestUnit, index: int) -> bool:
        self._flush()
        try:
            pid = os.fork()
        except OSError as exc:
            self.reporter.error(f"Cannot fork. {exc.strerror} [{exc.errno}]")
            return True

        if pid == 0:
            code = 2
            try:
                self.worker = True
                code = 1 if self._do_run(unit, index) else 0
            finally:
                self._flush()
                os._exit(code)

        _, status = os.waitpid(pid, 0)
        if os.WIFEXITED(status):
            code = os.WEXITSTATUS(status)
            if code == 0:
                return False
            if code != 1:
                self.reporter.error(f"Unexpected exit code [{code}]")
            return True
        if os.WIFSIGNALED(status):
            signum = os.WTERMSIG(status)
            name = _SIGNAL_NAMES.get(signum, f"signal {signum}")
            self.reporter.error(f"Test interrupted by {name}.")
            return True
        self.reporter.error(f"Test ended in an unexpected way [{status}].")
        return True

    def _run_unit(self, unit: TestUnit, index: int, master_index: int) -> None:
        r = self.reporter
        r.current_unit = unit.name
        r.current_already_logged = 0
        start = self._now()

        if not self.no_exec and hasattr(os, "fork"):
            failed = self._run_forked(unit, index)
        else:
            failed = self._do_run(unit, index)

        end = self._now()
        r.current_unit = None
        self.run_units += 1
        if failed:
            self.failed_units += 1
        detail = self._details[master_index]
        detail.passed = not failed
        detail.duration = end - start

    def _write_summary(self) -> None:
        r = self.reporter
        if self.no_summary or r.verbose_level < 1:
            return
        total = len(self.units)
        if r.verbose_level >= 3:
            r.print_in_color(Color.DEFAULT_INTENSIVE, "Summary:\n")
            self._write(f"  Count of all unit tests:     {total:4d}\n")
            self._write(f"  Count of run unit tests:     {self.run_units:4d}\n")
            self._write(f"  Count of failed unit tests:  {self.failed_units:4d}\n")
            self._write(f"  Count of skipped unit tests: {total - self.run_units:4d}\n")
        if self.failed_units == 0:
            r.print_in_color(Color.GREEN_INTENSIVE, "SUCCESS:")
            self._write(" All unit tests have passed.\n")
        else:
            r.print_in_color(Color.RED_INTENSIVE, "FAILED:")
            verb = "has" if self.failed_units == 1 else "have"
            self._write(f" {self.failed_units} of {self.run_units} unit tests {verb} failed.\n")
        if r.verbose_level >= 3:
            self._write("\n")

    def run(self) -> int:
        """Run the selected tests and write the summary; return the exit status."""
        global _active
        r = self.reporter
        r.timer = bool(self.timer)

        if self._selected_count == 0:
            for index in range(len(self.units)):
                self._remember(index)

        if self.no_exec is None:
            self.no_exec = self._selected_count <= 1 or _tracer_present()

        if r.tap:
            r.verbose_level = min(r.verbose_level, 2)
            self.no_summary = True
            if not self.worker:
                self._write(f"1..{self._selected_count}\n")

        previous = _active
        _active = r
        try:
            index = self.worker_index
            for master_index, (unit, detail) in enumerate(zip(self.units, self._details)):
                if detail.selected != self.skip_mode:
                    self._run_unit(unit, index, master_index)
                    index += 1
        finally:
            _active = previous

        self._write_summary()
        return 0 if self.failed_units == 0 else 1

    def write_xml(self, path: str, suite_name: str) -> None:
        """Write the results in XUnit form to ``path``."""
        total = len(self.units)

        def attr(text: str) -> str:
            return escape(text, {'"': "&quot;"})

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<testsuite name="{attr(suite_name)}" tests="{total}" '
            f'errors="{self.failed_units}" failures="{self.failed_units}" '
            f'skip="{total - self.run_units}">',
        ]
        for unit, detail in zip(self.units, self._details):
            lines.append(f'  <testcase name="{attr(unit.name)}" time="{detail.duration:.2f}">')
            if detail.passed is False:
                lines.append("    <failure />")
            elif detail.passed is None:
                lines.append("    <skipped />")
            lines.append("  </testcase>")
        lines.append("</testsuite>")
        with open(path, "w", encoding="utf-8") as stream:
            stream.write("\n".join(lines) + "\n")

    # -- command line ---------------------------------------------------

    def _usage_error(self, text: str, hint: str = "--help' for more information.") -> None:
        self._write_err(text + "\n")
        self._write_err(f"Try '{self.prog} {hint}\n")
        raise _Exit(2)

    def _handle_option(self, opt_id: object, arg: str | None) -> None:
        r = self.reporter
        if opt_id == "s":
            self.skip_mode = True
        elif opt_id == "e":
            if arg is None or arg == "always":
                self.no_exec = False
            elif arg == "never":
                self.no_exec = True
            elif arg != "auto":
                self._usage_error(f"{self.prog}: Unrecognized argument '{arg}' for option --exec.")
        elif opt_id == "E":
            self.no_exec = True
        elif opt_id == "t":
            if arg is None or arg == "real":
                self.timer = 1
            elif arg == "cpu":
                self.timer = 2
            else:
                self._usage_error(f"{self.prog}: Unrecognized argument '{arg}' for option --time.")
        elif opt_id == "S":
            self.no_summary = True
        elif opt_id == "T":
            r.tap = True
        elif opt_id == "l":
            self._write(self.list_names())
            raise _Exit(0)
        elif opt_id == "v":
            r.verbose_level = _atoi(arg) if arg is not None else r.verbose_level + 1
        elif opt_id == "q":
            r.verbose_level = 0
        elif opt_id == "c":
            if arg is None or arg == "always":
                r.colorize = True
            elif arg == "never":
                r.colorize = False
            elif arg != "auto":
                self._usage_error(f"{self.prog}: Unrecognized argument '{arg}' for option --color.")
        elif opt_id == "C":
            r.colorize = False
        elif opt_id == "h":
            self._write(self.help_text(self.prog))
            raise _Exit(0)
        elif opt_id == "w":
            self.worker = True
            self.worker_index = _atoi(arg or "")
        elif opt_id == "x":
            try:
                with open(arg, "w", encoding="utf-8"):
                    pass
            except OSError as exc:
                self._write_err(f"Unable to open '{arg}': {exc.strerror}\n")
                raise _Exit(2) from exc
            self.xml_output = arg
        elif opt_id is OptionId.NONE:
            if self.lookup(arg) == 0:
                self._usage_error(
                    f"{self.prog}: Unrecognized unit test '{arg}'",
                    "--list' for list of unit tests.",
                )
        elif opt_id is OptionId.UNKNOWN:
            self._usage_error(f"Unrecognized command line option '{arg}'.")
        elif opt_id is OptionId.MISSING_ARG:
            self._usage_error(f"The command line option '{arg}' requires an argument.")
        elif opt_id is OptionId.BOGUS_ARG:
            self._usage_error(f"The command line option '{arg}' does not expect an argument.")

    def main(self, argv: Sequence[str] | None = None) -> int:
        """Parse the command-line arguments, run the tests and return the exit status."""
        args = list(sys.argv[1:] if argv is None else argv)
        try:
            for opt_id, arg in parse_options(_OPTIONS, args):
                self._handle_option(opt_id, arg)
        except _Exit as stop:
            return stop.code

        code = self.run()
        if self.xml_output:
            self.write_xml(self.xml_output, os.path.basename(self.prog))
        return code