# labsuite

This package is a small set of teaching utilities. It has five modules:

- `labsuite.stats` finds the minimum and maximum of a sequence. It also has a generic helper that returns the larger of two values.
- `labsuite.programs` holds small command-line exercise programs built on those helpers.
- `labsuite.cmdline`, `labsuite.reporter` and `labsuite.runner` make up a lightweight unit-test runner. It can write plain, coloured, TAP or XUnit XML output.

## Installation

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Statistics helpers

```python
from labsuite.stats import find_min, find_max, generic_max
from labsuite.programs import compare_ints, compare_strings

find_min([4, -2, 9])                        # -2
find_max([4, -2, 9])                        # 9
generic_max(1, 5, compare_ints)             # 5
generic_max("zzz", "aaa", compare_strings)  # "zzz"
```

When the sequence is empty, `find_min` and `find_max` return the 32-bit integer limits: 2147483647 from `find_min` and -2147483648 from `find_max`. Any real value replaces these limits.

`generic_max(a, b, compare)` returns `a` when `compare(a, b)` is positive and `b` otherwise.

`labsuite.programs` also provides:

- `swap(a, b)`, which returns the pair in reversed order.
- `Point2d`, a dataclass with `x` and `y` fields.

## Exercise programs

```
labsuite-hello                  # prints "hello world!"
labsuite-minmax 3 -7 12         # prints "min: -7" and "max: 12"
labsuite-generic-max            # largest of two ints and of two strings
labsuite-recap                  # swap and point exercises
```

`labsuite-minmax` reads each argument's leading integer. An argument with no leading integer counts as 0.

## Unit-test runner

### Writing tests

A test is a plain function with no arguments. Inside it you can call:

- `check(cond, message)` to record a condition. It returns whether the condition holds.
- `require(cond, message)` to record a condition and stop the test at once if it fails.
- `case(name)` to label the checks that follow. `case(None)` ends the label.
- `msg(text)` or `dump(title, data)` to add detail. These print only after a failed check.

If a test raises any exception other than the one `require` uses, the runner counts the test as failed and reports the exception.

### Running a suite

```python
import sys
from labsuite.runner import TestSuite, TestUnit, check

def test_add():
    check(1 + 1 == 2, "1 + 1 == 2")

suite = TestSuite([TestUnit("add", test_add)])
sys.exit(suite.main())
```

`TestSuite` also accepts plain `(name, function)` pairs in place of `TestUnit` entries.

`TestSuite.main(argv)` parses the command line and runs the selected tests. If `--xml-output` was given, it also writes the XUnit report. It returns the exit status: 0 when every test passed, 1 when any test failed, and 2 on a usage error.

On systems with `os.fork`, tests run in child processes by default when more than one test is selected. A test that kills its process is then reported, not fatal to the run.

### Command-line options

```
-s, --skip            run every test except the ones named
    --exec[=WHEN]     run tests in child processes (auto, always, never)
-E, --no-exec         same as --exec=never
-t, --time[=TIMER]    measure test duration (real, cpu)
    --no-summary      do not print the summary
    --tap             produce TAP output
-x, --xml-output=FILE write an XUnit report
-l, --list            list the tests and exit
-v, --verbose[=LEVEL] more output (0 silent ... 3 every condition)
-q, --quiet           same as --verbose=0
    --color[=WHEN]    coloured output (auto, always, never)
    --no-color        same as --color=never
-h, --help            show help and exit
```

Test names given on the command line are matched in three steps:

1. An exact name match.
2. Failing that, whole-word matches. Words are separated by space, tab, `-`, `_` or `.`.
3. Failing that, substring matches.

### Lower-level pieces

You can also use the building blocks directly:

- `labsuite.cmdline.parse_options(options, args)` yields `(id, argument)` pairs from a list of `Option` entries.
- `labsuite.reporter.Reporter` writes test lines, checks, cases, messages and hex dumps to any text stream.

## What this package does not do

- The test runner has no command of its own and does not discover tests. You collect test functions into a `TestSuite` yourself and call `TestSuite.main` from your own script.
- Where `os.fork` is not available, tests always run in the runner's own process.

## Running the tests

```
pytest
```