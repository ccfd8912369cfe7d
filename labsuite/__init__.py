"""Integer statistics helpers, exercise programs and a lightweight unit-test runner."""

__version__ = "0.1.0"
__all__ = ["cmdline", "programs", "reporter", "runner", "stats"]