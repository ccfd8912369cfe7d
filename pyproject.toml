[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labsuite"
version = "0.1.0"
description = "Small integer statistics helpers, exercise programs and a lightweight unit-test runner"
requires-python = ">=3.10"
dependencies = []
keywords = ["unit testing", "test runner", "tap", "xunit", "statistics", "exercises"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing :: Unit",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
labsuite-hello = "labsuite.programs:hello_main"
labsuite-minmax = "labsuite.programs:minmax_main"
labsuite-generic-max = "labsuite.programs:generic_max_main"
labsuite-recap = "labsuite.programs:recap_main"

[tool.hatch.build.targets.wheel]
packages = ["labsuite"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
