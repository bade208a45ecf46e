[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "robotctl"
version = "0.1.0"
description = "Command console, balance controllers and scheduler models for a two-wheeled balancing robot"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "embedded",
    "robotics",
    "pid",
    "lqr",
    "command-line",
    "rtos",
    "cortex-m4",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
robotctl = "robotctl.console:main"

[tool.hatch.build.targets.wheel]
packages = ["robotctl"]

[tool.hatch.build.targets.sdist]
include = ["robotctl", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
