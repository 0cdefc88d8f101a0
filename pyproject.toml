[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "validatron"
version = "0.1.0"
description = "A small rule language for matching dataclass events against compiled conditions"
requires-python = ">=3.10"
dependencies = []
keywords = ["rules", "dsl", "conditions", "events", "filtering", "dataclasses"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["validatron"]

[tool.hatch.build.targets.sdist]
include = ["validatron", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
