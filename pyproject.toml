[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chronical"
version = "0.1.0"
description = "A terminal puzzle engine with plain-text YAML level packs."
requires-python = ">=3.10"
keywords = ["puzzle", "nonogram", "terminal", "game", "levelpack", "yaml", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]
dependencies = [
    "pyyaml",
    "blessed",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chronical = "chronical.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["chronical"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
