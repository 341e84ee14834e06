[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vidlang"
version = "0.1.0"
description = "A small pipeline language for describing video edits, with a parser, an interpreter and a live preview server"
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "dsl", "pipeline", "parser", "interpreter", "editing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
vidlang-parse = "vidlang.parse_cli:main"
vidlang-run = "vidlang.run_cli:main"
vidlang-server = "vidlang.server:main"

[tool.hatch.build.targets.wheel]
packages = ["vidlang"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
