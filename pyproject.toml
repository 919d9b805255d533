[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fmtkit"
version = "0.1.0"
description = "Brace-style string formatting with replacement fields, standard format specs and named arguments"
requires-python = ">=3.10"
dependencies = []
keywords = ["format", "formatting", "format string", "replacement field", "named arguments"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fmtkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
