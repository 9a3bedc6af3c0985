[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "goianinha"
version = "0.1.0"
description = "Syntax tree, symbol tables, semantic analysis and MIPS code generation for the Goianinha teaching language"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "mips", "semantic-analysis", "symbol-table", "ast", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["goianinha"]

[tool.pytest.ini_options]
addopts = "-ra"
