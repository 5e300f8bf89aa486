[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arkfront"
version = "0.1.0"
description = "Front end for a small Lisp-like scripting language: lexer, syntax tree nodes, macro processor and optimizer"
requires-python = ">=3.10"
dependencies = []
keywords = ["lexer", "macro", "compiler", "lisp", "ast", "optimizer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["arkfront"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
