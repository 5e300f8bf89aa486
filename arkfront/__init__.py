"""Lexer, syntax tree nodes, macro processor and optimizer for a small Lisp-like language."""

__version__ = "0.1.0"