"""Syntax tree, symbol tables, semantic analysis and MIPS generation for Goianinha."""

__version__ = "0.1.0"
__all__ = ["ast", "symbols", "semantic", "codegen"]