"""
MIPS Assembler Command-Line Interface
=====================================

- **mipsasm**: assemble a source file into an object listing

The tool is a Click-based CLI application with built-in help and
consistent error reporting (see mips_asm.cli.errors).
"""

__all__ = ["mipsasm"]
