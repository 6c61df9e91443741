"""
MARIE Assembler Command-Line Interface
======================================

- **marieasm**: assemble a MARIE source file (or stdin) and print a
  listing, hex dump or symbol table

Implemented as a Click application with the shared exit codes from
marie_asm.cli.errors.
"""

__all__ = ["marieasm"]
