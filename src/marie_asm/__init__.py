"""
MARIE Assembler Toolchain
=========================

A two-pass assembler for MARIE (Machine Architecture that is Really
Intuitive and Easy), the accumulator machine used to teach computer
organization: 16-bit words, a 4-bit opcode, a 12-bit address field and
4096 words of memory.

Main Components
---------------
- **assembler**: Tokenizer, symbol table, two-pass code generator,
  word encoder and text listings
- **disassembler**: Renders words back into assembly text
- **cli**: The ``marieasm`` command

Quick Start
-----------
    >>> from marie_asm import assemble
    >>> program = assemble(b"SKIPCOND EQ\\nJUMP DONE\\nDONE, HALT")
    >>> program.get_symbols()
    {'DONE': 2}

Or from the command line:
    $ marieasm program.mas
    $ marieasm program.mas --format hex -b program.bin
"""

__version__ = "1.0.0"

from marie_asm.errors import (
    MarieError,
    SourceLocation,
    ErrorKind,
    AssemblerError,
    MalformedNumericLiteralError,
    UnexpectedTokenError,
    OperandArityError,
    DuplicateLabelError,
    UndefinedLabelError,
    OperandOutOfRangeError,
    InvalidSkipCondOperandError,
    AddressSpaceExhaustedError,
    AddressOverlapError,
)
from marie_asm.config import AssemblerConfig, get_default_config, set_default_config
from marie_asm.assembler import Assembler, Program, assemble, assemble_file
from marie_asm.disassembler import MarieDisassembler, disassemble_word

__all__ = [
    "__version__",
    # Errors
    "MarieError",
    "SourceLocation",
    "ErrorKind",
    "AssemblerError",
    "MalformedNumericLiteralError",
    "UnexpectedTokenError",
    "OperandArityError",
    "DuplicateLabelError",
    "UndefinedLabelError",
    "OperandOutOfRangeError",
    "InvalidSkipCondOperandError",
    "AddressSpaceExhaustedError",
    "AddressOverlapError",
    # Configuration
    "AssemblerConfig",
    "get_default_config",
    "set_default_config",
    # Assembler
    "Assembler",
    "Program",
    "assemble",
    "assemble_file",
    # Disassembler
    "MarieDisassembler",
    "disassemble_word",
]
