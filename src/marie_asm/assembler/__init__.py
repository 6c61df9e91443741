"""
MARIE Assembler
===============

This package implements a two-pass assembler for MARIE, the 16-bit
teaching machine with a 4-bit opcode, a 12-bit address field and 4096
words of memory.

Main Components
---------------
- **Assembler**: Main assembler class with file handling and output writers
- **Lexer**: Tokenizes source bytes into classified tokens
- **SymbolTable**: Label -> address map built in pass 1
- **CodeGenerator**: Runs pass 1 (structure, labels, addresses) and
  pass 2 (operand resolution, encoding)
- **encode/decode**: Pack and unpack 16-bit instruction words

Source Syntax
-------------
```
/ comments start with a slash
        ORG 100          / decimal: place code at $064
LOOP,   LOAD X           / label definition ends with a comma
        SKIPCOND GT      / LT, EQ or GT
        JUMP DONE        / forward reference
        JUMP LOOP
DONE,   HALT
X,      HEX 1F           / data word in hex
Y,      DEC 31           / data word in decimal
```

Instruction operands are hexadecimal and must start with a digit
(``0FF``, not ``FF``, which would be a label).

Example Usage
-------------
>>> from marie_asm.assembler import assemble
>>> program = assemble(b"ORG 100\\nHALT")
>>> [(hex(w.address), hex(w.word)) for w in program.words]
[('0x64', '0x7000')]
"""

from marie_asm.assembler.assembler import Assembler, assemble, assemble_file
from marie_asm.assembler.lexer import Lexer, SourceText, Token, TokenType
from marie_asm.assembler.symbols import Symbol, SymbolTable, SymbolView
from marie_asm.assembler.codegen import (
    CodeGenerator,
    InstructionRecord,
    Program,
    ProgramWord,
)
from marie_asm.assembler.encoder import encode, decode
from marie_asm.assembler.opcodes import (
    Opcode,
    Directive,
    SkipCondition,
    MEMORY_SIZE,
)
from marie_asm.assembler.listing import format_listing, format_hex, format_symbols

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "SourceText",
    "Token",
    "TokenType",
    # Symbols
    "Symbol",
    "SymbolTable",
    "SymbolView",
    # Code generator
    "CodeGenerator",
    "InstructionRecord",
    "Program",
    "ProgramWord",
    # Encoder
    "encode",
    "decode",
    # Opcodes
    "Opcode",
    "Directive",
    "SkipCondition",
    "MEMORY_SIZE",
    # Listing
    "format_listing",
    "format_hex",
    "format_symbols",
]
