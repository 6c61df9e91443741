"""
MARIE Instruction Set Definition
================================

This module defines the MARIE instruction set: the thirteen opcodes, the
three assembler directives and the SKIPCOND condition codes.

Instruction Format
------------------
Every instruction is one 16-bit word:

```
 15    12 11                     0
+--------+------------------------+
| opcode |        operand         |
+--------+------------------------+
```

The operand is a 12-bit memory address, so the machine addresses 4096
words. Nullary instructions (INPUT, OUTPUT, HALT, CLEAR) leave the operand
field zero.

SKIPCOND
--------
SKIPCOND does not take an address. Its operand selects the condition
tested against the accumulator, stored in bits 10-11 of the word:

| Condition | Operand field | Skips next instruction when |
|-----------|---------------|-----------------------------|
| LT        | $000          | AC < 0                      |
| EQ        | $400          | AC = 0                      |
| GT        | $800          | AC > 0                      |

Directives
----------
- ORG n : set the address counter to n (decimal), emits nothing
- DEC n : one data word, value given in decimal
- HEX n : one data word, value given in hexadecimal
"""

from enum import Enum
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

MEMORY_SIZE = 4096          # Addressable words
MAX_ADDRESS = MEMORY_SIZE - 1
OPCODE_SHIFT = 12           # Opcode lives in bits 12-15
OPERAND_MASK = 0x0FFF       # Operand lives in bits 0-11
WORD_LIMIT = 0x10000        # Data words are full 16-bit values


# =============================================================================
# Opcodes
# =============================================================================

class Opcode(Enum):
    """
    MARIE opcodes.

    Each member carries its 4-bit machine code and whether it consumes an
    operand (``unary``). The set is closed.
    """

    JNS = (0x0, True)        # Store PC at X, jump to X+1
    LOAD = (0x1, True)       # AC <- M[X]
    STORE = (0x2, True)      # M[X] <- AC
    ADD = (0x3, True)        # AC <- AC + M[X]
    SUBT = (0x4, True)       # AC <- AC - M[X]
    INPUT = (0x5, False)     # AC <- input
    OUTPUT = (0x6, False)    # output <- AC
    HALT = (0x7, False)      # Stop
    SKIPCOND = (0x8, True)   # Skip next instruction on condition
    JUMP = (0x9, True)       # PC <- X
    CLEAR = (0xA, False)     # AC <- 0
    ADDI = (0xB, True)       # AC <- AC + M[M[X]]
    JUMPI = (0xC, True)      # PC <- M[X]

    def __init__(self, code: int, unary: bool):
        self.code = code
        self.unary = unary

    def __str__(self) -> str:
        return self.name


class Directive(Enum):
    """
    Assembler directives.

    Each takes exactly one numeric operand. ``base`` is the radix the
    operand is written in; ``emits`` is False for ORG, which only moves
    the address counter.
    """

    ORG = (10, False)
    DEC = (10, True)
    HEX = (16, True)

    def __init__(self, base: int, emits: bool):
        self.base = base
        self.emits = emits

    def __str__(self) -> str:
        return self.name


class SkipCondition(Enum):
    """SKIPCOND conditions and their operand bit patterns."""

    LT = 0x000
    EQ = 0x400
    GT = 0x800

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Lookup Tables
# =============================================================================
# Keyed by upper-case mnemonic. Built once from the enums above.

OPCODES: dict[str, Opcode] = {op.name: op for op in Opcode}
DIRECTIVES: dict[str, Directive] = {d.name: d for d in Directive}
SKIP_CONDITIONS: dict[str, SkipCondition] = {c.name: c for c in SkipCondition}

_OPCODES_BY_CODE: dict[int, Opcode] = {op.code: op for op in Opcode}
_CONDITIONS_BY_BITS: dict[int, SkipCondition] = {c.value: c for c in SkipCondition}


def lookup_opcode(name: str) -> Optional[Opcode]:
    """Return the opcode for a mnemonic (case-insensitive), or None."""
    return OPCODES.get(name.upper())


def lookup_directive(name: str) -> Optional[Directive]:
    """Return the directive for a name (case-insensitive), or None."""
    return DIRECTIVES.get(name.upper())


def lookup_skip_condition(name: str) -> Optional[SkipCondition]:
    """Return the SKIPCOND condition for a keyword (case-insensitive), or None."""
    return SKIP_CONDITIONS.get(name.upper())


def opcode_from_code(code: int) -> Optional[Opcode]:
    """
    Return the opcode with the given 4-bit machine code.

    Codes $D-$F are unassigned and return None.
    """
    return _OPCODES_BY_CODE.get(code)


def skip_condition_from_bits(bits: int) -> Optional[SkipCondition]:
    """Return the condition whose operand pattern equals ``bits``, or None."""
    return _CONDITIONS_BY_BITS.get(bits)
