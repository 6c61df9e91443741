"""
Instruction word packing.

A MARIE word holds the 4-bit opcode in bits 12-15 and the 12-bit operand
in bits 0-11. For SKIPCOND the operand is the condition's bit pattern,
which already sits in bits 10-11.
"""

from typing import Optional

from marie_asm.assembler.opcodes import Opcode, OPCODE_SHIFT, OPERAND_MASK


def encode(opcode: Opcode, operand: Optional[int] = None) -> int:
    """
    Pack an opcode and a resolved operand into a 16-bit word.

    Args:
        opcode: The instruction's opcode
        operand: Resolved 12-bit operand, or None for nullary opcodes

    Returns:
        The instruction word
    """
    if operand is None:
        operand = 0
    return (opcode.code << OPCODE_SHIFT) | (operand & OPERAND_MASK)


def decode(word: int) -> tuple[int, int]:
    """Split a word into its (opcode code, operand) fields."""
    return (word >> OPCODE_SHIFT) & 0xF, word & OPERAND_MASK
