"""
MARIE Disassembler
==================

Turns MARIE instruction words back into assembly text. This is the
inverse of the assembler's encoder.

Output follows the assembler's own syntax, so a disassembled word can
be fed back through the assembler:

    1003  ->  LOAD 003
    8400  ->  SKIPCOND EQ
    7000  ->  HALT
    D123  ->  HEX 0D123    (opcode $D is unassigned)
    0ABC  ->  JNS 0ABC

A word with an unassigned opcode, a nullary opcode with a non-zero
operand field, or a SKIPCOND with an unknown condition pattern is shown
as a HEX data word, since the assembler could not have produced it from
an instruction.

Hex operands that would start with a letter get a leading 0, the same
way a programmer has to write them for the assembler to read a number
rather than a label.

Usage:
    disasm = MarieDisassembler(symbol_table={0x010: "LOOP"})
    for line in disasm.disassemble([0x1010, 0x7000], start_address=0):
        print(line)
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from marie_asm.assembler.encoder import decode
from marie_asm.assembler.opcodes import (
    Opcode,
    opcode_from_code,
    skip_condition_from_bits,
)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledWord:
    """
    A single disassembled MARIE word.

    Attributes:
        address: Memory address of the word
        word: The raw 16-bit word
        mnemonic: Instruction mnemonic, or "HEX" for data
        operand_str: Formatted operand (may be empty)
        comment: Symbol name for the operand address, when known
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str
    comment: str = ""

    @property
    def text(self) -> str:
        """The assembly text without address or comment."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as ADDRESS: WORD  MNEMONIC OPERAND"""
        if self.comment:
            return f"{self.address:03X}: {self.word:04X}  {self.text:<12} / {self.comment}"
        return f"{self.address:03X}: {self.word:04X}  {self.text}"


def disassemble_word(word: int) -> str:
    """Render one word as assembly text (e.g. ``LOAD 003``)."""
    mnemonic, operand_str = _decode_text(word)
    return f"{mnemonic} {operand_str}" if operand_str else mnemonic


def _hex(value: int, width: int) -> str:
    text = f"{value:0{width}X}"
    return "0" + text if text[0].isalpha() else text


def _decode_text(word: int) -> tuple[str, str]:
    code, operand = decode(word)
    opcode = opcode_from_code(code)

    if opcode is None:
        return "HEX", _hex(word, 4)

    if opcode is Opcode.SKIPCOND:
        condition = skip_condition_from_bits(operand)
        if condition is None:
            return "HEX", _hex(word, 4)
        return opcode.name, condition.name

    if not opcode.unary:
        if operand:
            return "HEX", _hex(word, 4)
        return opcode.name, ""

    return opcode.name, _hex(operand, 3)


# =============================================================================
# MARIE Disassembler
# =============================================================================

class MarieDisassembler:
    """
    Disassembler for MARIE words.

    Attributes:
        _symbol_table: Optional address -> name map used to annotate
                       address operands
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        self._symbol_table = symbol_table or {}

    def disassemble_one(self, word: int, address: int = 0) -> DisassembledWord:
        """Disassemble one word located at ``address``."""
        mnemonic, operand_str = _decode_text(word)

        comment = ""
        opcode = opcode_from_code(word >> 12)
        if mnemonic != "HEX" and opcode is not None and opcode.unary and opcode is not Opcode.SKIPCOND:
            comment = self._symbol_table.get(word & 0x0FFF, "")

        return DisassembledWord(address, word, mnemonic, operand_str, comment)

    def disassemble(
        self,
        words: Iterable[int],
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[DisassembledWord]:
        """
        Disassemble consecutive words.

        Args:
            words: Words to disassemble
            start_address: Address of the first word
            count: Maximum number of words (None = all)
        """
        result = []
        for index, word in enumerate(words):
            if count is not None and index >= count:
                break
            result.append(self.disassemble_one(word, start_address + index))
        return result

    def disassemble_bytes(self, data: bytes, start_address: int = 0) -> List[DisassembledWord]:
        """Disassemble big-endian words from a binary image."""
        if len(data) % 2:
            raise ValueError(f"binary image has odd length {len(data)}")
        words = [int.from_bytes(data[i:i + 2], "big") for i in range(0, len(data), 2)]
        return self.disassemble(words, start_address)

    def disassemble_to_text(self, words: Iterable[int], start_address: int = 0) -> str:
        """Disassemble and return one line per word."""
        return "\n".join(str(w) for w in self.disassemble(words, start_address))

    def add_symbols(self, symbols: Dict[int, str]) -> None:
        """Add address -> name annotations."""
        self._symbol_table.update(symbols)
