"""
MARIE Disassembler Module
=========================

Renders assembled MARIE words back into assembly text, for listings and
for inspecting binary images written by ``marieasm -b``.

Usage:
    from marie_asm.disassembler import MarieDisassembler, disassemble_word

    disassemble_word(0x8400)   # 'SKIPCOND EQ'

    disasm = MarieDisassembler()
    for line in disasm.disassemble_bytes(image, start_address=0x100):
        print(line)
"""

from .marie import MarieDisassembler, DisassembledWord, disassemble_word

__all__ = [
    "MarieDisassembler",
    "DisassembledWord",
    "disassemble_word",
]
