#!/usr/bin/env python3
"""
MARIE Assembler Demo
====================

This script demonstrates how to use the marie_asm package to:
1. Assemble a source file
2. Print the listing and symbol table
3. Write a binary image
4. Disassemble the image again

Usage:
    python examples/assembler_demo.py
"""

from pathlib import Path

from marie_asm.assembler import Assembler
from marie_asm.disassembler import MarieDisassembler
from marie_asm.errors import AssemblerError


def main():
    source = Path(__file__).with_name("countdown.mas")

    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    asm = Assembler()
    program = asm.assemble_file(source)
    print(f"Assembled {source.name}: {len(program)} words at ${program.origin:03X}")

    # ==========================================================================
    # 2. Listing and symbols
    # ==========================================================================
    print("\nListing:")
    print(asm.get_listing())

    print("\nSymbols:")
    print(asm.get_symbol_listing())

    # ==========================================================================
    # 3. Binary image
    # ==========================================================================
    image = program.to_bytes()
    print(f"\nBinary image: {len(image)} bytes")

    # ==========================================================================
    # 4. Disassemble, annotating operands with label names
    # ==========================================================================
    names = {address: name for name, address in program.get_symbols().items()}
    disasm = MarieDisassembler(names)
    print("\nDisassembly:")
    for line in disasm.disassemble_bytes(image, start_address=program.origin):
        print(line)

    # ==========================================================================
    # 5. Errors carry their location
    # ==========================================================================
    try:
        asm.assemble("LOOP, LOAD X\n      JUMP LOPP\nX, DEC 1", "typo.mas")
    except AssemblerError as e:
        print(f"\n{e}")


if __name__ == "__main__":
    main()
