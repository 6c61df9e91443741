"""
Text renderings of an assembled program.

Listing (source order)::

    000  1003  LOOP, LOAD 003
    001  3004  ADD 004
    002  2000  STORE 000
    003  7000  HALT

Hex dump (address order)::

    000 1003
    001 3004

Symbol table (address order, then name)::

    LOOP            000
"""

from marie_asm.assembler.codegen import InstructionRecord, Program
from marie_asm.assembler.opcodes import Directive, Opcode, skip_condition_from_bits


def format_record(record: InstructionRecord) -> str:
    """Render a resolved record as assembly text with resolved operands."""
    mnemonic = record.mnemonic

    if mnemonic is Directive.DEC:
        text = f"DEC {record.resolved}"
    elif mnemonic is Directive.HEX:
        text = f"HEX {record.resolved:04X}"
    elif mnemonic is Opcode.SKIPCOND:
        text = f"SKIPCOND {skip_condition_from_bits(record.resolved)}"
    elif mnemonic.unary:
        text = f"{mnemonic} {record.resolved:03X}"
    else:
        text = str(mnemonic)

    prefix = "".join(f"{label}, " for label in record.labels)
    return prefix + text


def format_listing(program: Program) -> str:
    """Return the listing: address, word and resolved source per record."""
    lines = [
        f"{record.address:03X}  {record.word:04X}  {format_record(record)}"
        for record in program.records
    ]
    return "\n".join(lines)


def format_hex(program: Program) -> str:
    """Return the hex dump: one ``AAA WWWW`` line per word, by address."""
    return "\n".join(f"{address:03X} {word:04X}" for address, word in program.words)


def format_symbols(program: Program) -> str:
    """Return the symbol table sorted by address, then name."""
    symbols = sorted(program.symbols, key=lambda s: (s.address, s.name))
    return "\n".join(f"{s.name:<15} {s.address:03X}" for s in symbols)
