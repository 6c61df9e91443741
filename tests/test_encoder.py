# =============================================================================
# test_encoder.py - Instruction Set and Word Encoding Tests
# =============================================================================
# Tests for the opcode/directive tables and for packing opcode + operand
# into 16-bit words.
# =============================================================================

import pytest

from marie_asm.assembler.encoder import decode, encode
from marie_asm.assembler.opcodes import (
    Directive,
    MEMORY_SIZE,
    Opcode,
    SkipCondition,
    lookup_directive,
    lookup_opcode,
    lookup_skip_condition,
    opcode_from_code,
    skip_condition_from_bits,
)


# =============================================================================
# Instruction Set Tests
# =============================================================================

class TestInstructionSet:
    """Test the opcode, directive and condition tables."""

    def test_thirteen_opcodes(self):
        assert len(Opcode) == 13

    def test_codes_are_unique_nibbles(self):
        codes = [op.code for op in Opcode]
        assert len(set(codes)) == 13
        assert all(0 <= code <= 0xF for code in codes)

    def test_known_codes(self):
        assert Opcode.JNS.code == 0x0
        assert Opcode.LOAD.code == 0x1
        assert Opcode.HALT.code == 0x7
        assert Opcode.SKIPCOND.code == 0x8
        assert Opcode.JUMPI.code == 0xC

    def test_nullary_opcodes(self):
        """INPUT, OUTPUT, HALT and CLEAR take no operand."""
        nullary = {op for op in Opcode if not op.unary}
        assert nullary == {Opcode.INPUT, Opcode.OUTPUT, Opcode.HALT, Opcode.CLEAR}

    def test_lookup_is_case_insensitive(self):
        assert lookup_opcode("skipcond") is Opcode.SKIPCOND
        assert lookup_directive("org") is Directive.ORG
        assert lookup_skip_condition("gt") is SkipCondition.GT

    def test_lookup_unknown(self):
        assert lookup_opcode("NOP") is None
        assert lookup_directive("EQU") is None
        assert lookup_skip_condition("NE") is None

    def test_unassigned_codes(self):
        for code in (0xD, 0xE, 0xF):
            assert opcode_from_code(code) is None
        assert opcode_from_code(0x9) is Opcode.JUMP

    def test_directive_bases(self):
        assert Directive.ORG.base == 10
        assert Directive.DEC.base == 10
        assert Directive.HEX.base == 16
        assert not Directive.ORG.emits
        assert Directive.DEC.emits and Directive.HEX.emits

    def test_skip_condition_patterns(self):
        """Conditions occupy bits 10-11 of the operand field."""
        assert SkipCondition.LT.value == 0x000
        assert SkipCondition.EQ.value == 0x400
        assert SkipCondition.GT.value == 0x800
        assert skip_condition_from_bits(0x400) is SkipCondition.EQ
        assert skip_condition_from_bits(0xC00) is None


# =============================================================================
# Encoding Tests
# =============================================================================

class TestEncode:
    """Test packing words."""

    def test_unary_opcode(self):
        assert encode(Opcode.LOAD, 0x003) == 0x1003
        assert encode(Opcode.STORE, 0xABC) == 0x2ABC

    def test_nullary_opcode(self):
        """A nullary opcode has an all-zero operand field."""
        assert encode(Opcode.HALT) == 0x7000
        assert encode(Opcode.CLEAR, None) == 0xA000

    def test_jns_zero_code(self):
        assert encode(Opcode.JNS, 0xFFF) == 0x0FFF

    def test_skipcond(self):
        assert encode(Opcode.SKIPCOND, SkipCondition.LT.value) == 0x8000
        assert encode(Opcode.SKIPCOND, SkipCondition.EQ.value) == 0x8400
        assert encode(Opcode.SKIPCOND, SkipCondition.GT.value) == 0x8800

    @pytest.mark.parametrize("opcode", list(Opcode))
    def test_round_trip(self, opcode):
        """Decoding recovers the opcode code and every 12-bit operand."""
        for operand in range(MEMORY_SIZE):
            assert decode(encode(opcode, operand)) == (opcode.code, operand)

    def test_decode_splits_fields(self):
        assert decode(0x9002) == (0x9, 0x002)
        assert decode(0xFFFF) == (0xF, 0xFFF)
