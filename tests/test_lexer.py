# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the MARIE assembler lexer/tokenizer.
#
# Test coverage includes:
#   - Word classification: opcodes, directives, numbers, identifiers
#   - Case-insensitive matching
#   - Comments, whitespace and line/column tracking
#   - Invalid bytes and malformed numerals
#   - Restarting the token stream
# =============================================================================

import pytest

from marie_asm.assembler.lexer import Lexer, SourceText, Token, TokenType


# =============================================================================
# Helper Functions
# =============================================================================

def tokenize(source: bytes | str) -> list[Token]:
    """Tokenize a source buffer into a list."""
    return list(Lexer(source, "<test>").tokenize())


def kinds(source: bytes | str) -> list[TokenType]:
    return [t.type for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces no tokens."""
        assert tokenize(b"") == []

    def test_whitespace_only(self):
        """Whitespace and blank lines produce no tokens."""
        assert tokenize(b"  \t\n\r\n   \n") == []

    def test_eof_not_in_stream(self):
        """The token stream ends without an EOF token."""
        tokens = tokenize(b"HALT")
        assert [t.type for t in tokens] == [TokenType.OPCODE]

    def test_labelled_instruction(self):
        """A label definition, mnemonic and operand."""
        assert kinds(b"LOOP, LOAD 3") == [
            TokenType.IDENT,
            TokenType.COMMA,
            TokenType.OPCODE,
            TokenType.NUMBER,
        ]

    def test_comma_without_spaces(self):
        """Comma splits words even without whitespace."""
        assert kinds(b"X,HALT") == [TokenType.IDENT, TokenType.COMMA, TokenType.OPCODE]

    def test_str_source_accepted(self):
        """A str buffer is encoded and tokenized like bytes."""
        assert kinds("LOAD X") == [TokenType.OPCODE, TokenType.IDENT]


# =============================================================================
# Classification Tests
# =============================================================================

class TestClassification:
    """Test how alphanumeric runs are classified."""

    @pytest.mark.parametrize("word", [
        "JNS", "LOAD", "STORE", "ADD", "SUBT", "INPUT", "OUTPUT",
        "HALT", "SKIPCOND", "JUMP", "CLEAR", "ADDI", "JUMPI",
    ])
    def test_all_opcodes(self, word):
        """Every mnemonic is an OPCODE token."""
        assert kinds(word) == [TokenType.OPCODE]

    @pytest.mark.parametrize("word", ["ORG", "DEC", "HEX"])
    def test_directives(self, word):
        """ORG, DEC and HEX are DIRECTIVE tokens."""
        assert kinds(word) == [TokenType.DIRECTIVE]

    def test_case_insensitive_keywords(self):
        """Mnemonics and directives match in any case."""
        assert kinds(b"load Store org Hex") == [
            TokenType.OPCODE,
            TokenType.OPCODE,
            TokenType.DIRECTIVE,
            TokenType.DIRECTIVE,
        ]

    def test_opcode_prefix_is_identifier(self):
        """A word that only starts with a mnemonic is an identifier."""
        assert kinds(b"ADDX HALTED") == [TokenType.IDENT, TokenType.IDENT]

    def test_hex_number(self):
        """Digit-led hex-digit runs are numbers."""
        assert kinds(b"0FF 100 1a2B 3") == [TokenType.NUMBER] * 4

    def test_letter_led_hex_is_identifier(self):
        """FF starts with a letter, so it names a label."""
        assert kinds(b"FF") == [TokenType.IDENT]

    def test_skipcond_keywords_are_identifiers(self):
        """LT, EQ and GT are plain identifiers to the lexer."""
        assert kinds(b"SKIPCOND EQ") == [TokenType.OPCODE, TokenType.IDENT]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Test offsets, lengths, lines and columns."""

    def test_columns(self):
        """Columns are 1-indexed byte positions."""
        tokens = tokenize(b"LOOP, LOAD 3")
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (1, 5), (1, 7), (1, 12)]

    def test_offsets_and_lengths(self):
        """Tokens record offset and length into the buffer."""
        tokens = tokenize(b"LOOP, LOAD 3")
        assert [(t.offset, t.length) for t in tokens] == [(0, 4), (4, 1), (6, 4), (11, 1)]

    def test_lines(self):
        """Newlines advance the line and reset the column."""
        tokens = tokenize(b"LOAD X\n  HALT\n\nCLEAR")
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (1, 6), (2, 3), (4, 1)]

    def test_crlf_line_endings(self):
        """Carriage returns are whitespace."""
        tokens = tokenize(b"HALT\r\nCLEAR")
        assert (tokens[1].line, tokens[1].column) == (2, 1)

    def test_tab_counts_one_column(self):
        tokens = tokenize(b"\tHALT")
        assert tokens[0].column == 2

    def test_source_text_lookup(self):
        """Token text is read back from the source buffer."""
        source = SourceText(b"loop, Load 0ff")
        tokens = list(Lexer(source).tokenize())
        assert [source.text(t) for t in tokens] == ["loop", ",", "Load", "0ff"]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test slash comments."""

    def test_trailing_comment(self):
        """Everything after / on a line is ignored."""
        tokens = tokenize(b"HALT / stop, LOAD 5\nCLEAR")
        assert [t.type for t in tokens] == [TokenType.OPCODE, TokenType.OPCODE]
        assert tokens[1].line == 2

    def test_comment_without_space(self):
        assert kinds(b"HALT/LOAD") == [TokenType.OPCODE]

    def test_full_line_comment(self):
        assert tokenize(b"/ just a comment") == []

    def test_comment_at_end_of_buffer(self):
        """A comment with no trailing newline ends the stream cleanly."""
        assert kinds(b"CLEAR / done") == [TokenType.OPCODE]


# =============================================================================
# Invalid Input Tests
# =============================================================================

class TestInvalidInput:
    """Test stray bytes and malformed numerals."""

    def test_stray_byte_continues(self):
        """A stray byte is a 1-byte INVALID token and scanning continues."""
        lexer = Lexer(b"LOAD #\nHALT")
        tokens = list(lexer.tokenize())
        assert [t.type for t in tokens] == [
            TokenType.OPCODE, TokenType.INVALID, TokenType.OPCODE
        ]
        assert tokens[1].length == 1
        assert "'#'" in tokens[1].error
        assert not lexer.halted

    def test_non_ascii_byte(self):
        tokens = tokenize(b"\xffHALT")
        assert [t.type for t in tokens] == [TokenType.INVALID, TokenType.OPCODE]
        assert "\\xff" in tokens[0].error

    def test_malformed_numeral_halts(self):
        """A digit-led run with non-hex letters stops tokenization."""
        lexer = Lexer(b"LOAD 12G\nHALT")
        tokens = list(lexer.tokenize())
        assert [t.type for t in tokens] == [TokenType.OPCODE, TokenType.INVALID]
        assert tokens[1].length == 3
        assert "malformed numeric literal" in tokens[1].error
        assert lexer.halted

    def test_next_token_after_halt_is_eof(self):
        lexer = Lexer(b"9Z HALT")
        assert lexer.next_token().type == TokenType.INVALID
        assert lexer.next_token().type == TokenType.EOF


# =============================================================================
# Stream Control Tests
# =============================================================================

class TestStreamControl:
    """Test next_token() and restarting."""

    def test_next_token_returns_eof_repeatedly(self):
        lexer = Lexer(b"HALT")
        assert lexer.next_token().type == TokenType.OPCODE
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF

    def test_tokenize_restarts_from_start(self):
        """Calling tokenize() again yields the same stream."""
        lexer = Lexer(b"LOOP, LOAD 3\nHALT")
        first = list(lexer.tokenize())
        second = list(lexer.tokenize())
        assert first == second

    def test_restart_clears_halt(self):
        lexer = Lexer(b"1X")
        list(lexer.tokenize())
        assert lexer.halted
        assert len(list(lexer.tokenize())) == 1

    def test_tokens_are_immutable(self):
        token = tokenize(b"HALT")[0]
        with pytest.raises(AttributeError):
            token.offset = 3


# =============================================================================
# Source Text Tests
# =============================================================================

class TestSourceText:
    """Test line lookup for diagnostics."""

    def test_line_text(self):
        source = SourceText(b"HALT\nLOAD X\r\nCLEAR")
        assert source.line_text(1) == "HALT"
        assert source.line_text(2) == "LOAD X"
        assert source.line_text(3) == "CLEAR"

    def test_line_text_out_of_range(self):
        source = SourceText(b"HALT")
        assert source.line_text(0) == ""
        assert source.line_text(7) == ""
