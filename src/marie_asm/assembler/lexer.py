"""
MARIE Assembly Language Lexer
=============================

This module implements the lexer (tokenizer) for MARIE assembly language.
It converts a source buffer into a stream of classified tokens that the
code generator walks in both passes.

Token Types
-----------
- OPCODE: One of the thirteen MARIE mnemonics (LOAD, SKIPCOND, ...)
- DIRECTIVE: ORG, DEC or HEX
- NUMBER: A digit-led run of hex digits (0FF, 100, 3)
- IDENT: Any other letter-led run (label definitions and references,
  and the SKIPCOND keywords LT/EQ/GT)
- COMMA: ``,`` ends a label definition
- INVALID: A byte that cannot start a token, or a malformed numeral
- EOF: Returned by next_token() once the buffer is exhausted

Words are classified case-insensitively: ``load``, ``Load`` and ``LOAD``
are the same opcode.

Comments
--------
A comment starts at ``/`` and runs to the end of the line.

Numbers
-------
A word whose first byte is a digit must be made of hex digits only. A
word like ``12G`` is a malformed numeral: it is emitted as an INVALID
token and tokenization stops there, since the rest of the stream cannot
be trusted. Other stray bytes (``#``, ``;``, ...) become 1-byte INVALID
tokens and scanning carries on so later lines still tokenize.

Tokens never copy source text. Each one records an offset and length
into the SourceText it came from; use SourceText.text() to read it.

Example
-------
>>> from marie_asm.assembler.lexer import Lexer
>>> lexer = Lexer(b"LOOP, LOAD 3  / fetch")
>>> for token in lexer.tokenize():
...     print(token)
Token(IDENT, 1:1+4)
Token(COMMA, 1:5+1)
Token(OPCODE, 1:7+4)
Token(NUMBER, 1:12+1)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from marie_asm.assembler.opcodes import OPCODES, DIRECTIVES


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token kinds produced by the lexer."""

    EOF = auto()         # End of buffer (never part of tokenize() output)
    INVALID = auto()     # Stray byte or malformed numeral
    OPCODE = auto()      # Instruction mnemonic
    DIRECTIVE = auto()   # ORG / DEC / HEX
    IDENT = auto()       # Label name or SKIPCOND keyword
    NUMBER = auto()      # Digit-led hex-digit run
    COMMA = auto()       # ,


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token: a classified view into the source buffer.

    Attributes:
        type: The TokenType classification
        offset: Byte offset of the first byte in the source
        length: Length in bytes
        line: Line number in source (1-indexed)
        column: Byte column in source (1-indexed)
        error: Why the token is INVALID (None for valid tokens)
    """
    type: TokenType
    offset: int
    length: int
    line: int
    column: int
    error: Optional[str] = None

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.line}:{self.column}+{self.length})"

    @property
    def end(self) -> int:
        """Offset one past the last byte of the token."""
        return self.offset + self.length


# =============================================================================
# Source Buffer
# =============================================================================

class SourceText:
    """
    Immutable source buffer shared by all tokens of one assembly.

    Attributes:
        data: The raw source bytes
        filename: Name used in diagnostics
    """

    def __init__(self, data: bytes | str, filename: str = "<input>"):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.data = bytes(data)
        self.filename = filename
        self._line_starts: Optional[list[int]] = None

    def __len__(self) -> int:
        return len(self.data)

    def text(self, token: Token) -> str:
        """Return the source text a token covers."""
        return self.data[token.offset:token.end].decode("ascii", errors="replace")

    def line_text(self, line: int) -> str:
        """
        Return the text of a 1-indexed source line, without its newline.

        Used for the source excerpt in error messages.
        """
        if self._line_starts is None:
            starts = [0]
            pos = self.data.find(b"\n")
            while pos != -1:
                starts.append(pos + 1)
                pos = self.data.find(b"\n", pos + 1)
            self._line_starts = starts

        if line < 1 or line > len(self._line_starts):
            return ""
        start = self._line_starts[line - 1]
        end = self.data.find(b"\n", start)
        if end == -1:
            end = len(self.data)
        return self.data[start:end].decode("utf-8", errors="replace").rstrip("\r")


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes MARIE assembly source.

    Usage:
        lexer = Lexer(source_bytes, filename)
        tokens = list(lexer.tokenize())

    tokenize() can be called again to restart from the beginning of the
    buffer; a stream cannot be resumed from the middle.

    Attributes:
        source: The SourceText being tokenized
        halted: True once a malformed numeral stopped the current stream
    """

    # Bytes that make up a word (opcode, directive, number, identifier)
    WORD_CHARS = frozenset((string.ascii_letters + string.digits).encode("ascii"))

    DIGITS = frozenset(string.digits.encode("ascii"))
    HEX_DIGITS = frozenset(string.hexdigits.encode("ascii"))

    # Whitespace other than newline
    BLANKS = frozenset(b" \t\r\v\f")

    NEWLINE = ord("\n")
    COMMENT = ord("/")
    COMMA = ord(",")

    def __init__(self, source: SourceText | bytes | str, filename: str = "<input>"):
        """
        Initialize the lexer with a source buffer.

        Args:
            source: A SourceText, or raw bytes/str to wrap in one
            filename: Name of the source (ignored when source is a SourceText)
        """
        if not isinstance(source, SourceText):
            source = SourceText(source, filename)
        self.source = source
        self._data = source.data
        self.reset()

    def reset(self) -> None:
        """Rewind to the start of the buffer."""
        self._pos = 0
        self._line = 1
        self._column = 1
        self.halted = False

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the start of the source.

        The stream ends when the buffer is exhausted; no EOF token is
        yielded. If a malformed numeral is found, its INVALID token is the
        last one yielded.

        Yields:
            Token objects in source order
        """
        self.reset()
        while True:
            token = self.next_token()
            if token.type == TokenType.EOF:
                return
            yield token

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Returns an EOF token at the end of the buffer, and after a
        malformed numeral halted the stream.
        """
        if not self.halted:
            self._skip_blanks_and_comments()

        if self.halted or self._at_end():
            return Token(TokenType.EOF, self._pos, 0, self._line, self._column)

        byte = self._data[self._pos]

        if byte == self.COMMA:
            return self._make_token(TokenType.COMMA, 1)

        if byte in self.WORD_CHARS:
            return self._scan_word()

        # Anything else is a lone invalid byte; keep scanning after it
        shown = chr(byte) if 0x20 <= byte < 0x7F else f"\\x{byte:02x}"
        return self._make_token(
            TokenType.INVALID, 1, error=f"unexpected character '{shown}'"
        )

    # =========================================================================
    # Scanning Helpers
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._data)

    def _skip_blanks_and_comments(self) -> None:
        """Skip whitespace, newlines and ``/`` comments."""
        data = self._data
        while self._pos < len(data):
            byte = data[self._pos]
            if byte == self.NEWLINE:
                self._pos += 1
                self._line += 1
                self._column = 1
            elif byte in self.BLANKS:
                self._pos += 1
                self._column += 1
            elif byte == self.COMMENT:
                end = data.find(b"\n", self._pos)
                if end == -1:
                    end = len(data)
                self._column += end - self._pos
                self._pos = end
            else:
                return

    def _make_token(
        self, token_type: TokenType, length: int, error: Optional[str] = None
    ) -> Token:
        """Create a token at the current position and step past it."""
        token = Token(token_type, self._pos, length, self._line, self._column, error)
        self._pos += length
        self._column += length
        return token

    def _scan_word(self) -> Token:
        """
        Scan a maximal alphanumeric run and classify it.

        Priority: opcode, directive, number (digit-led), identifier.
        """
        data = self._data
        end = self._pos
        while end < len(data) and data[end] in self.WORD_CHARS:
            end += 1

        length = end - self._pos
        word = data[self._pos:end].decode("ascii").upper()

        if word in OPCODES:
            return self._make_token(TokenType.OPCODE, length)

        if word in DIRECTIVES:
            return self._make_token(TokenType.DIRECTIVE, length)

        if data[self._pos] in self.DIGITS:
            if all(b in self.HEX_DIGITS for b in data[self._pos:end]):
                return self._make_token(TokenType.NUMBER, length)
            token = self._make_token(
                TokenType.INVALID, length,
                error=f"malformed numeric literal '{word}'",
            )
            self.halted = True
            return token

        return self._make_token(TokenType.IDENT, length)
