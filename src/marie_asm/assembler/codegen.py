"""
MARIE Code Generator
====================

This module turns a token stream into a resolved program image. It
implements a two-pass assembly process:

Pass 1 (Structure and Symbols)
------------------------------
- Group tokens into logical lines
- Record label definitions (``NAME,``) at the current address
- Check each line's shape: labels, one mnemonic, operand arity
- Process ORG to move the address counter
- Assign an address to every instruction and data word

Pass 2 (Operand Resolution)
---------------------------
- Parse numeric operands (hex for instructions and HEX, decimal for DEC)
- Resolve label references against the completed symbol table
- Map SKIPCOND keywords to their bit patterns
- Encode every record into its 16-bit word

Pass 2 never writes to the symbol table: pass 1 freezes it and hands
over a read-only view. This is what makes forward references safe.

Every error is fatal. The first problem found aborts assembly and no
partial program is produced. A malformed numeral stops the lexer, so it is
reported before pass 1 looks at any line.
"""

from dataclasses import dataclass, replace
from itertools import groupby
from typing import Iterator, NamedTuple, Optional
import logging
import string
import struct

from marie_asm.errors import (
    MalformedNumericLiteralError,
    UnexpectedTokenError,
    OperandArityError,
    OperandOutOfRangeError,
    InvalidSkipCondOperandError,
    AddressSpaceExhaustedError,
    AddressOverlapError,
    SourceLocation,
)
from marie_asm.assembler.lexer import Lexer, SourceText, Token, TokenType
from marie_asm.assembler.opcodes import (
    Opcode,
    Directive,
    MEMORY_SIZE,
    MAX_ADDRESS,
    WORD_LIMIT,
    lookup_opcode,
    lookup_directive,
    lookup_skip_condition,
)
from marie_asm.assembler.symbols import SymbolTable, SymbolView
from marie_asm.assembler.encoder import encode


logger = logging.getLogger(__name__)


# =============================================================================
# Instruction Records
# =============================================================================

@dataclass(frozen=True)
class InstructionRecord:
    """
    One instruction or data word of the program.

    Pass 1 creates records with ``address`` fixed and ``resolved`` and
    ``word`` unset. Pass 2 returns completed copies; a record is never
    modified in place.

    Attributes:
        mnemonic: The opcode, or DEC/HEX for data words
        operand: Raw operand token (None for nullary opcodes)
        address: Memory address of the word
        location: Where the mnemonic appears in the source
        labels: Labels bound to this address on the same line
        resolved: Resolved operand value (None until pass 2, and for
                  nullary opcodes)
        word: Encoded 16-bit word (None until pass 2)
    """
    mnemonic: Opcode | Directive
    operand: Optional[Token]
    address: int
    location: SourceLocation
    labels: tuple[str, ...] = ()
    resolved: Optional[int] = None
    word: Optional[int] = None

    @property
    def is_data(self) -> bool:
        """True for DEC/HEX data words."""
        return isinstance(self.mnemonic, Directive)

    @property
    def line(self) -> int:
        return self.location.line


class ProgramWord(NamedTuple):
    """An (address, word) pair of the output image."""
    address: int
    word: int


# =============================================================================
# Program
# =============================================================================

@dataclass(frozen=True)
class Program:
    """
    A fully resolved program.

    Attributes:
        records: Completed instruction records in source order
        symbols: Read-only symbol table
        source: The source buffer the program was assembled from
    """
    records: tuple[InstructionRecord, ...]
    symbols: SymbolView
    source: SourceText

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ProgramWord]:
        return iter(self.words)

    @property
    def words(self) -> list[ProgramWord]:
        """(address, word) pairs sorted by address, source order kept for ties."""
        ordered = sorted(self.records, key=lambda r: r.address)
        return [ProgramWord(r.address, r.word) for r in ordered]

    @property
    def origin(self) -> int:
        """Lowest address holding a word (0 for an empty program)."""
        if not self.records:
            return 0
        return min(r.address for r in self.records)

    @property
    def end_address(self) -> int:
        """One past the highest address holding a word."""
        if not self.records:
            return 0
        return max(r.address for r in self.records) + 1

    def get_symbols(self) -> dict[str, int]:
        """Return a copy of the label -> address mapping."""
        return dict(self.symbols.as_dict())

    def operand_text(self, record: InstructionRecord) -> Optional[str]:
        """Source text of a record's operand, or None."""
        if record.operand is None:
            return None
        return self.source.text(record.operand)

    def memory_image(self, size: int = MEMORY_SIZE) -> list[int]:
        """
        Return a flat memory image.

        Unused words are 0. Records are written in source order, so a
        later record wins if two share an address.
        """
        image = [0] * size
        for record in self.records:
            image[record.address] = record.word
        return image

    def to_bytes(self) -> bytes:
        """
        Return the used part of memory as big-endian words.

        Covers origin through the highest used address; gaps are 0.
        """
        image = self.memory_image()[self.origin:self.end_address]
        return struct.pack(f">{len(image)}H", *image)


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Runs both assembly passes over a source buffer.

    Usage:
        codegen = CodeGenerator()
        program = codegen.generate(SourceText(b"LOAD X\\nHALT\\nX, DEC 5"))
        for address, word in program.words:
            ...

    The generator keeps no state between generate() calls, so assembling
    the same source twice gives the same program.
    """

    BASE_DIGITS = {10: frozenset(string.digits), 16: frozenset(string.hexdigits)}
    BASE_FORMATS = {10: "d", 16: "X"}

    def __init__(self, allow_overlap: bool = False):
        """
        Initialize the code generator.

        Args:
            allow_overlap: If True, two records at the same address only
                           log a warning instead of failing assembly.
        """
        self._allow_overlap = allow_overlap

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(self, source: SourceText) -> Program:
        """
        Assemble a source buffer.

        Args:
            source: The source to assemble

        Returns:
            The resolved Program

        Raises:
            AssemblerError: On the first error found
        """
        self._source = source
        lexer = Lexer(source)
        tokens = list(lexer.tokenize())

        # A malformed numeral truncates the stream; none of it is usable
        if lexer.halted:
            self._check_valid(tokens[-1])

        symbols = SymbolTable()
        records = self._pass1(tokens, symbols)
        view = symbols.freeze()

        resolved = self._pass2(records, view)
        return Program(tuple(resolved), view, source)

    # =========================================================================
    # Pass 1: Structure and Symbols
    # =========================================================================

    def _pass1(self, tokens: list[Token], symbols: SymbolTable) -> list[InstructionRecord]:
        """
        First pass: check line structure, collect labels, assign addresses.

        Returns:
            Records with addresses assigned and operands unresolved
        """
        records: list[InstructionRecord] = []
        occupied: dict[int, SourceLocation] = {}
        address = 0

        for _, group in groupby(tokens, key=lambda t: t.line):
            line = list(group)
            labels, head, operand = self._split_line(line)

            for label in labels:
                if address > MAX_ADDRESS:
                    raise AddressSpaceExhaustedError(
                        address, self._location(label), self._line_text(label)
                    )
                symbols.define(
                    self._text(label), address,
                    location=self._location(label),
                    source_line=self._line_text(label),
                )

            directive = lookup_directive(self._text(head)) if head.type == TokenType.DIRECTIVE else None

            if directive is Directive.ORG:
                address = self._parse_number(operand, directive.base, MEMORY_SIZE)
                logger.debug(f"line {head.line}: ORG sets address counter to ${address:03X}")
                continue

            if address > MAX_ADDRESS:
                raise AddressSpaceExhaustedError(
                    address, self._location(head), self._line_text(head)
                )

            location = self._location(head)
            if address in occupied:
                if not self._allow_overlap:
                    raise AddressOverlapError(
                        address,
                        location=location,
                        original_location=occupied[address],
                        source_line=self._line_text(head),
                    )
                logger.warning(
                    f"{location}: address ${address:03X} overwrites word from {occupied[address]}"
                )
            occupied[address] = location

            mnemonic = directive or lookup_opcode(self._text(head))
            records.append(InstructionRecord(
                mnemonic=mnemonic,
                operand=operand,
                address=address,
                location=location,
                labels=tuple(self._text(label).upper() for label in labels),
            ))
            address += 1

        logger.debug(f"Pass 1: {len(records)} words, {len(symbols)} labels")
        return records

    def _split_line(self, line: list[Token]) -> tuple[list[Token], Token, Optional[Token]]:
        """
        Split one line into label tokens, mnemonic token and operand token.

        Raises:
            UnexpectedTokenError: If the line does not have the shape
                ``(LABEL ,)* MNEMONIC [OPERAND]``
            OperandArityError: If the operand count does not match
            MalformedNumericLiteralError: On a malformed numeral
        """
        for token in line:
            self._check_valid(token)

        labels = []
        i = 0
        while (
            i + 1 < len(line)
            and line[i].type == TokenType.IDENT
            and line[i + 1].type == TokenType.COMMA
        ):
            labels.append(line[i])
            i += 2

        if i >= len(line):
            last = line[-1]
            raise UnexpectedTokenError(
                "expected mnemonic or directive after label",
                location=self._location(last),
                source_line=self._line_text(last),
            )

        head = line[i]
        if head.type not in (TokenType.OPCODE, TokenType.DIRECTIVE):
            hint = None
            if head.type == TokenType.IDENT:
                hint = "labels are defined as 'NAME,' before the mnemonic"
            raise UnexpectedTokenError(
                f"expected mnemonic or directive, found '{self._text(head)}'",
                location=self._location(head),
                hint=hint,
                source_line=self._line_text(head),
            )

        operands = line[i + 1:]
        name = self._text(head).upper()
        if head.type == TokenType.DIRECTIVE:
            expected = 1
        else:
            expected = 1 if lookup_opcode(name).unary else 0

        # Anything after a nullary opcode is an extra operand
        if expected == 0 and operands:
            raise OperandArityError(
                name, expected, len(operands),
                location=self._location(operands[0]),
                source_line=self._line_text(operands[0]),
            )

        for token in operands:
            if token.type not in (TokenType.NUMBER, TokenType.IDENT):
                raise UnexpectedTokenError(
                    f"unexpected '{self._text(token)}' in operand",
                    location=self._location(token),
                    source_line=self._line_text(token),
                )

        if len(operands) != expected:
            at = operands[expected] if len(operands) > expected else head
            raise OperandArityError(
                name, expected, len(operands),
                location=self._location(at),
                source_line=self._line_text(at),
            )

        operand = operands[0] if operands else None
        if head.type == TokenType.DIRECTIVE and operand.type != TokenType.NUMBER:
            raise UnexpectedTokenError(
                f"{name} takes a number, found '{self._text(operand)}'",
                location=self._location(operand),
                source_line=self._line_text(operand),
            )

        return labels, head, operand

    def _check_valid(self, token: Token) -> None:
        """Raise the matching error if the token is INVALID."""
        if token.type != TokenType.INVALID:
            return
        error_class = UnexpectedTokenError
        if self._source.data[token.offset] in Lexer.DIGITS:
            error_class = MalformedNumericLiteralError
        raise error_class(
            token.error or f"invalid token '{self._text(token)}'",
            location=self._location(token),
            source_line=self._line_text(token),
        )

    # =========================================================================
    # Pass 2: Operand Resolution
    # =========================================================================

    def _pass2(
        self, records: list[InstructionRecord], symbols: SymbolView
    ) -> list[InstructionRecord]:
        """
        Second pass: resolve every operand and encode every word.

        Returns:
            Completed copies of the records, in the same order
        """
        resolved = []
        for record in records:
            if record.is_data:
                value = self._parse_number(record.operand, record.mnemonic.base, WORD_LIMIT)
                resolved.append(replace(record, resolved=value, word=value))
                continue

            value = self._resolve_operand(record, symbols)
            resolved.append(replace(record, resolved=value, word=encode(record.mnemonic, value)))

        logger.debug(f"Pass 2: resolved {len(resolved)} words")
        return resolved

    def _resolve_operand(
        self, record: InstructionRecord, symbols: SymbolView
    ) -> Optional[int]:
        """Resolve an instruction's operand to its 12-bit field value."""
        opcode = record.mnemonic
        token = record.operand

        if not opcode.unary:
            return None

        if opcode is Opcode.SKIPCOND:
            condition = None
            if token.type == TokenType.IDENT:
                condition = lookup_skip_condition(self._text(token))
            if condition is None:
                raise InvalidSkipCondOperandError(
                    self._text(token),
                    location=self._location(token),
                    source_line=self._line_text(token),
                )
            return condition.value

        if token.type == TokenType.NUMBER:
            return self._parse_number(token, 16, MEMORY_SIZE)

        return symbols.resolve(
            self._text(token),
            location=self._location(token),
            source_line=self._line_text(token),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _parse_number(self, token: Token, base: int, limit: int) -> int:
        """
        Parse a NUMBER token in the given base.

        Raises:
            MalformedNumericLiteralError: If the digits are not valid in base
            OperandOutOfRangeError: If the value is not below limit
        """
        text = self._text(token)
        digits = text.lstrip("0") or "0"
        if any(c not in self.BASE_DIGITS[base] for c in digits):
            kind = "decimal" if base == 10 else f"base-{base}"
            raise MalformedNumericLiteralError(
                f"malformed {kind} literal '{text}'",
                location=self._location(token),
                source_line=self._line_text(token),
            )

        # Longer than limit - 1 written in this base; too big to convert
        if len(digits) > len(format(limit - 1, self.BASE_FORMATS[base])):
            raise OperandOutOfRangeError(
                None, limit,
                location=self._location(token),
                source_line=self._line_text(token),
            )

        value = int(digits, base)
        if value >= limit:
            raise OperandOutOfRangeError(
                value, limit,
                location=self._location(token),
                source_line=self._line_text(token),
            )
        return value

    def _text(self, token: Token) -> str:
        return self._source.text(token)

    def _location(self, token: Token) -> SourceLocation:
        return SourceLocation(self._source.filename, token.line, token.column)

    def _line_text(self, token: Token) -> str:
        return self._source.line_text(token.line)
