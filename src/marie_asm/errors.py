"""
MARIE Assembler Error Hierarchy
===============================

This module defines the exception hierarchy for the MARIE assembler.
All exceptions inherit from MarieError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
MarieError (base)
└── AssemblerError (assembly of a source buffer failed)
    ├── MalformedNumericLiteralError - numeral mixes digits and non-hex letters
    ├── UnexpectedTokenError - line is not label(s) + mnemonic + operand
    ├── OperandArityError - operand missing, or given to a nullary opcode
    ├── DuplicateLabelError - label defined twice
    ├── UndefinedLabelError - label referenced but never defined
    ├── OperandOutOfRangeError - numeric operand does not fit its field
    ├── InvalidSkipCondOperandError - SKIPCOND operand not LT/EQ/GT
    ├── AddressSpaceExhaustedError - record placed past address 4095
    └── AddressOverlapError - two records placed at the same address

Every assembly error is fatal: the assembler stops at the first one and
produces no partial program. Each error carries an ErrorKind plus the
line and column it was detected at.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MarieError(Exception):
    """
    Base exception for all MARIE toolchain errors.

        try:
            assemble(source)
        except MarieError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for buffer input)
        line: Line number (1-indexed)
        column: Byte column (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


class ErrorKind(Enum):
    """Classification of assembly failures."""
    MALFORMED_NUMERIC_LITERAL = "MalformedNumericLiteral"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    OPERAND_ARITY_MISMATCH = "OperandArityMismatch"
    DUPLICATE_LABEL = "DuplicateLabel"
    UNDEFINED_LABEL = "UndefinedLabel"
    OPERAND_OUT_OF_RANGE = "OperandOutOfRange"
    INVALID_SKIPCOND_OPERAND = "InvalidSkipCondOperand"
    ADDRESS_SPACE_EXHAUSTED = "AddressSpaceExhausted"
    ADDRESS_OVERLAP = "AddressOverlap"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(MarieError):
    """
    Base exception for all assembler errors.

    Subclasses set the ``kind`` class attribute; the base class is only
    raised directly for failures that have no more specific kind.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the offending line (optional)
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> int:
        """Line of the error, or 0 when the error has no location."""
        return self.location.line if self.location else 0

    @property
    def column(self) -> int:
        """Column of the error, or 0 when the error has no location."""
        return self.location.column if self.location else 0

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.mas:3:7: error: undefined label 'LOPP'
                JUMP LOPP
                     ^
            hint: did you mean 'LOOP'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class MalformedNumericLiteralError(AssemblerError):
    """
    A numeral that cannot be read in its base.

    Raised for digit-led words containing letters past 'F' (``12G``) and
    for DEC/ORG operands containing hex letters (``DEC 1A``).
    """
    kind = ErrorKind.MALFORMED_NUMERIC_LITERAL


class UnexpectedTokenError(AssemblerError):
    """
    A token that does not fit the line shape.

    A line is zero or more ``LABEL,`` definitions, exactly one mnemonic or
    directive, then the operand when the mnemonic takes one.
    """
    kind = ErrorKind.UNEXPECTED_TOKEN


class OperandArityError(AssemblerError):
    """Operand missing for a unary mnemonic, or present for a nullary one."""
    kind = ErrorKind.OPERAND_ARITY_MISMATCH

    def __init__(
        self,
        mnemonic: str,
        expected: int,
        actual: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.actual = actual

        if expected == 0:
            message = f"'{mnemonic}' takes no operand"
        elif actual == 0:
            message = f"'{mnemonic}' requires an operand"
        else:
            message = f"'{mnemonic}' takes exactly {expected} operand, got {actual}"

        super().__init__(message, location=location, source_line=source_line)


class DuplicateLabelError(AssemblerError):
    """
    Label defined multiple times.

    Includes the location of the original definition when available.
    """
    kind = ErrorKind.DUPLICATE_LABEL

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedLabelError(AssemblerError):
    """
    Reference to a label that was never defined.

    Raised during pass 2. Similarly-named labels are offered as a hint
    to help catch typos.
    """
    kind = ErrorKind.UNDEFINED_LABEL

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandOutOfRangeError(AssemblerError):
    """
    Numeric operand too large for the field it is stored in.

    ``value`` is None when the numeral has too many digits to convert.
    """
    kind = ErrorKind.OPERAND_OUT_OF_RANGE

    def __init__(
        self,
        value: Optional[int],
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.value = value
        self.limit = limit

        message = "operand out of range"
        if value is not None:
            message = f"operand {value} (${value:X}) out of range"

        super().__init__(
            message,
            location=location,
            hint=f"value must be between 0 and {limit - 1} (${limit - 1:X})",
            source_line=source_line,
        )


class InvalidSkipCondOperandError(AssemblerError):
    """SKIPCOND operand is not one of LT, EQ or GT."""
    kind = ErrorKind.INVALID_SKIPCOND_OPERAND

    def __init__(
        self,
        operand: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.operand = operand
        super().__init__(
            f"invalid SKIPCOND condition '{operand}'",
            location=location,
            hint="SKIPCOND takes LT, EQ or GT",
            source_line=source_line,
        )


class AddressSpaceExhaustedError(AssemblerError):
    """A record would be placed past the last memory word."""
    kind = ErrorKind.ADDRESS_SPACE_EXHAUSTED

    def __init__(
        self,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address
        super().__init__(
            f"address ${address:X} is past the end of memory",
            location=location,
            hint="program must fit in addresses $000 to $FFF",
            source_line=source_line,
        )


class AddressOverlapError(AssemblerError):
    """
    Two records placed at the same address.

    Only possible when ORG moves the address counter back over code that
    was already placed.
    """
    kind = ErrorKind.ADDRESS_OVERLAP

    def __init__(
        self,
        address: int,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"address ${address:03X} was first written at {original_location}"

        super().__init__(
            f"address ${address:03X} written twice",
            location=location,
            hint=hint,
            source_line=source_line,
        )
