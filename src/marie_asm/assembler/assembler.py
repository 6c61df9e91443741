"""
MARIE Assembler - Main Interface
================================

This module provides the Assembler class, the primary interface for
assembling MARIE source code. It wraps the code generator and adds
file handling and output writers.

Example Usage
-------------
>>> from marie_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> program = asm.assemble_string('''
... LOOP, LOAD X     / fetch
...       ADD ONE
...       STORE X
...       JUMP LOOP
... X,    DEC 0
... ONE,  DEC 1
... ''')
>>> [f"{w.word:04X}" for w in program.words][:2]
['1004', '3005']
>>> asm.write_listing("loop.lst")

Command-Line Usage
------------------
    $ marieasm loop.mas -o loop.lst -s loop.sym -b loop.bin

See ``marieasm --help`` for all options.
"""

from pathlib import Path
from typing import Optional
import logging

from marie_asm.assembler.codegen import CodeGenerator, Program
from marie_asm.assembler.lexer import SourceText
from marie_asm.assembler.listing import format_hex, format_listing, format_symbols
from marie_asm.config import AssemblerConfig, get_default_config


logger = logging.getLogger(__name__)


class Assembler:
    """
    Main MARIE assembler class.

    Each assemble_* call replaces the previously assembled program; the
    get_* and write_* methods work on the most recent one.

    Attributes:
        config: Settings for this assembler
    """

    def __init__(self, config: Optional[AssemblerConfig] = None,
                 allow_overlap: Optional[bool] = None):
        """
        Initialize the assembler.

        Args:
            config: Configuration (default: get_default_config())
            allow_overlap: Overrides config.allow_overlap when given
        """
        self.config = config or get_default_config()
        if allow_overlap is None:
            allow_overlap = self.config.allow_overlap
        self._codegen = CodeGenerator(allow_overlap=allow_overlap)
        self._program: Optional[Program] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: bytes | str, filename: Optional[str] = None) -> Program:
        """
        Assemble a source buffer.

        Args:
            source: Assembly source (str is encoded as UTF-8)
            filename: Name for error messages (default: config.filename)

        Returns:
            The assembled Program

        Raises:
            AssemblerError: If assembly fails
        """
        source_text = SourceText(source, filename or self.config.filename)
        logger.debug(f"Assembling {source_text.filename} ({len(source_text)} bytes)")

        self._program = None
        self._program = self._codegen.generate(source_text)

        logger.info(
            f"Assembled {source_text.filename}: {len(self._program)} words, "
            f"{len(self._program.symbols)} labels"
        )
        return self._program

    def assemble_string(self, source: str, filename: Optional[str] = None) -> Program:
        """Assemble source code from a string."""
        return self.assemble(source, filename)

    def assemble_bytes(self, source: bytes, filename: Optional[str] = None) -> Program:
        """Assemble source code from raw bytes."""
        return self.assemble(source, filename)

    def assemble_file(self, filepath: str | Path) -> Program:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        return self.assemble(filepath.read_bytes(), str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    @property
    def program(self) -> Program:
        """
        The most recently assembled program.

        Raises:
            RuntimeError: If nothing has been assembled successfully
        """
        if self._program is None:
            raise RuntimeError("no program assembled")
        return self._program

    def get_words(self) -> list[tuple[int, int]]:
        """Return (address, word) pairs sorted by address."""
        return [tuple(w) for w in self.program.words]

    def get_symbols(self) -> dict[str, int]:
        """Return the label -> address mapping."""
        return self.program.get_symbols()

    def get_listing(self) -> str:
        return format_listing(self.program)

    def get_hex(self) -> str:
        return format_hex(self.program)

    def get_symbol_listing(self) -> str:
        return format_symbols(self.program)

    def get_output(self, output_format: Optional[str] = None) -> str:
        """
        Render the program in one of the text formats.

        Args:
            output_format: "listing", "hex" or "symbols"
                           (default: config.output_format)
        """
        output_format = output_format or self.config.output_format
        renderers = {
            "listing": self.get_listing,
            "hex": self.get_hex,
            "symbols": self.get_symbol_listing,
        }
        if output_format not in renderers:
            raise ValueError(f"unknown output format '{output_format}'")
        return renderers[output_format]()

    def write_listing(self, filepath: str | Path) -> None:
        self._write_text(filepath, self.get_listing())

    def write_hex(self, filepath: str | Path) -> None:
        self._write_text(filepath, self.get_hex())

    def write_symbols(self, filepath: str | Path) -> None:
        self._write_text(filepath, self.get_symbol_listing())

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the used memory range as raw big-endian words.

        The image starts at the program's origin; unused words in the
        range are 0.
        """
        data = self.program.to_bytes()
        Path(filepath).write_bytes(data)
        logger.info(f"Wrote {len(data)} bytes to {filepath}")

    def _write_text(self, filepath: str | Path, text: str) -> None:
        Path(filepath).write_text(text + "\n" if text else "")
        logger.info(f"Wrote {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: bytes | str, filename: str = "<input>",
             allow_overlap: bool = False) -> Program:
    """
    Assemble a source buffer into a Program.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(AssemblerConfig(filename=filename), allow_overlap=allow_overlap)
    return asm.assemble(source)


def assemble_file(filepath: str | Path, allow_overlap: bool = False) -> Program:
    """
    Assemble a source file into a Program.

    Raises:
        AssemblerError: If assembly fails
        FileNotFoundError: If source file not found
    """
    asm = Assembler(AssemblerConfig(), allow_overlap=allow_overlap)
    return asm.assemble_file(filepath)
