"""
marieasm - MARIE Assembler Command-Line Interface
=================================================

Usage Examples
--------------
Assemble and print the listing:
    $ marieasm loop.mas

Read source from stdin:
    $ cat loop.mas | marieasm

Hex dump to a file, plus a raw binary image and symbol table:
    $ marieasm loop.mas -f hex -o loop.hex -b loop.bin -s loop.sym

Verbose mode (debug logging on stderr):
    $ marieasm -v loop.mas
"""

from dataclasses import replace
from pathlib import Path
from typing import BinaryIO, Optional
import logging
import sys

import click

from marie_asm import __version__
from marie_asm.assembler import Assembler
from marie_asm.cli.errors import handle_cli_exception
from marie_asm.config import OUTPUT_FORMATS, get_default_config


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("rb"),
    default="-",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the output to FILE instead of stdout",
)
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default=None,
    help="Output format: listing (default), hex dump, or symbol table",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the symbol table to FILE",
)
@click.option(
    "-b", "--binary",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write a raw big-endian binary image to FILE",
)
@click.option(
    "--allow-overlap/--no-allow-overlap",
    default=None,
    help="Warn instead of failing when ORG makes two words share an address",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="marieasm")
def main(
    input_file: BinaryIO,
    output: Optional[Path],
    output_format: Optional[str],
    symbols: Optional[Path],
    binary: Optional[Path],
    allow_overlap: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble MARIE source code.

    INPUT_FILE is the assembly source to read; use - (the default) to
    read from standard input.

    \b
    Examples:
        marieasm loop.mas                 # Print listing
        marieasm loop.mas -f hex          # Print hex dump
        marieasm loop.mas -b loop.bin     # Also write binary image
    """
    config = replace(get_default_config())
    if output_format:
        config.output_format = output_format.lower()
    if allow_overlap is not None:
        config.allow_overlap = allow_overlap

    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level_value,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    filename = getattr(input_file, "name", "<stdin>")

    try:
        source = input_file.read()

        if verbose:
            click.echo(f"Assembling {filename}...", err=True)

        asm = Assembler(config)
        program = asm.assemble(source, filename)
        text = asm.get_output()

        if output:
            output.write_text(text + "\n" if text else "")
            if verbose:
                click.echo(f"Wrote {config.output_format} to {output}", err=True)
        elif text:
            click.echo(text)

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}", err=True)

        if binary:
            asm.write_binary(binary)
            if verbose:
                click.echo(f"Wrote binary image to {binary}", err=True)

        if verbose:
            click.echo(
                f"Assembly complete: {len(program)} words at ${program.origin:03X}, "
                f"{len(program.symbols)} labels",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
