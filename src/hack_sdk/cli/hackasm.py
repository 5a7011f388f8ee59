"""
hackasm - Hack Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the Hack assembler.

Usage Examples
--------------
Basic assembly:
    $ hackasm Add.asm

With output file:
    $ hackasm Add.asm -o Add.hack

Generate all output files:
    $ hackasm Max.asm -o Max.hack -l Max.lst -s Max.sym

Print machine code instead of writing a file:
    $ hackasm --stdout Add.asm

Verbose mode:
    $ hackasm -v Add.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from hack_sdk import __version__
from hack_sdk.assembler import Assembler
from hack_sdk.cli.errors import handle_cli_exception
from hack_sdk.config import AssemblerConfig


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .hack file (default: input.hack)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--stdout", "to_stdout",
    is_flag=True,
    help="Print machine code to standard output instead of writing a file",
)
@click.option(
    "--variable-base",
    type=click.IntRange(0, 0x7FFF),
    default=None,
    help="First RAM address for variables (default: 16)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject address literals above 32767 (default: strict)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    to_stdout: bool,
    variable_base: Optional[int],
    strict: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble Hack assembly source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The assembler produces a .hack file with one 16-bit binary word per
    line, ready to load into the Hack CPU emulator. No output is written
    if the source contains any error.

    \b
    Examples:
        hackasm Add.asm              # Outputs Add.hack
        hackasm Add.asm -o out.hack  # Specify output file
        hackasm --stdout Add.asm     # Print to terminal

    Settings can also come from HACK_VARIABLE_BASE,
    HACK_STRICT_ADDRESS_RANGE and HACK_OUTPUT_SUFFIX.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = AssemblerConfig.from_env()
    if variable_base is not None:
        config.variable_base = variable_base
    if strict is not None:
        config.strict_address_range = strict

    if to_stdout and output is not None:
        handle_cli_exception(click.BadParameter("--stdout and -o/--output are mutually exclusive"))

    output_file = output if output is not None else input_file.with_suffix(config.output_suffix)

    asm = Assembler(config=config)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...", err=True)

        words = asm.assemble_file(input_file)

        if to_stdout:
            click.echo(asm.get_output(), nl=False)
        else:
            asm.write_hack(output_file)
            if verbose:
                click.echo(f"Wrote {len(words)} words to {output_file}", err=True)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}", err=True)

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}", err=True)

        if verbose:
            table = asm.get_symbol_table()
            user_count = len(table.user_symbols()) if table is not None else 0
            click.echo(f"Assembly complete: {len(words)} instructions", err=True)
            click.echo(f"Defined {user_count} user symbols", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
