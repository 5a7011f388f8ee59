"""
hackdis - Hack Disassembler Command-Line Interface
==================================================

This module implements the command-line interface for the Hack
disassembler. It reads a .hack file and prints the equivalent assembly.

Usage Examples
--------------
Disassemble to the terminal:
    $ hackdis Add.hack

With addresses and hex words:
    $ hackdis Add.hack --hex

Output to file:
    $ hackdis Add.hack -o Add.dis.asm
"""

from pathlib import Path
from typing import Optional

import click

from hack_sdk import __version__
from hack_sdk.cli.errors import handle_cli_exception
from hack_sdk.disassembler import HackDisassembler, parse_hack_text


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
    help="Output file (default: stdout)",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Prefix each line with its ROM address, binary and hex word",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackdis")
def main(
    input_file: Path,
    output: Optional[Path],
    show_hex: bool,
    verbose: bool,
) -> None:
    """
    Disassemble Hack machine code.

    INPUT_FILE is a .hack file with one 16-bit binary word per line.

    \b
    Examples:
        hackdis Add.hack
        hackdis Add.hack --hex
        hackdis Add.hack -o Add.dis.asm
    """
    try:
        words = parse_hack_text(input_file.read_text(encoding="utf-8"))

        if verbose:
            click.echo(f"Input file: {input_file} ({len(words)} words)", err=True)

        disasm = HackDisassembler()
        instructions = disasm.disassemble(words)

        if show_hex:
            result = "".join(f"{instr}\n" for instr in instructions)
        else:
            result = "".join(f"{instr.text}\n" for instr in instructions)

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
