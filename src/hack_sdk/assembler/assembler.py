"""
Hack Assembler - Main Interface
===============================

This module provides the main Assembler class, the primary interface for
assembling Hack source code. It reads and cleans the source, runs both
passes over a fresh symbol table, and exposes the resulting machine
words in the text format the Hack CPU emulator loads.

Example Usage
-------------
>>> from hack_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> words = asm.assemble_string('''
... // Computes R0 = 2 + 3
...     @2
...     D=A
...     @3
...     D=D+A
...     @0
...     M=D
... ''')
>>> asm.get_output().splitlines()[1]
'1110110000010000'
>>>
>>> asm.write_hack("Add.hack")

Command-Line Usage
------------------
    $ hackasm Add.asm -o Add.hack -l Add.lst -s Add.sym

Options:
    -o, --output FILE      Output .hack file
    -l, --listing FILE     Generate listing file
    -s, --symbols FILE     Generate symbol file
    --stdout               Print words instead of writing a file
    -v, --verbose          Verbose output
"""

from pathlib import Path
from typing import Iterable, Optional
import logging

from hack_sdk.assembler.instructions import Instruction
from hack_sdk.assembler.opcodes import WORD_BITS
from hack_sdk.assembler.parser import first_pass, second_pass
from hack_sdk.assembler.source import SourceLine, number_lines, read_source, read_source_file
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.config import AssemblerConfig

logger = logging.getLogger(__name__)


def format_word(word: int) -> str:
    """Render a word as 16 '0'/'1' characters, most significant bit first."""
    return f"{word:0{WORD_BITS}b}"


class Assembler:
    """
    Main Hack assembler class.

    Each assemble_* call is one run: it builds a new SymbolTable, so an
    instance can be reused. If a run fails, the results of the previous
    run are cleared as well, so no partial output is ever visible.

    Attributes:
        config: Assembler configuration
        verbose: If True, print progress messages
    """

    def __init__(self, config: Optional[AssemblerConfig] = None, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            config: Assembler settings (default: AssemblerConfig())
            verbose: Enable verbose output
        """
        self.config = config or AssemblerConfig()
        self._verbose = verbose
        self._filename = "<input>"
        self._symbols: Optional[SymbolTable] = None
        self._instructions: list[Instruction] = []
        self._words: list[int] = []

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str | SourceLine],
                       filename: str = "<input>") -> list[int]:
        """
        Assemble already-cleaned source lines.

        Plain strings are numbered from 1 in the order given.

        Args:
            lines: Trimmed, non-empty, comment-free lines
            filename: Virtual filename for error messages

        Returns:
            Machine words in source order

        Raises:
            AssemblerError: If assembly fails
        """
        self._reset(filename)
        source = number_lines(lines)

        symbols = SymbolTable(
            variable_base=self.config.variable_base,
            warn_on_redefinition=self.config.warn_on_label_redefinition,
        )
        commands = first_pass(source, symbols)
        instructions = second_pass(
            commands, symbols, filename,
            strict_address_range=self.config.strict_address_range,
        )

        self._symbols = symbols
        self._instructions = instructions
        self._words = [inst.encode() for inst in instructions]

        if self._verbose:
            print(f"Assembled {len(self._words)} instructions, "
                  f"{len(symbols.user_symbols())} user symbols")

        return list(self._words)

    def assemble_string(self, source: str, filename: str = "<input>") -> list[int]:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Machine words in source order

        Raises:
            AssemblerError: If assembly fails
        """
        logger.debug(f"Assembling {filename}")
        return self.assemble_lines(read_source(source), filename)

    def assemble_file(self, filepath: str | Path) -> list[int]:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Machine words in source order

        Raises:
            AssemblerError: If assembly fails
            OSError: If the source file cannot be read
            UnicodeDecodeError: If the source file is not UTF-8 text
        """
        filepath = Path(filepath)
        self._reset(str(filepath))

        if self._verbose:
            print(f"Assembling {filepath}...")

        logger.debug(f"Assembling {filepath}")
        return self.assemble_lines(read_source_file(filepath), str(filepath))

    def _reset(self, filename: str) -> None:
        self._filename = filename
        self._symbols = None
        self._instructions = []
        self._words = []

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_words(self) -> list[int]:
        """Return the machine words from the last successful run."""
        return list(self._words)

    def get_instructions(self) -> list[Instruction]:
        """Return the resolved instructions from the last successful run."""
        return list(self._instructions)

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping symbol names to addresses, including the
            predefined names
        """
        return self._symbols.as_dict() if self._symbols is not None else {}

    def get_symbol_table(self) -> Optional[SymbolTable]:
        """Return the SymbolTable from the last successful run."""
        return self._symbols

    def get_output(self) -> str:
        """Return the .hack text: one binary word per line."""
        return "".join(f"{format_word(word)}\n" for word in self._words)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing ROM address, word, source line number and
            source text, followed by the user symbol table.
        """
        lines = []
        lines.append("Hack Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr   Word              Line  Source")
        lines.append("-" * 60)
        for address, (inst, word) in enumerate(zip(self._instructions, self._words)):
            number = inst.source.number if inst.source is not None else 0
            text = inst.source.text if inst.source is not None else inst.to_asm()
            lines.append(f"{address:5d}  {format_word(word)}  {number:4d}  {text}")
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        if self._symbols is not None:
            for sym in self._symbols.user_symbols():
                lines.append(f"{sym.name:20s} = {sym.value:5d}  {sym.kind}")
        return "\n".join(lines) + "\n"

    def write_hack(self, filepath: str | Path) -> None:
        """Write the .hack output file."""
        Path(filepath).write_text(self.get_output(), encoding="utf-8")

        if self._verbose:
            print(f"Wrote {len(self._words)} words to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        Path(filepath).write_text(self.get_listing(), encoding="utf-8")

        if self._verbose:
            print(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address kind (one per line, user symbols only)
        """
        with open(filepath, "w", encoding="utf-8") as f:
            f.write("# Symbol table\n")
            f.write(f"# Generated by hackasm from {self._filename}\n")
            if self._symbols is not None:
                for sym in self._symbols.user_symbols():
                    f.write(f"{sym.name} {sym.value} {sym.kind}\n")

        if self._verbose:
            print(f"Wrote symbols to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[int]:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> list[int]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
