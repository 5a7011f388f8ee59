"""
Hack SDK - Assembler Toolchain for the Hack Computer
====================================================

This package provides an assembler and disassembler for the 16-bit Hack
computer from The Elements of Computing Systems (nand2tetris).

Main Components
---------------
- **assembler**: Two-pass Hack assembler (hackasm)
    Converts assembly source files (.asm) to machine code text (.hack)

- **disassembler**: Hack disassembler (hackdis)
    Converts .hack files back into assembly

Quick Start
-----------
Assemble a program:
    >>> from hack_sdk.assembler import Assembler
    >>> asm = Assembler()
    >>> words = asm.assemble_file("Add.asm")
    >>> asm.write_hack("Add.hack")

Or use the command-line tools:
    $ hackasm Add.asm -o Add.hack
    $ hackdis Add.hack

Reference Documentation
-----------------------
- Hack machine language: https://www.nand2tetris.org/project04
- Hack assembler: https://www.nand2tetris.org/project06
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hack_sdk.assembler import Assembler, SymbolTable, assemble, assemble_file
from hack_sdk.config import AssemblerConfig
from hack_sdk.disassembler import HackDisassembler, parse_hack_text
from hack_sdk.errors import (
    HackError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    InvalidMnemonicError,
    AddressRangeError,
    DisassemblerError,
    HackFormatError,
    DisassemblyError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "SymbolTable",
    "AssemblerConfig",
    "assemble",
    "assemble_file",
    # Disassembler
    "HackDisassembler",
    "parse_hack_text",
    # Exception hierarchy
    "HackError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "InvalidMnemonicError",
    "AddressRangeError",
    "DisassemblerError",
    "HackFormatError",
    "DisassemblyError",
]
