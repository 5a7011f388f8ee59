"""
Hack Assembler
==============

This module provides a two-pass assembler for the 16-bit Hack computer.
It converts Hack assembly source (.asm) into the text machine-code
format (.hack) loaded by the Hack CPU emulator.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates one run
- **SymbolTable**: Predefined names, labels and variables
- **first_pass / second_pass**: The two assembler passes
- **AddressInstruction / ComputeInstruction**: Resolved instructions
- **opcodes**: Bidirectional encoding tables

Assembly Process
----------------
1. **Source reading**: Trim lines, drop blank lines and // comments
2. **Pass 1**: Bind every (LABEL) to the index of the next instruction
3. **Pass 2**: Classify lines, resolve @symbols (allocating variables
   from RAM[16] upward), validate and encode compute instructions

Example Usage
-------------
>>> from hack_sdk.assembler import assemble
>>> [f"{w:016b}" for w in assemble("(LOOP)\\n@LOOP\\n0;JMP")]
['0000000000000000', '1110101010000111']
"""

from hack_sdk.assembler.assembler import Assembler, assemble, assemble_file, format_word
from hack_sdk.assembler.instructions import (
    AddressInstruction,
    ComputeInstruction,
    Instruction,
    decode_word,
)
from hack_sdk.assembler.opcodes import (
    COMP_TABLE,
    JUMP_TABLE,
    PREDEFINED_SYMBOLS,
    Dest,
    Jump,
)
from hack_sdk.assembler.parser import first_pass, parse_instruction, second_pass
from hack_sdk.assembler.source import SourceLine, read_source, read_source_file
from hack_sdk.assembler.symbols import Symbol, SymbolKind, SymbolTable

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    "format_word",
    # Source reading
    "SourceLine",
    "read_source",
    "read_source_file",
    # Symbols
    "Symbol",
    "SymbolKind",
    "SymbolTable",
    # Passes
    "first_pass",
    "second_pass",
    "parse_instruction",
    # Instructions
    "AddressInstruction",
    "ComputeInstruction",
    "Instruction",
    "decode_word",
    # Opcodes
    "COMP_TABLE",
    "JUMP_TABLE",
    "PREDEFINED_SYMBOLS",
    "Dest",
    "Jump",
]
