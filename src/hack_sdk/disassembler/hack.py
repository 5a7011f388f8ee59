"""
Hack Disassembler
=================

Disassembles Hack machine words into assembly language. This is the
inverse of the assembler's encoding step and is driven by the same
bidirectional tables in hack_sdk.assembler.opcodes.

Symbol names are not recoverable from machine code, so address
instructions are rendered as literals unless a symbol table is given.

Usage:
    disasm = HackDisassembler()
    instructions = disasm.disassemble(words)

    text = disasm.disassemble_word(0b1110101010000111)   # "0;JMP"
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..assembler.assembler import format_word
from ..assembler.instructions import AddressInstruction, Instruction, decode_word
from ..errors import HackFormatError


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled Hack instruction.

    Attributes:
        address: ROM address of the instruction
        word: The 16-bit machine word
        instruction: Decoded instruction
        text: Assembly text
    """
    address: int
    word: int
    instruction: Instruction
    text: str

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORD HEX  ASSEMBLY"""
        return f"{self.address:5d}: {format_word(self.word)} {self.word:04X}  {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.address,
            "word": format_word(self.word),
            "hex": f"{self.word:04X}",
            "text": self.text,
        }


# =============================================================================
# .hack Text Format
# =============================================================================

def parse_hack_text(text: str) -> list[int]:
    """
    Parse .hack text into machine words.

    Each non-blank line must be exactly sixteen '0'/'1' characters,
    most significant bit first.

    Raises:
        HackFormatError: On the first malformed line
    """
    words = []
    for number, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line:
            continue
        if len(line) != 16 or set(line) - {"0", "1"}:
            raise HackFormatError(number, line)
        words.append(int(line, 2))
    return words


# =============================================================================
# Hack Disassembler
# =============================================================================

class HackDisassembler:
    """
    Disassembler for Hack machine words.

    Attributes:
        _symbol_table: Optional address -> name map for @ operands
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        """
        Initialize the disassembler.

        Args:
            symbol_table: Optional dict mapping addresses to symbol names,
                          used to render @ operands by name.
        """
        self._symbol_table = symbol_table or {}

    def disassemble_word(self, word: int) -> str:
        """
        Disassemble one word into assembly text.

        Raises:
            DisassemblyError: If the word is not a valid instruction
        """
        return self._render(decode_word(word))

    def _render(self, instruction: Instruction) -> str:
        if isinstance(instruction, AddressInstruction):
            name = self._symbol_table.get(instruction.address)
            if name is not None:
                return f"@{name}"
        return instruction.to_asm()

    def disassemble(self, words: Iterable[int], start_address: int = 0) -> List[DisassembledInstruction]:
        """
        Disassemble a sequence of words.

        Args:
            words: Machine words in ROM order
            start_address: ROM address of the first word

        Returns:
            List of DisassembledInstruction objects

        Raises:
            DisassemblyError: On the first word that does not decode
        """
        result = []
        for address, word in enumerate(words, start=start_address):
            instruction = decode_word(word)
            result.append(DisassembledInstruction(
                address=address,
                word=word,
                instruction=instruction,
                text=self._render(instruction),
            ))
        return result

    def disassemble_to_text(self, words: Iterable[int], start_address: int = 0) -> str:
        """Disassemble and return plain assembly, one instruction per line."""
        return "".join(f"{instr.text}\n" for instr in self.disassemble(words, start_address))

    def add_symbol(self, address: int, name: str) -> None:
        """Add a symbol used when rendering @ operands."""
        self._symbol_table[address] = name
