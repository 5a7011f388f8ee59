"""
Hack Instruction Model
======================

The two Hack instruction forms as immutable values. Each instruction is
fully resolved when it is built: address instructions carry a number,
never a symbol name, and compute instructions carry validated field
codes. Encoding is therefore a pure operation with no table lookups
that can fail.

Instruction Types
-----------------
1. **AddressInstruction**: ``@value``, loads a 15-bit value into A
2. **ComputeInstruction**: ``dest=comp;jump``, runs the ALU, stores the
   result, and optionally jumps
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from hack_sdk.assembler.opcodes import (
    COMPUTE_OPCODE,
    COMPUTE_OPCODE_MASK,
    COMP_MASK,
    COMP_SHIFT,
    COMP_TABLE,
    DEST_BY_LETTER,
    DEST_MASK,
    DEST_SHIFT,
    INDIRECT_MASK,
    INDIRECT_SHIFT,
    JUMP_BY_CODE,
    JUMP_MASK,
    JUMP_SHIFT,
    JUMP_TABLE,
    MAX_ADDRESS,
    Dest,
    Jump,
    comp_mnemonic,
    is_compute_word,
    lookup_comp,
)
from hack_sdk.assembler.source import SourceLine
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.errors import AddressRangeError, DisassemblyError, InvalidMnemonicError


# =============================================================================
# Address Instruction
# =============================================================================

@dataclass(frozen=True)
class AddressInstruction:
    """
    Address instruction (@value).

    Attributes:
        address: Resolved address, 0-32767
        symbol: Symbol name the address was resolved from, if any
        source: Source line the instruction came from
    """
    address: int
    symbol: Optional[str] = None
    source: Optional[SourceLine] = field(default=None, compare=False)

    @classmethod
    def from_operand(
        cls,
        operand: str,
        symbols: SymbolTable,
        source: Optional[SourceLine] = None,
        strict: bool = True,
    ) -> "AddressInstruction":
        """
        Resolve an @ operand to an address instruction.

        A purely decimal operand is a literal address. Anything else is
        a symbol name resolved through the table, allocating a new
        variable if the name is unknown.

        Args:
            operand: Text after the '@'
            symbols: Symbol table for this run
            source: Source line for diagnostics
            strict: Reject addresses that do not fit in 15 bits

        Raises:
            AddressRangeError: If the address is out of range in strict mode
        """
        if operand.isascii() and operand.isdigit():
            return cls(_check_address(int(operand), strict), None, source)

        line = source.number if source is not None else None
        address = symbols.lookup_or_allocate(operand, line)
        return cls(_check_address(address, strict), operand, source)

    def encode(self) -> int:
        """Return the 16-bit machine word."""
        return self.address & MAX_ADDRESS

    def to_asm(self) -> str:
        """Render as assembly text, using the symbol name when known."""
        return f"@{self.symbol if self.symbol is not None else self.address}"


# =============================================================================
# Compute Instruction
# =============================================================================

@dataclass(frozen=True)
class ComputeInstruction:
    """
    Compute instruction (dest=comp;jump).

    Attributes:
        comp: Computation mnemonic in its A-register form (e.g. "D+A")
        indirect: True when the ALU reads M (RAM[A]) instead of A
        dest: Destination register mask
        jump: Jump condition mask
        source: Source line the instruction came from
    """
    comp: str
    indirect: bool = False
    dest: Dest = Dest.NONE
    jump: Jump = Jump.NONE
    source: Optional[SourceLine] = field(default=None, compare=False)

    @classmethod
    def from_fields(
        cls,
        dest: Optional[str],
        comp: str,
        jump: Optional[str],
        source: Optional[SourceLine] = None,
    ) -> "ComputeInstruction":
        """
        Build a compute instruction from its textual fields.

        Args:
            dest: Destination letters, or None when no '=' was written
            comp: Computation text as written (may use M)
            jump: Jump mnemonic, or None when no ';' was written

        Raises:
            InvalidMnemonicError: If any field is not recognized
        """
        return cls(
            *_parse_comp(comp),
            dest=parse_dest(dest),
            jump=parse_jump(jump),
            source=source,
        )

    @classmethod
    def decode(cls, word: int) -> "ComputeInstruction":
        """
        Rebuild a compute instruction from a machine word.

        Raises:
            DisassemblyError: If the word is not a valid compute instruction
        """
        if word & COMPUTE_OPCODE_MASK != COMPUTE_OPCODE:
            raise DisassemblyError(word, "not a compute instruction")

        code = (word & COMP_MASK) >> COMP_SHIFT
        indirect = bool(word & INDIRECT_MASK)
        if comp_mnemonic(code, False) is None:
            raise DisassemblyError(word, f"unknown computation code {code:06b}")

        return cls(
            comp=comp_mnemonic(code, False),
            indirect=indirect,
            dest=Dest((word & DEST_MASK) >> DEST_SHIFT),
            jump=Jump((word & JUMP_MASK) >> JUMP_SHIFT),
        )

    def encode(self) -> int:
        """Return the 16-bit machine word."""
        word = COMPUTE_OPCODE
        word |= int(self.indirect) << INDIRECT_SHIFT
        word |= COMP_TABLE[self.comp] << COMP_SHIFT
        word |= int(self.dest) << DEST_SHIFT
        word |= int(self.jump) << JUMP_SHIFT
        return word

    @property
    def comp_text(self) -> str:
        """Computation as it would be written, M form when indirect."""
        return comp_mnemonic(COMP_TABLE[self.comp], self.indirect)

    @property
    def dest_text(self) -> str:
        return self.dest.mnemonic()

    @property
    def jump_text(self) -> str:
        return JUMP_BY_CODE.get(int(self.jump), "")

    def to_asm(self) -> str:
        """Render as canonical assembly text."""
        text = self.comp_text
        if self.dest:
            text = f"{self.dest_text}={text}"
        if self.jump:
            text = f"{text};{self.jump_text}"
        return text


Instruction = Union[AddressInstruction, ComputeInstruction]


# =============================================================================
# Field Parsing
# =============================================================================

def parse_dest(text: Optional[str]) -> Dest:
    """
    Parse destination letters into a mask.

    Each of A, M and D may appear at most once, in any order. None means
    the instruction had no '=' at all; an empty string is an error.
    """
    if text is None:
        return Dest.NONE
    if not text:
        raise InvalidMnemonicError("destination", text, valid=list(DEST_BY_LETTER))

    mask = Dest.NONE
    for letter in text:
        bit = DEST_BY_LETTER.get(letter)
        if bit is None or mask & bit:
            raise InvalidMnemonicError("destination", text, valid=list(DEST_BY_LETTER))
        mask |= bit
    return mask


def parse_jump(text: Optional[str]) -> Jump:
    """Parse a jump mnemonic into a mask; None means no jump."""
    if text is None:
        return Jump.NONE
    try:
        return JUMP_TABLE[text]
    except KeyError:
        raise InvalidMnemonicError("jump", text, valid=list(JUMP_TABLE)) from None


def _check_address(address: int, strict: bool) -> int:
    """Return address if it fits in 15 bits, else reject or truncate it."""
    if 0 <= address <= MAX_ADDRESS:
        return address
    if strict:
        raise AddressRangeError(address, MAX_ADDRESS)
    return address & MAX_ADDRESS


def _parse_comp(text: str) -> tuple[str, bool]:
    """Return (A-form mnemonic, indirection flag) for a computation."""
    result = lookup_comp(text)
    if result is None:
        raise InvalidMnemonicError("computation", text, valid=list(COMP_TABLE))
    code, indirect = result
    return comp_mnemonic(code, False), indirect


def decode_word(word: int) -> Instruction:
    """
    Decode any 16-bit word into an instruction.

    Words with bit 15 clear are address instructions; the rest must be
    valid compute instructions.
    """
    if not is_compute_word(word):
        return AddressInstruction(word)
    return ComputeInstruction.decode(word)
