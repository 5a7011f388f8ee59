"""
Hack Instruction Set Definition
===============================

This module defines the encoding tables for the Hack computer's two
instruction forms. Every table is a static, bidirectional mapping
between canonical mnemonic text and a fixed-width numeric code, so the
same data drives both the assembler and the disassembler.

Instruction Formats
-------------------
The Hack CPU executes 16-bit words, most significant bit first:

1. **Address instruction** (@value)
   - ``0vvv vvvv vvvv vvvv``
   - Bit 15 is clear; the low 15 bits are loaded into the A register.

2. **Compute instruction** (dest=comp;jump)
   - ``111a cccc ccdd djjj``
   - Bits 15-13: opcode 111
   - Bit 12 (a): indirection, ALU reads M (RAM[A]) instead of A
   - Bits 11-6 (c): computation code
   - Bits 5-3 (d): destination mask (A, D, M)
   - Bits 2-0 (j): jump mask (less than, equal, greater than)

Computation codes are listed in their A-register form. The M form
(e.g. ``D+M``) uses the same six bits with the indirection bit set.

Reference
---------
- The Elements of Computing Systems, chapter 4 and 6
- https://www.nand2tetris.org/project06
"""

from enum import IntFlag


# =============================================================================
# Word Layout
# =============================================================================

WORD_BITS = 16

# Largest value an address instruction can carry (15 bits)
MAX_ADDRESS = 0x7FFF

# Bit 15 set marks a compute instruction; bits 15-13 are its opcode
COMPUTE_FLAG = 1 << 15
COMPUTE_OPCODE = 0b111 << 13
COMPUTE_OPCODE_MASK = 0b111 << 13

INDIRECT_SHIFT = 12
COMP_SHIFT = 6
DEST_SHIFT = 3
JUMP_SHIFT = 0

INDIRECT_MASK = 1 << INDIRECT_SHIFT
COMP_MASK = 0b111111 << COMP_SHIFT
DEST_MASK = 0b111 << DEST_SHIFT
JUMP_MASK = 0b111 << JUMP_SHIFT

# Register symbols substituted when matching computations
MEMORY_REGISTER = "M"
ADDRESS_REGISTER = "A"


# =============================================================================
# Computation Table
# =============================================================================

COMP_TABLE: dict[str, int] = {
    "0":   0b101010,
    "1":   0b111111,
    "-1":  0b111010,
    "D":   0b001100,
    "A":   0b110000,
    "!D":  0b001101,
    "!A":  0b110001,
    "-D":  0b001111,
    "-A":  0b110011,
    "D+1": 0b011111,
    "A+1": 0b110111,
    "D-1": 0b001110,
    "A-1": 0b110010,
    "D+A": 0b000010,
    "D-A": 0b010011,
    "A-D": 0b000111,
    "D&A": 0b000000,
    "D|A": 0b010101,
}

# Reverse lookup for the disassembler
COMP_BY_CODE: dict[int, str] = {code: mnemonic for mnemonic, code in COMP_TABLE.items()}


# =============================================================================
# Destination Bits
# =============================================================================

class Dest(IntFlag):
    """Destination register mask, bits 5-3 of a compute instruction."""
    NONE = 0
    M = 0b001
    D = 0b010
    A = 0b100

    def mnemonic(self) -> str:
        """Canonical destination text in A, M, D order ("" for none)."""
        return "".join(
            letter for letter, bit in (("A", Dest.A), ("M", Dest.M), ("D", Dest.D))
            if self & bit
        )


DEST_BY_LETTER: dict[str, Dest] = {"A": Dest.A, "M": Dest.M, "D": Dest.D}


# =============================================================================
# Jump Conditions
# =============================================================================

class Jump(IntFlag):
    """Jump condition mask, bits 2-0 of a compute instruction."""
    NONE = 0
    GT = 0b001
    EQ = 0b010
    LT = 0b100


JUMP_TABLE: dict[str, Jump] = {
    "JGT": Jump.GT,
    "JEQ": Jump.EQ,
    "JGE": Jump.GT | Jump.EQ,
    "JLT": Jump.LT,
    "JNE": Jump.GT | Jump.LT,
    "JLE": Jump.EQ | Jump.LT,
    "JMP": Jump.GT | Jump.EQ | Jump.LT,
}

JUMP_BY_CODE: dict[int, str] = {int(code): mnemonic for mnemonic, code in JUMP_TABLE.items()}


# =============================================================================
# Predefined Symbols
# =============================================================================

PREDEFINED_SYMBOLS: dict[str, int] = {
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    **{f"R{n}": n for n in range(16)},
    "SCREEN": 0x4000,
    "KBD": 0x6000,
}

# First RAM address after R0-R15
DEFAULT_VARIABLE_BASE = 16


# =============================================================================
# Utility Functions
# =============================================================================

def lookup_comp(mnemonic: str) -> tuple[int, bool] | None:
    """
    Look up a computation mnemonic.

    Any memory register reference is replaced with the address register
    before matching, and reported through the returned indirection flag.

    Args:
        mnemonic: Computation text as written (e.g. "D+M")

    Returns:
        (6-bit code, indirection flag), or None if not a valid computation
    """
    indirect = MEMORY_REGISTER in mnemonic
    if indirect:
        mnemonic = mnemonic.replace(MEMORY_REGISTER, ADDRESS_REGISTER)
    code = COMP_TABLE.get(mnemonic)
    if code is None:
        return None
    return code, indirect


def comp_mnemonic(code: int, indirect: bool) -> str | None:
    """
    Return the canonical computation text for a code.

    Args:
        code: 6-bit computation code
        indirect: If True, render the memory form (A replaced with M)

    Returns:
        Mnemonic text, or None if the code is not in the table
    """
    mnemonic = COMP_BY_CODE.get(code)
    if mnemonic is None:
        return None
    if indirect:
        mnemonic = mnemonic.replace(ADDRESS_REGISTER, MEMORY_REGISTER)
    return mnemonic


def is_compute_word(word: int) -> bool:
    """Check whether a 16-bit word has the compute opcode bit set."""
    return bool(word & COMPUTE_FLAG)
