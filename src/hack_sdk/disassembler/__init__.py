"""
Hack SDK Disassembler Module
============================

Decodes Hack machine words back into assembly text. Output uses the
same syntax the assembler accepts, so a disassembly can be assembled
again to the same words.

Usage:
    from hack_sdk.disassembler import HackDisassembler, parse_hack_text

    words = parse_hack_text(Path("Add.hack").read_text())
    disasm = HackDisassembler()
    for instr in disasm.disassemble(words):
        print(instr)
"""

from .hack import DisassembledInstruction, HackDisassembler, parse_hack_text

__all__ = [
    "HackDisassembler",
    "DisassembledInstruction",
    "parse_hack_text",
]
