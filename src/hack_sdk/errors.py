"""
Hack SDK Error Hierarchy
========================

This module defines the exception hierarchy for the entire Hack SDK.
All exceptions inherit from HackError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
HackError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - line matches neither instruction form
│   │   └── InvalidMnemonicError - unknown dest/comp/jump mnemonic
│   └── AddressRangeError - address that cannot be encoded
└── DisassemblerError (disassembler-related)
    ├── HackFormatError - malformed .hack text
    └── DisassemblyError - word that does not decode

Assembly errors are always fatal: the first one aborts the run and no
output is produced. Each exception captures source location information
(filename, line, column) when available, so the caller can report the
offending line before exiting.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class HackError(Exception):
    """
    Base exception for all Hack SDK errors.

        try:
            assembler.assemble_file("Prog.asm")
        except HackError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(HackError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            Prog.asm:7:3: error: unrecognized computation 'D+B'
                D=D+B
                  ^
            hint: valid computations: 0, 1, -1, D, A, ...
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def with_location(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "AssemblerError":
        """
        Attach a source location to an error raised without one.

        The instruction constructors know nothing about files or line
        numbers; the pipeline fills them in here before re-raising.
        """
        self.location = location
        if source_line is not None:
            self.source_line = source_line
        self.args = (self._format_message(),)
        return self


class AssemblySyntaxError(AssemblerError):
    """
    Malformed instruction in assembly source.

    Raised when a line is neither an address instruction (@value) nor
    a compute instruction (dest=comp;jump).

    Examples:
        - "D = A" (whitespace inside the instruction)
        - "@" (missing operand)
        - "=D" (empty destination before '=')
    """
    pass


class InvalidMnemonicError(AssemblySyntaxError):
    """
    A compute instruction field names an unknown mnemonic.

    Attributes:
        field: Which field failed ("destination", "computation", "jump")
        mnemonic: The offending text
    """

    def __init__(
        self,
        field: str,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid: Optional[list[str]] = None,
    ):
        self.field = field
        self.mnemonic = mnemonic
        self.valid = valid or []

        hint = None
        if self.valid:
            hint = f"valid {field}s: {', '.join(self.valid)}"

        super().__init__(
            f"unrecognized {field} '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class AddressRangeError(AssemblerError):
    """
    An address instruction operand cannot be encoded.

    Address instructions carry a 15-bit value; bit 15 is reserved to
    tell them apart from compute instructions.

    Example:
        @40000  ; Error: does not fit in 15 bits
    """

    def __init__(
        self,
        value: int,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.value = value
        self.limit = limit

        super().__init__(
            f"address {value} is out of range",
            location=location,
            hint=f"addresses must be between 0 and {limit}",
            source_line=source_line,
        )


# =============================================================================
# Disassembler Exceptions
# =============================================================================

class DisassemblerError(HackError):
    """Base exception for disassembler errors."""
    pass


class HackFormatError(DisassemblerError):
    """
    Invalid .hack file text.

    Each non-blank line must be exactly sixteen '0'/'1' characters.
    """

    def __init__(self, line: int, text: str):
        self.line = line
        self.text = text
        super().__init__(f"line {line}: not a 16-bit binary word: {text!r}")


class DisassemblyError(DisassemblerError):
    """
    A machine word does not correspond to any valid instruction.

    Raised for compute words whose computation bits match no table
    entry, or whose reserved bits 14-13 are not set.
    """

    def __init__(self, word: int, reason: str):
        self.word = word
        self.reason = reason
        super().__init__(f"cannot decode {word:016b}: {reason}")
