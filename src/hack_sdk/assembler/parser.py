"""
Hack Assembler Passes
=====================

The two passes of the Hack assembler. Both take the run's SymbolTable
explicitly; nothing is kept at module level.

Pass 1 - Label Resolution
-------------------------
Walks the cleaned source once, binding every ``(LABEL)`` to the number
of instruction lines seen so far and dropping the label line. Because
this pass finishes before any instruction is parsed, forward and
backward references to labels behave the same, and a label always wins
over a variable of the same name.

Pass 2 - Classification and Encoding
------------------------------------
Classifies each remaining line, first match wins:

| Form                 | Instruction        | Example       |
|----------------------|--------------------|---------------|
| ``@operand``         | AddressInstruction | @17, @LOOP    |
| ``dest=comp;jump``   | ComputeInstruction | D=D+M, 0;JMP  |

Unknown symbols in address instructions become variables, allocated in
first-use order. Any line that fails to parse aborts the whole pass.
"""

from typing import Iterable
import logging
import re

from hack_sdk.assembler.instructions import (
    AddressInstruction,
    ComputeInstruction,
    Instruction,
)
from hack_sdk.assembler.source import SourceLine
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.errors import AssemblerError, AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)


# (NAME) - parentheses around a non-empty name with no ')' inside
LABEL_PATTERN = re.compile(r"^\(([^)]+)\)$")

# [dest=]comp[;jump]; fields are validated against the tables afterwards
COMPUTE_PATTERN = re.compile(
    r"^(?:(?P<dest>[^=;]*)=)?(?P<comp>[^=;]+)(?:;(?P<jump>[^=;]*))?$"
)

ADDRESS_PREFIX = "@"


# =============================================================================
# Pass 1
# =============================================================================

def match_label(text: str) -> str | None:
    """Return the label name if text is a label declaration."""
    match = LABEL_PATTERN.match(text)
    return match.group(1) if match else None


def first_pass(lines: Iterable[SourceLine], symbols: SymbolTable) -> list[SourceLine]:
    """
    Bind labels and strip label lines.

    Args:
        lines: Cleaned source lines in order
        symbols: Symbol table for this run (labels are added to it)

    Returns:
        Instruction-bearing lines, in order
    """
    commands: list[SourceLine] = []

    for line in lines:
        label = match_label(line.text)
        if label is not None:
            symbols.declare_label(label, len(commands), line.number)
            continue
        commands.append(line)

    logger.debug(f"Pass 1: {len(commands)} instructions")
    return commands


# =============================================================================
# Pass 2
# =============================================================================

def parse_instruction(
    line: SourceLine,
    symbols: SymbolTable,
    filename: str = "<input>",
    strict_address_range: bool = True,
) -> Instruction:
    """
    Classify and resolve one instruction-bearing line.

    Args:
        line: The source line
        symbols: Symbol table for this run
        filename: Source name used in error locations
        strict_address_range: Reject address literals above 32767

    Returns:
        The resolved instruction

    Raises:
        AssemblySyntaxError: If the line is not a valid instruction
        AddressRangeError: If an address literal cannot be encoded
    """
    text = line.text

    if text.startswith(ADDRESS_PREFIX):
        operand = text[len(ADDRESS_PREFIX):]
        if not operand:
            raise AssemblySyntaxError(
                "missing address operand",
                location=SourceLocation(filename, line.number, 2),
                source_line=text,
                hint="write @value or @symbol",
            )
        try:
            return AddressInstruction.from_operand(
                operand, symbols, source=line, strict=strict_address_range
            )
        except AssemblerError as e:
            raise e.with_location(SourceLocation(filename, line.number, 2), text)

    match = COMPUTE_PATTERN.match(text)
    if match is None:
        raise AssemblySyntaxError(
            "malformed instruction",
            location=SourceLocation(filename, line.number, 1),
            source_line=text,
            hint="expected @value or dest=comp;jump",
        )

    try:
        return ComputeInstruction.from_fields(
            match.group("dest"), match.group("comp"), match.group("jump"), source=line
        )
    except AssemblerError as e:
        column = _field_column(match, getattr(e, "field", None))
        raise e.with_location(SourceLocation(filename, line.number, column), text)


def _field_column(match: re.Match, field: str | None) -> int:
    """1-indexed column of the compute field an error refers to."""
    group = {"destination": "dest", "computation": "comp", "jump": "jump"}.get(field)
    if group is None or match.start(group) < 0:
        return 1
    return match.start(group) + 1


def second_pass(
    lines: Iterable[SourceLine],
    symbols: SymbolTable,
    filename: str = "<input>",
    strict_address_range: bool = True,
) -> list[Instruction]:
    """
    Parse, resolve and validate every instruction line.

    Args:
        lines: Instruction-bearing lines from pass 1
        symbols: Symbol table for this run (variables are added to it)
        filename: Source name used in error locations
        strict_address_range: Reject address literals above 32767

    Returns:
        Instructions in source order

    Raises:
        AssemblerError: On the first invalid line
    """
    instructions = [
        parse_instruction(line, symbols, filename, strict_address_range)
        for line in lines
    ]
    logger.debug(
        f"Pass 2: {len(instructions)} instructions, "
        f"next variable address {symbols.next_variable_address}"
    )
    return instructions
