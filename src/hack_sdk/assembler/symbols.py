"""
Hack Symbol Table
=================

Maps symbol names to RAM/ROM addresses for one assembly run.

The table is seeded with the architecture's predefined names (SP, LCL,
ARG, THIS, THAT, R0-R15, SCREEN, KBD). Labels are declared during the
first pass; variables are allocated on first use during the second
pass, starting at RAM[16] and counting up by one.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging

from hack_sdk.assembler.opcodes import DEFAULT_VARIABLE_BASE, PREDEFINED_SYMBOLS

logger = logging.getLogger(__name__)


class SymbolKind(Enum):
    """Where a symbol binding came from."""
    PREDEFINED = auto()
    LABEL = auto()
    VARIABLE = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass
class Symbol:
    """
    A single symbol table entry.

    Attributes:
        name: Symbol name as written in source
        value: Bound address
        kind: Predefined name, label or variable
        line: Source line that introduced it (None for predefined names)
    """
    name: str
    value: int
    kind: SymbolKind
    line: Optional[int] = None


class SymbolTable:
    """
    Symbol table for a single assembly run.

    Created once per run and passed explicitly into both passes.
    lookup_or_allocate() never replaces an existing binding;
    declare_label() always does.

    Attributes:
        next_variable_address: Address the next new variable will receive
    """

    def __init__(self, variable_base: int = DEFAULT_VARIABLE_BASE,
                 warn_on_redefinition: bool = True):
        self._symbols: dict[str, Symbol] = {}
        self._warn_on_redefinition = warn_on_redefinition
        self.next_variable_address = variable_base
        self.seed()

    def seed(self) -> None:
        """Populate the predefined architecture names."""
        for name, value in PREDEFINED_SYMBOLS.items():
            self._symbols[name] = Symbol(name, value, SymbolKind.PREDEFINED)

    # =========================================================================
    # Binding
    # =========================================================================

    def lookup_or_allocate(self, name: str, line: Optional[int] = None) -> int:
        """
        Resolve a symbol, allocating a variable address if it is new.

        Args:
            name: Symbol name
            line: Source line of the reference (recorded for new variables)

        Returns:
            The bound address
        """
        symbol = self._symbols.get(name)
        if symbol is not None:
            return symbol.value

        address = self.next_variable_address
        self._symbols[name] = Symbol(name, address, SymbolKind.VARIABLE, line)
        self.next_variable_address += 1
        logger.debug(f"Allocated variable '{name}' at {address}")
        return address

    def declare_label(self, name: str, address: int, line: Optional[int] = None) -> None:
        """
        Bind a label to an instruction address.

        An existing binding with the same name is replaced, whether it is
        a predefined name or an earlier label.

        Args:
            name: Label name
            address: Index of the instruction following the label
            line: Source line of the declaration
        """
        previous = self._symbols.get(name)
        if previous is not None and self._warn_on_redefinition:
            where = f" (line {previous.line})" if previous.line is not None else ""
            logger.warning(
                f"Label '{name}' replaces {previous.kind} binding "
                f"{previous.value}{where} with {address}"
            )
        self._symbols[name] = Symbol(name, address, SymbolKind.LABEL, line)
        logger.debug(f"Declared label '{name}' at {address}")

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, name: str) -> Optional[int]:
        """Return the address bound to name, or None without allocating."""
        symbol = self._symbols.get(name)
        return symbol.value if symbol is not None else None

    def get_symbol(self, name: str) -> Optional[Symbol]:
        """Return the full entry for name, or None."""
        return self._symbols.get(name)

    def user_symbols(self) -> list[Symbol]:
        """Labels and variables, in the order they were bound."""
        return [s for s in self._symbols.values() if s.kind is not SymbolKind.PREDEFINED]

    def as_dict(self) -> dict[str, int]:
        """Return a copy of the table as name -> address."""
        return {name: sym.value for name, sym in self._symbols.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())
