"""
Hack SDK - Assembler Configuration
==================================

Assembler settings. Configuration can come from:
- Default values (defined here)
- Constructor arguments
- Environment variables (AssemblerConfig.from_env)

The defaults reproduce the standard Hack assembler exactly: variables are
allocated from RAM[16] upward and address literals must fit in 15 bits.
"""

from dataclasses import dataclass
import os


# Environment variables that contain one of these are read as True
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")

# Variables must be reachable by a 15-bit address instruction
_MAX_VARIABLE_BASE = 0x7FFF


def _parse_bool(value: str) -> bool | None:
    """Parse a boolean environment value, or None if unrecognized."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


@dataclass
class AssemblerConfig:
    """
    Configuration for a Hack assembly run.

    Attributes:
        variable_base: First RAM address handed out to variables (default: 16)
        strict_address_range: Reject address literals above 32767 (default: True)
        warn_on_label_redefinition: Log a warning when a label replaces an
            existing binding (default: True)
        output_suffix: Suffix for the default output file (default: ".hack")
    """

    variable_base: int = 16
    strict_address_range: bool = True
    warn_on_label_redefinition: bool = True
    output_suffix: str = ".hack"

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            HACK_VARIABLE_BASE: First variable address (integer, 0-32767)
            HACK_STRICT_ADDRESS_RANGE: Enforce 15-bit literals (true/false)
            HACK_WARN_LABEL_REDEFINITION: Warn on label redefinition (true/false)
            HACK_OUTPUT_SUFFIX: Default output suffix (e.g. ".hack")

        Invalid values are ignored and the default is kept.

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if base := os.environ.get("HACK_VARIABLE_BASE"):
            try:
                value = int(base, 0)
            except ValueError:
                value = None
            if value is not None and 0 <= value <= _MAX_VARIABLE_BASE:
                config.variable_base = value

        if strict := os.environ.get("HACK_STRICT_ADDRESS_RANGE"):
            parsed = _parse_bool(strict)
            if parsed is not None:
                config.strict_address_range = parsed

        if warn := os.environ.get("HACK_WARN_LABEL_REDEFINITION"):
            parsed = _parse_bool(warn)
            if parsed is not None:
                config.warn_on_label_redefinition = parsed

        if suffix := os.environ.get("HACK_OUTPUT_SUFFIX"):
            config.output_suffix = suffix if suffix.startswith(".") else f".{suffix}"

        return config
