"""
Hack Assembly Source Reader
===========================

Turns raw assembly text into numbered source lines ready for the first
pass. Each line is trimmed; blank lines and ``//`` comments are dropped.
A ``//`` after an instruction starts an end-of-line comment.

Whitespace inside an instruction is left alone, so ``D = A`` reaches
the parser as written and is rejected there.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

COMMENT_MARKER = "//"


@dataclass(frozen=True)
class SourceLine:
    """
    One instruction-bearing or label line of source.

    Attributes:
        number: Line number in the original text (1-indexed)
        text: Trimmed line content without comments
    """
    number: int
    text: str

    def __str__(self) -> str:
        return self.text


def clean_line(raw: str) -> str:
    """Strip comments and surrounding whitespace from one raw line."""
    comment = raw.find(COMMENT_MARKER)
    if comment >= 0:
        raw = raw[:comment]
    return raw.strip()


def read_source(text: str) -> list[SourceLine]:
    """
    Split assembly text into numbered, cleaned source lines.

    Only a newline ends a line, so form feeds and other Unicode line
    breaks do not shift line numbers. A trailing carriage return is
    stripped with the other whitespace.

    Args:
        text: Complete source text

    Returns:
        Non-empty lines in source order
    """
    lines = []
    for number, raw in enumerate(text.split("\n"), start=1):
        cleaned = clean_line(raw)
        if cleaned:
            lines.append(SourceLine(number, cleaned))
    return lines


def read_source_file(filepath: str | Path) -> list[SourceLine]:
    """
    Read and clean an assembly source file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8 text
    """
    return read_source(Path(filepath).read_text(encoding="utf-8"))


def number_lines(lines: Iterable[str | SourceLine]) -> list[SourceLine]:
    """
    Wrap already-cleaned text lines as SourceLines numbered from 1.

    SourceLine items are passed through unchanged.
    """
    result = []
    for number, line in enumerate(lines, start=1):
        if isinstance(line, SourceLine):
            result.append(line)
        else:
            result.append(SourceLine(number, line))
    return result
