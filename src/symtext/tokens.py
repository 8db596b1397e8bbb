"""Literal token data structures and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass

QUOTE = '"'
NEWLINE = "\n"
CR = "\r"

# Alignment whitespace; each character counts as one column
_INDENT_WS = frozenset(" \t")

# Trailing whitespace tolerated after a closing delimiter line
_TRAILING_WS = " \t\r"


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Literal:
    """A scanned string literal, body kept exactly as written.

    ``indent`` is the 0-based column of the opening delimiter, i.e. the
    number of aligning whitespace characters every multi-line body line
    carries. Multi-line bodies store CRLF line ends as plain newlines.
    """

    delimiter_length: int
    multiline: bool
    body: str
    indent: int
    span: Span


def is_quote(ch: str | None) -> bool:
    """Return True if ch is the quote character."""
    return ch == QUOTE


def is_blank(line: str) -> bool:
    """Return True if line contains only spaces and tabs (or is empty)."""
    return all(ch in _INDENT_WS for ch in line)


def leading_ws(line: str) -> int:
    """Count the aligning whitespace characters at the start of line."""
    count = 0
    for ch in line:
        if ch not in _INDENT_WS:
            break
        count += 1
    return count


def rstrip_trailing(text: str) -> str:
    """Strip the whitespace a closing delimiter line may end with."""
    return text.rstrip(_TRAILING_WS)
