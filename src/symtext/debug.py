"""--debug dump of scanned literals to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from symtext.lexer import ScannedLiteral
from symtext.text import StringValue
from symtext.tokens import Literal


def dump_literals(scanned: list[ScannedLiteral], *, file: TextIO | None = None) -> None:
    """Print each literal token and its characters to *file* (default stderr)."""
    if file is None:
        file = sys.stderr
    for item in scanned:
        _dump_literal(item.literal, 0, file)
        if item.value is not None:
            _dump_string(item.value, 1, file)
        elif item.error is not None:
            file.write(f"{_indent(1)}Rejected({item.error.message})\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_literal(literal: Literal, depth: int, f: TextIO) -> None:
    start = literal.span.start
    form = "multi-line" if literal.multiline else "single-line"
    f.write(
        f"{_indent(depth)}Literal {start.line}:{start.column} {form} "
        f"delimiter={literal.delimiter_length} body={literal.body!r}\n"
    )


def _dump_string(value: StringValue, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}String\n")
    for symbol in value.characters():
        f.write(f"{_indent(depth + 1)}U+{symbol.code_point:04X} {symbol.name}\n")
