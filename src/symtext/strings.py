"""Indentation normalization for multi-line string literals."""

from __future__ import annotations

from symtext.tokens import Literal, leading_ws


def strip_indent(body: str, column: int) -> str:
    """Turn a multi-line literal body into the string's content.

    Algorithm:
    1. Remove up to ``column`` leading spaces/tabs from every line. Lines
       with less indentation are blank ones (the lexer rejects the rest), so
       they become empty.
    2. If the result starts with a newline, drop it.
    3. If the result ends with a newline, drop it.

    Steps 2 and 3 each remove at most one character and only touch the
    literal's own opening and closing newlines.
    """
    if column > 0:
        lines = body.split("\n")
        lines = [line[min(column, leading_ws(line)) :] for line in lines]
        body = "\n".join(lines)

    if body.startswith("\n"):
        body = body[1:]
    if body.endswith("\n"):
        body = body[:-1]
    return body


def normalize(literal: Literal) -> str:
    """Return the content of a literal; single-line bodies pass through."""
    if not literal.multiline:
        return literal.body
    return strip_indent(literal.body, literal.indent)
