"""Literal renderer: spell a string value back as literal source text."""

from __future__ import annotations

from itertools import count, groupby

from symtext.text import StringValue
from symtext.tokens import CR, NEWLINE, QUOTE, rstrip_trailing


def render_literal(string: StringValue | str, column: int = 0) -> str:
    """Render string as a literal that scans back to the same string.

    Uses the single-line form when it can hold the text, otherwise the
    multi-line form. The delimiter is the shortest quote run that does not
    close the literal early. ``column`` is where the opening delimiter will
    sit; multi-line bodies are indented to match.

    Raises ValueError for text that needs the multi-line form but has a
    line ending in CR, since multi-line bodies read CRLF as a line end.
    """
    text = str(string)
    if _fits_single_line(text):
        delim = QUOTE * _single_line_delimiter(text)
        return f"{delim}{text}{delim}"

    lines = text.split(NEWLINE)
    if any(line.endswith(CR) for line in lines):
        raise ValueError(f"no literal form keeps the CR line ends of {text!r}")

    delim = QUOTE * _multiline_delimiter(lines)
    pad = " " * column
    body = NEWLINE.join(pad + line for line in lines)
    return f"{delim}{NEWLINE}{body}{NEWLINE}{pad}{delim}"


def _fits_single_line(text: str) -> bool:
    # Edge quotes would merge into the delimiter runs
    if not text or text[0] == QUOTE or text[-1] == QUOTE:
        return False
    # A leading line break would open the multi-line form
    if text.startswith((NEWLINE, CR + NEWLINE)):
        return False
    return NEWLINE not in text or CR + NEWLINE in text


def _single_line_delimiter(text: str) -> int:
    runs = {len(list(group)) for ch, group in groupby(text) if ch == QUOTE}
    return _shortest_unused(runs)


def _multiline_delimiter(lines: list[str]) -> int:
    # Only a line made of nothing but quotes can be mistaken for the close
    runs = set()
    for line in lines:
        stripped = rstrip_trailing(line)
        if stripped and stripped == QUOTE * len(stripped):
            runs.add(len(stripped))
    return _shortest_unused(runs)


def _shortest_unused(lengths: set[int]) -> int:
    return next(n for n in count(1) if n not in lengths)
