"""Escape-free string literals and nominal Unicode text."""

from __future__ import annotations

from symtext.codec import CharacterSymbol, decode_body, intern, name_of
from symtext.graphemes import clusters_of, get_strategy
from symtext.lexer import scan_literal
from symtext.render import render_literal
from symtext.text import StringValue, characters_of

__version__ = "0.1.0"

__all__ = [
    "CharacterSymbol",
    "StringValue",
    "characters_of",
    "clusters_of",
    "decode_body",
    "get_strategy",
    "intern",
    "name_of",
    "render_literal",
    "scan_literal",
]
