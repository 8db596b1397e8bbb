"""Character symbols: interning code points and naming them.

A character symbol is the nominal form of a code point, the pair
("unicode", NAME). Only the integer is stored; the name is looked up the
first time someone asks for it and cached in the owning table.

The process-wide table is created on first use and is reachable only
through :func:`intern`, :func:`name_of`, and :func:`decode_body`.
"""

from __future__ import annotations

import logging
import threading
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import ClassVar

from symtext.errors import InvalidScalar
from symtext.text import StringValue
from symtext.tokens import Position

logger = logging.getLogger(__name__)

MAX_CODE_POINT = 0x10FFFF
_SURROGATES = range(0xD800, 0xE000)


@dataclass(frozen=True, slots=True, order=True)
class CharacterSymbol:
    """Interned nominal representation of one code point.

    Equality, hashing, and ordering use the code point alone.
    """

    NAMESPACE: ClassVar[str] = "unicode"

    code_point: int
    _table: SymbolTable = field(compare=False, repr=False)

    @property
    def namespace(self) -> str:
        return self.NAMESPACE

    @property
    def name(self) -> str:
        return self._table.name_of(self)

    @property
    def qualified_name(self) -> str:
        return f"{self.NAMESPACE}:{self.name}"

    def __str__(self) -> str:
        return chr(self.code_point)


def check_scalar(value: object) -> int:
    """Return value if it is a Unicode scalar value, else raise InvalidScalar."""
    if type(value) is not int:
        raise InvalidScalar(value)
    if value < 0 or value > MAX_CODE_POINT or value in _SURROGATES:
        raise InvalidScalar(value)
    return value


def _is_noncharacter(cp: int) -> bool:
    return 0xFDD0 <= cp <= 0xFDEF or (cp & 0xFFFE) == 0xFFFE


def unicode_name(cp: int) -> str:
    """Return the character name, or the code point label if it has none."""
    ch = chr(cp)
    name = unicodedata.name(ch, None)
    if name is not None:
        return name
    category = unicodedata.category(ch)
    if category == "Cc":
        kind = "control"
    elif category == "Co":
        kind = "private-use"
    elif _is_noncharacter(cp):
        kind = "noncharacter"
    else:
        kind = "reserved"
    return f"<{kind}-{cp:04X}>"


class SymbolTable:
    """Append-only table of interned character symbols, keyed by code point.

    Lookups take no lock. Inserts are serialized and re-check under the lock,
    so threads racing on the same code point all get the same object.
    """

    def __init__(self) -> None:
        self._symbols: dict[int, CharacterSymbol] = {}
        self._names: dict[int, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, code_point: object) -> bool:
        return type(code_point) is int and code_point in self._symbols

    def intern(self, code_point: int) -> CharacterSymbol:
        """Return the unique symbol for code_point, creating it on first use."""
        check_scalar(code_point)
        symbol = self._symbols.get(code_point)
        if symbol is not None:
            return symbol
        with self._lock:
            symbol = self._symbols.get(code_point)
            if symbol is None:
                symbol = CharacterSymbol(code_point, self)
                self._symbols[code_point] = symbol
        return symbol

    def name_of(self, symbol: CharacterSymbol) -> str:
        """Return the Unicode name of symbol, computing it once."""
        cp = symbol.code_point
        name = self._names.get(cp)
        if name is None:
            name = self._names.setdefault(cp, unicode_name(cp))
        return name

    def is_named(self, code_point: int) -> bool:
        """Return True once the name for code_point has been computed."""
        return code_point in self._names

    def decode_body(
        self, raw: Iterable[str] | Iterable[int], position: Position | None = None
    ) -> StringValue:
        """Intern each code point of raw, in order, into a StringValue.

        raw is text (or any iterable of characters or integer code points).
        position, when given, is attached to InvalidScalar for diagnostics.
        """
        symbols: list[CharacterSymbol] = []
        try:
            for item in raw:
                symbols.append(self.intern(item if isinstance(item, int) else ord(item)))
        except InvalidScalar as exc:
            if position is None:
                raise
            raise InvalidScalar(exc.value, position) from exc
        return StringValue(symbols)


_default_table: SymbolTable | None = None
_default_lock = threading.Lock()


def _table() -> SymbolTable:
    global _default_table
    table = _default_table
    if table is None:
        with _default_lock:
            if _default_table is None:
                _default_table = SymbolTable()
                logger.debug("created process-wide symbol table")
            table = _default_table
    return table


def intern(code_point: int) -> CharacterSymbol:
    """Return the process-wide symbol for code_point."""
    return _table().intern(code_point)


def name_of(symbol: CharacterSymbol) -> str:
    """Return the Unicode standard name of symbol."""
    return symbol.name


def decode_body(
    raw: Iterable[str] | Iterable[int], position: Position | None = None
) -> StringValue:
    """Turn normalized literal text into a string value of interned symbols."""
    return _table().decode_body(raw, position)
