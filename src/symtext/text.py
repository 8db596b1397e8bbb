"""String values: immutable sequences of character symbols."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from symtext.scanner import SequenceScanner

if TYPE_CHECKING:
    from symtext.codec import CharacterSymbol


class StringValue:
    """An immutable string of interned character symbols.

    Strings are scanned, never indexed: there is no subscript and no length.
    Equality compares code points element by element.
    """

    __slots__ = ("_symbols",)

    def __init__(self, symbols: Iterable[CharacterSymbol] = ()) -> None:
        self._symbols: tuple[CharacterSymbol, ...] = tuple(symbols)

    def characters(self) -> SequenceScanner[CharacterSymbol]:
        """Return a fresh scanner over this string's characters."""
        return SequenceScanner(self._symbols)

    def code_points(self) -> Iterator[int]:
        return (symbol.code_point for symbol in self._symbols)

    def is_empty(self) -> bool:
        return not self._symbols

    def __bool__(self) -> bool:
        return bool(self._symbols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringValue):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __str__(self) -> str:
        return "".join(map(chr, self.code_points()))

    def __repr__(self) -> str:
        return f"StringValue({str(self)!r})"


def characters_of(string: StringValue) -> SequenceScanner[CharacterSymbol]:
    """Return a scanner over the characters of string."""
    return string.characters()
