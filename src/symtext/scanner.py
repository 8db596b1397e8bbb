"""Pull-based scanners over strings, streams, and generated items.

Every scanner offers ``peek()`` (look at the next item without consuming it)
and ``advance()`` (consume and return it). Both return ``None`` once the
source is exhausted, and keep doing so from then on.

Whether a scan can be repeated depends on the source: a scanner over a
materialized sequence can be derived again from that sequence, while a
scanner over a stream or generator consumes it for good.
"""

from __future__ import annotations

import codecs
from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator, Sequence
from typing import Generic, TypeVar

from symtext.errors import MalformedInput
from symtext.tokens import Position

T = TypeVar("T")

_NOTHING = object()


class TextScanner(ABC, Generic[T]):
    """Single-pass cursor with one item of lookahead."""

    @abstractmethod
    def peek(self) -> T | None:
        """Return the next item without consuming it, or None at the end."""

    @abstractmethod
    def advance(self) -> T | None:
        """Consume and return the next item, or None at the end."""

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        item = self.advance()
        if item is None:
            raise StopIteration
        return item


class SequenceScanner(TextScanner[T]):
    """Scanner over a materialized sequence (a str, tuple, or list)."""

    def __init__(self, items: Sequence[T]) -> None:
        self._items = items
        self._index = 0

    def peek(self) -> T | None:
        if self._index < len(self._items):
            return self._items[self._index]
        return None

    def advance(self) -> T | None:
        if self._index < len(self._items):
            item = self._items[self._index]
            self._index += 1
            return item
        return None


class IteratorScanner(TextScanner[T]):
    """Scanner over a one-shot iterable such as a generator."""

    def __init__(self, items: Iterable[T]) -> None:
        self._source: Iterator[T] | None = iter(items)
        self._pending: object = _NOTHING

    def peek(self) -> T | None:
        if self._pending is _NOTHING:
            if self._source is None:
                return None
            try:
                self._pending = next(self._source)
            except StopIteration:
                self._source = None
                return None
        return self._pending  # type: ignore[return-value]

    def advance(self) -> T | None:
        item = self.peek()
        self._pending = _NOTHING
        return item


class SourceCursor(TextScanner[str]):
    """Character scanner that tracks line, column, and offset.

    ``source`` is the full text when it is known, so errors can quote it.
    """

    def __init__(
        self,
        chars: TextScanner[str] | str,
        start: Position | None = None,
        source: str | None = None,
    ) -> None:
        if isinstance(chars, str):
            if source is None:
                source = chars
            chars = SequenceScanner(chars)
        self._chars = chars
        self.source = source
        start = start or Position(1, 1, 0)
        self._line = start.line
        self._col = start.column
        self._offset = start.offset

    @property
    def position(self) -> Position:
        return Position(self._line, self._col, self._offset)

    def peek(self) -> str | None:
        return self._chars.peek()

    def advance(self) -> str | None:
        ch = self._chars.advance()
        if ch is None:
            return None
        self._offset += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch


def as_cursor(chars: TextScanner[str] | str) -> SourceCursor:
    """Return chars as a SourceCursor, wrapping it if necessary."""
    if isinstance(chars, SourceCursor):
        return chars
    return SourceCursor(chars)


# ---------------------------------------------------------------------------
# Byte streams
# ---------------------------------------------------------------------------


class _Utf8Buffer:
    """Incremental UTF-8 decoding; partial sequences stay in the decoder."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._text = ""
        self._index = 0
        self._closed = False

    def _buffered(self) -> bool:
        return self._index < len(self._text)

    def _feed(self, chunk: bytes | None) -> None:
        final = chunk is None
        if final:
            self._closed = True
        try:
            self._text = self._decoder.decode(b"" if final else chunk, final)
        except UnicodeDecodeError as exc:
            self._closed = True
            self._text = ""
            raise MalformedInput(f"malformed UTF-8 input: {exc.reason}") from exc
        self._index = 0

    def _peek_buffered(self) -> str | None:
        if self._buffered():
            return self._text[self._index]
        return None

    def _take_buffered(self) -> str | None:
        ch = self._peek_buffered()
        if ch is not None:
            self._index += 1
        return ch


class Utf8StreamScanner(_Utf8Buffer, TextScanner[str]):
    """Character scanner over an iterable of UTF-8 byte chunks.

    Chunks may split a code point anywhere; the incomplete bytes are held
    until the rest arrives. Malformed bytes raise MalformedInput.
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        super().__init__()
        self._chunks: Iterator[bytes] = iter(chunks)

    def _fill(self) -> None:
        while not self._buffered() and not self._closed:
            self._feed(next(self._chunks, None))

    def peek(self) -> str | None:
        self._fill()
        return self._peek_buffered()

    def advance(self) -> str | None:
        self._fill()
        return self._take_buffered()


class AsyncUtf8Scanner(_Utf8Buffer):
    """Character scanner over an async iterable of UTF-8 byte chunks.

    ``peek`` and ``advance`` are coroutines; awaiting more input never loses
    a partially received code point.
    """

    def __init__(self, chunks: AsyncIterable[bytes]) -> None:
        super().__init__()
        self._chunks: AsyncIterator[bytes] = aiter(chunks)

    async def _fill(self) -> None:
        while not self._buffered() and not self._closed:
            self._feed(await anext(self._chunks, None))

    async def peek(self) -> str | None:
        await self._fill()
        return self._peek_buffered()

    async def advance(self) -> str | None:
        await self._fill()
        return self._take_buffered()

    async def read_all(self) -> str:
        """Consume the rest of the stream and return it as text."""
        parts: list[str] = []
        while (ch := await self.advance()) is not None:
            parts.append(ch)
        return "".join(parts)

    def __aiter__(self) -> AsyncUtf8Scanner:
        return self

    async def __anext__(self) -> str:
        ch = await self.advance()
        if ch is None:
            raise StopAsyncIteration
        return ch
