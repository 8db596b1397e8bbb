"""Delimiter-balanced string literal scanner.

A literal opens with a run of N quotes and closes with a run of exactly N
quotes. Nothing inside is ever escaped: a body that needs quotes picks a
delimiter length that does not occur in it.

Quote runs inside a single-line body whose length differs from N (shorter
or longer) are plain content. Only a run of exactly N closes the literal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from symtext.codec import decode_body
from symtext.errors import CodecError, MisalignedLine, NotALiteral, UnterminatedLiteral
from symtext.scanner import SourceCursor, TextScanner, as_cursor
from symtext.strings import normalize
from symtext.text import StringValue
from symtext.tokens import (
    CR,
    NEWLINE,
    QUOTE,
    Literal,
    Position,
    Span,
    is_blank,
    is_quote,
    leading_ws,
    rstrip_trailing,
)

logger = logging.getLogger(__name__)


class LiteralScanner:
    """Scan string literals from a character cursor.

    The cursor must know its true column for multi-line literals to align;
    a plain scanner is assumed to start at line 1, column 1.
    """

    def __init__(self, chars: TextScanner[str] | str) -> None:
        self._cursor = as_cursor(chars)

    @property
    def cursor(self) -> SourceCursor:
        return self._cursor

    def scan(self) -> StringValue:
        """Scan one literal and decode it into a string value."""
        literal = self.scan_token()
        return decode_body(normalize(literal), literal.span.start)

    def scan_token(self) -> Literal:
        """Scan one literal and return its raw token."""
        start = self._cursor.position
        if not is_quote(self._cursor.peek()):
            raise NotALiteral("expected a string literal", start, self._cursor.source)

        indent = start.column - 1
        delimiter_length = self._count_quotes()

        # A CR not followed by LF is the first character of a single-line body
        carried = self._cursor.advance() if self._cursor.peek() == CR else ""

        if self._cursor.peek() == NEWLINE:
            body = self._scan_multiline(delimiter_length, indent, start)
            multiline = True
        else:
            body = self._scan_single_line(delimiter_length, start, carried)
            multiline = False

        literal = Literal(
            delimiter_length, multiline, body, indent, Span(start, self._cursor.position)
        )
        logger.debug(
            "scanned literal at %d:%d (delimiter=%d, multiline=%s)",
            start.line,
            start.column,
            delimiter_length,
            multiline,
        )
        return literal

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _count_quotes(self) -> int:
        count = 0
        while is_quote(self._cursor.peek()):
            self._cursor.advance()
            count += 1
        return count

    def _unterminated(self, delimiter_length: int, start: Position) -> UnterminatedLiteral:
        plural = "" if delimiter_length == 1 else "s"
        return UnterminatedLiteral(
            f"unterminated string literal (expected {delimiter_length} closing quote{plural})",
            start,
            self._cursor.source,
            delimiter_length=delimiter_length,
        )

    # ------------------------------------------------------------------
    # Single-line form
    # ------------------------------------------------------------------

    def _scan_single_line(
        self, delimiter_length: int, start: Position, prefix: str = ""
    ) -> str:
        chars: list[str] = [prefix] if prefix else []
        while True:
            ch = self._cursor.peek()
            if ch is None:
                raise self._unterminated(delimiter_length, start)
            if is_quote(ch):
                run = self._count_quotes()
                if run == delimiter_length:
                    return "".join(chars)
                # Any other run length is content
                chars.append(QUOTE * run)
            else:
                chars.append(self._cursor.advance())

    # ------------------------------------------------------------------
    # Multi-line form
    # ------------------------------------------------------------------

    def _scan_multiline(self, delimiter_length: int, indent: int, start: Position) -> str:
        parts: list[str] = [self._cursor.advance()]  # opening newline
        closing = QUOTE * delimiter_length

        while self._cursor.peek() is not None:
            line_start = self._cursor.position
            line, terminated = self._read_line()

            if leading_ws(line) >= indent and rstrip_trailing(line[indent:]) == closing:
                return "".join(parts)

            if not is_blank(line) and leading_ws(line) < indent:
                raise MisalignedLine(
                    f"line is indented less than its literal's opening delimiter "
                    f"(expected {indent} leading whitespace characters)",
                    line_start,
                    self._cursor.source,
                    required_column=indent + 1,
                )

            parts.append(line)
            if not terminated:
                break
            parts.append(NEWLINE)

        raise self._unterminated(delimiter_length, start)

    def _read_line(self) -> tuple[str, bool]:
        """Consume one line; return its text and whether a newline ended it."""
        chars: list[str] = []
        while (ch := self._cursor.advance()) is not None:
            if ch == NEWLINE:
                return "".join(chars).removesuffix(CR), True
            chars.append(ch)
        return "".join(chars), False


def scan_literal(cursor: TextScanner[str] | str) -> StringValue:
    """Scan the literal at cursor and return its string value."""
    return LiteralScanner(cursor).scan()


# ---------------------------------------------------------------------------
# Whole-source driver
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScannedLiteral:
    """One literal found in a source; value is None if the codec rejected it."""

    literal: Literal
    value: StringValue | None
    error: CodecError | None = None


class LiteralReader:
    """Find and scan every string literal in a source text.

    Characters outside literals are skipped. Structural errors stop the
    read; a codec error only rejects the literal that contains it.
    """

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self._filename = filename
        self._scanner = LiteralScanner(SourceCursor(source))

    def __iter__(self) -> Iterator[ScannedLiteral]:
        cursor = self._scanner.cursor
        while (ch := cursor.peek()) is not None:
            if not is_quote(ch):
                cursor.advance()
                continue
            literal = self._scanner.scan_token()
            try:
                value = decode_body(normalize(literal), literal.span.start)
            except CodecError as exc:
                start = literal.span.start
                logger.debug(
                    "%s:%d:%d: literal rejected: %s",
                    self._filename,
                    start.line,
                    start.column,
                    exc.message,
                )
                yield ScannedLiteral(literal, None, exc)
            else:
                yield ScannedLiteral(literal, value)

    def read_all(self) -> list[ScannedLiteral]:
        """Scan the whole source and return every literal found."""
        return list(self)


def tokenize_literals(source: str, filename: str = "<input>") -> list[ScannedLiteral]:
    """Convenience function: scan every literal in source."""
    return LiteralReader(source, filename).read_all()
