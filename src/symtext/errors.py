"""Error types with formatted source context."""

from __future__ import annotations

from symtext.tokens import Position


def _snippet(message: str, position: Position, source: str | None, filename: str) -> str:
    col = position.column
    line_num = str(position.line)
    gutter_width = len(line_num) + 1
    header = f"error: {message}\n{' ' * gutter_width}--> {filename}:{position.line}:{col}"

    # Streaming sources have no text to quote
    if source is None:
        return header

    lines = source.splitlines(keepends=True)
    line_idx = position.line - 1
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    underline_len = max(1, min(2, len(source_line) - col + 1))
    pad = " " * (col - 1)
    carets = "^" * underline_len

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"{header}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised when a literal cannot be scanned, with position and source context."""

    def __init__(self, message: str, position: Position, source: str | None = None) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<input>") -> str:
        return _snippet(self.message, self.position, self.source, filename)


class NotALiteral(LexError):
    """The cursor is not positioned at a quote; nothing was consumed."""


class UnterminatedLiteral(LexError):
    """Input ended before the closing delimiter. Position is the opening run."""

    def __init__(
        self,
        message: str,
        position: Position,
        source: str | None = None,
        delimiter_length: int = 1,
    ) -> None:
        self.delimiter_length = delimiter_length
        super().__init__(message, position, source)


class MisalignedLine(LexError):
    """A multi-line body line is indented less than the opening delimiter."""

    def __init__(
        self,
        message: str,
        position: Position,
        source: str | None = None,
        required_column: int = 1,
    ) -> None:
        self.required_column = required_column
        super().__init__(message, position, source)


class CodecError(Exception):
    """Raised when text cannot be turned into character symbols."""

    def __init__(self, message: str, position: Position | None = None) -> None:
        self.message = message
        self.position = position
        super().__init__(message)

    def format(self, filename: str = "<input>", source: str | None = None) -> str:
        if self.position is None:
            return f"error: {self.message}"
        return _snippet(self.message, self.position, source, filename)


class InvalidScalar(CodecError):
    """A value is not a Unicode scalar value (surrogate, out of range, not an int)."""

    def __init__(self, value: object, position: Position | None = None) -> None:
        self.value = value
        if isinstance(value, int) and 0 <= value <= 0x10FFFF:
            shown = f"U+{value:04X}"
        else:
            shown = repr(value)
        super().__init__(f"invalid Unicode scalar value {shown}", position)


class MalformedInput(CodecError):
    """Encoded input could not be decoded into code points."""
