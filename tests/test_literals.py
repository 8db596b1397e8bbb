"""Test single-line literals, quote counting, and delimiter matching."""

import pytest

from symtext.errors import LexError, NotALiteral, UnterminatedLiteral
from symtext.lexer import LiteralScanner, scan_literal
from symtext.scanner import SourceCursor
from symtext.tokens import Position


class TestBasicLiteral:
    def test_single_quoted(self, scan):
        assert scan('"hello"') == "hello"

    def test_double_quoted(self, scan):
        assert scan('""hello""') == "hello"

    def test_triple_quoted(self, scan):
        assert scan('"""hello"""') == "hello"

    def test_five_quoted(self, scan):
        assert scan('"""""hello"""""') == "hello"

    def test_sentence(self):
        text = "For example, this is a string."
        value = scan_literal(f'"{text}"')
        assert str(value) == text
        assert sum(1 for _ in value.characters()) == len(text)

    def test_non_ascii(self, scan):
        assert scan('"naïve café 😀"') == "naïve café 😀"


class TestNoEscapeProcessing:
    def test_backslash_n_literal(self, scan):
        assert scan('"\\n"') == "\\n"

    def test_backslash_before_quote(self, scan):
        # The backslash does not protect the quote
        assert scan('"a\\"') == "a\\"

    def test_newline_inside_single_line_body(self, scan):
        assert scan('"a\nb"') == "a\nb"


class TestQuotesInside:
    def test_single_quote_inside_double(self, scan):
        assert scan('""a"b""') == 'a"b'

    def test_two_quotes_inside_triple(self, scan):
        assert scan('"""a""b"""') == 'a""b'

    def test_shorter_run_is_content(self, scan):
        assert scan('"""say "hi" and ""bye"" ok"""') == 'say "hi" and ""bye"" ok'

    def test_longer_run_is_content(self, scan):
        assert scan('"a""b"') == 'a""b'

    def test_much_longer_run_is_content(self, scan):
        assert scan('""a"""""b""') == 'a"""""b'

    def test_closes_at_first_exact_run(self, scan):
        assert scan('"a"b"') == "a"


class TestCursorPosition:
    def test_stops_after_closing_run(self):
        cursor = SourceCursor('"ab" rest')
        assert str(scan_literal(cursor)) == "ab"
        assert cursor.peek() == " "
        assert cursor.position == Position(1, 5, 4)

    def test_not_a_literal_consumes_nothing(self):
        cursor = SourceCursor("abc")
        with pytest.raises(NotALiteral):
            scan_literal(cursor)
        assert cursor.peek() == "a"

    def test_not_a_literal_at_end_of_input(self):
        with pytest.raises(NotALiteral):
            scan_literal("")

    def test_not_a_literal_is_lex_error(self):
        with pytest.raises(LexError):
            scan_literal("x")


class TestLiteralToken:
    def test_token_fields(self):
        literal = LiteralScanner('"""abc"""').scan_token()
        assert literal.delimiter_length == 3
        assert literal.multiline is False
        assert literal.body == "abc"
        assert literal.indent == 0
        assert literal.span.start == Position(1, 1, 0)
        assert literal.span.end == Position(1, 10, 9)

    def test_body_is_unprocessed(self):
        literal = LiteralScanner('""  a"b  ""').scan_token()
        assert literal.body == '  a"b  '


class TestUnterminated:
    def test_two_quotes_alone(self):
        with pytest.raises(UnterminatedLiteral) as exc_info:
            scan_literal('""')
        assert exc_info.value.delimiter_length == 2

    def test_single_quote_alone(self):
        with pytest.raises(UnterminatedLiteral):
            scan_literal('"')

    def test_two_quotes_then_text(self):
        with pytest.raises(UnterminatedLiteral):
            scan_literal('"" x')

    def test_not_enough_closing_quotes(self):
        with pytest.raises(UnterminatedLiteral, match="expected 4 closing quotes"):
            scan_literal('""""hello"""')

    def test_position_is_opening_run(self):
        cursor = SourceCursor('ab "cd')
        cursor.advance()
        cursor.advance()
        cursor.advance()
        with pytest.raises(UnterminatedLiteral) as exc_info:
            scan_literal(cursor)
        assert exc_info.value.position == Position(1, 4, 3)


def _max_quote_run(text: str) -> int:
    best = run = 0
    for ch in text:
        run = run + 1 if ch == '"' else 0
        best = max(best, run)
    return best


_CONTENTS = [
    "x",
    "hello world",
    'a"b',
    'say "hi" now',
    'a""b',
    'one " two "" three',
    '(cat "a" "b")',
    "tab\there",
]


@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_round_trip_for_every_delimiter_length(n):
    for content in _CONTENTS:
        if _max_quote_run(content) >= n:
            continue
        delim = '"' * n
        assert str(scan_literal(delim + content + delim)) == content
