"""Tests for the CLI module: arg parsing, exit codes, report output."""

from __future__ import annotations

from pathlib import Path

import pytest

from symtext.cli import build_parser, format_literal, main
from symtext.graphemes import get_strategy
from symtext.lexer import tokenize_literals

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["src.sym"])
        assert ns.input == "src.sym"
        assert ns.clusters is None
        assert ns.names is None
        assert ns.debug is False

    def test_flags(self) -> None:
        ns = build_parser().parse_args(
            ["src.sym", "--clusters", "legacy", "--names", "--debug", "-v"]
        )
        assert ns.clusters == "legacy"
        assert ns.names is True
        assert ns.debug is True
        assert ns.verbose is True

    def test_missing_input_exits(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ---------------------------------------------------------------------------
# Report formatting
# ---------------------------------------------------------------------------


class TestFormatLiteral:
    def test_single_line(self) -> None:
        [scanned] = tokenize_literals('(def x "hi")')
        assert format_literal(scanned) == "1:8 single-line delimiter=1 'hi'"

    def test_multi_line(self) -> None:
        [scanned] = tokenize_literals('""\n  a\n""')
        assert format_literal(scanned) == "1:1 multi-line delimiter=2 '  a'"

    def test_names(self) -> None:
        [scanned] = tokenize_literals('"hé"')
        assert format_literal(scanned, names=True).splitlines()[1:] == [
            "  U+0068 LATIN SMALL LETTER H",
            "  U+00E9 LATIN SMALL LETTER E WITH ACUTE",
        ]

    def test_clusters(self) -> None:
        [scanned] = tokenize_literals('"e\N{COMBINING ACUTE ACCENT}x"')
        lines = format_literal(scanned, strategy=get_strategy("extended")).splitlines()
        assert lines[1] == "  clusters (extended): [0065 0301] [0078]"

    def test_rejected(self) -> None:
        [scanned] = tokenize_literals('"a\ud800"')
        assert format_literal(scanned) == (
            "1:1 single-line delimiter=1 rejected: invalid Unicode scalar value U+D800"
        )


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "src.sym"
    path.write_text(text, encoding="utf-8")
    return path


class TestMain:
    def test_lists_literals(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, '(def x "hi")\n(def y ""q"q"")\n')
        assert main([str(src)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "1:8 single-line delimiter=1 'hi'",
            "2:8 single-line delimiter=2 'q\"q'",
        ]

    def test_names_flag(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, '"A"')
        assert main([str(src), "--names"]) == 0
        assert "  U+0041 LATIN CAPITAL LETTER A" in capsys.readouterr().out

    def test_clusters_flag(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, '"ab"')
        assert main([str(src), "--clusters", "codepoint"]) == 0
        assert "  clusters (codepoint): [0061] [0062]" in capsys.readouterr().out

    def test_unknown_strategy(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, '"ab"')
        assert main([str(src), "--clusters", "nope"]) == 2
        assert "unknown clustering strategy" in capsys.readouterr().err

    def test_lex_error_exit_1(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, '(def x "oops)\n')
        assert main([str(src)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("error: unterminated string literal")
        assert f"{src}:1:8" in err

    def test_missing_file_exit_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "absent.sym")]) == 2
        assert "cannot read" in capsys.readouterr().err

    def test_no_literals(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, "(+ 1 2)\n")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == ""

    def test_debug_dump(self, tmp_path: Path, capsys) -> None:
        src = _write(tmp_path, '(def x "hi")')
        assert main([str(src), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "Literal 1:8 single-line delimiter=1 body='hi'" in err
        assert "U+0069 LATIN SMALL LETTER I" in err
