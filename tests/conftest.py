"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from symtext.codec import SymbolTable
from symtext.lexer import ScannedLiteral, scan_literal, tokenize_literals


@pytest.fixture
def table():
    """Return a private symbol table, isolated from the process-wide one."""
    return SymbolTable()


@pytest.fixture
def scan():
    """Return a helper that scans the literal at the start of source as text."""

    def _scan(source: str) -> str:
        return str(scan_literal(source))

    return _scan


@pytest.fixture
def read():
    """Return a helper that scans every literal in source and returns their texts."""

    def _read(source: str) -> list[str]:
        return [str(item.value) for item in tokenize_literals(source)]

    return _read


def assert_values(scanned: list[ScannedLiteral], expected: list[str]) -> None:
    """Assert that the scanned literal values match the expected texts."""
    actual = [str(item.value) if item.value is not None else None for item in scanned]
    assert actual == expected, f"Expected {expected}, got {actual}"
