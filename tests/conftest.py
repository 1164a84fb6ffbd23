"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from csslex.codec import normalize
from csslex.lexer import Scanner
from csslex.tokens import RawToken, Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that scans source and returns raw tokens (excluding EOF)."""

    def _lex(source: str) -> list[RawToken]:
        tokens = list(Scanner(source))
        assert tokens[-1].type != TokenType.ERROR, f"scan stopped with {tokens[-1]}"
        return tokens[:-1]

    return _lex


@pytest.fixture
def lex_normalized(lex):
    """Return a helper that scans source and normalizes every token."""

    def _lex(source: str) -> list[Token]:
        return [normalize(t) for t in lex(source)]

    return _lex


def assert_types(tokens: list[RawToken] | list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[RawToken] | list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"
