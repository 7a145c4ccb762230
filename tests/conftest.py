"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest
from pygments.token import _TokenType

from pklgrammar.lexer import tokenize
from pklgrammar.tokens import Token


@pytest.fixture
def lex():
    """Return a helper that classifies source and returns coalesced tokens."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


def pairs(tokens: list[Token]) -> list[tuple[_TokenType, str]]:
    """(type, value) for every token."""
    return [(t.type, t.value) for t in tokens]


def find_values(tokens: list[Token], tt: _TokenType) -> list[str]:
    """Values of the tokens with exactly the given type."""
    return [t.value for t in tokens if t.type is tt]


def find_words(tokens: list[Token], tt: _TokenType) -> list[str]:
    """Whitespace-separated words covered by tokens of exactly the given type."""
    return [w for t in tokens if t.type is tt for w in t.value.split()]


def assert_pairs(tokens: list[Token], expected: list[tuple[_TokenType, str]]) -> None:
    """Assert the full (type, value) sequence."""
    actual = pairs(tokens)
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_no_type(tokens: list[Token], tt: _TokenType) -> None:
    """Assert no token has the given type or one of its subtypes."""
    offending = [t for t in tokens if t.type in tt]
    assert not offending, f"Unexpected {tt} tokens: {offending}"
