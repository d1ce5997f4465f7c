"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from ventolex.lexer import tokenize
from ventolex.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns (type, value) pairs."""

    def _lex(source: str, **kwargs) -> list[tuple[TokenType, str]]:
        return pairs(tokenize(source, **kwargs))

    return _lex


def pairs(tokens: list[Token]) -> list[tuple[TokenType, str]]:
    """Reduce tokens to (type, value) pairs for comparison."""
    return [(t.type, t.value) for t in tokens]
