"""Ventolex: lexer for {{ }} template source."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ventolex.tokens import Token

__version__ = "0.1.0"


def tokenize(
    source: str,
    filename: str = "input.vto",
    *,
    strict_comments: bool = False,
) -> list[Token]:
    """Split template source into text, tag, filter, comment and raw tokens."""
    from ventolex.lexer import tokenize as lexer_tokenize

    return lexer_tokenize(source, filename, strict_comments=strict_comments)
