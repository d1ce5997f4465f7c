"""Ventolex lexer: converts template source into a flat token stream."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum, auto

from ventolex.errors import UnterminatedCommentError
from ventolex.raw import match_raw_block
from ventolex.scanner import scan_tag
from ventolex.tokens import LineIndex, Token, TokenType

logger = logging.getLogger(__name__)


class _Mode(Enum):
    TEXT = auto()
    TAG = auto()
    COMMENT = auto()


class Lexer:
    """Tokenize template source into TEXT, TAG, FILTER, COMMENT and RAW tokens."""

    def __init__(
        self,
        source: str,
        filename: str = "input.vto",
        *,
        strict_comments: bool = False,
    ) -> None:
        self._source = source
        self._filename = filename
        self._strict_comments = strict_comments
        self._lines = LineIndex(source)
        self._pos = 0
        self._mode = _Mode.TEXT
        self._tokens: list[Token] = []
        # Strip leading whitespace from the next text segment ({{ ... -}})
        self._trim_next = False

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            if self._mode == _Mode.TEXT:
                self._lex_text()
            elif self._mode == _Mode.COMMENT:
                self._lex_comment()
            elif self._mode == _Mode.TAG:
                self._lex_tag()

        logger.debug("tokenized %s: %d tokens", self._filename, len(self._tokens))
        return self._tokens

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, tt: TokenType, value: str, start: int, end: int) -> Token:
        tok = Token(tt, value, self._lines.span(start, end))
        self._tokens.append(tok)
        return tok

    def _trim_previous(self) -> None:
        """Strip trailing whitespace from the text token just before a {{- tag."""
        if not self._tokens or self._tokens[-1].type != TokenType.TEXT:
            return
        last = self._tokens[-1]
        value = last.value.rstrip()
        if value:
            self._tokens[-1] = replace(last, value=value)
        else:
            self._tokens.pop()

    # ------------------------------------------------------------------
    # Text mode
    # ------------------------------------------------------------------

    def _lex_text(self) -> None:
        start = self._pos
        index = self._source.find("{{", start)
        end = len(self._source) if index == -1 else index

        text = self._source[start:end]
        if self._trim_next:
            text = text.lstrip()
            self._trim_next = False
        if text:
            self._emit(TokenType.TEXT, text, start, end)

        self._pos = end
        if index == -1:
            return

        raw = match_raw_block(self._source, index, self._filename)
        if raw is not None:
            content_start, content_end, block_end = raw
            logger.debug("raw block at offset %d in %s", index, self._filename)
            self._emit(
                TokenType.RAW, self._source[content_start:content_end], index, block_end
            )
            self._pos = block_end
            return

        if self._source.startswith("{{#", index):
            self._mode = _Mode.COMMENT
        else:
            self._mode = _Mode.TAG

    # ------------------------------------------------------------------
    # Comment mode
    # ------------------------------------------------------------------

    def _lex_comment(self) -> None:
        start = self._pos
        body_start = start + 3  # skip {{#
        index = self._source.find("#}}", body_start)

        if index == -1:
            if self._strict_comments:
                raise UnterminatedCommentError(
                    self._lines.position(start), self._source, self._filename
                )
            # Lenient: the rest of the source is the comment
            end = len(self._source)
            self._emit(TokenType.COMMENT, self._source[body_start:], start, end)
            self._pos = end
            return

        self._emit(TokenType.COMMENT, self._source[body_start:index], start, index + 3)
        self._pos = index + 3
        self._mode = _Mode.TEXT

    # ------------------------------------------------------------------
    # Tag mode
    # ------------------------------------------------------------------

    def _lex_tag(self) -> None:
        cuts = scan_tag(self._source, self._pos, self._filename)
        last = len(cuts) - 1

        for i in range(1, len(cuts)):
            prev, curr = cuts[i - 1], cuts[i]
            # Drop the two-character marker (|> or }}) before each cut point
            code = self._source[prev : curr - 2]

            if i == 1:
                if code.startswith("-"):
                    code = code[1:]
                    self._trim_previous()
                if i == last and code.endswith("-"):
                    code = code[:-1]
                    self._trim_next = True
                self._emit(TokenType.TAG, code.strip(), prev, curr - 2)
                continue

            if i == last and code.endswith("-"):
                code = code[:-1]
                self._trim_next = True
            self._emit(TokenType.FILTER, code.strip(), prev, curr - 2)

        self._pos = cuts[-1]
        self._mode = _Mode.TEXT


def tokenize(
    source: str,
    filename: str = "input.vto",
    *,
    strict_comments: bool = False,
) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename, strict_comments=strict_comments).tokenize()


def untokenize(tokens: list[Token]) -> str:
    """Write tokens back out as template source.

    Tags and filters are written in canonical ``{{ tag |> filter }}`` form, so
    lexing the result again yields the same token types and values, except
    when a text token ends in ``{``. A bare ``raw`` tag is written with a trim
    marker (``{{ raw -}}`` or ``{{- raw }}``) so it cannot open a raw block;
    ValueError is raised when whitespace on both sides makes that impossible.
    """
    parts: list[str] = []
    for i, tok in enumerate(tokens):
        prev = tokens[i - 1] if i > 0 else None
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        closes = tok.type in (TokenType.TAG, TokenType.FILTER) and (
            nxt is None or nxt.type != TokenType.FILTER
        )

        if tok.type == TokenType.TEXT:
            parts.append(tok.value)
        elif tok.type == TokenType.RAW:
            parts.append(f"{{{{raw}}}}{tok.value}{{{{/raw}}}}")
        elif tok.type == TokenType.COMMENT:
            parts.append(f"{{{{#{tok.value}#}}}}")
        elif tok.type == TokenType.TAG and closes and tok.value == "raw":
            parts.append(_raw_named_tag(prev, nxt))
            continue
        elif tok.type == TokenType.TAG:
            parts.append(f"{{{{ {tok.value}")
        elif tok.type == TokenType.FILTER:
            parts.append(f" |> {tok.value}")

        if closes:
            parts.append(" }}")
    return "".join(parts)


def _raw_named_tag(prev: Token | None, nxt: Token | None) -> str:
    """Spell a lone ``raw`` tag so the raw-block opener does not match it."""
    if nxt is None or nxt.type != TokenType.TEXT or not nxt.value[:1].isspace():
        return "{{ raw -}}"
    if prev is None or prev.type != TokenType.TEXT or not prev.value[-1:].isspace():
        return "{{- raw }}"
    raise ValueError("cannot write a 'raw' tag between whitespace without opening a raw block")
