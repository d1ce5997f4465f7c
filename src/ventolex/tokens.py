"""Token types, data structures, and source position helpers."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    TEXT = auto()  # literal output
    TAG = auto()  # {{ expr }}
    FILTER = auto()  # |> filter, follows its tag
    COMMENT = auto()  # {{# ... #}}
    RAW = auto()  # {{raw}} ... {{/raw}}


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token.

    ``value`` is the token text after trimming; ``span`` covers the source
    region the token was cut from, before any trimming.
    """

    type: TokenType
    value: str
    span: Span


class LineIndex:
    """Map 0-based offsets in a source string to line/column positions."""

    def __init__(self, source: str) -> None:
        self._line_starts = [0]
        self._line_starts.extend(i + 1 for i, ch in enumerate(source) if ch == "\n")

    def position(self, offset: int) -> Position:
        line_idx = bisect_right(self._line_starts, offset) - 1
        return Position(line_idx + 1, offset - self._line_starts[line_idx] + 1, offset)

    def span(self, start: int, end: int) -> Span:
        return Span(self.position(start), self.position(end))
