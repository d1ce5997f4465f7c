"""Tag scanner: finds the true end of a ``{{ ... }}`` tag and its filter pipes."""

from __future__ import annotations

from enum import Enum, auto

from ventolex.errors import UnclosedTagError
from ventolex.tokens import LineIndex


class Context(Enum):
    BRACKET = auto()  # { ... }, including the tag's own {{ and ${ interpolations
    SINGLE_QUOTE = auto()
    DOUBLE_QUOTE = auto()
    LITERAL = auto()  # `template literal`
    COMMENT = auto()  # /* block comment */


# Contexts whose contents are opaque: braces, pipes and other quotes are ignored
_OPAQUE = frozenset(
    {Context.SINGLE_QUOTE, Context.DOUBLE_QUOTE, Context.LITERAL, Context.COMMENT}
)
_QUOTES = frozenset({Context.SINGLE_QUOTE, Context.DOUBLE_QUOTE, Context.LITERAL})
_QUOTE_CHARS = {
    "'": Context.SINGLE_QUOTE,
    '"': Context.DOUBLE_QUOTE,
    "`": Context.LITERAL,
}


def scan_tag(source: str, start: int = 0, filename: str = "input.vto") -> list[int]:
    """Return the cut points of the tag whose ``{{`` sits at *start*.

    The first cut point is just past the opening ``{{``, the last just past the
    closing ``}}``, and any in between just past a ``|>`` filter pipe. Offsets
    are absolute. For example ``{{ tag |> filter1 |> filter2 }}`` gives
    ``[2, 9, 20, 31]``.

    A ``|>`` counts as a filter pipe whenever a bracket is the innermost
    context, so a pipe nested inside ``{ }`` or ``${ }`` also splits the tag.

    Raises UnclosedTagError if the source ends before the tag closes.
    """
    length = len(source)
    stack: list[Context] = []
    cuts = [start + 2]
    pos = start

    while pos < length:
        ch = source[pos]
        pos += 1
        top = stack[-1] if stack else None

        if ch == "{":
            if top is Context.LITERAL:
                # ${ opens an interpolation inside a template literal
                if source[pos - 2] == "$":
                    stack.append(Context.BRACKET)
            elif top not in _OPAQUE:
                stack.append(Context.BRACKET)

        elif ch == "}":
            if top is Context.BRACKET:
                stack.pop()
                if not stack:
                    cuts.append(pos)
                    return cuts

        elif ch in _QUOTE_CHARS:
            ctx = _QUOTE_CHARS[ch]
            if top is ctx:
                stack.pop()
            elif top not in _OPAQUE:
                stack.append(ctx)

        elif ch == "/":
            if top not in _QUOTES:
                if source.startswith("*", pos):
                    stack.append(Context.COMMENT)
                elif top is Context.COMMENT and source[pos - 2] == "*":
                    stack.pop()

        elif ch == "|":
            if top is Context.BRACKET and source.startswith(">", pos):
                cuts.append(pos + 1)

    raise UnclosedTagError(LineIndex(source).position(start), source, filename)
