"""Detection of ``{{raw}} ... {{/raw}}`` passthrough blocks."""

from __future__ import annotations

import re

from ventolex.errors import UnclosedRawBlockError
from ventolex.tokens import LineIndex

_RAW_OPEN = re.compile(r"\{\{\s*raw\s*\}\}")
_RAW_CLOSE = re.compile(r"\{\{\s*/raw\s*\}\}")


def match_raw_block(
    source: str, start: int = 0, filename: str = "input.vto"
) -> tuple[int, int, int] | None:
    """Match a raw block opening at *start*.

    Returns ``(content_start, content_end, block_end)`` as absolute offsets,
    or None if the ``{{`` at *start* does not open a raw block.
    Raises UnclosedRawBlockError if there is no closing ``{{/raw}}``.
    """
    opening = _RAW_OPEN.match(source, start)
    if opening is None:
        return None

    closing = _RAW_CLOSE.search(source, opening.end())
    if closing is None:
        raise UnclosedRawBlockError(LineIndex(source).position(start), source, filename)

    return opening.end(), closing.start(), closing.end()
