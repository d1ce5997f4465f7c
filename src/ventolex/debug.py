"""Token dumps for --format text/json and debugging."""

from __future__ import annotations

import json
import sys
from typing import TextIO

from ventolex.tokens import Token


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one ``line:col  TYPE  'value'`` line per token to *file*."""
    for tok in tokens:
        start = tok.span.start
        pos = f"{start.line}:{start.column}"
        file.write(f"{pos:<8} {tok.type.name:<8} {tok.value!r}\n")


def tokens_to_json(tokens: list[Token]) -> str:
    """Render tokens as a JSON list of ``[kind, text]`` pairs."""
    return json.dumps([[tok.type.name.lower(), tok.value] for tok in tokens], indent=2)
