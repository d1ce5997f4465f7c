"""Minimal LSP server for ventolex templates — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from ventolex import __version__
from ventolex.errors import LexError, UnterminatedCommentError
from ventolex.lexer import tokenize

server = LanguageServer(
    "ventolex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _utf16_column(source: str, offset: int) -> int:
    """Return the 0-based UTF-16 column of *offset*, as LSP positions count."""
    line_start = source.rfind("\n", 0, offset) + 1
    return len(source[line_start:offset].encode("utf-16-le")) // 2


def _diagnostic(exc: LexError, severity: DiagnosticSeverity) -> Diagnostic:
    line = exc.position.line - 1
    col = _utf16_column(exc.source, exc.position.offset)
    # Cover the opening {{ of the offending construct
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 2),
        ),
        message=exc.message,
        severity=severity,
        source="ventolex",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    # Unterminated comments are legal in lenient mode: warning, not error
    try:
        tokenize(source, filename, strict_comments=True)
    except UnterminatedCommentError as exc:
        diagnostics.append(_diagnostic(exc, DiagnosticSeverity.Warning))
    except LexError as exc:
        diagnostics.append(_diagnostic(exc, DiagnosticSeverity.Error))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
