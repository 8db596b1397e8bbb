"""Minimal LSP server for symtext: literal diagnostics only."""

from __future__ import annotations

import logging

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

from symtext import __version__
from symtext.errors import LexError, MisalignedLine
from symtext.lexer import LiteralReader
from symtext.tokens import Span

logger = logging.getLogger(__name__)

server = LanguageServer(
    "symtext-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _range(span: Span) -> Range:
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Scan every literal in the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        for scanned in LiteralReader(source, filename):
            if scanned.error is None:
                continue
            diagnostics.append(
                Diagnostic(
                    range=_range(scanned.literal.span),
                    message=scanned.error.message,
                    severity=DiagnosticSeverity.Warning,
                    source="symtext",
                )
            )
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        message = exc.message
        if isinstance(exc, MisalignedLine):
            message += f" (required column {exc.required_column})"
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=message,
                severity=DiagnosticSeverity.Error,
                source="symtext",
            )
        )

    logger.debug("%s: %d diagnostic(s)", filename, len(diagnostics))
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
