"""Minimal LSP server for Pkl: semantic tokens and string diagnostics."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygments.token import Comment, Keyword, Name, Number, String, _TokenType

from pklgrammar.lexer import tokenize, unterminated_strings
from pklgrammar.tokens import Position as TokenPosition

log = logging.getLogger(__name__)

TOKEN_TYPES = [
    "keyword",
    "string",
    "number",
    "comment",
    "type",
    "property",
    "decorator",
    "variable",
    "operator",
]
TOKEN_MODIFIERS = ["declaration"]

LEGEND = SemanticTokensLegend(token_types=TOKEN_TYPES, token_modifiers=TOKEN_MODIFIERS)

# Most specific first: Keyword.Type must win over Keyword
_SEMANTIC_TYPES: list[tuple[_TokenType, str, int]] = [
    (Keyword.Type, "type", 0),
    (Keyword, "keyword", 0),
    (String.Interpol, "operator", 0),
    (String, "string", 0),
    (Number, "number", 0),
    (Comment, "comment", 0),
    (Name.Attribute, "property", 1),
    (Name.Property, "property", 0),
    (Name.Decorator, "decorator", 0),
    (Name, "variable", 0),
]

server = LanguageServer(
    "pklgrammar-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full
)


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def _utf16_column(source: str, pos: TokenPosition) -> int:
    """0-based UTF-16 column of `pos`, counting from the preceding `\n`."""
    return _utf16_len(source[pos.offset - pos.column + 1 : pos.offset])


def _classify(ttype: _TokenType) -> tuple[int, int] | None:
    for parent, name, modifiers in _SEMANTIC_TYPES:
        if ttype in parent:
            return TOKEN_TYPES.index(name), modifiers
    return None


def encode_semantic_tokens(source: str) -> list[int]:
    """Relative-encoded LSP semantic token data for `source`.

    Tokens spanning several lines are split per line, as the protocol
    requires single-line tokens.
    """
    data: list[int] = []
    prev_line = 0
    prev_char = 0
    for tok in tokenize(source):
        kind = _classify(tok.type)
        if kind is None:
            continue
        start = tok.span.start
        line = start.line - 1
        char = _utf16_column(source, start)
        for i, piece in enumerate(tok.value.split("\n")):
            if i:
                line += 1
                char = 0
            if not piece.strip():
                continue
            delta_line = line - prev_line
            delta_char = char - prev_char if delta_line == 0 else char
            data.extend([delta_line, delta_char, _utf16_len(piece), kind[0], kind[1]])
            prev_line, prev_char = line, char
    return data


def _validate(ls: LanguageServer, uri: str) -> None:
    """Publish a warning for every unterminated single-line string."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    diagnostics: list[Diagnostic] = []

    for pos in unterminated_strings(source):
        line = pos.line - 1
        col = _utf16_column(source, pos)
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col),
                ),
                message="unterminated string literal",
                severity=DiagnosticSeverity.Warning,
                source="pkl",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    doc = ls.workspace.get_text_document(params.text_document.uri)
    log.debug("semantic tokens for %s", params.text_document.uri)
    return SemanticTokens(data=encode_semantic_tokens(doc.source))


def main() -> None:
    server.start_io()
