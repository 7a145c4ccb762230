"""Pygments lexer for Pkl, built from the rule tree."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pygments.lexer import RegexLexer
from pygments.token import Error, _TokenType

from pklgrammar.engine import compile_states
from pklgrammar.grammar import PKL
from pklgrammar.tokens import Position, PositionTracker, Span, Token


class PklLexer(RegexLexer):
    """Lexer for Pkl configuration files."""

    name = PKL.name
    aliases = list(PKL.aliases)
    filenames = list(PKL.filenames)
    mimetypes = list(PKL.mimetypes)
    url = "https://pkl-lang.org"

    tokens = compile_states(PKL)


def lexer_class(tag_tokens: Mapping[str, _TokenType] | None = None) -> type[PklLexer]:
    """Return PklLexer, or a subclass whose tags map to other token types."""
    if not tag_tokens:
        return PklLexer
    return type("PklLexer", (PklLexer,), {"tokens": compile_states(PKL, tag_tokens)})


def tokenize(source: str, lexer: RegexLexer | None = None) -> list[Token]:
    """Classify `source`, merging adjacent runs of the same token type."""
    lexer = lexer or PklLexer()
    tracker = PositionTracker(source)
    result: list[Token] = []
    for ttype, start, value in _coalesce(lexer.get_tokens_unprocessed(source)):
        end = start + len(value)
        result.append(Token(ttype, value, Span(tracker.at(start), tracker.at(end))))
    return result


def unterminated_strings(source: str) -> list[Position]:
    """Positions where a single-line string reached the end of its line unclosed."""
    tracker = PositionTracker(source)
    return [
        tracker.at(index)
        for index, ttype, value in PklLexer().get_tokens_unprocessed(source)
        if ttype is Error and not value
    ]


def _coalesce(
    stream: Iterable[tuple[int, _TokenType, str]],
) -> Iterable[tuple[_TokenType, int, str]]:
    current: _TokenType | None = None
    start = 0
    parts: list[str] = []
    for index, ttype, value in stream:
        if not value:
            continue
        if ttype is current:
            parts.append(value)
            continue
        if current is not None:
            yield current, start, "".join(parts)
        current, start, parts = ttype, index, [value]
    if current is not None:
        yield current, start, "".join(parts)
