"""Compile a rule tree into Pygments lexer states.

Pygments is the engine that walks the grammar. Each span rule becomes a
state whose first entry is its end pattern (popping back to the parent),
followed by its children in order, the keyword lexeme rule when the span
has a keyword table, and a plain-text fallback that classifies any other
word, whitespace run or single character with the span's own tag. `SELF`
compiles to the span's own begin entry and `ROOT` to `include("root")`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Union

import pygments.token
from pygments.lexer import include
from pygments.token import (
    STANDARD_TYPES,
    Comment,
    Error,
    Keyword,
    Name,
    Number,
    String,
    Text,
    _TokenType,
)

from pklgrammar.primitives import IDENTIFIER_RE
from pklgrammar.rules import (
    ROOT,
    SELF,
    KeywordTable,
    Language,
    MatchRule,
    Rule,
    SpanRule,
    VariantGroup,
    _Ref,
)

log = logging.getLogger(__name__)

TAG_TOKENS: dict[str, _TokenType] = {
    "keyword": Keyword,
    "literal": Keyword.Constant,
    "title": Name,
    "number": Number,
    "string": String,
    "char.escape": String.Escape,
    "subst": String.Interpol,
    "comment": Comment,
    "doctag": Comment.Special,
    "meta": Name.Decorator,
    "type": Keyword.Type,
    "property": Name.Property,
    "attr": Name.Attribute,
    # container tags: their own text stays plain
    "class": Text,
    "function": Text,
    "params": Text,
}

# One word, one run of horizontal whitespace, one newline, or one character.
# Never spans a line end, so `$` end patterns are always tried.
FALLBACK_RE = r"\n|[^\S\n]+|\w+|."

# Identifier-shaped lexeme checked against keyword tables; `import*`, `read?`
KEYWORD_LEXEME_RE = rf"{IDENTIFIER_RE}(?:[*?](?![\w.]))?"

# (pattern, token or callback[, new state]) or an include of another state
Action = Union[_TokenType, Callable]
Entry = Union[tuple[str, Action], tuple[str, Action, str], include]


def parse_token_type(name: str) -> _TokenType:
    """Resolve a dotted Pygments token name such as "Name.Attribute".

    The first component is looked up in `pygments.token`, so both the
    short alias ("String.Escape") and the full path
    ("Token.Literal.String.Escape") resolve to the same type.
    """
    head, _, rest = name.partition(".")
    ttype = getattr(pygments.token, head, None)
    for part in filter(None, rest.split(".")):
        if not isinstance(ttype, _TokenType):
            break
        ttype = getattr(ttype, part, None)
    if not isinstance(ttype, _TokenType) or ttype not in STANDARD_TYPES:
        raise ValueError(f"unknown token type '{name}'")
    return ttype


def compile_states(
    language: Language, tag_tokens: Mapping[str, _TokenType] | None = None
) -> dict[str, list[Entry]]:
    """Return a Pygments `tokens` dict for `language`."""
    return _StateCompiler(language, tag_tokens).compile()


def _empty(lexer: object, match: object) -> Iterator[tuple[int, _TokenType, str]]:
    return iter(())


def _scoped(actions: list[_TokenType]) -> Callable:
    """Callback emitting one token per capture group."""

    def callback(lexer, match):
        for i, action in enumerate(actions, 1):
            text = match.group(i)
            if text:
                yield match.start(i), action, text

    return callback


def _keyword_callback(
    keywords: KeywordTable, tokens: Mapping[str, _TokenType], content: _TokenType
) -> Callable:
    def callback(lexer, match):
        word = match.group()
        tag = keywords.lookup(word)
        if tag is None and word[-1] in "*?":
            # `foo?` is the identifier `foo` followed by an operator
            base = word[:-1]
            tag = keywords.lookup(base)
            yield match.start(), tokens.get(tag, content) if tag else content, base
            yield match.end() - 1, content, word[-1]
            return
        yield match.start(), tokens.get(tag, content) if tag else content, word

    return callback


class _StateCompiler:
    def __init__(self, language: Language, tag_tokens: Mapping[str, _TokenType] | None) -> None:
        self.language = language
        self.tokens = {**TAG_TOKENS, **(tag_tokens or {})}
        self.states: dict[str, list[Entry]] = {}
        # (span id, inherited tag, parent content) -> state name
        self._names: dict[tuple[int, str | None, _TokenType], str] = {}
        self._used: set[str] = {"root"}

    def compile(self) -> dict[str, list[Entry]]:
        root = self.entries(self.language.contains, None, Text, None)
        root.extend(self.tail(self.language.keywords, Text))
        self.states["root"] = root
        log.debug("compiled %s into %d states", self.language.name, len(self.states))
        return self.states

    def token(self, tag: str | None, default: _TokenType) -> _TokenType:
        if tag is None:
            return default
        return self.tokens.get(tag, Text)

    def entries(
        self,
        rules: tuple[Rule | _Ref, ...],
        tag: str | None,
        content: _TokenType,
        span: tuple[SpanRule, str | None, _TokenType] | None,
    ) -> list[Entry]:
        result: list[Entry] = []
        for rule in rules:
            if rule is SELF:
                if span is None:
                    raise ValueError("SELF used outside a span")
                result.append(self.begin_entry(*span))
            elif rule is ROOT:
                result.append(include("root"))
            elif isinstance(rule, MatchRule):
                result.append(self.match_entry(rule, rule.tag or tag, content))
            elif isinstance(rule, SpanRule):
                result.append(self.begin_entry(rule, tag, content))
            elif isinstance(rule, VariantGroup):
                result.extend(self.entries(rule.variants, rule.tag or tag, content, span))
            else:
                raise TypeError(f"not a rule: {rule!r}")
        return result

    def match_entry(self, rule: MatchRule, tag: str | None, content: _TokenType) -> Entry:
        own = self.token(tag, content)
        if len(rule.parts) == 1:
            return (rule.pattern, own)
        actions = [self.token(rule.scopes.get(i), own) for i in range(1, len(rule.parts) + 1)]
        return (rule.pattern, _scoped(actions))

    def tail(self, keywords: KeywordTable | None, content: _TokenType) -> list[Entry]:
        result: list[Entry] = []
        if keywords is not None:
            result.append((KEYWORD_LEXEME_RE, _keyword_callback(keywords, self.tokens, content)))
        result.append((FALLBACK_RE, content))
        return result

    def begin_entry(self, span: SpanRule, tag: str | None, parent: _TokenType) -> Entry:
        tag = span.tag or tag
        inner = self.token(tag, parent)
        state = self.state_for(span, tag, parent, inner)

        if span.return_begin:
            return (f"(?={span.begin})", _empty, state)
        if span.begin_scope is not None:
            action = self.token(span.begin_scope, inner)
        elif span.exclude_begin:
            action = parent
        else:
            action = inner
        return (span.begin, action, state)

    def state_for(
        self, span: SpanRule, tag: str | None, parent: _TokenType, inner: _TokenType
    ) -> str:
        key = (id(span), tag, parent)
        name = self._names.get(key)
        if name is not None:
            return name

        base = span.label or "span"
        name, n = base, 1
        while name in self._used:
            n += 1
            name = f"{base}-{n}"
        self._used.add(name)
        # Registered before the children so SELF resolves to this state
        self._names[key] = name

        if span.end_scope is not None:
            end_action = self.token(span.end_scope, inner)
        elif span.exclude_end:
            end_action = parent
        else:
            end_action = inner

        rules: list[Entry] = [(span.end, end_action, "#pop")]
        if span.single_line:
            # Unterminated: close at end of line with a zero-width marker
            rules.append((r"$", Error, "#pop"))
        rules.extend(self.entries(span.contains, None, inner, (span, tag, parent)))
        rules.extend(self.tail(span.keywords, inner))
        self.states[name] = rules
        return name
