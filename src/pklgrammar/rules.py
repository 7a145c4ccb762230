"""Rule node types, recursive references, and pattern helpers."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union


class _Ref:
    """Placeholder in a `contains` list, bound lazily by the engine adapter."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return self.name


# The enclosing span itself (highlight.js "self")
SELF = _Ref("SELF")
# The whole root rule set of the language
ROOT = _Ref("ROOT")


@dataclass(frozen=True, slots=True, eq=False)
class KeywordTable:
    """Reserved words by classification tag (e.g. keyword, literal)."""

    words: Mapping[str, frozenset[str]]

    @classmethod
    def of(cls, **tags: list[str] | tuple[str, ...]) -> KeywordTable:
        return cls({tag: frozenset(ws) for tag, ws in tags.items()})

    def lookup(self, word: str) -> str | None:
        """Return the tag of a reserved word, or None for ordinary identifiers."""
        for tag, ws in self.words.items():
            if word in ws:
                return tag
        return None


@dataclass(frozen=True, slots=True, eq=False)
class MatchRule:
    """A single-pattern rule.

    With one part the whole match gets `tag`. With several parts each part is
    wrapped in its own capture group and `scopes` maps the 1-based group index
    to a tag; groups absent from `scopes` keep the enclosing classification.
    """

    parts: tuple[str, ...]
    tag: str | None = None
    scopes: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    label: str | None = None

    @property
    def pattern(self) -> str:
        if len(self.parts) == 1:
            return self.parts[0]
        return "".join(f"({p})" for p in self.parts)


@dataclass(frozen=True, slots=True, eq=False)
class SpanRule:
    """A begin/end bounded rule whose `contains` are active inside the span."""

    begin: str
    end: str
    tag: str | None = None
    contains: tuple[Rule | _Ref, ...] = ()
    keywords: KeywordTable | None = None
    exclude_begin: bool = False
    exclude_end: bool = False
    return_begin: bool = False
    begin_scope: str | None = None
    end_scope: str | None = None
    single_line: bool = False
    label: str | None = None


@dataclass(frozen=True, slots=True, eq=False)
class VariantGroup:
    """Ordered alternatives; the first variant that matches wins."""

    variants: tuple[Rule, ...]
    tag: str | None = None
    label: str | None = None


Rule = Union[MatchRule, SpanRule, VariantGroup]


@dataclass(frozen=True, slots=True, eq=False)
class Language:
    """A named grammar registration: the value handed to the engine."""

    name: str
    aliases: tuple[str, ...]
    contains: tuple[Rule, ...]
    keywords: KeywordTable
    filenames: tuple[str, ...] = ()
    mimetypes: tuple[str, ...] = ()


def match(*parts: str, tag: str | None = None, scopes: Mapping[int, str] | None = None,
          label: str | None = None) -> MatchRule:
    """Build a MatchRule from one pattern or a sequence of scoped parts."""
    return MatchRule(tuple(parts), tag, MappingProxyType(dict(scopes or {})), label)


def words(*ws: str, suffix: str = r"\b") -> str:
    """Pattern matching any of the literal words (longest first)."""
    alts = "|".join(re.escape(w) for w in sorted(ws, key=len, reverse=True))
    return rf"\b(?:{alts}){suffix}"


def source(pattern: str | None) -> str | None:
    """Return the regex source of a pattern (compiled or plain)."""
    if pattern is None:
        return None
    return getattr(pattern, "pattern", pattern)


def concat(*patterns: str) -> str:
    """Join pattern fragments into a single regex source."""
    return "".join(source(p) or "" for p in patterns)
