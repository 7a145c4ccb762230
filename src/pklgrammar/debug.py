"""--debug rule tree dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from pklgrammar.rules import Language, MatchRule, Rule, SpanRule, VariantGroup, _Ref


def dump_grammar(language: Language, *, file: TextIO | None = None) -> None:
    """Print a human-readable rule tree to *file* (default: stderr)."""
    file = file or sys.stderr
    file.write(f"Language {language.name} aliases={list(language.aliases)}\n")
    for tag, words in language.keywords.words.items():
        file.write(f"{_indent(1)}Keywords {tag}: {len(words)} words\n")
    seen: set[int] = set()
    for rule in language.contains:
        _dump_rule(rule, 1, file, seen)


def _indent(depth: int) -> str:
    return "  " * depth


def _title(rule: Rule) -> str:
    parts = [type(rule).__name__]
    if rule.label:
        parts.append(rule.label)
    if rule.tag:
        parts.append(f"[{rule.tag}]")
    return " ".join(parts)


def _dump_rule(rule: Rule | _Ref, depth: int, f: TextIO, seen: set[int]) -> None:
    if isinstance(rule, _Ref):
        f.write(f"{_indent(depth)}-> {rule!r}\n")
    elif isinstance(rule, MatchRule):
        _dump_match(rule, depth, f)
    elif isinstance(rule, SpanRule):
        _dump_span(rule, depth, f, seen)
    elif isinstance(rule, VariantGroup):
        f.write(f"{_indent(depth)}{_title(rule)}\n")
        for variant in rule.variants:
            _dump_rule(variant, depth + 1, f, seen)


def _dump_match(rule: MatchRule, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}{_title(rule)} {rule.pattern!r}")
    if rule.scopes:
        scopes = ", ".join(f"{i}={tag}" for i, tag in sorted(rule.scopes.items()))
        f.write(f" scopes({scopes})")
    f.write("\n")


def _dump_span(rule: SpanRule, depth: int, f: TextIO, seen: set[int]) -> None:
    f.write(f"{_indent(depth)}{_title(rule)} {rule.begin!r} .. {rule.end!r}")
    flags = [
        name
        for name, on in (
            ("excludeBegin", rule.exclude_begin),
            ("excludeEnd", rule.exclude_end),
            ("returnBegin", rule.return_begin),
            ("singleLine", rule.single_line),
        )
        if on
    ]
    if flags:
        f.write(f" ({', '.join(flags)})")
    f.write("\n")
    # Shared spans are expanded once
    if id(rule) in seen:
        if rule.contains:
            f.write(f"{_indent(depth + 1)}...\n")
        return
    seen.add(id(rule))
    for child in rule.contains:
        _dump_rule(child, depth + 1, f, seen)
