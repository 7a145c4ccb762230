"""Export the rule tree as a highlight.js language definition (JSON)."""

from __future__ import annotations

import json
from typing import Any

from pklgrammar.rules import ROOT, SELF, Language, MatchRule, Rule, SpanRule, VariantGroup, _Ref

# Marker for the whole root rule set; highlight.js has no name for it
ROOT_MARKER = "$root"


def to_mode(language: Language) -> dict[str, Any]:
    """Convert a Language into a highlight.js-shaped mode dictionary."""
    keywords = {tag: sorted(words) for tag, words in language.keywords.words.items()}
    return {
        "name": language.name,
        "aliases": list(language.aliases),
        "keywords": keywords,
        "contains": [_rule(r) for r in language.contains],
    }


def to_json(language: Language, indent: int | None = 2) -> str:
    return json.dumps(to_mode(language), indent=indent)


def _rule(rule: Rule | _Ref) -> Any:
    if rule is SELF:
        return "self"
    if rule is ROOT:
        return ROOT_MARKER
    if isinstance(rule, MatchRule):
        return _match(rule)
    if isinstance(rule, SpanRule):
        return _span(rule)
    if isinstance(rule, VariantGroup):
        mode: dict[str, Any] = {}
        if rule.tag:
            mode["scope"] = rule.tag
        mode["variants"] = [_rule(v) for v in rule.variants]
        return mode
    raise TypeError(f"not a rule: {rule!r}")


def _match(rule: MatchRule) -> dict[str, Any]:
    mode: dict[str, Any] = {}
    if len(rule.parts) == 1:
        if rule.tag:
            mode["scope"] = rule.tag
        mode["match"] = rule.pattern
    else:
        mode["match"] = list(rule.parts)
        mode["scope"] = {str(i): tag for i, tag in sorted(rule.scopes.items())}
    return mode


def _span(rule: SpanRule) -> dict[str, Any]:
    mode: dict[str, Any] = {}
    if rule.tag:
        mode["scope"] = rule.tag
    mode["begin"] = rule.begin
    mode["end"] = rule.end
    if rule.begin_scope:
        mode["beginScope"] = rule.begin_scope
    if rule.end_scope:
        mode["endScope"] = rule.end_scope
    if rule.exclude_begin:
        mode["excludeBegin"] = True
    if rule.exclude_end:
        mode["excludeEnd"] = True
    if rule.return_begin:
        mode["returnBegin"] = True
    if rule.keywords is not None:
        mode["keywords"] = {tag: sorted(words) for tag, words in rule.keywords.words.items()}
    if rule.contains:
        mode["contains"] = [_rule(c) for c in rule.contains]
    return mode
