"""Construction-defect checks for a rule tree."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from pklgrammar.errors import GrammarError
from pklgrammar.rules import Language, MatchRule, Rule, SpanRule, VariantGroup, _Ref
from pklgrammar.strings import FENCE_CHAR, STRING_LABELS

log = logging.getLogger(__name__)

_LITERAL_RE = re.compile(r"[^\\.^$*+?{}\[\]|()]*")


def check_grammar(language: Language) -> None:
    """Raise GrammarError on the first construction defect in `language`."""
    checker = _Checker()
    for ref in language.contains:
        if isinstance(ref, _Ref):
            raise GrammarError(f"{ref!r} may only appear inside a span", "root")
    checker.check_rules(language.contains, "root")
    log.debug("checked %d rules of %s", len(checker.seen), language.name)


def _literal(pattern: str) -> str | None:
    """Return the pattern if it matches only its own text, else None."""
    if _LITERAL_RE.fullmatch(pattern):
        return pattern
    return None


def _compile(pattern: str, path: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.MULTILINE)
    except re.error as exc:
        raise GrammarError(f"invalid pattern: {exc.msg}", path, pattern, exc.pos) from None


def _name(rule: Rule, index: int) -> str:
    return f"{rule.label or type(rule).__name__}[{index}]"


class _Checker:
    def __init__(self) -> None:
        self.seen: set[int] = set()

    def check_rules(self, rules: Iterable[Rule | _Ref], path: str) -> None:
        for i, rule in enumerate(rules):
            if isinstance(rule, _Ref):
                continue
            self.check_rule(rule, f"{path} > {_name(rule, i)}")

    def check_rule(self, rule: Rule, path: str) -> None:
        if id(rule) in self.seen:
            return
        self.seen.add(id(rule))

        if isinstance(rule, MatchRule):
            self._check_match(rule, path)
        elif isinstance(rule, SpanRule):
            self._check_span(rule, path)
        elif isinstance(rule, VariantGroup):
            self._check_variants(rule, path)
        else:
            raise GrammarError(f"not a rule: {rule!r}", path)

    def _check_match(self, rule: MatchRule, path: str) -> None:
        if not rule.parts:
            raise GrammarError("match rule has no pattern", path)
        if len(rule.parts) > 1:
            for part in rule.parts:
                if _compile(part, path).groups:
                    raise GrammarError(
                        "scoped match part must not contain capture groups", path, part
                    )
            for index in rule.scopes:
                if not 1 <= index <= len(rule.parts):
                    raise GrammarError(
                        f"scope map names group {index}, rule has {len(rule.parts)}",
                        path,
                        rule.pattern,
                    )
        _compile(rule.pattern, path)

    def _check_span(self, rule: SpanRule, path: str) -> None:
        if not rule.begin or not rule.end:
            raise GrammarError("span rule needs both begin and end patterns", path)
        _compile(rule.begin, path)
        _compile(rule.end, path)
        if rule.label in STRING_LABELS:
            _check_fence_pairing(rule, path)
        self.check_rules(rule.contains, path)

    def _check_variants(self, rule: VariantGroup, path: str) -> None:
        if not rule.variants:
            raise GrammarError("variant group is empty", path)
        openers = [_opener(v) for v in rule.variants]
        for j, later in enumerate(openers):
            if later is None:
                continue
            for i, earlier in enumerate(openers[:j]):
                if earlier is not None and later.startswith(earlier):
                    raise GrammarError(
                        f"variant {j} ('{later}') can never match: "
                        f"variant {i} ('{earlier}') is tried first",
                        path,
                    )
        for i, variant in enumerate(rule.variants):
            if isinstance(variant, _Ref):
                raise GrammarError(f"{variant!r} is not allowed as a variant", path)
            self.check_rule(variant, f"{path} > {_name(variant, i)}")


def _opener(rule: Rule) -> str | None:
    """Literal text a rule must start with, when its begin is a plain string."""
    if isinstance(rule, SpanRule) and not rule.return_begin:
        return _literal(rule.begin)
    if isinstance(rule, MatchRule) and len(rule.parts) == 1:
        return _literal(rule.parts[0])
    return None


def _check_fence_pairing(rule: SpanRule, path: str) -> None:
    begin = _literal(rule.begin)
    end = _literal(rule.end)
    if begin is None or end is None:
        raise GrammarError("string delimiters must be literal text", path, rule.begin)

    delimiter = begin[: len(begin) - len(begin.lstrip(FENCE_CHAR))]
    quotes = begin[len(delimiter) :]
    if end != quotes + delimiter:
        raise GrammarError(
            f"string opened with '{begin}' must close with '{quotes + delimiter}'",
            path,
            rule.end,
        )

    # Escapes and interpolations must repeat exactly the same fence
    prefix = "\\\\" + delimiter
    for child in rule.contains:
        if isinstance(child, _Ref):
            continue
        patterns = []
        if isinstance(child, SpanRule):
            patterns.append(child.begin)
        elif isinstance(child, VariantGroup):
            patterns.extend(v.pattern for v in child.variants if isinstance(v, MatchRule))
        elif isinstance(child, MatchRule):
            patterns.append(child.pattern)
        for pattern in patterns:
            rest = pattern[len(prefix) :]
            if not pattern.startswith(prefix) or rest.startswith(FENCE_CHAR):
                raise GrammarError(
                    f"escape does not use the string's '{delimiter}' fence", path, pattern
                )
