"""String escapes, interpolation, and the string rule family.

A Pkl string may be fenced with up to three `#` characters so that quotes
and backslashes inside it need no escaping: `#"a "quoted" \\ word"#`. Escape
and interpolation sequences inside such a string must repeat the same
fence (`\\#n`, `\\#(expr)`); with any other number of `#` they are plain
text. Every builder here therefore takes the fence and threads it through
the begin pattern, the end pattern and all of the span's children.
"""

from __future__ import annotations

from pklgrammar.rules import ROOT, SELF, SpanRule, VariantGroup, concat, match

FENCE_CHAR = "#"
FENCE_WIDTHS = (0, 1, 2, 3)


def fence(width: int) -> str:
    """Return the raw delimiter for a fence width."""
    if width not in FENCE_WIDTHS:
        raise ValueError(f"unsupported string fence width {width}")
    return FENCE_CHAR * width


def string_escape(delimiter: str = "") -> VariantGroup:
    return VariantGroup(
        (
            match(concat(r"\\", delimiter, r"[0\\tnr\"']")),
            match(concat(r"\\", delimiter, r"u\{[0-9a-fA-F]{1,8}\}")),
        ),
        tag="char.escape",
        label="escape",
    )


# Parentheses nested inside an interpolated expression, so that `\(f(x))`
# ends on the second `)`.
_PAREN_GROUP = SpanRule(begin=r"\(", end=r"\)", contains=(SELF, ROOT), label="parens")


def interpolation(delimiter: str = "") -> SpanRule:
    return SpanRule(
        begin=concat(r"\\", delimiter, r"\("),
        end=r"\)",
        tag="subst",
        contains=(_PAREN_GROUP, ROOT),
        label="interpolation",
    )


def multiline_string(delimiter: str = "") -> SpanRule:
    return SpanRule(
        begin=concat(delimiter, '"""'),
        end=concat('"""', delimiter),
        contains=(string_escape(delimiter), interpolation(delimiter)),
        label="multiline-string",
    )


def single_line_string(delimiter: str = "") -> SpanRule:
    return SpanRule(
        begin=concat(delimiter, '"'),
        end=concat('"', delimiter),
        contains=(string_escape(delimiter), interpolation(delimiter)),
        single_line=True,
        label="string",
    )


def string_constant(delimiter: str = "") -> SpanRule:
    """Single-line string without interpolation (module and import paths)."""
    return SpanRule(
        begin=concat(delimiter, '"'),
        end=concat('"', delimiter),
        contains=(string_escape(delimiter),),
        single_line=True,
        label="string-constant",
    )


# Multi-line openers must be tried before single-line ones: `"""` starts
# with `"`.
STRING = VariantGroup(
    tuple(multiline_string(fence(n)) for n in FENCE_WIDTHS)
    + tuple(single_line_string(fence(n)) for n in FENCE_WIDTHS),
    tag="string",
    label="string",
)

STRING_CONSTANT = VariantGroup(
    tuple(string_constant(fence(n)) for n in FENCE_WIDTHS),
    tag="string",
    label="string-constant",
)

STRING_LABELS = frozenset({"multiline-string", "string", "string-constant"})
