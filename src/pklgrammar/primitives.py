"""Primitive matchers: identifiers, numeric literals, comments, reserved words."""

from __future__ import annotations

from pklgrammar.rules import KeywordTable, SpanRule, VariantGroup, match

IDENTIFIER_RE = r"[a-zA-Z_][a-zA-Z0-9_]*"
# Back-quoted identifiers may contain any text except a back-quote
QUOTED_IDENTIFIER_RE = r"`[^`]+`"

NORMAL_IDENTIFIER = match(IDENTIFIER_RE, tag="title")
QUOTED_IDENTIFIER = match(QUOTED_IDENTIFIER_RE, tag="title")

IDENTIFIER = VariantGroup((NORMAL_IDENTIFIER, QUOTED_IDENTIFIER), tag="title", label="identifier")

# Type names share the identifier shape but classify as types
TYPE_NAME = VariantGroup(
    (match(IDENTIFIER_RE), match(QUOTED_IDENTIFIER_RE)), tag="type", label="type-name"
)

_DECIMAL_DIGITS = r"(?:[0-9]_*)+"
_HEX_DIGITS = r"(?:[0-9a-fA-F]_*)+"

NUMBER = VariantGroup(
    (
        # decimal floating-point (subsumes decimal integers)
        match(
            rf"\b{_DECIMAL_DIGITS}(?:\.{_DECIMAL_DIGITS})?(?:[eE][+-]?{_DECIMAL_DIGITS})?\b"
        ),
        # hexadecimal floating-point (subsumes hexadecimal integers)
        match(rf"\b0x{_HEX_DIGITS}(?:\.{_HEX_DIGITS})?(?:[pP][+-]?{_DECIMAL_DIGITS})?\b"),
        match(r"\b0o(?:[0-7]_*)+\b"),
        match(r"\b0b(?:[01]_*)+\b"),
    ),
    tag="number",
    label="number",
)

DOC_COMMENT = SpanRule(begin=r"///", end=r"$", tag="doctag", label="doc-comment")
LINE_COMMENT = SpanRule(begin=r"//", end=r"$", tag="comment", label="line-comment")
BLOCK_COMMENT = SpanRule(begin=r"/\*", end=r"\*/", tag="comment", label="block-comment")

# Reserved words; the engine matches them on identifier-shaped lexemes
KEYWORDS = KeywordTable.of(
    keyword=[
        "abstract",
        "amends",
        "as",
        "case",
        "class",
        "const",
        "delete",
        "else",
        "extends",
        "external",
        "fixed",
        "for",
        "function",
        "hidden",
        "if",
        "import",
        "import*",
        "in",
        "is",
        "let",
        "local",
        "module",
        "new",
        "open",
        "out",
        "outer",
        "override",
        "protected",
        "read",
        "read*",
        "read?",
        "record",
        "super",
        "switch",
        "this",
        "throw",
        "trace",
        "typealias",
        "unknown",
        "vararg",
        "when",
    ],
    literal=["true", "false", "null", "nothing"],
)
