"""Structural declaration rules: headers, imports, definitions, properties."""

from __future__ import annotations

from pklgrammar.primitives import (
    BLOCK_COMMENT,
    IDENTIFIER,
    IDENTIFIER_RE,
    KEYWORDS,
    LINE_COMMENT,
    QUOTED_IDENTIFIER_RE,
    TYPE_NAME,
)
from pklgrammar.rules import SELF, KeywordTable, SpanRule, VariantGroup, match, words
from pklgrammar.strings import STRING, STRING_CONSTANT

_HEADER_WORDS = ("module", "amends", "extends")
# `module.foo` at line start is an expression, not a header
_HEADER_RE = words(*_HEADER_WORDS, suffix=r"\b(?!\.)")

MODULE_DECLARATION = SpanRule(
    begin=rf"^[^\S\n]*{_HEADER_RE}",
    end=r"$",
    tag="meta",
    return_begin=True,
    contains=(match(words(*_HEADER_WORDS), tag="keyword"), STRING_CONSTANT),
    label="module-header",
)

IMPORT_DECLARATION = SpanRule(
    begin=r"\bimport\*?(?=\s)",
    end=r"$",
    tag="meta",
    begin_scope="keyword",
    keywords=KeywordTable.of(keyword=["import", "import*", "as"]),
    contains=(STRING_CONSTANT,),
    label="import",
)

ANNOTATION = match(rf"@{IDENTIFIER_RE}", tag="meta", label="annotation")

# `<...>` type argument lists nest: Mapping<String, Listing<Int>>
GENERIC_ARGUMENTS = SpanRule(
    begin=r"<",
    end=r">",
    contains=(SELF, TYPE_NAME, LINE_COMMENT, BLOCK_COMMENT),
    label="generic-arguments",
)

CLASS_DEF = SpanRule(
    begin=words("class"),
    end=r"\{|$",
    tag="class",
    begin_scope="keyword",
    exclude_end=True,
    contains=(match(words("extends"), tag="keyword"), IDENTIFIER, GENERIC_ARGUMENTS),
    label="class",
)

PARAMS = SpanRule(
    begin=r"\(",
    end=r"\)",
    tag="params",
    contains=(LINE_COMMENT, BLOCK_COMMENT, IDENTIFIER),
    label="params",
)

FUNCTION_DEF = SpanRule(
    begin=words("function"),
    end=r"[={]",
    tag="function",
    begin_scope="keyword",
    exclude_end=True,
    contains=(IDENTIFIER, PARAMS),
    label="function",
)

# Right-hand side of a typealias: a type expression up to the end of line
TYPE_EXPRESSION = SpanRule(
    begin=r"=",
    end=r"$",
    tag="type",
    exclude_begin=True,
    contains=(LINE_COMMENT, BLOCK_COMMENT, STRING, GENERIC_ARGUMENTS, TYPE_NAME),
    label="type-expression",
)

TYPEALIAS_DEF = SpanRule(
    begin=words("typealias"),
    end=r"$",
    tag="type",
    begin_scope="keyword",
    contains=(IDENTIFIER, TYPE_EXPRESSION),
    label="typealias",
)

TYPE_REFERENCE = SpanRule(
    begin=r":[^\S\n]*",
    end=r"(?=[=,)\]}]|$)",
    tag="type",
    exclude_begin=True,
    contains=(TYPE_NAME, LINE_COMMENT, BLOCK_COMMENT),
    label="type-reference",
)

PROPERTY_ACCESS = VariantGroup(
    (
        match(r"\.|\?\.", r"\s*", QUOTED_IDENTIFIER_RE, scopes={3: "property"}),
        match(r"\.|\?\.", r"\s*", IDENTIFIER_RE, scopes={3: "property"}),
    ),
    label="property-access",
)

# `==` is a comparison, not an assignment
_DECLARATION_LOOKAHEAD = r"(?=[:{]|=(?!=))"

_RESERVED_RE = words(
    *sorted(w for ws in KEYWORDS.words.values() for w in ws if w.isidentifier())
)
# `new {`, `else {` and the type in `new Listing {` are expressions
_DECLARED_NAME_RE = rf"(?<!\bnew\s)(?!{_RESERVED_RE}){IDENTIFIER_RE}"

OBJECT_PROPERTY = VariantGroup(
    (
        match(QUOTED_IDENTIFIER_RE, r"\s*", _DECLARATION_LOOKAHEAD, scopes={1: "attr"}),
        match(_DECLARED_NAME_RE, r"\s*", _DECLARATION_LOOKAHEAD, scopes={1: "attr"}),
    ),
    label="object-property",
)
