"""Root assembly of the Pkl grammar."""

from __future__ import annotations

from pklgrammar.declarations import (
    ANNOTATION,
    CLASS_DEF,
    FUNCTION_DEF,
    IMPORT_DECLARATION,
    MODULE_DECLARATION,
    OBJECT_PROPERTY,
    PROPERTY_ACCESS,
    TYPE_REFERENCE,
    TYPEALIAS_DEF,
)
from pklgrammar.primitives import (
    BLOCK_COMMENT,
    DOC_COMMENT,
    KEYWORDS,
    LINE_COMMENT,
    NUMBER,
    QUOTED_IDENTIFIER,
)
from pklgrammar.registry import register_language
from pklgrammar.rules import Language
from pklgrammar.strings import STRING


def build_grammar() -> Language:
    """Assemble the root rule set.

    Order matters: the engine tries rules in sequence at each position, so
    comments come first, then line-anchored headers, then definitions and
    property forms, and plain strings and numbers last.
    """
    return Language(
        name="Pkl",
        aliases=("pkl",),
        contains=(
            DOC_COMMENT,
            LINE_COMMENT,
            BLOCK_COMMENT,
            MODULE_DECLARATION,
            IMPORT_DECLARATION,
            ANNOTATION,
            CLASS_DEF,
            FUNCTION_DEF,
            TYPEALIAS_DEF,
            PROPERTY_ACCESS,
            TYPE_REFERENCE,
            OBJECT_PROPERTY,
            STRING,
            NUMBER,
            # a back-quoted name is one identifier even if it spells a keyword
            QUOTED_IDENTIFIER,
        ),
        keywords=KEYWORDS,
        filenames=("*.pkl", "PklProject"),
        mimetypes=("text/x-pkl",),
    )


PKL: Language = build_grammar()
register_language(PKL)
