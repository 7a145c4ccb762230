"""Lexical grammar for the Pkl configuration language."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pklgrammar.grammar import PKL, build_grammar
from pklgrammar.registry import get_language, register_language

if TYPE_CHECKING:
    from pygments.formatter import Formatter

__version__ = "0.1.0"

__all__ = ["PKL", "build_grammar", "get_language", "highlight", "register_language"]


def highlight(source: str, formatter: Formatter | None = None) -> str:
    """Highlight Pkl source, as HTML unless another Pygments formatter is given."""
    from pygments import highlight as pygments_highlight
    from pygments.formatters import HtmlFormatter

    from pklgrammar.lexer import PklLexer

    return pygments_highlight(source, PklLexer(), formatter or HtmlFormatter())
