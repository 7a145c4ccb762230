"""Test token positions, coalescing, unterminated strings and lexer variants."""

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import include
from pygments.plugin import find_plugin_lexers
from pygments.token import Error, Name, Text

import pklgrammar
from pklgrammar import PKL
from pklgrammar.engine import compile_states
from pklgrammar.lexer import PklLexer, lexer_class, tokenize, unterminated_strings
from pklgrammar.tokens import Position, PositionTracker

from .conftest import assert_no_type, find_values


class TestPositions:
    def test_first_token(self, lex):
        tokens = lex("foo = 1")
        assert tokens[0].span.start == Position(1, 1, 0)
        assert tokens[0].span.end == Position(1, 4, 3)

    def test_second_line(self, lex):
        tokens = lex("a = 1\nbar = 2")
        bar = next(t for t in tokens if t.value == "bar")
        assert bar.span.start.line == 2
        assert bar.span.start.column == 1
        assert bar.span.start.offset == 6

    def test_multiline_token_end(self, lex):
        tokens = lex('"""\nab\n"""')
        assert tokens[0].span.end == Position(3, 4, 10)

    def test_tracker_columns(self):
        tracker = PositionTracker("ab\ncd")
        assert tracker.at(0) == Position(1, 1, 0)
        assert tracker.at(1) == Position(1, 2, 1)
        assert tracker.at(3) == Position(2, 1, 3)
        assert tracker.at(5) == Position(2, 3, 5)


class TestCoalescing:
    def test_adjacent_same_type_merged(self, lex):
        tokens = lex("a + b")
        assert [(t.type, t.value) for t in tokens] == [(Text, "a + b")]

    def test_no_empty_tokens(self, lex):
        tokens = lex('x = "abc')
        assert all(t.value for t in tokens)
        assert_no_type(tokens, Error)

    def test_values_cover_source(self, lex):
        source = 'amends "a.pkl"\nclass A { b: Int = 1 } // c\n'
        assert "".join(t.value for t in lex(source)) == source


class TestUnterminatedStrings:
    def test_reported_at_line_end(self):
        assert unterminated_strings('x = "abc\ny = 1') == [Position(1, 9, 8)]

    def test_code_after_recovers(self, lex):
        tokens = lex('x = "abc\ny = 1')
        assert find_values(tokens, Name.Attribute) == ["x", "y"]

    def test_terminated(self):
        assert unterminated_strings('x = "abc"\n') == []

    def test_multiline_string_not_reported(self):
        assert unterminated_strings('x = """\nabc') == []


class TestLexerVariants:
    def test_default_class(self):
        assert lexer_class() is PklLexer
        assert lexer_class({}) is PklLexer

    def test_tag_override(self):
        lexer = lexer_class({"attr": Name.Variable})()
        tokens = tokenize("foo = 1", lexer)
        assert tokens[0].type is Name.Variable

    def test_override_leaves_base_untouched(self):
        lexer_class({"attr": Name.Variable})
        assert tokenize("foo = 1")[0].type is Name.Attribute

    def test_metadata(self):
        assert PklLexer.name == "Pkl"
        assert "pkl" in PklLexer.aliases
        assert "*.pkl" in PklLexer.filenames


class TestPackageHighlight:
    def test_html_default(self):
        html = pklgrammar.highlight("foo = 1\n")
        assert '<span class="na">foo</span>' in html

    def test_custom_formatter(self):
        html = pklgrammar.highlight("foo = 1\n", HtmlFormatter(nowrap=True))
        assert not html.startswith("<div")

    def test_matches_pygments_highlight(self):
        source = "x = 1\n"
        expected = pygments_highlight(source, PklLexer(), HtmlFormatter())
        assert pklgrammar.highlight(source) == expected


class TestPygmentsPlugin:
    """Requires the package to be installed so its entry point is registered."""

    def test_entry_point(self):
        found = [(cls.__module__, cls.__name__) for cls in find_plugin_lexers()]
        assert ("pklgrammar.lexer", "PklLexer") in found


class TestCompiledStates:
    def test_entry_shapes(self):
        states = compile_states(PKL)
        assert "root" in states
        for entries in states.values():
            for entry in entries:
                if isinstance(entry, include):
                    assert str(entry) in states
                    continue
                assert isinstance(entry, tuple)
                assert len(entry) in (2, 3)
                assert isinstance(entry[0], str)
                if len(entry) == 3:
                    assert entry[2] == "#pop" or entry[2] in states
