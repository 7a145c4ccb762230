"""Test identifiers, back-quoted names, keywords and literals."""

import pytest
from pygments.token import Keyword, Name, Number, Text

from .conftest import assert_no_type, assert_pairs, find_values


class TestQuotedIdentifiers:
    def test_declared(self, lex):
        assert_pairs(
            lex("`my class` = 1"),
            [(Name.Attribute, "`my class`"), (Text, " = "), (Number, "1")],
        )

    def test_bare(self, lex):
        assert_pairs(lex("`my class`"), [(Name, "`my class`")])

    def test_keyword_spelling(self, lex):
        tokens = lex("`class` = 1")
        assert find_values(tokens, Name.Attribute) == ["`class`"]
        assert_no_type(tokens, Keyword)

    def test_accessed(self, lex):
        assert_pairs(lex("foo.`my prop`"), [(Text, "foo."), (Name.Property, "`my prop`")])


class TestPlainIdentifiers:
    def test_ordinary_word_is_text(self, lex):
        assert_pairs(lex("foo"), [(Text, "foo")])

    def test_underscore_and_digits(self, lex):
        assert_pairs(lex("_foo_2 = 1")[:1], [(Name.Attribute, "_foo_2")])

    def test_keyword_prefix_is_not_keyword(self, lex):
        assert_no_type(lex("classes + iffy"), Keyword)


class TestKeywords:
    @pytest.mark.parametrize("word", ["local", "hidden", "new", "let", "when", "throw", "this"])
    def test_keyword(self, lex, word):
        assert find_values(lex(f"{word} x"), Keyword) == [word]

    def test_conditional(self, lex):
        tokens = lex("if (true) null else false")
        assert find_values(tokens, Keyword) == ["if", "else"]
        assert find_values(tokens, Keyword.Constant) == ["true", "null", "false"]

    def test_nothing_literal(self, lex):
        assert find_values(lex("x = nothing"), Keyword.Constant) == ["nothing"]

    @pytest.mark.parametrize("word", ["read?", "read*"])
    def test_read_variants(self, lex, word):
        tokens = lex(f'{word}("env:HOME")')
        assert find_values(tokens, Keyword) == [word]

    def test_null_safe_access(self, lex):
        assert_pairs(lex("foo?.bar"), [(Text, "foo?."), (Name.Property, "bar")])

    def test_non_null_operator(self, lex):
        assert_pairs(lex("foo?? 1")[:1], [(Text, "foo?? ")])
