"""Test string interpolation, nesting, and parenthesis balancing."""

import pytest
from pygments.token import Keyword, Name, Number, String, Text

from .conftest import assert_no_type, assert_pairs, find_values

WIDTHS = [0, 1, 2, 3]


class TestBasicInterpolation:
    def test_identifier(self, lex):
        tokens = lex('"a \\(name) b"')
        assert_pairs(
            tokens,
            [
                (String, '"a '),
                (String.Interpol, "\\("),
                (Text, "name"),
                (String.Interpol, ")"),
                (String, ' b"'),
            ],
        )

    def test_full_grammar_inside(self, lex):
        tokens = lex('"\\(if (x) 1 else foo.bar)"')
        assert find_values(tokens, Keyword) == ["if", "else"]
        assert find_values(tokens, Number) == ["1"]
        assert find_values(tokens, Name.Property) == ["bar"]

    def test_multiline(self, lex):
        tokens = lex('"""\nhello \\(name)\n"""')
        assert find_values(tokens, String.Interpol) == ["\\(", ")"]


class TestFencedInterpolation:
    @pytest.mark.parametrize("width", WIDTHS)
    def test_matching_fence(self, lex, width):
        f = "#" * width
        tokens = lex(f'{f}"x \\{f}(foo("a")) y"{f}')
        assert_pairs(
            tokens,
            [
                (String, f'{f}"x '),
                (String.Interpol, f"\\{f}("),
                (Text, "foo"),
                (String.Interpol, "("),
                (String, '"a"'),
                (String.Interpol, "))"),
                (String, f' y"{f}'),
            ],
        )

    @pytest.mark.parametrize("width", WIDTHS)
    def test_nested_string_of_other_width(self, lex, width):
        f = "#" * width
        g = "#" * ((width + 1) % 4)
        tokens = lex(f'{f}"\\{f}({g}"in)"{g})"{f}')
        assert_pairs(
            tokens,
            [
                (String, f'{f}"'),
                (String.Interpol, f"\\{f}("),
                (String, f'{g}"in)"{g}'),
                (String.Interpol, ")"),
                (String, f'"{f}'),
            ],
        )

    @pytest.mark.parametrize("width", WIDTHS)
    def test_nested_string_of_same_width(self, lex, width):
        f = "#" * width
        tokens = lex(f'{f}"\\{f}({f}"in"{f})"{f}')
        assert find_values(tokens, String.Interpol) == [f"\\{f}(", ")"]
        assert tokens[-1].value == f'"{f}'

    @pytest.mark.parametrize("width", [1, 2, 3])
    def test_unfenced_interpolation_is_text(self, lex, width):
        f = "#" * width
        source = f'{f}"\\(x)"{f}'
        assert_pairs(lex(source), [(String, source)])

    def test_too_many_fences_is_text(self, lex):
        source = '#"\\##(x)"#'
        assert_pairs(lex(source), [(String, source)])


class TestInterpolationBalancing:
    def test_nested_parens(self, lex):
        tokens = lex('"\\(f((1), (2))) end"')
        assert tokens[-1].value == ' end"'
        assert find_values(tokens, Number) == ["1", "2"]

    def test_string_constant_has_no_interpolation(self, lex):
        tokens = lex('import "a\\(b).pkl"')
        assert_no_type(tokens, String.Interpol)
        assert find_values(tokens, String) == ['"a\\(b).pkl"']
