"""Test string escapes and their fence matching."""

import pytest
from pygments.token import String

from .conftest import assert_no_type, assert_pairs, find_values

WIDTHS = [0, 1, 2, 3]


class TestSimpleEscapes:
    @pytest.mark.parametrize("code", ["0", "\\", "t", "n", "r", '"', "'"])
    def test_escape_code(self, lex, code):
        tokens = lex(f'"a\\{code}b"')
        assert_pairs(
            tokens,
            [(String, '"a'), (String.Escape, f"\\{code}"), (String, 'b"')],
        )

    def test_unknown_code_is_text(self, lex):
        tokens = lex('"a\\qb"')
        assert_pairs(tokens, [(String, '"a\\qb"')])

    def test_escaped_quote_does_not_close(self, lex):
        tokens = lex('"say \\"hi\\""')
        assert find_values(tokens, String.Escape) == ['\\"', '\\"']
        assert tokens[-1].value.endswith('"')


class TestUnicodeEscapes:
    @pytest.mark.parametrize("digits", ["0", "e9", "1F600", "0010FFFF"])
    def test_unicode(self, lex, digits):
        tokens = lex(f'"\\u{{{digits}}}"')
        assert find_values(tokens, String.Escape) == [f"\\u{{{digits}}}"]

    def test_too_many_digits(self, lex):
        tokens = lex('"\\u{123456789}"')
        assert_no_type(tokens, String.Escape)

    def test_no_braces(self, lex):
        tokens = lex('"\\u0041"')
        assert_no_type(tokens, String.Escape)


class TestFencedEscapes:
    @pytest.mark.parametrize("width", WIDTHS)
    def test_matching_fence(self, lex, width):
        f = "#" * width
        tokens = lex(f'{f}"a\\{f}nb"{f}')
        assert find_values(tokens, String.Escape) == [f"\\{f}n"]

    @pytest.mark.parametrize("width", WIDTHS)
    def test_matching_fence_multiline(self, lex, width):
        f = "#" * width
        tokens = lex(f'{f}"""\n\\{f}t\n"""{f}')
        assert find_values(tokens, String.Escape) == [f"\\{f}t"]

    @pytest.mark.parametrize(
        "width,used",
        [(w, u) for w in WIDTHS for u in WIDTHS if u != w],
    )
    def test_other_fence_is_text(self, lex, width, used):
        f = "#" * width
        g = "#" * used
        source = f'{f}"a\\{g}nb"{f}'
        assert_pairs(lex(source), [(String, source)])

    @pytest.mark.parametrize("width", [1, 2, 3])
    def test_unicode_needs_fence(self, lex, width):
        f = "#" * width
        tokens = lex(f'{f}"\\u{{41}} \\{f}u{{41}}"{f}')
        assert find_values(tokens, String.Escape) == [f"\\{f}u{{41}}"]
