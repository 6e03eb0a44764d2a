"""Tests for the greed-swapping and octal pattern rewrites."""

import pytest

from sedbot.commands.pattern import expand_octal, swap_greed


class TestSwapGreed:
    @pytest.mark.parametrize("pattern, expected", [
        ("a*", "a*?"),
        ("a+", "a+?"),
        ("a?", "a??"),
        ("a{2}", "a{2}?"),
        ("a{2,}", "a{2,}?"),
        ("a{2,3}", "a{2,3}?"),
        ("a{,3}", "a{,3}?"),
    ])
    def test_greedy_becomes_lazy(self, pattern, expected):
        assert swap_greed(pattern) == expected

    @pytest.mark.parametrize("pattern, expected", [
        ("a*?", "a*"),
        ("a+?b", "a+b"),
        ("a{2,3}?", "a{2,3}"),
    ])
    def test_lazy_becomes_greedy(self, pattern, expected):
        assert swap_greed(pattern) == expected

    def test_group_openers_are_not_quantifiers(self):
        assert swap_greed("(?:ab)*") == "(?:ab)*?"
        assert swap_greed("(?P<word>a)+") == "(?P<word>a)+?"

    def test_character_classes_untouched(self):
        assert swap_greed("[*+?]") == "[*+?]"
        assert swap_greed("[]*]+") == "[]*]+?"
        assert swap_greed("[^]?]") == "[^]?]"

    def test_escapes_untouched(self):
        assert swap_greed(r"\*\+\?") == r"\*\+\?"

    def test_literal_brace_untouched(self):
        assert swap_greed("a{x}") == "a{x}"

    def test_possessive_untouched(self):
        assert swap_greed("a*+") == "a*+"

    def test_mixed(self):
        assert swap_greed("a+b?c*?") == "a+?b??c*"

    def test_inline_comment_untouched(self):
        assert swap_greed("a(?#x*)b*") == "a(?#x*)b*?"

    def test_verbose_whitespace_before_lazy_marker(self):
        assert swap_greed("a+ ?", verbose=True) == "a+ "

    def test_verbose_comment_untouched(self):
        assert swap_greed("a+ # note*\n b", verbose=True) == "a+? # note*\n b"

    def test_whitespace_significant_without_verbose(self):
        assert swap_greed("a+ ?") == "a+? ??"


class TestExpandOctal:
    def test_three_digits(self):
        assert expand_octal(r"\141") == "a"

    def test_sequence(self):
        assert expand_octal(r"\101\102") == "AB"

    def test_special_character_escaped(self):
        assert expand_octal(r"\52") == r"\*"

    def test_at_most_three_digits(self):
        assert expand_octal(r"\1234") == "S4"

    def test_escaped_backslash_untouched(self):
        assert expand_octal(r"\\141") == r"\\141"

    def test_non_octal_digit_untouched(self):
        assert expand_octal(r"\8") == r"\8"

    def test_other_escapes_untouched(self):
        assert expand_octal(r"\d+\.") == r"\d+\."
