# tests/test_rules_matchers.py
from __future__ import annotations

"""
Tests for rules/matchers.py: regex, literal and function matcher families,
their coercion, and RuleSet.build().
"""

import re

import pytest

from affix_tokenizer.rules import matchers as M


@pytest.mark.parametrize("string,expected", [
    ("(hello", 1),
    ("((hello", 1),
    ("hello", None),
    ("", None),
])
def test_regex_prefix(string, expected):
    assert M.RegexPrefixMatcher(r"^\(")(string) == expected


def test_regex_prefix_from_pieces_anchors_each_piece():
    m = M.RegexPrefixMatcher.from_pieces(["\\(", "\\$", "``"])
    assert m("``quote") == 2
    assert m("$5") == 1
    assert m("a(") is None


def test_regex_suffix_from_pieces():
    m = M.RegexSuffixMatcher.from_pieces(["\\)", "!", "'s"])
    assert m("it's") == 2
    assert m("wow!") == 1
    assert m("(x") is None


def test_regex_infix_spans():
    m = M.RegexInfixMatcher.from_pieces(["-", "(?<=[a-z])/(?=[a-z])"])
    assert m("and/or-not") == [(3, 4), (6, 7)]
    assert m("plain") == []


@pytest.mark.parametrize("string,expected", [
    ("...and", 3),
    ("..and", 1),
    ("(x", 1),
    ("x", None),
])
def test_literal_prefix_prefers_longest(string, expected):
    assert M.LiteralPrefixMatcher(["(", ".", "..."])(string) == expected


def test_literal_suffix():
    m = M.LiteralSuffixMatcher(["'s", "s", ""])
    assert m("dog's") == 2
    assert m("dogs") == 1
    assert m("dog") is None


def test_function_affix_converts_match_objects():
    m = M.FunctionAffixMatcher(re.compile(r"[!?]+$").search, kind="suffix")
    assert m("what?!") == 2
    assert m("what") is None


def test_function_infix_converts_match_objects():
    m = M.FunctionInfixMatcher(re.compile(r"-").finditer)
    assert m("a-b-c") == [(1, 2), (3, 4)]
    assert M.FunctionInfixMatcher(lambda s: None)("abc") == []


def test_coercion_by_type():
    assert M.as_prefix_matcher(None) is None
    assert isinstance(M.as_prefix_matcher(r"^\("), M.RegexPrefixMatcher)
    assert isinstance(M.as_suffix_matcher(re.compile(r"\)$")), M.RegexSuffixMatcher)
    assert isinstance(M.as_infix_matcher("-"), M.RegexInfixMatcher)
    lit = M.LiteralPrefixMatcher(["("])
    assert M.as_prefix_matcher(lit) is lit
    wrapped = M.as_suffix_matcher(lambda s: 1)
    assert isinstance(wrapped, M.FunctionAffixMatcher) and wrapped.kind == "suffix"
    with pytest.raises(TypeError):
        M.as_infix_matcher(42)


def test_matcher_of_wrong_kind_is_rewrapped():
    # a prefix matcher passed as suffix keeps working but reports as "suffix"
    m = M.as_suffix_matcher(M.LiteralPrefixMatcher(["x"]))
    assert m.kind == "suffix"
    assert m("xa") == 1


def test_ruleset_build_coerces_everything():
    rules = M.RuleSet.build(r"^\(", r"\)$", "-", token_match=r"\d+$", url_match=lambda s: False)
    assert rules.prefix("(a") == 1
    assert rules.suffix("a)") == 1
    assert rules.infix("a-b") == [(1, 2)]
    assert rules.token_match("123")
    assert not rules.url_match("http://x")


@pytest.mark.parametrize("string,expected", [
    ("(a", 1),
    ("a(b", None),
    ("a(", None),
])
def test_unanchored_prefix_pattern_only_matches_at_start(string, expected):
    assert M.RegexPrefixMatcher(r"\(")(string) == expected


@pytest.mark.parametrize("string,expected", [
    ("a!", 1),
    ("a!b", None),
    ("!a", None),
    ("a!!", 1),
    ("a!b!", 1),
])
def test_unanchored_suffix_pattern_only_matches_at_end(string, expected):
    assert M.RegexSuffixMatcher(r"!")(string) == expected


def test_match_objects_away_from_the_edge_are_no_match():
    assert M.FunctionAffixMatcher(re.compile(r"\(").search, kind="prefix")("a(b") is None
    assert M.FunctionAffixMatcher(re.compile(r"!").search, kind="suffix")("a!b") is None
    assert M.FunctionAffixMatcher(re.compile(r"!").search, kind="suffix")("ab!") == 1
