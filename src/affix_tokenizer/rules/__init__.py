# src/affix_tokenizer/rules/__init__.py
"""
rules.

Does: Expose matcher protocols/implementations and spaCy-derived defaults.
"""

from __future__ import annotations

from .defaults import load_special_cases, spacy_rules, spacy_special_cases
from .matchers import (
    AffixMatcher,
    FunctionAffixMatcher,
    FunctionInfixMatcher,
    InfixMatcher,
    LiteralPrefixMatcher,
    LiteralSuffixMatcher,
    RegexInfixMatcher,
    RegexPrefixMatcher,
    RegexSuffixMatcher,
    RuleSet,
)

__all__ = [
    "AffixMatcher",
    "InfixMatcher",
    "RegexPrefixMatcher",
    "RegexSuffixMatcher",
    "RegexInfixMatcher",
    "LiteralPrefixMatcher",
    "LiteralSuffixMatcher",
    "FunctionAffixMatcher",
    "FunctionInfixMatcher",
    "RuleSet",
    "spacy_rules",
    "spacy_special_cases",
    "load_special_cases",
]
