# src/affix_tokenizer/rules/defaults.py
"""
defaults.

Does: Build ready-made rule sets from spaCy's per-language punctuation and
      tokenizer-exception tables, and read project-level special cases from
      <data>/special_cases.json.
Returns: spacy_rules(lang) → RuleSet; spacy_special_cases(lang) → mapping;
         load_special_cases(name) → mapping.
Used by: Tokenizer.from_settings().
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from spacy.symbols import NORM, ORTH
from spacy.util import get_lang_class

from affix_tokenizer.rules.matchers import (
    RegexInfixMatcher,
    RegexPrefixMatcher,
    RegexSuffixMatcher,
    RuleSet,
)
from affix_tokenizer.utils.load_config import ConfigFileNotFound, DataDirNotFound, load_config

__all__ = ["spacy_rules", "spacy_special_cases", "load_special_cases"]

log = logging.getLogger(__name__)

# spaCy attribute symbols → descriptor keys; other symbols are dropped
_SPACY_ATTR_NAMES: dict[int, str] = {ORTH: "text", NORM: "norm"}


def _defaults(lang: str) -> Any:
    return get_lang_class(lang).Defaults


@lru_cache(maxsize=8)
def spacy_rules(lang: str = "en") -> RuleSet:
    """
    Does: Compile spaCy's prefix/suffix/infix pieces for `lang` into regex
          matchers and carry over its token_match/url_match predicates.
    Returns: RuleSet (matchers absent where spaCy defines none).
    """
    d = _defaults(lang)
    rules = RuleSet(
        prefix=RegexPrefixMatcher.from_pieces(d.prefixes) if d.prefixes else None,
        suffix=RegexSuffixMatcher.from_pieces(d.suffixes) if d.suffixes else None,
        infix=RegexInfixMatcher.from_pieces(d.infixes) if d.infixes else None,
        token_match=d.token_match,
        url_match=d.url_match,
    )
    log.debug("Built spaCy rule set for %r", lang)
    return rules


def _convert_spacy_attrs(attrs: Mapping[Any, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in attrs.items():
        name = _SPACY_ATTR_NAMES.get(key) if isinstance(key, int) else str(key).lower()
        if name is not None:
            out[name] = value
    return out


@lru_cache(maxsize=8)
def spacy_special_cases(lang: str = "en") -> Mapping[str, tuple[dict[str, Any], ...]]:
    """spaCy's tokenizer exceptions for `lang`, as descriptor mappings."""
    table = _defaults(lang).tokenizer_exceptions or {}
    converted = {
        string: tuple(_convert_spacy_attrs(attrs) for attrs in substrings)
        for string, substrings in table.items()
        # whitespace entries can never be seen after the whitespace split
        if not any(ch.isspace() for ch in string)
    }
    log.debug("Converted %d spaCy tokenizer exceptions for %r", len(converted), lang)
    return MappingProxyType(converted)


def _validate_special_cases(data: dict[str, Any]) -> dict[str, Any]:
    for key, value in data.items():
        if not isinstance(value, list) or not value:
            raise ValueError(f"special case {key!r} must map to a non-empty list")
        for item in value:
            if not isinstance(item, (str, dict)):
                raise ValueError(f"special case {key!r} has a {type(item).__name__} entry")
    return data


def load_special_cases(name: str = "special_cases") -> dict[str, Any]:
    """
    Does: Read <data>/<name>.json ({string: [token attrs, ...]}).
    Returns: The validated mapping, or {} when no data dir/file exists.
    """
    try:
        return load_config(name, validator=_validate_special_cases)
    except (DataDirNotFound, ConfigFileNotFound) as e:
        log.debug("No project special cases loaded: %s", e)
        return {}
