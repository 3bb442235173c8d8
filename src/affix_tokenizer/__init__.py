"""
affix_tokenizer
===============

Does: Rule-based tokenizer: whitespace split, ordered prefix/suffix
      stripping, infix splitting and special-case exceptions, with a
      memoizing per-substring cache and an order-preserving batch pipe.
Exports: Tokenizer, Document, Token, TokenDescriptor, RuleSet, Lexicon,
         TokenizerSettings and the error classes.
"""

from .doc import Document, Token
from .errors import (
    ConfigurationError,
    MalformedInputError,
    MatcherProtocolViolation,
    TokenizerError,
)
from .lexicon import LexemeAttrs, Lexicon
from .rules.matchers import RuleSet
from .settings import TokenizerSettings, load_settings
from .tokenizer import Tokenizer
from .types import TokenDescriptor

__all__ = [
    "Tokenizer",
    "Document",
    "Token",
    "TokenDescriptor",
    "RuleSet",
    "Lexicon",
    "LexemeAttrs",
    "TokenizerSettings",
    "load_settings",
    "TokenizerError",
    "ConfigurationError",
    "MatcherProtocolViolation",
    "MalformedInputError",
]
__docformat__ = "google"
