# src/affix_tokenizer/errors.py
"""
errors.

Does: Exception taxonomy for tokenizer configuration, matcher misbehaviour
      and malformed input. Each class also subclasses the closest built-in so
      callers can catch either.
"""

from __future__ import annotations

__all__ = [
    "TokenizerError",
    "ConfigurationError",
    "MatcherProtocolViolation",
    "MalformedInputError",
]


class TokenizerError(Exception):
    """Base class for every error raised by the tokenizer."""


class ConfigurationError(TokenizerError, ValueError):
    """A special case was rejected; the exception table is left unchanged."""


class MatcherProtocolViolation(TokenizerError, RuntimeError):
    """A prefix/suffix/infix matcher broke its contract.

    Signals a misconfigured rule set, never retried.
    """

    def __init__(self, message: str, *, kind: str | None = None, string: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.string = string


class MalformedInputError(TokenizerError, TypeError):
    """`tokenize`/`pipe` received something that is not text."""
