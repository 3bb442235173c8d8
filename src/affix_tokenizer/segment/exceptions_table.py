# src/affix_tokenizer/segment/exceptions_table.py
"""
exceptions_table.

Does: Hold special-case segmentations (literal string -> SubTokens), validate
      them on insertion, and count mutations in a generation number that the
      segmentation cache compares against.
Used by: segment.affixes (lookups), segment.cache (generation), Tokenizer.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping

from affix_tokenizer.errors import ConfigurationError
from affix_tokenizer.types import DescriptorLike, SubTokens, coerce_sub_tokens, surface_of

__all__ = ["ExceptionTable", "validate_special_case"]

logger = logging.getLogger(__name__)


def validate_special_case(string: str, token_attrs: Iterable[DescriptorLike]) -> SubTokens:
    """
    Does: Coerce `token_attrs` and check it is a legal segmentation of `string`.
    Returns: SubTokens ready for storage.
    Raises: ConfigurationError on any violation.
    """
    if not isinstance(string, str) or not string:
        raise ConfigurationError(f"Special case key must be a non-empty string, got {string!r}")
    if any(ch.isspace() for ch in string):
        raise ConfigurationError(f"Special case {string!r} contains whitespace and can never match")
    tokens = coerce_sub_tokens(token_attrs)
    if not tokens:
        raise ConfigurationError(f"Special case {string!r} has no tokens")
    if any(not t.text for t in tokens):
        raise ConfigurationError(f"Special case {string!r} contains an empty token")
    joined = surface_of(tokens)
    if joined != string:
        raise ConfigurationError(
            f"Special case tokens {[t.text for t in tokens]!r} join to {joined!r}, not {string!r}"
        )
    return tokens


class ExceptionTable:
    """Exact-match special cases. Reads are lock-free dict lookups; writes lock."""

    def __init__(self, entries: Mapping[str, Iterable[DescriptorLike]] | None = None):
        self._entries: dict[str, SubTokens] = {}
        self._lock = threading.RLock()
        self._generation = 0
        if entries:
            self.update(entries)

    @property
    def generation(self) -> int:
        return self._generation

    def lookup(self, string: str) -> SubTokens | None:
        return self._entries.get(string)

    def __contains__(self, string: object) -> bool:
        return string in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def items(self) -> list[tuple[str, SubTokens]]:
        return list(self._entries.items())

    def insert(self, string: str, token_attrs: Iterable[DescriptorLike]) -> SubTokens:
        tokens = validate_special_case(string, token_attrs)
        with self._lock:
            self._entries[string] = tokens
            self._generation += 1
        logger.debug("Special case %r -> %r (generation %d)", string, [t.text for t in tokens], self._generation)
        return tokens

    def update(self, entries: Mapping[str, Iterable[DescriptorLike]]) -> None:
        """All-or-nothing bulk insert with a single generation bump."""
        validated = {key: validate_special_case(key, value) for key, value in entries.items()}
        if not validated:
            return
        with self._lock:
            self._entries.update(validated)
            self._generation += 1
        logger.debug("Loaded %d special cases (generation %d)", len(validated), self._generation)

    def remove(self, string: str) -> None:
        with self._lock:
            del self._entries[string]
            self._generation += 1
        logger.debug("Removed special case %r (generation %d)", string, self._generation)
