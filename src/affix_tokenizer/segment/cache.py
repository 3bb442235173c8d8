# src/affix_tokenizer/segment/cache.py
"""
cache.

Does: Memoize SubTokens per whitespace-delimited substring, tagged with the
      exception-table generation they were computed under. A generation
      change empties the cache lazily on the next access, and a `put` that
      carries an older generation is dropped.
Used by: Tokenizer (shared across pipe workers).
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from affix_tokenizer.segment.exceptions_table import ExceptionTable
from affix_tokenizer.types import SubTokens

__all__ = ["SegmentationCache"]

logger = logging.getLogger(__name__)


class SegmentationCache:
    """Substring -> SubTokens. Unbounded unless `max_size` is given (LRU)."""

    def __init__(self, exceptions: ExceptionTable, max_size: int | None = None):
        if max_size is not None and max_size < 1:
            raise ValueError(f"max_size must be positive or None, got {max_size}")
        self._exceptions = exceptions
        self._max_size = max_size
        self._data: OrderedDict[str, SubTokens] = OrderedDict()
        self._generation = exceptions.generation
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    @property
    def max_size(self) -> int | None:
        return self._max_size

    def _sync_generation(self) -> None:
        # caller holds the lock
        current = self._exceptions.generation
        if current != self._generation:
            dropped = len(self._data)
            self._data.clear()
            self._generation = current
            logger.debug("Exception table changed (generation %d); dropped %d cached entries", current, dropped)

    def get(self, substring: str) -> SubTokens | None:
        with self._lock:
            self._sync_generation()
            tokens = self._data.get(substring)
            if tokens is None:
                self.misses += 1
                return None
            self.hits += 1
            if self._max_size is not None:
                self._data.move_to_end(substring)
            return tokens

    def put(self, substring: str, tokens: SubTokens, generation: int | None = None) -> bool:
        """Store `tokens`; returns False when `generation` is already stale."""
        with self._lock:
            self._sync_generation()
            if generation is not None and generation != self._generation:
                return False
            self._data[substring] = tokens
            if self._max_size is not None:
                self._data.move_to_end(substring)
                while len(self._data) > self._max_size:
                    self._data.popitem(last=False)
            return True

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            self._sync_generation()
            return len(self._data)

    def __contains__(self, substring: object) -> bool:
        with self._lock:
            self._sync_generation()
            return substring in self._data
