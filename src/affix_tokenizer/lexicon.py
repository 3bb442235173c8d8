# src/affix_tokenizer/lexicon.py
"""
lexicon.

Does: Intern surface strings and expose shared per-string attributes
      (rank, shape, vector presence, a few lexical flags). Interning goes
      through spaCy's StringStore; flags come from spacy.lang.lex_attrs.
Returns: LexemeAttrs records, one per distinct string, via
         Lexicon.intern_and_get_attributes().
Used by: Tokenizer, which attaches the record to every produced token.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from spacy.lang import lex_attrs
from spacy.strings import StringStore

__all__ = ["LexemeAttrs", "AttributeStore", "Lexicon"]


@dataclass(frozen=True)
class LexemeAttrs:
    orth: int
    rank: int
    text: str
    lower: str
    shape: str
    is_alpha: bool
    is_digit: bool
    is_punct: bool
    like_num: bool
    like_url: bool
    has_vector: bool


class AttributeStore(Protocol):
    def intern_and_get_attributes(self, string: str) -> LexemeAttrs: ...


class Lexicon:
    """Thread-safe intern table. Records never change once created."""

    def __init__(self, vector_keys: Iterable[str] | None = None):
        self._strings = StringStore()
        self._records: dict[str, LexemeAttrs] = {}
        self._vector_keys = frozenset(vector_keys or ())
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, string: object) -> bool:
        return string in self._records

    def intern_and_get_attributes(self, string: str) -> LexemeAttrs:
        record = self._records.get(string)
        if record is not None:
            return record
        with self._lock:
            record = self._records.get(string)
            if record is None:
                record = LexemeAttrs(
                    orth=self._strings.add(string),
                    rank=len(self._records),
                    text=string,
                    lower=string.lower(),
                    shape=lex_attrs.word_shape(string),
                    is_alpha=string.isalpha(),
                    is_digit=string.isdigit(),
                    is_punct=lex_attrs.is_punct(string),
                    like_num=lex_attrs.like_num(string),
                    like_url=lex_attrs.like_url(string),
                    has_vector=string in self._vector_keys,
                )
                self._records[string] = record
        return record

    def strings(self) -> list[str]:
        """Interned strings in rank order."""
        return list(self._records)
