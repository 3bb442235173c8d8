# src/affix_tokenizer/rules/matchers.py
# ──────────────────────────────────────────────────────────────
# Pluggable prefix / suffix / infix matchers
# ──────────────────────────────────────────────────────────────
"""
matchers.

Does: Define the matcher capabilities the affix engine consumes and three
      interchangeable families of implementations:
        - regex-backed (compiled patterns, spaCy-style piece lists)
        - literal (longest-literal lookup over a fixed set, no regex)
        - function wrappers (plain callables, re.Match results tolerated)
Returns: AffixMatcher/InfixMatcher protocols, concrete matchers, RuleSet and
         the as_*_matcher() coercers.
Used by: segment.affixes, Tokenizer construction, rules.defaults.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

from spacy.util import compile_infix_regex, compile_prefix_regex, compile_suffix_regex

__all__ = [
    "AffixMatcher",
    "InfixMatcher",
    "Span",
    "RegexPrefixMatcher",
    "RegexSuffixMatcher",
    "RegexInfixMatcher",
    "LiteralPrefixMatcher",
    "LiteralSuffixMatcher",
    "FunctionAffixMatcher",
    "FunctionInfixMatcher",
    "RuleSet",
    "as_prefix_matcher",
    "as_suffix_matcher",
    "as_infix_matcher",
    "as_predicate",
]

Span = tuple[int, int]
Predicate = Callable[[str], Any]


@runtime_checkable
class AffixMatcher(Protocol):
    """`(string) -> length of the affix found, or None`."""

    kind: str

    def __call__(self, string: str) -> Optional[int]: ...


@runtime_checkable
class InfixMatcher(Protocol):
    """`(string) -> ordered (start, end) spans, non-overlapping`."""

    kind: str

    def __call__(self, string: str) -> list[Span]: ...


def _compile(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    return re.compile(pattern) if isinstance(pattern, str) else pattern


# ──────────────────────────────────────────────────────────────
# Regex family
# ──────────────────────────────────────────────────────────────


class _RegexAffixMatcher:
    kind = "affix"

    def __init__(self, pattern: str | re.Pattern[str]):
        self.pattern = _compile(pattern)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern!r})"


class RegexPrefixMatcher(_RegexAffixMatcher):
    """Prefix match at position 0 (``pattern.match``)."""

    kind = "prefix"

    def __call__(self, string: str) -> Optional[int]:
        m = self.pattern.match(string)
        return None if m is None else m.end()

    @classmethod
    def from_pieces(cls, pieces: Iterable[str]) -> RegexPrefixMatcher:
        return cls(compile_prefix_regex(tuple(pieces)))


class RegexSuffixMatcher(_RegexAffixMatcher):
    """Suffix search: the leftmost match that ends at the end of the string."""

    kind = "suffix"

    def __call__(self, string: str) -> Optional[int]:
        m = self.pattern.search(string)
        # leftmost match that reaches the end of the string
        while m is not None and m.end() != len(string):
            m = self.pattern.search(string, m.start() + 1)
        return None if m is None else m.end() - m.start()

    @classmethod
    def from_pieces(cls, pieces: Iterable[str]) -> RegexSuffixMatcher:
        return cls(compile_suffix_regex(tuple(pieces)))


class RegexInfixMatcher:
    kind = "infix"

    def __init__(self, pattern: str | re.Pattern[str]):
        self.pattern = _compile(pattern)

    @classmethod
    def from_pieces(cls, pieces: Iterable[str]) -> RegexInfixMatcher:
        return cls(compile_infix_regex(tuple(pieces)))

    def __call__(self, string: str) -> list[Span]:
        return [m.span() for m in self.pattern.finditer(string)]

    def __repr__(self) -> str:
        return f"RegexInfixMatcher({self.pattern.pattern!r})"


# ──────────────────────────────────────────────────────────────
# Literal family (no regex; longest literal wins)
# ──────────────────────────────────────────────────────────────


class _LiteralAffixMatcher:
    kind = "affix"

    def __init__(self, literals: Iterable[str]):
        by_len: dict[int, set[str]] = {}
        for lit in literals:
            if lit:
                by_len.setdefault(len(lit), set()).add(lit)
        self._by_len = by_len
        self._lengths = sorted(by_len, reverse=True)

    def _piece(self, string: str, n: int) -> str:
        raise NotImplementedError

    def __call__(self, string: str) -> Optional[int]:
        for n in self._lengths:
            if n <= len(string) and self._piece(string, n) in self._by_len[n]:
                return n
        return None

    def __repr__(self) -> str:
        size = sum(len(v) for v in self._by_len.values())
        return f"{type(self).__name__}(<{size} literals>)"


class LiteralPrefixMatcher(_LiteralAffixMatcher):
    kind = "prefix"

    def _piece(self, string: str, n: int) -> str:
        return string[:n]


class LiteralSuffixMatcher(_LiteralAffixMatcher):
    kind = "suffix"

    def _piece(self, string: str, n: int) -> str:
        return string[-n:]


# ──────────────────────────────────────────────────────────────
# Function wrappers
# ──────────────────────────────────────────────────────────────


class FunctionAffixMatcher:
    """
    Does: Adapt a plain callable. ``re.Match`` results (as returned by a
          bound ``pattern.search``) become their length when they touch the
          stripped end of the string, else no match; anything else is
          passed through untouched for the engine to validate.
    """

    def __init__(self, func: Callable[[str], Any], kind: str):
        self.func = func
        self.kind = kind

    def __call__(self, string: str) -> Any:
        out = self.func(string)
        if isinstance(out, re.Match):
            if self.kind == "prefix" and out.start() != 0:
                return None
            if self.kind == "suffix" and out.end() != len(string):
                return None
            return out.end() - out.start()
        return out

    def __repr__(self) -> str:
        return f"FunctionAffixMatcher({self.func!r}, kind={self.kind!r})"


class FunctionInfixMatcher:
    kind = "infix"

    def __init__(self, func: Callable[[str], Any]):
        self.func = func

    def __call__(self, string: str) -> Any:
        out = self.func(string)
        if out is None:
            return []
        return [m.span() if isinstance(m, re.Match) else m for m in out]

    def __repr__(self) -> str:
        return f"FunctionInfixMatcher({self.func!r})"


# ──────────────────────────────────────────────────────────────
# Coercion
# ──────────────────────────────────────────────────────────────


def _as_affix(obj: Any, kind: str, regex_cls: type) -> Optional[AffixMatcher]:
    if obj is None:
        return None
    if isinstance(obj, (str, re.Pattern)):
        return regex_cls(obj)
    if getattr(obj, "kind", None) == kind and callable(obj):
        return obj
    if callable(obj):
        return FunctionAffixMatcher(obj, kind)
    raise TypeError(f"Unsupported {kind} matcher: {obj!r}")


def as_prefix_matcher(obj: Any) -> Optional[AffixMatcher]:
    return _as_affix(obj, "prefix", RegexPrefixMatcher)


def as_suffix_matcher(obj: Any) -> Optional[AffixMatcher]:
    return _as_affix(obj, "suffix", RegexSuffixMatcher)


def as_infix_matcher(obj: Any) -> Optional[InfixMatcher]:
    if obj is None:
        return None
    if isinstance(obj, (str, re.Pattern)):
        return RegexInfixMatcher(obj)
    if getattr(obj, "kind", None) == "infix" and callable(obj):
        return obj
    if callable(obj):
        return FunctionInfixMatcher(obj)
    raise TypeError(f"Unsupported infix matcher: {obj!r}")


def as_predicate(obj: Any) -> Optional[Predicate]:
    """Patterns become ``pattern.match``; callables are kept as-is."""
    if obj is None:
        return None
    if isinstance(obj, (str, re.Pattern)):
        return _compile(obj).match
    if callable(obj):
        return obj
    raise TypeError(f"Unsupported match predicate: {obj!r}")


@dataclass(frozen=True)
class RuleSet:
    """The matchers a tokenizer segments with. Any of them may be absent."""

    prefix: Optional[AffixMatcher] = None
    suffix: Optional[AffixMatcher] = None
    infix: Optional[InfixMatcher] = None
    token_match: Optional[Predicate] = None
    url_match: Optional[Predicate] = None

    @classmethod
    def build(
        cls,
        prefix: Any = None,
        suffix: Any = None,
        infix: Any = None,
        *,
        token_match: Any = None,
        url_match: Any = None,
    ) -> RuleSet:
        return cls(
            prefix=as_prefix_matcher(prefix),
            suffix=as_suffix_matcher(suffix),
            infix=as_infix_matcher(infix),
            token_match=as_predicate(token_match),
            url_match=as_predicate(url_match),
        )
