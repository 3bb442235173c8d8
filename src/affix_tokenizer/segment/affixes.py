# src/affix_tokenizer/segment/affixes.py
# ──────────────────────────────────────────────────────────────
# Affix-stripping engine
# Segments one whitespace-free substring with prefix/suffix loops,
# special-case lookups and infix splitting.
# ──────────────────────────────────────────────────────────────

"""
affixes.

Does: Segment a substring as
      special case → prefix loop → suffix loop → special/token/url match
      → infix split, and reassemble prefixes + core + reversed suffixes.
Returns: segment() → SubTokens; explain_segment() → [(rule, text), ...].
Used by: Tokenizer (through the segmentation cache) and Tokenizer.explain().

Notes:
- The prefix loop always runs to completion before the suffix loop starts.
- A reported affix length L is accepted only when 0 < L < len(remainder);
  0, None and L >= len(remainder) end the loop. Negative lengths and
  non-integer reports are MatcherProtocolViolation.
- Every accepted strip shortens the remainder, so each loop is bounded by
  the substring length; exceeding that bound is also a violation.
"""

from __future__ import annotations

from typing import Any, Optional

from affix_tokenizer.errors import MatcherProtocolViolation
from affix_tokenizer.rules.matchers import AffixMatcher, RuleSet, Span
from affix_tokenizer.segment.exceptions_table import ExceptionTable
from affix_tokenizer.types import SubTokens, TokenDescriptor, surface_of
from affix_tokenizer.utils.log import debug, is_enabled

__all__ = [
    "segment",
    "explain_segment",
    "affix_length",
    "infix_spans",
    "PREFIX",
    "SUFFIX",
    "SPECIAL",
    "INFIX",
    "TOKEN",
    "TOKEN_MATCH",
    "URL_MATCH",
]

# Rule labels reported by explain_segment()
PREFIX = "PREFIX"
SUFFIX = "SUFFIX"
SPECIAL = "SPECIAL"
INFIX = "INFIX"
TOKEN = "TOKEN"
TOKEN_MATCH = "TOKEN_MATCH"
URL_MATCH = "URL_MATCH"

_TRACE_TOPIC = "affixes"

Piece = tuple[str, TokenDescriptor]


# ──────────────────────────────────────────────────────────────
# Matcher result validation
# ──────────────────────────────────────────────────────────────


def affix_length(matcher: AffixMatcher, string: str) -> Optional[int]:
    """
    Does: Call a prefix/suffix matcher and validate what it reports.
    Returns: The raw length (0 and over-long lengths allowed) or None.
    Raises: MatcherProtocolViolation for non-integers and negatives.
    """
    kind = getattr(matcher, "kind", "affix")
    out: Any = matcher(string)
    if out is None:
        return None
    if isinstance(out, bool) or not isinstance(out, int):
        raise MatcherProtocolViolation(
            f"{kind} matcher returned {type(out).__name__} for {string!r}; expected int or None",
            kind=kind,
            string=string,
        )
    if out < 0:
        raise MatcherProtocolViolation(
            f"{kind} matcher reported negative length {out} for {string!r}",
            kind=kind,
            string=string,
        )
    return out


def infix_spans(matcher: Any, string: str) -> list[Span]:
    """Call an infix matcher and check spans are in bounds, sorted and disjoint."""
    spans: list[Span] = []
    prev_end = 0
    for item in matcher(string) or ():
        try:
            start, end = item
        except (TypeError, ValueError) as e:
            raise MatcherProtocolViolation(
                f"infix matcher produced {item!r} for {string!r}; expected (start, end)",
                kind="infix",
                string=string,
            ) from e
        if not all(isinstance(x, int) and not isinstance(x, bool) for x in (start, end)):
            raise MatcherProtocolViolation(
                f"infix span {item!r} is not a pair of ints", kind="infix", string=string
            )
        if not 0 <= start <= end <= len(string) or start < prev_end:
            raise MatcherProtocolViolation(
                f"infix span {item!r} for {string!r} is out of bounds, unsorted or overlapping",
                kind="infix",
                string=string,
            )
        spans.append((start, end))
        prev_end = end
    return spans


# ──────────────────────────────────────────────────────────────
# Walk
# ──────────────────────────────────────────────────────────────


def _halts(remainder: str, rules: RuleSet, exceptions: ExceptionTable) -> bool:
    """True when the remainder must be kept whole (special case or token_match)."""
    if remainder in exceptions:
        return True
    return bool(rules.token_match is not None and rules.token_match(remainder))


def _strip(
    remainder: str,
    matcher: AffixMatcher | None,
    label: str,
    rules: RuleSet,
    exceptions: ExceptionTable,
    out: list[Piece],
) -> tuple[str, bool]:
    """
    Does: Repeatedly strip affixes from one end of `remainder` into `out`.
    Returns: (new remainder, halted) where halted means a special case or
             token_match was exposed and no further stripping may happen.
    """
    if matcher is None:
        return remainder, False
    from_start = label == PREFIX
    budget = len(remainder)
    steps = 0
    while remainder:
        length = affix_length(matcher, remainder)
        if not length or length >= len(remainder):
            break
        steps += 1
        if steps > budget:
            raise MatcherProtocolViolation(
                f"{label.lower()} loop made no progress on {remainder!r}",
                kind=getattr(matcher, "kind", label.lower()),
                string=remainder,
            )
        if from_start:
            piece, remainder = remainder[:length], remainder[length:]
        else:
            piece, remainder = remainder[-length:], remainder[:-length]
        out.append((label, TokenDescriptor(piece)))
        if _halts(remainder, rules, exceptions):
            return remainder, True
    return remainder, False


def _split_core(remainder: str, rules: RuleSet, exceptions: ExceptionTable) -> list[Piece]:
    special = exceptions.lookup(remainder)
    if special is not None:
        return [(SPECIAL, t) for t in special]
    if rules.token_match is not None and rules.token_match(remainder):
        return [(TOKEN_MATCH, TokenDescriptor(remainder))]
    if rules.url_match is not None and rules.url_match(remainder):
        return [(URL_MATCH, TokenDescriptor(remainder))]
    if rules.infix is None:
        return [(TOKEN, TokenDescriptor(remainder))]

    spans = infix_spans(rules.infix, remainder)
    if not spans:
        return [(TOKEN, TokenDescriptor(remainder))]

    pieces: list[Piece] = []
    start = 0
    for infix_start, infix_end in spans:
        if infix_start != start:
            pieces.append((TOKEN, TokenDescriptor(remainder[start:infix_start])))
        # zero-width spans only mark a split point
        if infix_start != infix_end:
            pieces.append((INFIX, TokenDescriptor(remainder[infix_start:infix_end])))
        start = infix_end
    if start < len(remainder):
        pieces.append((TOKEN, TokenDescriptor(remainder[start:])))
    return pieces


def _walk(string: str, rules: RuleSet, exceptions: ExceptionTable) -> list[Piece]:
    special = exceptions.lookup(string)
    if special is not None:
        return [(SPECIAL, t) for t in special]
    if rules.token_match is not None and rules.token_match(string):
        return [(TOKEN_MATCH, TokenDescriptor(string))]

    prefixes: list[Piece] = []
    suffixes: list[Piece] = []
    remainder, halted = _strip(string, rules.prefix, PREFIX, rules, exceptions, prefixes)
    if not halted:
        remainder, _ = _strip(remainder, rules.suffix, SUFFIX, rules, exceptions, suffixes)

    core = _split_core(remainder, rules, exceptions) if remainder else []
    pieces = prefixes + core + suffixes[::-1]

    if surface_of(t for _, t in pieces) != string:
        # Only reachable through a matcher reporting inconsistent spans
        raise MatcherProtocolViolation(
            f"segmentation {[t.text for _, t in pieces]!r} does not reproduce {string!r}",
            string=string,
        )
    return pieces


# ──────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────


def segment(string: str, rules: RuleSet, exceptions: ExceptionTable) -> SubTokens:
    """Segment one non-empty, whitespace-free substring."""
    pieces = _walk(string, rules, exceptions)
    if is_enabled(_TRACE_TOPIC):
        debug(f"{string!r} -> {[(label, t.text) for label, t in pieces]!r}", topic=_TRACE_TOPIC)
    return tuple(t for _, t in pieces)


def explain_segment(string: str, rules: RuleSet, exceptions: ExceptionTable) -> list[tuple[str, str]]:
    """Same walk as segment(), reporting which rule produced each token."""
    return [(label, t.text) for label, t in _walk(string, rules, exceptions)]
