# src/affix_tokenizer/tokenizer.py
# ──────────────────────────────────────────────────────────────
# Tokenizer
# Whitespace split → cached per-substring segmentation → Document.
# ──────────────────────────────────────────────────────────────

"""
tokenizer.

Does: Split text on whitespace runs, segment each run through the
      generation-tagged cache (affix engine on a miss), and stitch the
      results into a Document with offsets and trailing whitespace.
Returns: Tokenizer with tokenize()/__call__, add_special_case(), find_prefix(),
         find_suffix(), find_infix(), explain(), pipe(), from_settings().
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from affix_tokenizer.doc import Document, Token
from affix_tokenizer.errors import MalformedInputError
from affix_tokenizer.lexicon import AttributeStore, LexemeAttrs, Lexicon
from affix_tokenizer.pipe import ordered_map
from affix_tokenizer.rules.defaults import load_special_cases, spacy_rules, spacy_special_cases
from affix_tokenizer.rules.matchers import RuleSet, Span
from affix_tokenizer.segment.affixes import affix_length, explain_segment, infix_spans, segment
from affix_tokenizer.segment.cache import SegmentationCache
from affix_tokenizer.segment.exceptions_table import ExceptionTable
from affix_tokenizer.settings import TokenizerSettings, load_settings
from affix_tokenizer.types import DescriptorLike, SubTokens

__all__ = ["Tokenizer"]

logger = logging.getLogger(__name__)

# non-whitespace run + the whitespace run that follows it
_RUN_RE = re.compile(r"(\S+)(\s*)")
_LEADING_WS_RE = re.compile(r"\s*")


def _check_text(text: Any) -> str:
    if not isinstance(text, str):
        raise MalformedInputError(f"Expected str, got {type(text).__name__}")
    return text


class Tokenizer:
    """
    Rule-based tokenizer.

    Matchers may be given as matcher objects, regex patterns or plain
    callables (see `RuleSet.build`). Special cases can be added at any
    time; the segmentation cache never serves results computed before the
    latest change.
    """

    def __init__(
        self,
        special_cases: Mapping[str, Iterable[DescriptorLike]] | None = None,
        prefix: Any = None,
        suffix: Any = None,
        infix: Any = None,
        *,
        token_match: Any = None,
        url_match: Any = None,
        lexicon: AttributeStore | None = None,
        cache_max_size: int | None = None,
        batch_size: int = 1000,
        n_workers: int = 1,
    ):
        self._rules = RuleSet.build(prefix, suffix, infix, token_match=token_match, url_match=url_match)
        self._exceptions = ExceptionTable(special_cases)
        self._cache = SegmentationCache(self._exceptions, max_size=cache_max_size)
        self.lexicon = lexicon
        self.batch_size = batch_size
        self.n_workers = n_workers

    @classmethod
    def from_settings(cls, settings: TokenizerSettings | None = None) -> Tokenizer:
        """
        Does: Build a tokenizer from spaCy's defaults for `settings.lang`
              plus the project special cases file.
        Returns: Tokenizer (settings default to load_settings()).
        """
        settings = settings or load_settings()
        rules = spacy_rules(settings.lang)
        special_cases: dict[str, Any] = dict(spacy_special_cases(settings.lang))
        if settings.special_cases_file:
            special_cases.update(load_special_cases(settings.special_cases_file))
        tok = cls(
            special_cases,
            rules.prefix,
            rules.suffix,
            rules.infix,
            token_match=rules.token_match,
            url_match=rules.url_match,
            lexicon=Lexicon() if settings.attach_lexemes else None,
            cache_max_size=settings.cache_max_size,
            batch_size=settings.batch_size,
            n_workers=settings.n_workers,
        )
        logger.info(
            "Tokenizer ready (lang=%s, %d special cases, workers=%d)",
            settings.lang,
            len(tok._exceptions),
            settings.n_workers,
        )
        return tok

    # ── Introspection ────────────────────────────────────────────

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def special_cases(self) -> Mapping[str, SubTokens]:
        return MappingProxyType(dict(self._exceptions.items()))

    @property
    def cache(self) -> SegmentationCache:
        return self._cache

    def find_prefix(self, string: str) -> Optional[int]:
        if self._rules.prefix is None:
            return None
        return affix_length(self._rules.prefix, string)

    def find_suffix(self, string: str) -> Optional[int]:
        if self._rules.suffix is None:
            return None
        return affix_length(self._rules.suffix, string)

    def find_infix(self, string: str) -> list[Span]:
        if self._rules.infix is None:
            return []
        return infix_spans(self._rules.infix, string)

    # ── Special cases ────────────────────────────────────────────

    def add_special_case(self, string: str, token_attrs: Iterable[DescriptorLike]) -> None:
        """Register `string` → `token_attrs`; raises ConfigurationError if they don't join to `string`."""
        self._exceptions.insert(string, token_attrs)

    # ── Tokenization ─────────────────────────────────────────────

    def _segment(self, substring: str) -> SubTokens:
        generation = self._exceptions.generation
        tokens = self._cache.get(substring)
        if tokens is None:
            tokens = segment(substring, self._rules, self._exceptions)
            self._cache.put(substring, tokens, generation)
        return tokens

    def tokenize(self, text: str) -> Document:
        text = _check_text(text)
        leading = _LEADING_WS_RE.match(text).group(0)
        lexemes: dict[str, LexemeAttrs] = {}
        tokens: list[Token] = []
        for run in _RUN_RE.finditer(text):
            substring, whitespace = run.group(1), run.group(2)
            offset = run.start(1)
            sub_tokens = self._segment(substring)
            last = len(sub_tokens) - 1
            for i, desc in enumerate(sub_tokens):
                lex = None
                if self.lexicon is not None:
                    lex = lexemes.get(desc.text)
                    if lex is None:
                        lex = lexemes[desc.text] = self.lexicon.intern_and_get_attributes(desc.text)
                tokens.append(
                    Token(
                        text=desc.text,
                        idx=offset,
                        whitespace_=whitespace if i == last else "",
                        attrs=desc.attrs,
                        lex=lex,
                    )
                )
                offset += len(desc.text)
        return Document(text, tokens, leading)

    __call__ = tokenize

    def explain(self, text: str) -> list[tuple[str, str]]:
        """
        Does: Report which rule produced each token, bypassing the cache.
        Returns: [(rule label, token text), ...] in token order.
        """
        text = _check_text(text)
        out: list[tuple[str, str]] = []
        for run in _RUN_RE.finditer(text):
            out.extend(explain_segment(run.group(1), self._rules, self._exceptions))
        return out

    def pipe(
        self,
        texts: Iterable[str],
        batch_size: int | None = None,
        n_workers: int | None = None,
    ) -> Iterator[Document]:
        """
        Does: Tokenize a stream of texts lazily, in input order.
        Returns: One-shot iterator of Documents. `n_workers` > 1 shares this
                 tokenizer's cache and special cases across a thread pool.
        """
        if texts is None or isinstance(texts, (str, bytes)):
            raise MalformedInputError(f"pipe() expects an iterable of texts, got {type(texts).__name__}")
        try:
            stream = iter(texts)
        except TypeError as e:
            raise MalformedInputError(f"pipe() expects an iterable of texts, got {type(texts).__name__}") from e
        return ordered_map(
            self.tokenize,
            stream,
            batch_size=self.batch_size if batch_size is None else batch_size,
            n_workers=self.n_workers if n_workers is None else n_workers,
        )
