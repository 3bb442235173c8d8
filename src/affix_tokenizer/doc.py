# src/affix_tokenizer/doc.py
"""
doc.

Does: The produced objects: Token (surface text, attribute overrides,
      trailing whitespace run, character offset, optional lexeme record) and
      Document (source text + ordered tokens).
Used by: Tokenizer; downstream consumers of the token sequence.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    from affix_tokenizer.lexicon import LexemeAttrs

__all__ = ["Token", "Document"]


@dataclass(frozen=True)
class Token:
    text: str
    idx: int
    whitespace_: str = ""
    attrs: Mapping[str, Any] = field(default_factory=dict)
    lex: LexemeAttrs | None = None

    @property
    def has_space(self) -> bool:
        """True when at least one whitespace character followed this token."""
        return bool(self.whitespace_)

    @property
    def text_with_ws(self) -> str:
        return self.text + self.whitespace_

    @property
    def norm(self) -> str:
        return self.attrs.get("norm", self.text)

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text


class Document(Sequence[Token]):
    """
    Ordered tokens plus the text they came from.

    ``leading_whitespace`` holds any whitespace before the first token, so
    ``leading_whitespace + "".join(t.text_with_ws for t in doc) == doc.text``.
    """

    def __init__(self, text: str, tokens: Sequence[Token], leading_whitespace: str = ""):
        self.text = text
        self.leading_whitespace = leading_whitespace
        self._tokens: tuple[Token, ...] = tuple(tokens)

    @overload
    def __getitem__(self, i: int) -> Token: ...
    @overload
    def __getitem__(self, i: slice) -> Sequence[Token]: ...

    def __getitem__(self, i):
        return self._tokens[i]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __repr__(self) -> str:
        return f"Document({self.text!r}, {len(self)} tokens)"

    @property
    def words(self) -> list[str]:
        return [t.text for t in self._tokens]

    @property
    def spaces(self) -> list[bool]:
        return [t.has_space for t in self._tokens]

    @property
    def text_with_ws(self) -> str:
        """Text rebuilt from the tokens; always equal to ``self.text``."""
        return self.leading_whitespace + "".join(t.text_with_ws for t in self._tokens)
