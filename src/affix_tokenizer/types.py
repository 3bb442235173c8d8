# src/affix_tokenizer/types.py
from __future__ import annotations

"""
types.py.

Does: Token descriptors (surface text + attribute overrides) and the helpers
      that coerce user-supplied special-case payloads into them.
Returns: TokenDescriptor, SubTokens, coerce_descriptor(), coerce_sub_tokens(),
         surface_of().
Used by: Exception table, affix engine, tokenizer.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Tuple, Union

from spacy.symbols import NORM, ORTH

from affix_tokenizer.errors import ConfigurationError

__all__ = [
    "TokenDescriptor",
    "SubTokens",
    "DescriptorLike",
    "coerce_descriptor",
    "coerce_sub_tokens",
    "surface_of",
]

# Keys accepted as the surface form of a descriptor mapping
_TEXT_KEYS = ("text", "orth", "ORTH")
# spaCy attribute symbols, as found in its tokenizer_exceptions tables
_SYMBOL_KEYS = {ORTH: "text", NORM: "norm"}

_EMPTY_ATTRS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class TokenDescriptor:
    """One sub-token: surface text plus read-only attribute overrides (e.g. ``norm``)."""

    text: str
    attrs: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_ATTRS, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.attrs, MappingProxyType):
            object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenDescriptor):
            return NotImplemented
        return self.text == other.text and dict(self.attrs) == dict(other.attrs)

    def __hash__(self) -> int:
        return hash(self.text)

    @property
    def norm(self) -> str:
        return self.attrs.get("norm", self.text)


SubTokens = Tuple[TokenDescriptor, ...]
DescriptorLike = Union[TokenDescriptor, str, Mapping[str, Any]]


def coerce_descriptor(obj: DescriptorLike) -> TokenDescriptor:
    """
    Does: Accept a TokenDescriptor, a bare string, or a mapping with a
          ``text``/``orth``/``ORTH`` key plus extra attribute keys.
    Returns: TokenDescriptor (attribute keys lowercased).
    Raises: ConfigurationError when no usable surface text is present.
    """
    if isinstance(obj, TokenDescriptor):
        return obj
    if isinstance(obj, str):
        return TokenDescriptor(obj)
    if isinstance(obj, Mapping):
        text = None
        attrs: dict[str, Any] = {}
        for key, value in obj.items():
            key = _SYMBOL_KEYS.get(key, key)
            if key in _TEXT_KEYS:
                if text is not None and value != text:
                    raise ConfigurationError(f"Conflicting surface forms in {dict(obj)!r}")
                text = value
            else:
                attrs[str(key).lower()] = value
        if not isinstance(text, str):
            raise ConfigurationError(f"Token attributes need a string 'text' entry: {dict(obj)!r}")
        return TokenDescriptor(text, attrs)
    raise ConfigurationError(f"Cannot build a token descriptor from {type(obj).__name__}")


def coerce_sub_tokens(items: Iterable[DescriptorLike]) -> SubTokens:
    if isinstance(items, (str, Mapping)):
        # A lone string/mapping is almost always a forgotten list
        raise ConfigurationError(f"Expected a sequence of token attributes, got {type(items).__name__}")
    return tuple(coerce_descriptor(item) for item in items)


def surface_of(tokens: Iterable[TokenDescriptor]) -> str:
    return "".join(t.text for t in tokens)
