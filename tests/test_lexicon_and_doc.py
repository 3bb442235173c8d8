# tests/test_lexicon_and_doc.py
from __future__ import annotations

"""
Tests for lexicon.py, doc.py and types.py (descriptor coercion).
"""

import threading

import pytest
from spacy.symbols import NORM, ORTH

from affix_tokenizer import ConfigurationError, Document, Lexicon, Token, TokenDescriptor
from affix_tokenizer.types import coerce_descriptor, coerce_sub_tokens, surface_of


# ──────────────────────────────────────────────────────────────────────────────
# Lexicon
# ──────────────────────────────────────────────────────────────────────────────

def test_records_are_interned_once_with_increasing_rank():
    lex = Lexicon()
    a = lex.intern_and_get_attributes("Hello")
    b = lex.intern_and_get_attributes("1999")
    assert lex.intern_and_get_attributes("Hello") is a
    assert (a.rank, b.rank) == (0, 1)
    assert lex.strings() == ["Hello", "1999"]
    assert "Hello" in lex and len(lex) == 2


@pytest.mark.parametrize("text,shape", [("Hello", "Xxxxx"), ("1999", "dddd"), ("C3PO", "XdXX")])
def test_shape(text, shape):
    assert Lexicon().intern_and_get_attributes(text).shape == shape


def test_flags():
    lex = Lexicon(vector_keys=["apple"])
    assert lex.intern_and_get_attributes("!").is_punct
    assert lex.intern_and_get_attributes("10").like_num
    assert lex.intern_and_get_attributes("10").is_digit
    assert lex.intern_and_get_attributes("apple").has_vector
    assert not lex.intern_and_get_attributes("pear").has_vector
    assert lex.intern_and_get_attributes("Pear").lower == "pear"


def test_orth_ids_are_stable_across_lexicons():
    assert Lexicon().intern_and_get_attributes("word").orth == Lexicon().intern_and_get_attributes("word").orth


def test_concurrent_interning_creates_one_record():
    lex = Lexicon()
    seen = []

    def worker():
        seen.append(lex.intern_and_get_attributes("shared"))

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(lex) == 1
    assert all(r is seen[0] for r in seen)


# ──────────────────────────────────────────────────────────────────────────────
# Document / Token
# ──────────────────────────────────────────────────────────────────────────────

def test_document_sequence_behaviour():
    tokens = [Token("Hi", 1, " "), Token("there", 4, ""), Token("!", 9, "\n")]
    doc = Document(" Hi there!\n", tokens, " ")
    assert len(doc) == 3
    assert doc[0].text == "Hi" and doc[-1].text == "!"
    assert [t.text for t in doc[1:]] == ["there", "!"]
    assert doc.words == ["Hi", "there", "!"]
    assert doc.spaces == [True, False, True]
    assert doc.text_with_ws == doc.text
    assert str(doc[0]) == "Hi"
    assert doc[0].text_with_ws == "Hi "
    assert doc[1].norm == "there"


# ──────────────────────────────────────────────────────────────────────────────
# Descriptor coercion
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("obj", [
    "ca",
    {"text": "ca"},
    {"orth": "ca"},
    {"ORTH": "ca"},
    {ORTH: "ca", NORM: "can"},
    TokenDescriptor("ca"),
])
def test_coerce_descriptor_accepts_common_shapes(obj):
    assert coerce_descriptor(obj).text == "ca"


def test_extra_keys_become_lowercase_attrs():
    d = coerce_descriptor({"ORTH": "n't", "NORM": "not"})
    assert d.attrs == {"norm": "not"}
    assert d.norm == "not"
    with pytest.raises(TypeError):
        d.attrs["norm"] = "x"  # read-only view


def test_conflicting_surface_keys():
    with pytest.raises(ConfigurationError):
        coerce_descriptor({"text": "a", "orth": "b"})


def test_descriptor_equality_includes_attrs():
    assert TokenDescriptor("a", {"norm": "x"}) == TokenDescriptor("a", {"norm": "x"})
    assert TokenDescriptor("a", {"norm": "x"}) != TokenDescriptor("a")
    assert len({TokenDescriptor("a"), TokenDescriptor("a")}) == 1


def test_sub_tokens_and_surface():
    tokens = coerce_sub_tokens(["ca", {"text": "n't"}])
    assert isinstance(tokens, tuple)
    assert surface_of(tokens) == "can't"


def test_default_attrs_are_an_empty_read_only_view():
    a, b = TokenDescriptor("a"), TokenDescriptor("b")
    assert dict(a.attrs) == {}
    assert a.attrs is b.attrs
    with pytest.raises(TypeError):
        a.attrs["norm"] = "x"
    assert a.norm == "a"
