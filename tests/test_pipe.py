# tests/test_pipe.py
from __future__ import annotations

"""
Tests for pipe.py and Tokenizer.pipe(): input order under any worker count,
laziness, error position, and worker cleanup on early stop.
"""

import threading
import time

import pytest

from affix_tokenizer import MalformedInputError, Tokenizer
from affix_tokenizer.pipe import ordered_map


def _pool_threads():
    return [t for t in threading.enumerate() if t.name.startswith("tokenizer-pipe")]


@pytest.fixture
def tok():
    return Tokenizer(suffix=r"[!.,]$", infix=r"-")


# ──────────────────────────────────────────────────────────────────────────────
# ordered_map
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("n_items", [0, 1, 7, 60])
@pytest.mark.parametrize("n_workers", [1, 2, 8])
@pytest.mark.parametrize("batch_size", [1, 3, 1000])
def test_results_follow_input_order(n_items, n_workers, batch_size):
    def slow_for_early_items(i):
        # early items finish last
        time.sleep(0.001 * ((n_items - i) % 5))
        return i * 10

    out = list(ordered_map(slow_for_early_items, range(n_items), batch_size=batch_size, n_workers=n_workers))
    assert out == [i * 10 for i in range(n_items)]


def test_sequential_mode_is_lazy():
    pulled = []

    def source():
        for i in range(100):
            pulled.append(i)
            yield i

    it = ordered_map(lambda x: x, source(), n_workers=1)
    assert next(it) == 0
    assert pulled == [0]


def test_pool_buffers_at_most_batch_size():
    pulled = []

    def source():
        for i in range(100):
            pulled.append(i)
            yield i

    it = ordered_map(lambda x: x, source(), batch_size=4, n_workers=2)
    assert next(it) == 0
    assert len(pulled) <= 5


def test_error_surfaces_at_its_position():
    def fail_on_three(i):
        if i == 3:
            raise ValueError("boom")
        return i

    it = ordered_map(fail_on_three, range(10), batch_size=10, n_workers=4)
    assert [next(it) for _ in range(3)] == [0, 1, 2]
    with pytest.raises(ValueError):
        next(it)


def test_early_close_joins_workers():
    it = ordered_map(lambda x: time.sleep(0.001) or x, range(1000), batch_size=8, n_workers=4)
    assert next(it) == 0
    assert next(it) == 1
    it.close()
    assert _pool_threads() == []


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        ordered_map(lambda x: x, [], batch_size=0)


# ──────────────────────────────────────────────────────────────────────────────
# Tokenizer.pipe
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("n_workers", [1, 4])
def test_pipe_matches_tokenize(tok, n_workers):
    texts = [f"doc-{i} says hi!" for i in range(40)]
    docs = list(tok.pipe(texts, batch_size=5, n_workers=n_workers))
    assert [d.text for d in docs] == texts
    assert [d.words for d in docs] == [tok(t).words for t in texts]


def test_pipe_is_one_shot(tok):
    it = tok.pipe(["a", "b"])
    assert len(list(it)) == 2
    assert list(it) == []


def test_pipe_shares_the_cache(tok):
    list(tok.pipe(["same-word."] * 20, n_workers=4))
    assert "same-word." in tok.cache


@pytest.mark.parametrize("bad", [None, "a single string", b"bytes", 5, object()])
def test_pipe_rejects_non_iterables_of_text(tok, bad):
    with pytest.raises(MalformedInputError):
        tok.pipe(bad)


def test_pipe_rejects_non_text_items(tok):
    it = tok.pipe(["ok", 5])
    assert next(it).words == ["ok"]
    with pytest.raises(MalformedInputError):
        next(it)


def test_pipe_rejects_zero_batch_size_eagerly(tok):
    with pytest.raises(ValueError):
        tok.pipe(["a"], batch_size=0, n_workers=2)


def test_special_case_added_between_pooled_runs_is_seen():
    tok = Tokenizer(infix=r"(?=')")
    texts = ["can't stop", "we can't"] * 10
    before = list(tok.pipe(texts, batch_size=4, n_workers=4))
    assert before[0].words == ["can", "'t", "stop"]

    tok.add_special_case("can't", [{"text": "ca"}, {"text": "n't", "norm": "not"}])
    after = list(tok.pipe(texts, batch_size=4, n_workers=4))
    assert [d.words for d in after[::2]] == [["ca", "n't", "stop"]] * 10
    assert after[1].words == ["we", "ca", "n't"]
    assert after[1][2].norm == "not"
