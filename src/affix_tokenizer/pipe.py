# src/affix_tokenizer/pipe.py
"""
pipe.

Does: Lazily map a function over a stream while keeping input order, either
      inline or on a bounded thread pool with a reorder buffer keyed by
      input sequence number.
Returns: ordered_map() → one-shot iterator.
Used by: Tokenizer.pipe().
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

__all__ = ["ordered_map"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _sequential(fn: Callable[[T], R], items: Iterable[T]) -> Iterator[R]:
    for item in items:
        yield fn(item)


def _pooled(fn: Callable[[T], R], items: Iterable[T], batch_size: int, n_workers: int) -> Iterator[R]:
    executor = ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="tokenizer-pipe")
    logger.debug("Started pipe pool (workers=%d, batch_size=%d)", n_workers, batch_size)
    source = iter(items)
    pending: dict[Future[R], int] = {}
    finished: dict[int, Future[R]] = {}
    submitted = 0
    next_out = 0
    exhausted = False
    try:
        while True:
            # refill: at most batch_size texts buffered or in flight
            while not exhausted and len(pending) + len(finished) < batch_size:
                try:
                    item = next(source)
                except StopIteration:
                    exhausted = True
                    break
                pending[executor.submit(fn, item)] = submitted
                submitted += 1

            if next_out in finished:
                # errors surface at the failing text's position
                result = finished.pop(next_out).result()
                next_out += 1
                yield result
                continue

            if not pending:
                return

            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for fut in done:
                finished[pending.pop(fut)] = fut
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
        logger.debug("Stopped pipe pool after %d of %d results", next_out, submitted)


def ordered_map(
    fn: Callable[[T], R],
    items: Iterable[T],
    *,
    batch_size: int = 1000,
    n_workers: int = 1,
) -> Iterator[R]:
    """
    Does: Apply `fn` to each item, yielding results in input order.
    Returns: Iterator; closing it early cancels queued work and joins workers.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    if n_workers <= 1:
        return _sequential(fn, items)
    return _pooled(fn, items, batch_size, n_workers)
