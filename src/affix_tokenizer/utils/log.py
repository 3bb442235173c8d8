"""
log.py.

Does: Topic-scoped trace printer controlled by TOKENIZER_DEBUG_TOPICS
      (comma-separated topics, or 'all'). Silent when the variable is unset.
Returns: debug() prints timestamped lines; is_enabled() lets hot paths skip
         building messages.
"""

import os
import sys
from datetime import datetime
from typing import TextIO

__all__ = ["debug", "is_enabled", "reload_topics"]

ENV_VAR = "TOKENIZER_DEBUG_TOPICS"


def _load_topics() -> frozenset[str]:
    raw = os.getenv(ENV_VAR, "")
    return frozenset(t.strip().lower() for t in raw.split(",") if t.strip())


_DEBUG_TOPICS = _load_topics()


def reload_topics() -> None:
    """Re-read TOKENIZER_DEBUG_TOPICS."""
    global _DEBUG_TOPICS
    _DEBUG_TOPICS = _load_topics()


def is_enabled(topic: str) -> bool:
    if not _DEBUG_TOPICS:
        return False
    return "all" in _DEBUG_TOPICS or topic.lower().strip() in _DEBUG_TOPICS


def debug(
    msg: str,
    topic: str = "tokenizer",
    *,
    level: str = "DEBUG",
    stream: TextIO | None = None,
) -> None:
    """Does: Print `[ts] [topic][LEVEL] msg` to stderr when `topic` is enabled."""
    if not is_enabled(topic):
        return
    if stream is None:
        stream = sys.stderr
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{ts}] [{topic.lower().strip()}][{level.upper()}] {msg}", file=stream)
