# src/affix_tokenizer/settings.py
"""
settings.

Does: Tokenizer settings read from <data>/tokenizer_settings.json and
      validated; missing data dir or file means defaults.
Returns: TokenizerSettings, load_settings().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any

from affix_tokenizer.utils.load_config import ConfigFileNotFound, DataDirNotFound, load_config

__all__ = ["TokenizerSettings", "load_settings"]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenizerSettings:
    lang: str = "en"
    batch_size: int = 1000
    n_workers: int = 1
    cache_max_size: int | None = None
    attach_lexemes: bool = True
    special_cases_file: str | None = "special_cases"


def _validate(data: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(TokenizerSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(unknown)}")
    for name in ("batch_size", "n_workers"):
        value = data.get(name, 1)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")
    size = data.get("cache_max_size")
    if size is not None and (isinstance(size, bool) or not isinstance(size, int) or size < 1):
        raise ValueError(f"cache_max_size must be a positive integer or null, got {size!r}")
    if not isinstance(data.get("lang", "en"), str):
        raise ValueError("lang must be a string")
    if not isinstance(data.get("attach_lexemes", True), bool):
        raise ValueError("attach_lexemes must be a boolean")
    return data


def load_settings(name: str = "tokenizer_settings") -> TokenizerSettings:
    try:
        data = load_config(name, validator=_validate)
    except (DataDirNotFound, ConfigFileNotFound) as e:
        log.debug("Using default tokenizer settings: %s", e)
        return TokenizerSettings()
    return TokenizerSettings(**data)
