# src/affix_tokenizer/utils/load_config.py

"""Read tokenizer JSON tables (settings, special cases) from a <data/> directory.

Every file is a JSON object; the parsed dict is cached by file mtime and an
optional validator runs on a fresh copy at each call.

Used by settings loading, project special-case loading and tests that swap
the data directory.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import Any

# --- optional json5 support (no hard dependency) -----------------------------
try:  # mypy: json5 may be missing in most envs
    import json5 as _json5
except Exception:  # pragma: no cover - only hit when json5 missing
    _json5 = None  # type: ignore[assignment]

# ── Public surface ────────────────────────────────────────────────────────────
Validator = Callable[[dict[str, Any]], dict[str, Any]]

__all__ = [
    "load_config",
    "clear_config_cache",
    "temp_data_dir",
    "DataDirNotFound",
    "ConfigFileNotFound",
    "ConfigParseError",
    "ConfigTypeError",
]

DATA_DIR_ENV_VARS: tuple[str, ...] = ("DATA_DIR", "AFFIX_TOKENIZER_DATA_DIR")


# ── Exceptions ───────────────────────────────────────────────────────────────
class DataDirNotFound(FileNotFoundError):
    """No 'data' directory was found walking up from the package."""


class ConfigFileNotFound(FileNotFoundError):
    """The requested table is missing, unreadable, or outside the data dir."""


class ConfigParseError(ValueError):
    """JSON parsing or validation failed."""


class ConfigTypeError(TypeError):
    """The file parsed, but its top level is not a JSON object."""


# ── Logging & cache ──────────────────────────────────────────────────────────
log = logging.getLogger(__name__)
_CACHE_LOCK = threading.RLock()
# key: path, mtime, encoding, allow_comments
_TABLE_CACHE: dict[tuple[Path, float, str, bool], dict[str, Any]] = {}


def clear_config_cache() -> None:
    """Forget every cached table (tests and hot reload)."""
    with _CACHE_LOCK:
        _TABLE_CACHE.clear()
    log.debug("Config cache cleared.")


def _find_data_dir(start: Path | None = None) -> Path:
    here = (start or Path(__file__)).resolve()
    tried = [(p / "data").resolve() for p in [here, *here.parents]]
    for cand in tried:
        if cand.is_dir():
            return cand
    raise DataDirNotFound("No 'data' directory found.\nTried:\n  " + "\n  ".join(map(str, tried)))


def _data_dir() -> Path:
    for var in DATA_DIR_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return Path(os.path.expanduser(value)).resolve()
    return _find_data_dir()


def _table_path(name: str | os.PathLike[str], base_dir: Path | None) -> Path:
    """<data>/<name>.json, refusing anything that escapes the data dir."""
    data_dir = (base_dir or _data_dir()).resolve()
    file_name = os.fspath(name)
    if not file_name.endswith(".json"):
        file_name += ".json"
    path = (data_dir / file_name).resolve()
    if not path.is_relative_to(data_dir):
        raise ConfigFileNotFound(f"Refusing to read a table outside {data_dir}: {path}")
    if not path.is_file():
        raise ConfigFileNotFound(f"Config file not found: {path}")
    return path


def _parse(path: Path, encoding: str, allow_comments: bool) -> dict[str, Any]:
    try:
        with path.open("r", encoding=encoding, errors="strict", newline="") as f:
            if allow_comments:
                if _json5 is None:
                    raise ConfigParseError(
                        "json5 requested (allow_comments=True) but not installed"
                    )
                data = _json5.load(f)
            else:
                data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigFileNotFound(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigTypeError(f"{path.name}: expected a JSON object, got {type(data).__name__}")
    return data


def load_config(
    name: str | os.PathLike[str],
    *,
    base_dir: Path | None = None,
    encoding: str = "utf-8",
    validator: Validator | None = None,
    allow_comments: bool = False,
) -> dict[str, Any]:
    """Load the JSON object in <data>/<name>.json.

    The parsed dict is cached per (path, mtime); `validator` receives a
    shallow copy on every call, so it may normalize freely. Validator
    failures are re-raised as ConfigParseError.
    """
    path = _table_path(name, base_dir)
    try:
        mtime = path.stat().st_mtime
    except OSError as e:
        raise ConfigFileNotFound(f"Cannot stat {path}: {e}") from e

    key = (path, mtime, encoding, allow_comments)
    with _CACHE_LOCK:
        table = _TABLE_CACHE.get(key)
    if table is None:
        table = _parse(path, encoding, allow_comments)
        with _CACHE_LOCK:
            _TABLE_CACHE[key] = table
        log.debug("Loaded table %s (%d keys)", path.name, len(table))

    if validator is None:
        return dict(table)
    try:
        return validator(dict(table))
    except Exception as e:
        raise ConfigParseError(f"{path.name}: validator failed: {e}") from e


# ── Context manager to temporarily override the data directory ───────────────
class temp_data_dir:
    """Point DATA_DIR at `path` for the duration of the block."""

    def __init__(self, path: os.PathLike[str] | str):
        self._new = str(path)
        self._old: str | None = None

    def __enter__(self) -> temp_data_dir:
        self._old = os.environ.get("DATA_DIR")
        os.environ["DATA_DIR"] = self._new
        clear_config_cache()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._old is None:
            os.environ.pop("DATA_DIR", None)
        else:
            os.environ["DATA_DIR"] = self._old
        clear_config_cache()
