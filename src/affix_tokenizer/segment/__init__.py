# src/affix_tokenizer/segment/__init__.py
"""
segment.

Does: Per-substring segmentation: exception table, generation-tagged cache,
      and the affix-stripping engine.
"""

from __future__ import annotations

from .affixes import explain_segment, segment
from .cache import SegmentationCache
from .exceptions_table import ExceptionTable, validate_special_case

__all__ = [
    "segment",
    "explain_segment",
    "SegmentationCache",
    "ExceptionTable",
    "validate_special_case",
]
