from __future__ import annotations

from .base import (
    ImportMatcher,
    has_runtime_extension,
    is_relative_specifier,
    marker_stem,
    specifier_has_segment,
)
from .regex import RegexImportMatcher

__all__ = [
    "ImportMatcher",
    "RegexImportMatcher",
    "default_matcher",
    "has_runtime_extension",
    "is_relative_specifier",
    "marker_stem",
    "specifier_has_segment",
]


def default_matcher() -> ImportMatcher:
    """Return the matcher used when a stage is not given one explicitly."""
    return RegexImportMatcher()
