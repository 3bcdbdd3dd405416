from __future__ import annotations

"""
Base Definitions for Import Matching Strategies.

The rewrite and strip stages never look at module text directly; they ask an
ImportMatcher to recognize relative imports and marker imports. Swapping the
regex strategy for a tokenizer only requires a new subclass.
"""

import posixpath
from abc import ABC, abstractmethod
from typing import Callable, Optional

from typebuild.domain.constants import RUNTIME_EXTENSIONS, SOURCE_EXTENSION

# Extensions removed before comparing a path segment with a marker name
SEGMENT_EXTENSIONS = RUNTIME_EXTENSIONS | {SOURCE_EXTENSION}


class ImportMatcher(ABC):
    """
    Abstract recognizer for ES module import statements.
    """

    @abstractmethod
    def rewrite_relative_specifiers(self, text: str, transform: Callable[[str], str]) -> str:
        """
        Apply 'transform' to every relative specifier of an import statement.

        Args:
            text: Full module source.
            transform: Receives a relative specifier, returns its replacement.

        Returns:
            str: The module source with specifiers replaced.
        """

    @abstractmethod
    def import_specifier(self, line: str) -> Optional[str]:
        """
        Return the specifier if the line is a complete import statement.

        Recognizes 'import X from "..."' and bare 'import "..."' forms,
        with an optional trailing semicolon.

        Args:
            line: A single source line, without its terminator.

        Returns:
            Optional[str]: The quoted path, or None for any other line.
        """

    def is_marker_import(self, line: str, marker: str) -> bool:
        """Check whether a line imports the given marker as a whole path segment."""
        specifier = self.import_specifier(line)
        if specifier is None:
            return False
        return specifier_has_segment(specifier, marker)


# -----------------------------------------------------------------------------
# SHARED HELPERS
# -----------------------------------------------------------------------------

def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../")


def has_runtime_extension(specifier: str) -> bool:
    """Check whether the last path segment carries a runtime extension."""
    _, ext = posixpath.splitext(specifier.rsplit("/", 1)[-1])
    return ext.lower() in RUNTIME_EXTENSIONS


def marker_stem(name: str) -> str:
    """
    Reduce a configured marker source name to its base name without extension.

    >>> marker_stem("src/shared/types.ts")
    'types'
    """
    base = posixpath.basename(name.replace("\\", "/").rstrip("/"))
    stem, _ = posixpath.splitext(base)
    return stem or base


def specifier_has_segment(specifier: str, marker: str) -> bool:
    """
    Check whether a specifier contains 'marker' as a whole path segment.

    A segment matches when it equals the marker, or equals it once a known
    module extension is removed. 'types' matches './shared/types.js' but not
    './shared/typesExtra.js'.
    """
    if not marker:
        return False
    for segment in specifier.split("/"):
        if segment == marker:
            return True
        stem, ext = posixpath.splitext(segment)
        if stem == marker and ext.lower() in SEGMENT_EXTENSIONS:
            return True
    return False
