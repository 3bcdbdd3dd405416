from __future__ import annotations

"""
Marker-Import Stripper Stage.

Some sources (declaration-only modules such as 'types.ts') compile to empty
modules, yet the emitted code may still import them. This stage deletes every
import line whose specifier names such a marker module as a whole path
segment. Processing is line-by-line: only matching import lines are removed,
everything else is preserved byte-for-byte.
"""

import logging
from typing import Collection, List, Optional, Sequence

from typebuild.core.imports import ImportMatcher, default_matcher, marker_stem
from typebuild.core.pipeline.worker import DEFAULT_WORKERS, ProgressCallback, run_file_tasks
from typebuild.core.services.scanner import enumerate_by_extension
from typebuild.domain.constants import MODULE_EXTENSION
from typebuild.infra.fs import read_text, write_text_if_changed

logger = logging.getLogger(__name__)


def normalize_marker_names(marker_names: Sequence[str]) -> List[str]:
    """
    Reduce configured names to unique base names without extension.

    >>> normalize_marker_names(["types.ts", "src/types.ts", "models"])
    ['types', 'models']
    """
    stems: List[str] = []
    for name in marker_names:
        stem = marker_stem(name)
        if stem and stem not in stems:
            stems.append(stem)
    return stems


def strip_source(text: str, markers: Sequence[str], matcher: Optional[ImportMatcher] = None) -> str:
    """
    Remove marker import lines from a module source.

    Args:
        text: Module source.
        markers: Normalized marker stems.
        matcher: Import recognition strategy.

    Returns:
        str: The source without the matching lines (terminators included).
    """
    matcher = matcher or default_matcher()
    kept: List[str] = []
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        if any(matcher.is_marker_import(body, m) for m in markers):
            continue
        kept.append(line)
    return "".join(kept)


def strip_file(path: str, markers: Sequence[str], matcher: Optional[ImportMatcher] = None) -> bool:
    """
    Strip marker imports from one emitted module in place.

    Returns:
        bool: True if the file content changed and was written.
    """
    original = read_text(path)
    updated = strip_source(original, markers, matcher)
    if write_text_if_changed(path, original, updated):
        logger.info(f"Removed types import in: {path}")
        return True
    return False


def strip_marker_imports(
        output_root: str,
        marker_names: Sequence[str],
        ignored_dirs: Collection[str] = (),
        *,
        matcher: Optional[ImportMatcher] = None,
        max_workers: int = DEFAULT_WORKERS,
        progress_callback: Optional[ProgressCallback] = None,
) -> int:
    """
    Remove imports of marker modules across an output tree.

    Args:
        output_root: Directory containing the emitted modules.
        marker_names: Configured marker source names ('types.ts', 'types', ...).
        ignored_dirs: Directory names pruned from the walk.
        matcher: Import recognition strategy (regex by default).
        max_workers: Number of files processed concurrently.
        progress_callback: Receives the completion percentage.

    Returns:
        int: Number of files modified on disk.
    """
    markers = normalize_marker_names(marker_names)
    if not markers:
        logger.warning("No type files specified. Skipping type import removal.")
        return 0

    matcher = matcher or default_matcher()
    modules = enumerate_by_extension(output_root, MODULE_EXTENSION, ignored_dirs)

    flags = run_file_tasks(
        modules,
        lambda p: strip_file(p, markers, matcher),
        max_workers=max_workers,
        progress_callback=progress_callback,
    )
    modified = sum(1 for f in flags if f)
    logger.info(f"Checked all type imports in {output_root} ({modified} files changed).")
    return modified
