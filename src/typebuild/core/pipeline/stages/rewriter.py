from __future__ import annotations

"""
Import Rewriter Stage.

Node's ES module loader requires fully specified relative imports, while
TypeScript sources usually omit the extension. This stage appends the module
extension to every relative specifier that lacks a runtime extension.
Package imports and already-suffixed specifiers are never touched, which
makes the stage idempotent.
"""

import logging
from typing import Collection, Optional

from typebuild.core.imports import ImportMatcher, default_matcher, has_runtime_extension
from typebuild.core.pipeline.worker import DEFAULT_WORKERS, ProgressCallback, run_file_tasks
from typebuild.core.services.scanner import enumerate_by_extension
from typebuild.domain.constants import MODULE_EXTENSION
from typebuild.infra.fs import read_text, write_text_if_changed

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def add_extension(specifier: str) -> str:
    """
    Return the specifier with the module extension appended when needed.

    >>> add_extension("./x")
    './x.js'
    >>> add_extension("./data.json")
    './data.json'
    """
    if has_runtime_extension(specifier) or specifier.endswith("/"):
        return specifier
    return f"{specifier}{MODULE_EXTENSION}"


def rewrite_source(text: str, matcher: Optional[ImportMatcher] = None) -> str:
    """Rewrite the relative specifiers of a single module source."""
    matcher = matcher or default_matcher()
    return matcher.rewrite_relative_specifiers(text, add_extension)


def rewrite_file(path: str, matcher: Optional[ImportMatcher] = None) -> bool:
    """
    Rewrite one emitted module in place.

    Returns:
        bool: True if the file content changed and was written.
    """
    original = read_text(path)
    updated = rewrite_source(original, matcher)
    if write_text_if_changed(path, original, updated):
        logger.info(f"Fixed import paths in {path}")
        return True
    return False


def rewrite_imports(
        output_root: str,
        ignored_dirs: Collection[str] = (),
        *,
        matcher: Optional[ImportMatcher] = None,
        max_workers: int = DEFAULT_WORKERS,
        progress_callback: Optional[ProgressCallback] = None,
) -> int:
    """
    Rewrite relative import specifiers across an output tree.

    Args:
        output_root: Directory containing the emitted modules.
        ignored_dirs: Directory names pruned from the walk.
        matcher: Import recognition strategy (regex by default).
        max_workers: Number of files processed concurrently.
        progress_callback: Receives the completion percentage.

    Returns:
        int: Number of files modified on disk.
    """
    matcher = matcher or default_matcher()
    modules = enumerate_by_extension(output_root, MODULE_EXTENSION, ignored_dirs)
    logger.debug(f"Rewriting imports in {len(modules)} modules under {output_root}")

    flags = run_file_tasks(
        modules,
        lambda p: rewrite_file(p, matcher),
        max_workers=max_workers,
        progress_callback=progress_callback,
    )
    modified = sum(1 for f in flags if f)
    logger.info(f"Fixed import paths in {modified} of {len(modules)} JavaScript files.")
    return modified
