from __future__ import annotations

"""
Entry Resolver Stage.

Finds the runnable entry module inside the output tree.
"""

import logging
import os
from typing import Collection, Optional

from typebuild.core.services.scanner import enumerate_tree
from typebuild.infra.fs import to_posix

logger = logging.getLogger(__name__)


def resolve_entry(
        output_root: str,
        index_file_name: str,
        ignored_dirs: Collection[str] = (),
) -> Optional[str]:
    """
    Depth-first search for the first file named like the index file.

    Name comparison is case-insensitive. The tree walker's name-sorted
    order makes the result deterministic: for 'a/b/index.js' and
    'c/index.js' the former wins.

    Args:
        output_root: Directory to search.
        index_file_name: Target file name (e.g. 'index.js').
        ignored_dirs: Directory names pruned from the search.

    Returns:
        Optional[str]: Forward-slash path relative to output_root, or None
        if no file matches.
    """
    if not os.path.isdir(output_root):
        logger.warning(f"Output directory {output_root} does not exist.")
        return None

    target = index_file_name.lower()
    for entry in enumerate_tree(output_root, ignored_dirs):
        if entry.is_directory or entry.name.lower() != target:
            continue
        return to_posix(os.path.relpath(entry.absolute_path, output_root))

    return None
