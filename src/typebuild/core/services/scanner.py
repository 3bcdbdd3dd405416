from __future__ import annotations

"""
Tree Walker Service.

Enumerates the nodes of a directory tree while pruning ignored directories.
Both the compiler input discovery and every post-compilation stage walk the
tree through this module, so pruning and ordering rules are identical
everywhere.

Ordering: entries of each directory are sorted by name and yielded
depth-first, a directory before its contents. The walk never leaves the
root: symbolic links that resolve outside of it are skipped and symlinked
directories are never descended into.
"""

import logging
import os
from typing import Collection, Iterable, List, Optional, Tuple, Union

from typebuild.domain.constants import ALWAYS_IGNORED_DIRS
from typebuild.domain.tree_models import FileEntry
from typebuild.infra.fs import is_within, to_posix

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def enumerate_tree(root: str, ignored_dirs: Collection[str] = ()) -> List[FileEntry]:
    """
    Recursively list every file and directory under a root.

    A directory is pruned when its base name, its path relative to the root,
    or its absolute path is a member of 'ignored_dirs'. '.git' and
    'node_modules' are pruned even when the caller omits them. A directory
    that cannot be read is reported and omitted; the entries already
    discovered elsewhere are kept.

    Args:
        root: Directory to walk.
        ignored_dirs: Directory names, root-relative or absolute paths to prune.

    Returns:
        List[FileEntry]: Nodes in deterministic depth-first order.
    """
    root_abs = os.path.abspath(root)
    entries: List[FileEntry] = []
    _walk(root_abs, root_abs, frozenset(ignored_dirs).union(ALWAYS_IGNORED_DIRS), entries)
    return entries


def enumerate_by_extension(
        root: str,
        ext: Union[str, Tuple[str, ...]],
        ignored_dirs: Collection[str] = (),
        exclude_suffixes: Iterable[str] = (),
) -> List[str]:
    """
    List the files under a root whose name ends with the given extension(s).

    Args:
        root: Directory to walk.
        ext: Extension or tuple of extensions, including the dot.
        ignored_dirs: Directory names (or root-relative paths) to prune.
        exclude_suffixes: Name suffixes to leave out (e.g. '.d.ts').

    Returns:
        List[str]: Absolute file paths in traversal order.
    """
    suffixes = (ext,) if isinstance(ext, str) else tuple(ext)
    excluded = tuple(exclude_suffixes)

    files: List[str] = []
    for entry in enumerate_tree(root, ignored_dirs):
        if entry.is_directory:
            continue
        name = entry.name
        if not name.endswith(suffixes):
            continue
        if excluded and name.endswith(excluded):
            continue
        files.append(entry.absolute_path)
    return files


def is_ignored(
        name: str,
        rel_path: str,
        ignored_dirs: Collection[str],
        absolute_path: Optional[str] = None,
) -> bool:
    """Check a directory against the ignored set by base name, relative or absolute path."""
    if name in ignored_dirs or rel_path in ignored_dirs:
        return True
    return absolute_path is not None and os.path.normpath(absolute_path) in ignored_dirs


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _walk(current: str, root: str, ignored_dirs: Collection[str], out: List[FileEntry]) -> None:
    """Depth-first traversal appending discovered nodes to 'out'."""
    try:
        with os.scandir(current) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.error(f"Cannot read directory {current}: {e}")
        return

    for child in children:
        rel_path = to_posix(os.path.relpath(child.path, root))

        try:
            is_link = child.is_symlink()
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.error(f"Cannot inspect {child.path}: {e}")
            continue

        if is_link and not is_within(child.path, root):
            logger.debug(f"Skipping link leaving the tree: {child.path}")
            continue

        if is_dir:
            if is_ignored(child.name, rel_path, ignored_dirs, child.path):
                logger.debug(f"Skipping ignored directory: {child.path}")
                continue
            out.append(FileEntry(absolute_path=child.path, is_directory=True))
            _walk(child.path, root, ignored_dirs, out)
            continue

        if is_link and os.path.isdir(child.path):
            # Symlinked directory inside the root: listed, not descended into
            if not is_ignored(child.name, rel_path, ignored_dirs, child.path):
                out.append(FileEntry(absolute_path=child.path, is_directory=True))
            continue

        out.append(FileEntry(absolute_path=child.path, is_directory=False))
