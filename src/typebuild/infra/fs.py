from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, containment checks, atomic text persistence and
replace-on-copy helpers used by the post-compilation stages. Acts as an
abstraction over 'os', 'shutil' and 'tempfile' so that every stage performs
its read-modify-write cycle in the same way.
"""

import os
import shutil
import tempfile
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_against(base_dir: str, path: str) -> str:
    """
    Resolve a possibly-relative path against a project directory.

    Args:
        base_dir: Directory used as anchor for relative paths.
        path: Absolute or relative path.

    Returns:
        str: Absolute normalized path.
    """
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(base_dir, path))


def is_within(path: str, root: str) -> bool:
    """
    Check whether a path lies inside a root directory (or is the root itself).

    Symbolic links are resolved on both sides before comparison.
    """
    real_path = os.path.realpath(path)
    real_root = os.path.realpath(root)
    try:
        return os.path.commonpath([real_path, real_root]) == real_root
    except ValueError:
        # Different drives on Windows
        return False


def to_posix(path: str) -> str:
    """Convert host separators to forward slashes."""
    return path.replace(os.sep, "/").replace("\\", "/")

# -----------------------------------------------------------------------------
# FILE PERSISTENCE API
# -----------------------------------------------------------------------------

def read_text(path: str) -> str:
    """
    Read a UTF-8 text file preserving its original line terminators.

    Raises:
        OSError: If the file cannot be opened.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text_atomic(path: str, content: str) -> None:
    """
    Replace a file's content atomically.

    The new content is written to a sibling temporary file which then
    replaces the target, so readers never observe a half-written module.

    Args:
        path: Target file path.
        content: Complete new text content.

    Raises:
        OSError: If the temporary file cannot be created or moved.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".typebuild-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        if os.path.exists(path):
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def write_text_if_changed(path: str, original: str, updated: str) -> bool:
    """
    Persist updated content only when it differs from the original.

    Returns:
        bool: True if the file was rewritten on disk.
    """
    if updated == original:
        return False
    write_text_atomic(path, updated)
    return True

# -----------------------------------------------------------------------------
# DIRECTORY & COPY API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


def remove_path(path: str) -> None:
    """
    Delete a file, symlink or whole directory tree.

    Raises:
        OSError: If removal fails.
    """
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def copy_path(src: str, dest: str) -> None:
    """
    Copy a file or a directory tree to a destination, creating parents.

    Raises:
        OSError: If the copy fails.
    """
    parent = os.path.dirname(os.path.abspath(dest))
    os.makedirs(parent, exist_ok=True)
    if os.path.isdir(src):
        shutil.copytree(src, dest)
    else:
        shutil.copy2(src, dest)
