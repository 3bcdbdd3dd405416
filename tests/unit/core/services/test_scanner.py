from __future__ import annotations

"""
Unit tests for the Tree Walker Service.

Verifies deterministic depth-first ordering, pruning of ignored directories
by name and by relative path, extension filtering and the handling of
symbolic links and unreadable directories.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from typebuild.core.services.scanner import (
    enumerate_by_extension,
    enumerate_tree,
    is_ignored,
)


@pytest.fixture
def mock_fs_structure(tmp_path: Path) -> Path:
    """Create a temporary filesystem structure for walking tests."""
    root = tmp_path / "project"
    root.mkdir()

    (root / "src" / "lib").mkdir(parents=True)
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / "dist").mkdir()

    (root / "src" / "main.ts").write_text("export {};", encoding="utf-8")
    (root / "src" / "lib" / "util.ts").write_text("export {};", encoding="utf-8")
    (root / "src" / "lib" / "env.d.ts").write_text("declare const x: 1;", encoding="utf-8")
    (root / "node_modules" / "pkg" / "index.ts").write_text("export {};", encoding="utf-8")
    (root / "dist" / "main.js").write_text("export {};", encoding="utf-8")
    (root / "README.md").write_text("# Project", encoding="utf-8")

    return root


def _rel(root: Path, paths) -> list:
    return [Path(p).relative_to(root).as_posix() for p in paths]


def test_enumerate_tree_depth_first_sorted(mock_fs_structure: Path) -> None:
    """TC-01: Directories precede their contents and siblings are name-sorted."""
    entries = enumerate_tree(str(mock_fs_structure), {".git", "node_modules", "dist"})
    rel = _rel(mock_fs_structure, [e.absolute_path for e in entries])

    assert rel == [
        "README.md",
        "src",
        "src/lib",
        "src/lib/env.d.ts",
        "src/lib/util.ts",
        "src/main.ts",
    ]
    assert [e.is_directory for e in entries] == [False, True, True, False, False, False]


def test_enumerate_tree_always_prunes_vcs_and_dependencies(mock_fs_structure: Path) -> None:
    """TC-02: Without an ignored set only .git and node_modules are pruned."""
    entries = enumerate_tree(str(mock_fs_structure))
    rel = _rel(mock_fs_structure, [e.absolute_path for e in entries])

    assert "dist/main.js" in rel
    assert not any(p.startswith(("node_modules", ".git")) for p in rel)


def test_enumerate_by_extension_excludes_declarations(mock_fs_structure: Path) -> None:
    """TC-03: '.d.ts' files are left out of compiler inputs; ignored dirs are pruned."""
    files = enumerate_by_extension(
        str(mock_fs_structure),
        ".ts",
        {".git", "node_modules", "dist"},
        exclude_suffixes=(".d.ts",),
    )

    assert _rel(mock_fs_structure, files) == ["src/lib/util.ts", "src/main.ts"]
    assert all(os.path.isabs(p) for p in files)


def test_enumerate_by_extension_accepts_tuple(mock_fs_structure: Path) -> None:
    """TC-04: Several extensions may be requested at once."""
    files = enumerate_by_extension(str(mock_fs_structure), (".js", ".md"), {"node_modules"})
    assert _rel(mock_fs_structure, files) == ["README.md", "dist/main.js"]


def test_ignored_by_relative_path(mock_fs_structure: Path) -> None:
    """TC-05: A nested directory can be pruned by its root-relative path."""
    files = enumerate_by_extension(str(mock_fs_structure), ".ts", {"src/lib", "node_modules"})
    assert _rel(mock_fs_structure, files) == ["src/main.ts"]


def test_is_ignored_name_or_path() -> None:
    """TC-06: Membership is checked by base name, relative path or absolute path."""
    assert is_ignored("dist", "dist", {"dist"})
    assert is_ignored("lib", "src/lib", {"src/lib"})
    assert not is_ignored("lib", "src/lib", {"dist"})
    assert is_ignored("dist", "src/dist", {os.path.normpath("/tmp/app/src/dist")}, "/tmp/app/src/dist")


def test_empty_root_returns_nothing(tmp_path: Path) -> None:
    """TC-07: An empty directory yields an empty list."""
    assert enumerate_tree(str(tmp_path)) == []


def test_unreadable_directory_is_reported(mock_fs_structure: Path) -> None:
    """TC-08: A scandir failure is logged and the walk result is empty, not an exception."""
    with patch("typebuild.core.services.scanner.os.scandir", side_effect=PermissionError("denied")):
        assert enumerate_tree(str(mock_fs_structure)) == []


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="Symlinks unsupported")
def test_symlinks_are_not_followed_out_of_root(tmp_path: Path) -> None:
    """TC-09: Links leaving the root are skipped; internal dir links are not descended."""
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.ts").write_text("export {};", encoding="utf-8")

    root = tmp_path / "root"
    (root / "real").mkdir(parents=True)
    (root / "real" / "a.ts").write_text("export {};", encoding="utf-8")
    os.symlink(outside, root / "escape")
    os.symlink(root / "real", root / "alias")

    entries = enumerate_tree(str(root))
    rel = _rel(root, [e.absolute_path for e in entries])

    assert "escape" not in rel
    assert not any(p.startswith("escape/") for p in rel)
    assert "alias" in rel
    assert not any(p.startswith("alias/") for p in rel)
    assert "real/a.ts" in rel


def test_ignored_by_absolute_path(tmp_path: Path) -> None:
    """TC-10: An output directory nested in the root is pruned by its absolute path."""
    root = tmp_path / "src"
    (root / "dist").mkdir(parents=True)
    (root / "dist" / "leak.ts").write_text("export {};", encoding="utf-8")
    (root / "x.ts").write_text("export {};", encoding="utf-8")

    files = enumerate_by_extension(str(root), ".ts", {str(root / "dist")})

    assert _rel(root, files) == ["x.ts"]
