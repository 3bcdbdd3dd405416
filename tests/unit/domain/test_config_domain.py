from __future__ import annotations

"""
Unit tests for the Project Configuration Domain.

Verifies defaulting and warning behavior for every typebuild option,
ignored directory normalization and command-line override merging.
"""

import os
from pathlib import Path
from typing import Any, Dict

import pytest

from typebuild.core.services.scanner import enumerate_by_extension
from typebuild.domain.config import (
    apply_overrides,
    build_project_config,
    clean_out_dir_name,
    load_project_config,
    normalize_ignored_dirs,
    normalize_index_name,
)


# -----------------------------------------------------------------------------
# PURE HELPERS
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("raw,expected", [
    ("./dist", "dist"),
    ("./dist/", "dist"),
    ("build/out", "build/out"),
    ("./", "."),
])
def test_clean_out_dir_name(raw: str, expected: str) -> None:
    assert clean_out_dir_name(raw) == expected


def test_normalize_ignored_dirs_always_includes_defaults() -> None:
    result = normalize_ignored_dirs(["fixtures", " ", "coverage"], "dist")
    assert result == frozenset({"fixtures", "coverage", ".git", "node_modules", "dist"})


def test_normalize_ignored_dirs_empty() -> None:
    assert normalize_ignored_dirs(None, "out") == frozenset({".git", "node_modules", "out"})


def test_normalize_ignored_dirs_adds_absolute_out_dir(tmp_path: Path) -> None:
    out_dir = str(tmp_path / "src" / "dist")
    assert normalize_ignored_dirs([], "src/dist", out_dir) == frozenset(
        {".git", "node_modules", "src/dist", os.path.normpath(out_dir)}
    )


@pytest.mark.parametrize("raw,expected", [
    ("index", "index.js"),
    ("server.js", "server.js"),
    ("", "index.js"),
])
def test_normalize_index_name(raw: str, expected: str) -> None:
    assert normalize_index_name(raw) == expected


# -----------------------------------------------------------------------------
# BUILDING FROM TSCONFIG
# -----------------------------------------------------------------------------

def test_build_full_config(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    cfg, warnings = build_project_config(str(tmp_path), tsconfig_dict)

    assert warnings == []
    assert cfg.out_dir == os.path.join(str(tmp_path), "dist")
    assert cfg.root_dir == os.path.join(str(tmp_path), "src")
    assert cfg.out_dir_name == "dist"
    assert cfg.ignored_dirs == frozenset({"fixtures", ".git", "node_modules", "dist", cfg.out_dir})
    assert cfg.index_file_name == "index.js"
    assert cfg.marker_source_names == ("types.ts",)
    assert cfg.static_asset_paths == ("public",)
    assert cfg.index_path is None
    assert cfg.strict is False


def test_missing_section_single_warning(tmp_path: Path) -> None:
    """Without a 'typebuild' section defaults apply and one warning is emitted."""
    cfg, warnings = build_project_config(str(tmp_path), {"compilerOptions": {}})

    assert len(warnings) == 1
    assert "typebuild" in warnings[0]
    assert cfg.out_dir == os.path.join(str(tmp_path), "dist")
    assert cfg.root_dir == os.path.normpath(str(tmp_path))
    assert cfg.marker_source_names == ()
    assert cfg.static_asset_paths == ()


def test_each_missing_option_warns(tmp_path: Path) -> None:
    cfg, warnings = build_project_config(str(tmp_path), {"typebuild": {"indexPath": "app/main.js"}})

    joined = "\n".join(warnings)
    assert "output directory" in joined
    assert "root directory" in joined
    assert "ignored directories" in joined
    assert "index name" in joined
    assert "type files" in joined
    assert "static files" in joined
    assert cfg.index_path == "app/main.js"


def test_non_list_option_is_reported(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    tsconfig_dict["typebuild"]["staticFiles"] = 42
    cfg, warnings = build_project_config(str(tmp_path), tsconfig_dict)

    assert cfg.static_asset_paths == ()
    assert any("'staticFiles' must be a list" in w for w in warnings)


def test_string_option_becomes_single_item(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    tsconfig_dict["typebuild"]["typeFileNames"] = "models.ts"
    cfg, _ = build_project_config(str(tmp_path), tsconfig_dict)
    assert cfg.marker_source_names == ("models.ts",)


def test_out_dir_nested_in_root_is_pruned(tmp_path: Path) -> None:
    """An outDir inside rootDir is pruned from the source walk."""
    cfg, _ = build_project_config(
        str(tmp_path),
        {"compilerOptions": {"rootDir": "./src", "outDir": "./src/dist"}, "typebuild": {}},
    )
    (tmp_path / "src" / "dist").mkdir(parents=True)
    (tmp_path / "src" / "dist" / "leak.ts").write_text("export {};", encoding="utf-8")
    (tmp_path / "src" / "x.ts").write_text("export {};", encoding="utf-8")

    files = enumerate_by_extension(cfg.root_dir, ".ts", cfg.ignored_dirs)

    assert cfg.out_dir_name == "src/dist"
    assert [os.path.basename(p) for p in files] == ["x.ts"]


def test_strict_flag(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    tsconfig_dict["compilerOptions"]["strict"] = True
    cfg, _ = build_project_config(str(tmp_path), tsconfig_dict)
    assert cfg.strict is True


# -----------------------------------------------------------------------------
# LOADING
# -----------------------------------------------------------------------------

def test_load_project_config_jsonc(tmp_path: Path) -> None:
    (tmp_path / "tsconfig.json").write_text(
        '{\n'
        '  // compiler\n'
        '  "compilerOptions": { "outDir": "./build", "rootDir": "./src", },\n'
        '  /* post-compile */\n'
        '  "typebuild": { "indexFile": "main" }\n'
        '}\n',
        encoding="utf-8",
    )
    cfg, _ = load_project_config(str(tmp_path))

    assert cfg.out_dir_name == "build"
    assert cfg.index_file_name == "main.js"
    assert "build" in cfg.ignored_dirs


def test_load_project_config_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_project_config(str(tmp_path))


def test_load_project_config_invalid(tmp_path: Path) -> None:
    (tmp_path / "tsconfig.json").write_text("{ not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_project_config(str(tmp_path))


# -----------------------------------------------------------------------------
# OVERRIDES
# -----------------------------------------------------------------------------

def test_apply_overrides_out_dir_recomputes_ignored(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    cfg, _ = build_project_config(str(tmp_path), tsconfig_dict)

    updated = apply_overrides(cfg, {"out_dir": "./out", "index_file_name": "server"})

    assert updated.out_dir == os.path.join(str(tmp_path), "out")
    assert updated.out_dir_name == "out"
    assert "out" in updated.ignored_dirs
    assert "dist" not in updated.ignored_dirs
    assert updated.out_dir in updated.ignored_dirs
    assert cfg.out_dir not in updated.ignored_dirs
    assert "fixtures" in updated.ignored_dirs
    assert updated.index_file_name == "server.js"


def test_apply_overrides_empty_returns_same(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    cfg, _ = build_project_config(str(tmp_path), tsconfig_dict)
    assert apply_overrides(cfg, {}) is cfg


def test_apply_overrides_root_dir(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> None:
    cfg, _ = build_project_config(str(tmp_path), tsconfig_dict)
    updated = apply_overrides(cfg, {"root_dir": "lib"})
    assert updated.root_dir == os.path.join(str(tmp_path), "lib")
