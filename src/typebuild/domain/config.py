from __future__ import annotations

"""
Project Configuration Domain.

Reads the 'typebuild' options out of the project's tsconfig.json and freezes
them into a ProjectConfig. Missing options fall back to documented defaults
and are reported as warnings; a missing or unreadable tsconfig.json is a
fatal configuration error.
"""

import logging
import os
import posixpath
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from typebuild.domain.constants import (
    ALWAYS_IGNORED_DIRS,
    CONFIG_SECTION,
    DEFAULT_INDEX_FILE,
    DEFAULT_OUT_DIR,
    MODULE_EXTENSION,
    TSCONFIG_FILE,
)
from typebuild.infra import jsonc
from typebuild.infra.fs import resolve_against

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectConfig:
    """
    Immutable build configuration, read once at pipeline start.

    Attributes:
        project_dir: Directory holding tsconfig.json and package.json.
        root_dir: Absolute source root scanned for compiler inputs.
        out_dir: Absolute output directory the compiler writes into.
        out_dir_name: Output directory as configured, without a leading './'.
        ignored_dirs: Directory names and paths pruned from every traversal.
        index_file_name: File name searched for by the entry resolver.
        marker_source_names: Source names whose imports are stripped.
        static_asset_paths: Paths copied verbatim from root_dir to out_dir.
        index_path: Explicit entry path relative to out_dir, bypasses resolution.
        strict: Whether tsconfig enables strict type checking.
    """
    project_dir: str
    root_dir: str
    out_dir: str
    out_dir_name: str
    ignored_dirs: FrozenSet[str]
    index_file_name: str = DEFAULT_INDEX_FILE
    marker_source_names: Tuple[str, ...] = field(default_factory=tuple)
    static_asset_paths: Tuple[str, ...] = field(default_factory=tuple)
    index_path: Optional[str] = None
    strict: bool = False


# -----------------------------------------------------------------------------
# PURE HELPERS
# -----------------------------------------------------------------------------

def clean_out_dir_name(out_dir: str) -> str:
    """
    Strip a leading './' and trailing separators from a configured out dir.

    >>> clean_out_dir_name("./dist/")
    'dist'
    """
    name = out_dir.replace("\\", "/")
    while name.startswith("./"):
        name = name[2:]
    return name.rstrip("/") or "."


def normalize_ignored_dirs(
        configured: Optional[Iterable[str]],
        out_dir_name: str,
        out_dir: Optional[str] = None,
) -> FrozenSet[str]:
    """
    Compute the effective ignored directory set.

    '.git', 'node_modules' and the output directory are always members,
    whatever the configuration says. The absolute output path is added too,
    so the output directory is pruned even when it is nested inside the
    source root under a different relative path.

    Args:
        configured: Names listed under typebuild.ignoredDirs (may be empty).
        out_dir_name: Cleaned output directory name.
        out_dir: Absolute output directory, when known.

    Returns:
        FrozenSet[str]: The complete ignored set.
    """
    names = {str(n).strip() for n in (configured or []) if str(n).strip()}
    names.update(ALWAYS_IGNORED_DIRS)
    names.add(out_dir_name)
    if out_dir:
        names.add(os.path.normpath(out_dir))
    return frozenset(names)


def normalize_index_name(index_file_name: str) -> str:
    """Append the module extension to an index name that lacks it."""
    name = (index_file_name or "").strip() or DEFAULT_INDEX_FILE
    if not name.lower().endswith(MODULE_EXTENSION):
        name += MODULE_EXTENSION
    return name


def _as_str_list(value: Any, key: str, warnings: List[str]) -> List[str]:
    """Coerce a configuration list, reporting non-list values."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        warnings.append(f"'{key}' must be a list, received {type(value).__name__}. Ignoring it.")
        return []
    return [str(v) for v in value if str(v).strip()]


# -----------------------------------------------------------------------------
# LOADING
# -----------------------------------------------------------------------------

def read_tsconfig(project_dir: str) -> Dict[str, Any]:
    """
    Load tsconfig.json from a project directory.

    Raises:
        FileNotFoundError: If tsconfig.json does not exist.
        ValueError: If it cannot be decoded.
    """
    path = os.path.join(project_dir, TSCONFIG_FILE)
    if not os.path.isfile(path):
        raise FileNotFoundError(
            f"{TSCONFIG_FILE} not found in '{project_dir}'. "
            f"Run typebuild from the root directory of your project."
        )
    try:
        return jsonc.load_file(path)
    except ValueError as e:
        raise ValueError(f"Invalid {TSCONFIG_FILE}: {e}") from e


def build_project_config(
        project_dir: str,
        tsconfig: Dict[str, Any],
) -> Tuple[ProjectConfig, List[str]]:
    """
    Derive a ProjectConfig from a decoded tsconfig document.

    Args:
        project_dir: Absolute project directory.
        tsconfig: Decoded tsconfig.json content.

    Returns:
        Tuple[ProjectConfig, List[str]]: The configuration and the list of
        warnings describing every defaulted option.
    """
    warnings: List[str] = []
    compiler_options = tsconfig.get("compilerOptions") or {}
    options = tsconfig.get(CONFIG_SECTION)

    if not isinstance(options, dict):
        warnings.append(
            f"No '{CONFIG_SECTION}' options set in {TSCONFIG_FILE}. Using defaults "
            f"(outDir: {DEFAULT_OUT_DIR}, indexFile: {DEFAULT_INDEX_FILE}); "
            f"type file imports and static files will be ignored."
        )
        options = {}

    raw_out_dir = compiler_options.get("outDir")
    if not raw_out_dir:
        if options:
            warnings.append(f"No output directory in {TSCONFIG_FILE}. Defaulted to '{DEFAULT_OUT_DIR}'.")
        raw_out_dir = DEFAULT_OUT_DIR

    raw_root_dir = compiler_options.get("rootDir")
    if not raw_root_dir:
        if options:
            warnings.append(f"No root directory in {TSCONFIG_FILE}. Defaulted to the project directory.")
        raw_root_dir = "."

    out_dir_name = clean_out_dir_name(str(raw_out_dir))

    configured_ignored = _as_str_list(options.get("ignoredDirs"), "ignoredDirs", warnings)
    if options and not configured_ignored:
        warnings.append(
            f"No ignored directories in {TSCONFIG_FILE}. "
            f"Defaulted to ['.git', 'node_modules', '{out_dir_name}']."
        )

    raw_index = options.get("indexFile")
    if options and not raw_index:
        warnings.append(f"No index name in {TSCONFIG_FILE}. Defaulted to '{DEFAULT_INDEX_FILE}'.")

    markers = _as_str_list(options.get("typeFileNames"), "typeFileNames", warnings)
    if options and not markers:
        warnings.append(f"No type files in {TSCONFIG_FILE}. Type file imports will be ignored.")

    assets = _as_str_list(options.get("staticFiles"), "staticFiles", warnings)
    if options and not assets:
        warnings.append(f"No static files in {TSCONFIG_FILE}. Static files will be ignored.")

    index_path = options.get("indexPath") or None
    if index_path is not None:
        index_path = posixpath.normpath(str(index_path).replace("\\", "/"))

    out_dir = resolve_against(project_dir, str(raw_out_dir))

    cfg = ProjectConfig(
        project_dir=project_dir,
        root_dir=resolve_against(project_dir, str(raw_root_dir)),
        out_dir=out_dir,
        out_dir_name=out_dir_name,
        ignored_dirs=normalize_ignored_dirs(configured_ignored, out_dir_name, out_dir),
        index_file_name=normalize_index_name(str(raw_index or DEFAULT_INDEX_FILE)),
        marker_source_names=tuple(markers),
        static_asset_paths=tuple(assets),
        index_path=index_path,
        strict=bool(compiler_options.get("strict", False)),
    )
    return cfg, warnings


def load_project_config(project_dir: str) -> Tuple[ProjectConfig, List[str]]:
    """
    Read tsconfig.json and build the immutable project configuration.

    Raises:
        FileNotFoundError: If tsconfig.json does not exist.
        ValueError: If tsconfig.json cannot be decoded.
    """
    project_dir = os.path.abspath(project_dir)
    tsconfig = read_tsconfig(project_dir)
    cfg, warnings = build_project_config(project_dir, tsconfig)
    logger.debug(f"Loaded project configuration: {cfg}")
    return cfg, warnings


def apply_overrides(cfg: ProjectConfig, overrides: Dict[str, Any]) -> ProjectConfig:
    """
    Return a copy of the configuration with command-line overrides applied.

    Recognized keys: 'out_dir', 'root_dir', 'index_file_name'. Changing the
    output directory recomputes the ignored directory set.
    """
    changes: Dict[str, Any] = {}

    out_dir = overrides.get("out_dir")
    if out_dir:
        out_dir_name = clean_out_dir_name(out_dir)
        configured = set(cfg.ignored_dirs) - {cfg.out_dir_name, cfg.out_dir}
        changes["out_dir"] = resolve_against(cfg.project_dir, out_dir)
        changes["out_dir_name"] = out_dir_name
        changes["ignored_dirs"] = normalize_ignored_dirs(configured, out_dir_name, changes["out_dir"])

    root_dir = overrides.get("root_dir")
    if root_dir:
        changes["root_dir"] = resolve_against(cfg.project_dir, root_dir)

    index_file_name = overrides.get("index_file_name")
    if index_file_name:
        changes["index_file_name"] = normalize_index_name(index_file_name)

    return replace(cfg, **changes) if changes else cfg
