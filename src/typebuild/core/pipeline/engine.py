from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates the entire build workflow:
1. Loads tsconfig.json and package.json (fatal if missing or invalid).
2. Runs the strict-mode type check when enabled.
3. Discovers TypeScript inputs and invokes the compiler collaborator.
4. Rewrites relative import specifiers in the emitted modules.
5. Strips imports of marker (type-only) modules.
6. Places static assets into the output tree.
7. Resolves the entry module and records the start script.
8. Asks for the automation preference once per project.

Stages run strictly one after another; each finishes all of its file
system work before the next begins.
"""

import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional

from typebuild.core.pipeline.stages.assets import place_assets
from typebuild.core.pipeline.stages.entry import resolve_entry
from typebuild.core.pipeline.stages.manifest_updater import (
    INVALID_CHOICE,
    needs_automation_prompt,
    persist_automation_choice,
    persist_entry_point,
)
from typebuild.core.pipeline.stages.rewriter import rewrite_imports
from typebuild.core.pipeline.stages.stripper import strip_marker_imports
from typebuild.core.pipeline.worker import DEFAULT_WORKERS, ProgressCallback
from typebuild.core.services import compiler
from typebuild.core.services.scanner import enumerate_by_extension
from typebuild.domain.config import ProjectConfig, apply_overrides, load_project_config
from typebuild.domain.constants import DECLARATION_SUFFIX, SOURCE_EXTENSION
from typebuild.domain.manifest import load_manifest, manifest_path, require_module_manifest
from typebuild.domain.pipeline_models import (
    BuildResult,
    create_error_result,
    create_success_result,
)

logger = logging.getLogger(__name__)

# Receives a stage label and returns a progress callback for it
ProgressFactory = Callable[[str], Optional[ProgressCallback]]

# Returns the raw automation answer; None means "do not ask this run"
AutomationPrompt = Callable[[], Optional[str]]


def run_build(
        project_dir: str,
        *,
        overrides: Optional[Dict[str, Any]] = None,
        skip_typecheck: bool = False,
        max_workers: int = DEFAULT_WORKERS,
        prompt: Optional[AutomationPrompt] = None,
        progress: Optional[ProgressFactory] = None,
) -> BuildResult:
    """
    Execute the full build pipeline for a project.

    Args:
        project_dir: Directory holding tsconfig.json and package.json.
        overrides: Command-line configuration overrides.
        skip_typecheck: Skip 'tsc --noEmit' even if strict mode is on.
        max_workers: Concurrency used by the per-file stages.
        prompt: Supplies the automation answer when it has not been asked yet.
        progress: Creates a progress callback per stage label.

    Returns:
        BuildResult: Status, counters and warnings of the run.
    """
    start = time.monotonic()
    project_dir = os.path.abspath(project_dir)
    warnings: List[str] = []

    def _elapsed() -> int:
        return int((time.monotonic() - start) * 1000)

    def _warn(msg: str) -> None:
        logger.warning(msg)
        warnings.append(msg)

    def _progress(label: str) -> Optional[ProgressCallback]:
        return progress(label) if progress else None

    logger.info("typebuild Build Started...")

    # -------------------------------------------------------------------------
    # 1) Configuration & Manifest
    # -------------------------------------------------------------------------
    try:
        cfg, config_warnings = load_project_config(project_dir)
        cfg = apply_overrides(cfg, overrides or {})
        manifest_file = manifest_path(project_dir)
        require_module_manifest(manifest_file)
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return create_error_result(str(e), project_dir, duration_ms=_elapsed())

    for msg in config_warnings:
        _warn(msg)

    # -------------------------------------------------------------------------
    # 2) Type Check
    # -------------------------------------------------------------------------
    if cfg.strict and not skip_typecheck:
        outcome = compiler.check_types(project_dir)
        if not outcome.ok:
            msg = f"Types check failed. Fix your TypeScript errors before building. ({outcome.error})"
            logger.error(msg)
            return create_error_result(msg, project_dir, cfg, warnings, duration_ms=_elapsed())

    # -------------------------------------------------------------------------
    # 3) Discovery & Compilation
    # -------------------------------------------------------------------------
    entry_points = enumerate_by_extension(
        cfg.root_dir,
        SOURCE_EXTENSION,
        cfg.ignored_dirs,
        exclude_suffixes=(DECLARATION_SUFFIX,),
    )
    logger.info(f"Found {len(entry_points)} TypeScript files under {cfg.root_dir}")

    outcome = compiler.compile_sources(entry_points, cfg.out_dir, project_dir, cfg.root_dir)
    if not outcome.ok:
        msg = f"Build failed: {outcome.error}"
        logger.error(msg)
        return create_error_result(msg, project_dir, cfg, warnings, entry_points, _elapsed())

    # -------------------------------------------------------------------------
    # 4-6) Output Normalization
    # -------------------------------------------------------------------------
    summary: Dict[str, Any] = {"entry_points": entry_points}

    if os.path.isdir(cfg.out_dir):
        summary["rewritten_files"] = rewrite_imports(
            cfg.out_dir,
            cfg.ignored_dirs,
            max_workers=max_workers,
            progress_callback=_progress("Fixing import paths:"),
        )

        if cfg.marker_source_names:
            summary["stripped_files"] = strip_marker_imports(
                cfg.out_dir,
                cfg.marker_source_names,
                cfg.ignored_dirs,
                max_workers=max_workers,
                progress_callback=_progress("Checking type imports:"),
            )
        else:
            _warn("You didn't specify the type files.")
    else:
        _warn(f"Output directory {cfg.out_dir} was not created by the compiler.")

    if cfg.static_asset_paths:
        report = place_assets(
            cfg.static_asset_paths,
            cfg.root_dir,
            cfg.out_dir,
            progress_callback=_progress("Static files progress:"),
        )
        summary["placed_assets"] = report.placed
        summary["skipped_assets"] = report.skipped
        for rel_path in report.skipped:
            warnings.append(f"Static file {rel_path} was skipped.")
    else:
        _warn("You didn't specify the static files.")

    # -------------------------------------------------------------------------
    # 7) Entry Point
    # -------------------------------------------------------------------------
    entry_path = _resolve_entry_path(cfg)
    summary["entry_path"] = entry_path

    if entry_path:
        out_dir_ref = cfg.out_dir_name if not os.path.isabs(cfg.out_dir_name) else cfg.out_dir
        summary["start_script"] = persist_entry_point(manifest_file, out_dir_ref, entry_path)
    else:
        _warn("No index file found! You have to manually set the start script in package.json")

    # -------------------------------------------------------------------------
    # 8) Automation Preference
    # -------------------------------------------------------------------------
    summary["automation_choice"] = _ask_automation(manifest_file, prompt)
    if summary["automation_choice"] == INVALID_CHOICE:
        _warn("Invalid automation choice! No scripts added to package.json.")

    duration = _elapsed()
    logger.info(f"Build completed successfully in duration {duration} ms.")
    return create_success_result(cfg, summary, warnings, duration)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _resolve_entry_path(cfg: ProjectConfig) -> Optional[str]:
    """Use the explicit indexPath override or search the output tree."""
    if cfg.index_path:
        logger.debug(f"Using configured indexPath: {cfg.index_path}")
        return cfg.index_path
    return resolve_entry(cfg.out_dir, cfg.index_file_name, cfg.ignored_dirs)


def _ask_automation(manifest_file: str, prompt: Optional[AutomationPrompt]) -> Optional[str]:
    """Fire the automation prompt unless it was already answered for this project."""
    manifest = load_manifest(manifest_file)
    if not needs_automation_prompt(manifest):
        logger.info("You have already answered the question about running typebuild automatically! Skipping...")
        return None

    if prompt is None:
        logger.debug("No automation prompt available. Question deferred to the next run.")
        return None

    answer = prompt()
    if answer is None:
        return None
    return persist_automation_choice(manifest_file, answer)
