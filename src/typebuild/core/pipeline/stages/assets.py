from __future__ import annotations

"""
Static Asset Placer Stage.

Copies configured static resources (files or whole directories) from the
source root into the output tree at the same relative path. An existing
destination is removed first so stale assets never survive a rebuild.
"""

import logging
import os
from typing import List, Optional, Sequence

from typebuild.core.pipeline.worker import ProgressCallback
from typebuild.domain.pipeline_models import AssetReport
from typebuild.infra.fs import copy_path, is_within, remove_path

logger = logging.getLogger(__name__)


def place_assets(
        static_asset_paths: Sequence[str],
        source_root: str,
        output_root: str,
        progress_callback: Optional[ProgressCallback] = None,
) -> AssetReport:
    """
    Copy static assets into the output tree, replacing previous copies.

    Missing sources, absolute paths, paths escaping the source root and
    directories that contain the output root are skipped with a warning.
    Copy failures are logged and the asset is reported as skipped.

    Args:
        static_asset_paths: Paths relative to the source root.
        source_root: Directory assets are read from.
        output_root: Directory assets are copied into.
        progress_callback: Receives processed / total as a percentage.

    Returns:
        AssetReport: Placed, replaced and skipped relative paths.
    """
    placed: List[str] = []
    replaced: List[str] = []
    skipped: List[str] = []

    total = len(static_asset_paths)
    if total == 0:
        logger.warning("No static files specified. Skipping static file placement.")
        return AssetReport()

    for current, rel_path in enumerate(static_asset_paths, start=1):
        src_path = os.path.normpath(os.path.join(source_root, rel_path))
        dest_path = os.path.normpath(os.path.join(output_root, rel_path))

        if os.path.isabs(rel_path) or not is_within(src_path, source_root) or src_path == os.path.normpath(source_root):
            logger.warning(f"Static file {rel_path} is not a path inside {source_root}! Skipping.")
            skipped.append(rel_path)
        elif not os.path.exists(src_path):
            logger.warning(f"Static file {src_path} does not exist! Skipping.")
            skipped.append(rel_path)
        elif is_within(output_root, src_path):
            logger.warning(f"Static file {rel_path} contains the output directory {output_root}! Skipping.")
            skipped.append(rel_path)
        else:
            try:
                if os.path.lexists(dest_path):
                    remove_path(dest_path)
                    replaced.append(rel_path)
                    logger.info(f"Removed existing static file: {dest_path}")
                copy_path(src_path, dest_path)
                placed.append(rel_path)
                logger.info(f"Copied static file: {src_path} to {dest_path}")
            except OSError as e:
                logger.error(f"Failed to copy static file {src_path}: {e}")
                skipped.append(rel_path)

        if progress_callback:
            progress_callback((current / total) * 100)

    logger.info("Done copying static files!")
    return AssetReport(placed=placed, replaced=replaced, skipped=skipped)
