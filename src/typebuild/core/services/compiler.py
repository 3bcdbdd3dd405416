from __future__ import annotations

"""
Compiler Collaborator.

Thin subprocess adapter around the external tools: 'tsc --noEmit' for strict
type checking and 'esbuild' for type stripping. esbuild runs without
bundling, so it emits one ES module (plus source map) per input, mirroring
the input's relative location under the output directory.
"""

import logging
import os
import shutil
import subprocess
from typing import List, Optional, Sequence

from typebuild.domain.constants import ESBUILD_TARGET
from typebuild.domain.pipeline_models import CompileOutcome

logger = logging.getLogger(__name__)


def _npx() -> str:
    """Resolve the npx launcher ('npx.cmd' on Windows)."""
    return shutil.which("npx") or ("npx.cmd" if os.name == "nt" else "npx")


def build_esbuild_command(entry_points: Sequence[str], out_dir: str, root_dir: Optional[str] = None) -> List[str]:
    """
    Compose the esbuild invocation for a list of inputs.

    Args:
        entry_points: Absolute paths of the TypeScript inputs.
        out_dir: Absolute output directory.
        root_dir: Directory whose structure is mirrored under out_dir.

    Returns:
        List[str]: argv suitable for subprocess.
    """
    cmd = [_npx(), "esbuild", *entry_points]
    cmd += [
        f"--outdir={out_dir}",
        "--format=esm",
        f"--target={ESBUILD_TARGET}",
        "--platform=node",
        "--sourcemap",
        "--charset=utf8",
    ]
    if root_dir:
        cmd.append(f"--outbase={root_dir}")
    return cmd


def _run(cmd: List[str], cwd: str, label: str) -> CompileOutcome:
    """Run a tool, streaming its output to the terminal."""
    logger.debug(f"Running {label}: {' '.join(cmd)}")
    try:
        completed = subprocess.run(cmd, cwd=cwd, check=False)
    except OSError as e:
        return CompileOutcome(ok=False, error=f"{label} could not be started: {e}", returncode=-1)

    if completed.returncode != 0:
        return CompileOutcome(
            ok=False,
            error=f"{label} failed with exit code {completed.returncode}",
            returncode=completed.returncode,
        )
    return CompileOutcome(ok=True, returncode=0)


def check_types(project_dir: str) -> CompileOutcome:
    """
    Run the TypeScript compiler in check-only mode.

    Returns:
        CompileOutcome: ok=False if type errors were reported.
    """
    logger.info("Checking TypeScript types (strict mode)...")
    outcome = _run([_npx(), "tsc", "--noEmit"], project_dir, "Type check")
    if outcome.ok:
        logger.info("Types check passed!")
    return outcome


def compile_sources(
        entry_points: Sequence[str],
        out_dir: str,
        project_dir: str,
        root_dir: Optional[str] = None,
) -> CompileOutcome:
    """
    Strip types from every input and emit ES modules into out_dir.

    Args:
        entry_points: TypeScript inputs discovered by the tree walker.
        out_dir: Absolute output directory.
        project_dir: Working directory for the compiler process.
        root_dir: Source root mirrored under out_dir.

    Returns:
        CompileOutcome: Result of the esbuild process.
    """
    if not entry_points:
        logger.warning("No TypeScript files found. Nothing to compile.")
        return CompileOutcome(ok=True)

    logger.info(f"Compiling {len(entry_points)} TypeScript files into {out_dir}")
    cmd = build_esbuild_command(entry_points, out_dir, root_dir)
    return _run(cmd, project_dir, "esbuild")
