from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the data structures and factory functions used to communicate build
results between the pipeline engine, its stages and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from typebuild.domain.config import ProjectConfig

# -----------------------------------------------------------------------------
# EXIT CODES
# -----------------------------------------------------------------------------
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# STAGE MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CompileOutcome:
    """
    Result of a compiler collaborator invocation.

    Attributes:
        ok: True if the compiler exited successfully.
        error: Failure description, empty on success.
        returncode: Process exit status (-1 if it could not be launched).
    """
    ok: bool
    error: str = ""
    returncode: int = 0


@dataclass(frozen=True)
class AssetReport:
    """
    Summary of a static asset placement run.

    Attributes:
        placed: Relative paths copied into the output tree.
        replaced: Subset of 'placed' whose destination existed beforehand.
        skipped: Relative paths skipped because the source was missing or invalid.
    """
    placed: List[str] = field(default_factory=list)
    replaced: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

# -----------------------------------------------------------------------------
# BUILD RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildResult:
    """
    Unified result of a complete build run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        exit_code: Process exit code the CLI should return.
        project_dir: Project directory the build ran in.
        out_dir: Absolute output directory.
        entry_points: Compiler inputs discovered by the tree walker.
        rewritten_files: Number of modules whose imports were rewritten.
        stripped_files: Number of modules with marker imports removed.
        placed_assets: Static assets copied into the output tree.
        skipped_assets: Static assets skipped with a warning.
        entry_path: Entry file relative to out_dir, if resolved.
        start_script: The 'start' command recorded in package.json.
        automation_choice: Normalized automation answer, if asked this run.
        warnings: Recoverable problems reported during the run.
        duration_ms: Wall-clock duration of the build.
    """
    ok: bool
    error: str
    exit_code: int

    project_dir: str
    out_dir: str

    entry_points: List[str] = field(default_factory=list)
    rewritten_files: int = 0
    stripped_files: int = 0
    placed_assets: List[str] = field(default_factory=list)
    skipped_assets: List[str] = field(default_factory=list)

    entry_path: Optional[str] = None
    start_script: Optional[str] = None
    automation_choice: Optional[str] = None

    warnings: List[str] = field(default_factory=list)
    duration_ms: int = 0

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        project_dir: str,
        cfg: Optional[ProjectConfig] = None,
        warnings: Optional[List[str]] = None,
        entry_points: Optional[List[str]] = None,
        duration_ms: int = 0,
) -> BuildResult:
    """
    Create a failed build result.

    Args:
        error: Detailed error description.
        project_dir: Directory the build was started in.
        cfg: Configuration, when it could be loaded before the failure.
        warnings: Warnings collected before the failure.
        entry_points: Compiler inputs, when traversal already ran.
        duration_ms: Elapsed time until the failure.

    Returns:
        BuildResult: An immutable error result.
    """
    return BuildResult(
        ok=False,
        error=error,
        exit_code=EXIT_FAILURE,
        project_dir=project_dir,
        out_dir=cfg.out_dir if cfg else "",
        entry_points=entry_points or [],
        warnings=warnings or [],
        duration_ms=duration_ms,
    )


def create_success_result(
        cfg: ProjectConfig,
        summary: Dict[str, Any],
        warnings: List[str],
        duration_ms: int,
) -> BuildResult:
    """
    Create a successful build result from the engine's stage summary.

    Args:
        cfg: Configuration used for the run.
        summary: Stage outputs keyed by BuildResult field name.
        warnings: Recoverable warnings reported during the run.
        duration_ms: Wall-clock duration of the build.

    Returns:
        BuildResult: An immutable success result.
    """
    return BuildResult(
        ok=True,
        error="",
        exit_code=EXIT_OK,
        project_dir=cfg.project_dir,
        out_dir=cfg.out_dir,
        entry_points=list(summary.get("entry_points", [])),
        rewritten_files=int(summary.get("rewritten_files", 0)),
        stripped_files=int(summary.get("stripped_files", 0)),
        placed_assets=list(summary.get("placed_assets", [])),
        skipped_assets=list(summary.get("skipped_assets", [])),
        entry_path=summary.get("entry_path"),
        start_script=summary.get("start_script"),
        automation_choice=summary.get("automation_choice"),
        warnings=list(warnings),
        duration_ms=duration_ms,
    )
