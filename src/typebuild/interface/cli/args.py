from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides understood by the build engine.
"""

import argparse
from typing import Any, Dict

from typebuild.core.pipeline.worker import DEFAULT_WORKERS
from typebuild.domain.constants import AUTOMATION_SCRIPTS

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the typebuild CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="typebuild",
        description=(
            "Compile a TypeScript ES module project with esbuild and turn the "
            "output into a directly runnable tree."
        ),
    )

    # --- Path Management ---
    p.add_argument(
        "-p", "--project",
        dest="project_dir",
        default=".",
        help="Project directory containing tsconfig.json and package.json (default: current directory).",
    )
    p.add_argument(
        "--out-dir",
        dest="out_dir",
        default=None,
        help="Override compilerOptions.outDir.",
    )
    p.add_argument(
        "--root-dir",
        dest="root_dir",
        default=None,
        help="Override compilerOptions.rootDir.",
    )
    p.add_argument(
        "--index-file",
        dest="index_file_name",
        default=None,
        help="Override typebuild.indexFile (the entry file name to search for).",
    )

    # --- Automation Preference ---
    p.add_argument(
        "--automation",
        choices=sorted(AUTOMATION_SCRIPTS),
        default=None,
        help="Answer the automation question non-interactively (y: prestart+build, s: prestart, b: build, n: none).",
    )
    p.add_argument(
        "--no-prompt",
        action="store_true",
        help="Never ask the automation question during this run.",
    )

    # --- Runtime ---
    p.add_argument(
        "--skip-typecheck",
        action="store_true",
        help="Do not run 'tsc --noEmit' even when strict mode is enabled.",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"Number of files rewritten concurrently (default: {DEFAULT_WORKERS}).",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--no-log-file",
        action="store_true",
        help="Do not write build/logs/build.log.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the build result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Overrides for apply_overrides(); unset options are omitted.
    """
    overrides: Dict[str, Any] = {}
    for key in ("out_dir", "root_dir", "index_file_name"):
        value = getattr(args, key, None)
        if value:
            overrides[key] = value
    return overrides
