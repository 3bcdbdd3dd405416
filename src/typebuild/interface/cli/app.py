from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: argument parsing, build log initialization,
pipeline execution and result rendering. Maps the build result onto process
exit codes: 0 on completion (warnings included), 1 on fatal configuration or
compiler errors, 130 when interrupted.
"""

import json
import sys
from dataclasses import asdict
from typing import List, Optional

from typebuild.core.pipeline.engine import run_build
from typebuild.domain.pipeline_models import EXIT_FAILURE, EXIT_INTERRUPTED, BuildResult
from typebuild.infra.fs import normalize_path
from typebuild.infra.logging import (
    LoggingConfig,
    configure_logging,
    default_build_log_path,
    get_logger,
    stop_logging,
)
from typebuild.interface.cli import args as cli_args
from typebuild.interface.cli.console import ask_automation, make_progress_factory

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)
    project_dir = normalize_path(args.project_dir, ".")

    # 2. Logging bootstrap: console + build/logs/build.log
    log_file = None if args.no_log_file else default_build_log_path(project_dir)
    logging_conf = LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=log_file,
    )
    configure_logging(logging_conf, force=True)
    logger.info("===BUILD START===")

    # 3. Interaction wiring
    if args.automation:
        prompt = lambda: args.automation  # noqa: E731
    elif args.no_prompt:
        prompt = None
    else:
        prompt = ask_automation

    progress = make_progress_factory(enabled=not args.json_output)

    # 4. Pipeline execution phase
    try:
        result = run_build(
            project_dir,
            overrides=cli_args.args_to_overrides(args),
            skip_typecheck=bool(args.skip_typecheck),
            max_workers=max(1, int(args.workers)),
            prompt=prompt,
            progress=progress,
        )
    except KeyboardInterrupt:
        logger.warning("Build interrupted by user.")
        _finish(log_file)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Build failed: {e}", exc_info=True)
        _finish(log_file)
        return EXIT_FAILURE

    # 5. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    _finish(log_file)
    return result.exit_code

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    """
    Format and print the build result to standard output.

    Args:
        result: The build result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print(f"Build completed in {result.duration_ms} ms.")
    print(f"Output directory: {result.out_dir}")

    stats = {
        "TypeScript files compiled": len(result.entry_points),
        "Modules with fixed imports": result.rewritten_files,
        "Modules with type imports removed": result.stripped_files,
        "Static files copied": len(result.placed_assets),
    }
    for label, value in stats.items():
        print(f"{label}: {value}")

    if result.start_script:
        print(f"Start script: {result.start_script}")
    else:
        print("Start script: not set (no index file found)")

    if result.warnings:
        print(f"Warnings: {len(result.warnings)}")


def _finish(log_file: Optional[str]) -> None:
    """Close the build log frame and flush pending records."""
    logger.info("===BUILD END===")
    if log_file:
        print("You can view log in ./build/logs")
    stop_logging()

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
