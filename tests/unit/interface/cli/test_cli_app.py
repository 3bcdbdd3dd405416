from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

The build engine is patched so these tests only cover wiring: logging
lifecycle, prompt selection, result rendering and exit codes.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from typebuild.domain.pipeline_models import BuildResult, create_error_result
from typebuild.interface.cli import app

RUN_BUILD = "typebuild.interface.cli.app.run_build"


@pytest.fixture(autouse=True)
def no_logging_side_effects():
    with patch("typebuild.interface.cli.app.configure_logging"), \
            patch("typebuild.interface.cli.app.stop_logging") as mock_stop:
        yield mock_stop


def _ok_result(project: str) -> BuildResult:
    return BuildResult(
        ok=True,
        error="",
        exit_code=0,
        project_dir=project,
        out_dir=f"{project}/dist",
        entry_points=["a.ts"],
        rewritten_files=1,
        start_script="node dist/index.js",
    )


def test_success_exit_code_and_summary(tmp_path: Path, capsys) -> None:
    with patch(RUN_BUILD, return_value=_ok_result(str(tmp_path))):
        code = app.main(["-p", str(tmp_path), "--no-prompt", "--no-log-file"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Start script: node dist/index.js" in out
    assert "Modules with fixed imports: 1" in out


def test_failure_exit_code(tmp_path: Path, capsys) -> None:
    with patch(RUN_BUILD, return_value=create_error_result("tsconfig.json not found", str(tmp_path))):
        code = app.main(["-p", str(tmp_path), "--no-log-file"])

    assert code == 1
    assert "tsconfig.json not found" in capsys.readouterr().err


def test_json_output(tmp_path: Path, capsys) -> None:
    with patch(RUN_BUILD, return_value=_ok_result(str(tmp_path))):
        app.main(["-p", str(tmp_path), "--json", "--no-log-file"])

    payload = json.loads(capsys.readouterr().out.split("\nYou can view log", 1)[0])
    assert payload["ok"] is True
    assert payload["start_script"] == "node dist/index.js"


def test_prompt_wiring(tmp_path: Path) -> None:
    with patch(RUN_BUILD, return_value=_ok_result(str(tmp_path))) as mock_run:
        app.main(["-p", str(tmp_path), "--automation", "s", "--no-log-file"])
    assert mock_run.call_args.kwargs["prompt"]() == "s"

    with patch(RUN_BUILD, return_value=_ok_result(str(tmp_path))) as mock_run:
        app.main(["-p", str(tmp_path), "--no-prompt", "--no-log-file"])
    assert mock_run.call_args.kwargs["prompt"] is None


def test_overrides_and_workers_forwarded(tmp_path: Path) -> None:
    with patch(RUN_BUILD, return_value=_ok_result(str(tmp_path))) as mock_run:
        app.main(["-p", str(tmp_path), "--out-dir", "out", "--workers", "0", "--skip-typecheck", "--no-log-file"])

    kwargs = mock_run.call_args.kwargs
    assert kwargs["overrides"] == {"out_dir": "out"}
    assert kwargs["max_workers"] == 1
    assert kwargs["skip_typecheck"] is True


def test_interrupt_returns_130(tmp_path: Path, no_logging_side_effects) -> None:
    with patch(RUN_BUILD, side_effect=KeyboardInterrupt):
        code = app.main(["-p", str(tmp_path), "--no-log-file"])

    assert code == 130
    no_logging_side_effects.assert_called_once()


def test_unexpected_error_returns_1(tmp_path: Path, no_logging_side_effects) -> None:
    with patch(RUN_BUILD, side_effect=RuntimeError("boom")):
        code = app.main(["-p", str(tmp_path), "--no-log-file"])

    assert code == 1
    no_logging_side_effects.assert_called_once()
