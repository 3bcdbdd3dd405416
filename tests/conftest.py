from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures that lay out a minimal TypeScript project and an
   already-compiled output tree.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def tsconfig_dict() -> Dict[str, Any]:
    """
    Return a complete tsconfig.json document with every typebuild option set.

    Returns:
        Dict[str, Any]: A sample tsconfig document.
    """
    return {
        "compilerOptions": {
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": False,
        },
        "typebuild": {
            "ignoredDirs": ["fixtures"],
            "indexFile": "index",
            "typeFileNames": ["types.ts"],
            "staticFiles": ["public"],
        },
    }


@pytest.fixture
def ts_project(tmp_path: Path, tsconfig_dict: Dict[str, Any]) -> Path:
    """
    Create a TypeScript project ready to be built.

    Structure:
    /project
      tsconfig.json
      package.json
      /src
        index.ts
        util.ts
        types.ts
        types.d.ts
        /public
          logo.txt
        /fixtures
          ignored.ts
    """
    project = tmp_path / "project"
    src = project / "src"
    (src / "public").mkdir(parents=True)
    (src / "fixtures").mkdir()

    (src / "index.ts").write_text(
        "import { helper } from './util';\n"
        "import { Shape } from './types';\n"
        "helper();\n",
        encoding="utf-8",
    )
    (src / "util.ts").write_text("export function helper(): void {}\n", encoding="utf-8")
    (src / "types.ts").write_text("export interface Shape { x: number }\n", encoding="utf-8")
    (src / "types.d.ts").write_text("declare const x: number;\n", encoding="utf-8")
    (src / "public" / "logo.txt").write_text("logo", encoding="utf-8")
    (src / "fixtures" / "ignored.ts").write_text("export {};\n", encoding="utf-8")

    (project / "tsconfig.json").write_text(json.dumps(tsconfig_dict, indent=2), encoding="utf-8")
    (project / "package.json").write_text(
        json.dumps({"name": "demo", "type": "module"}, indent=2),
        encoding="utf-8",
    )
    return project


@pytest.fixture
def fake_compile():
    """
    Return a stand-in for the esbuild invocation.

    It writes one '.js' module per input, mirroring the input's location
    relative to root_dir, and carries the source text over unchanged so the
    post-compile stages have real import statements to work on.
    """
    from typebuild.domain.pipeline_models import CompileOutcome

    def _compile(entry_points, out_dir, project_dir, root_dir=None):
        for src in entry_points:
            rel = os.path.relpath(src, root_dir or project_dir)
            dest = os.path.join(out_dir, os.path.splitext(rel)[0] + ".js")
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            with open(src, "r", encoding="utf-8") as f_in, open(dest, "w", encoding="utf-8") as f_out:
                f_out.write(f_in.read())
        return CompileOutcome(ok=True)

    return _compile
