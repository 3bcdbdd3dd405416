from __future__ import annotations

"""
Domain Constants.

Centralizes file names, default values and extension sets shared by the
configuration loader and the post-compilation stages.
"""

from typing import Dict, FrozenSet, Tuple

# -----------------------------------------------------------------------------
# PROJECT FILES
# -----------------------------------------------------------------------------
TSCONFIG_FILE = "tsconfig.json"
MANIFEST_FILE = "package.json"
CONFIG_SECTION = "typebuild"

# -----------------------------------------------------------------------------
# DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_OUT_DIR = "./dist"
DEFAULT_INDEX_FILE = "index.js"
ALWAYS_IGNORED_DIRS: Tuple[str, ...] = (".git", "node_modules")

# -----------------------------------------------------------------------------
# EXTENSIONS
# -----------------------------------------------------------------------------
SOURCE_EXTENSION = ".ts"
DECLARATION_SUFFIX = ".d.ts"
MODULE_EXTENSION = ".js"

# Extensions Node's ESM loader resolves without a rewrite
RUNTIME_EXTENSIONS: FrozenSet[str] = frozenset({".js", ".mjs", ".cjs", ".json"})

# -----------------------------------------------------------------------------
# AUTOMATION
# -----------------------------------------------------------------------------
AUTOMATION_COMMAND = "npx typebuild"

CHOICE_ALL = "y"
CHOICE_PRESTART = "s"
CHOICE_BUILD = "b"
CHOICE_NONE = "n"
DEFAULT_CHOICE = CHOICE_BUILD

# Scripts installed in package.json for each automation choice
AUTOMATION_SCRIPTS: Dict[str, Tuple[str, ...]] = {
    CHOICE_ALL: ("prestart", "build"),
    CHOICE_PRESTART: ("prestart",),
    CHOICE_BUILD: ("build",),
    CHOICE_NONE: (),
}

# -----------------------------------------------------------------------------
# COMPILER
# -----------------------------------------------------------------------------
ESBUILD_TARGET = "es2023"
