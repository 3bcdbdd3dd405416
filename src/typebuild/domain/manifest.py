from __future__ import annotations

"""
Build Manifest Persistence.

Wraps the project's package.json. The manifest is always written back to the
path it was read from, and every mutation happens inside a scoped
load-mutate-save transaction so that the entry-point update and the
automation preference update never depend on each other.
"""

import json
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

from typebuild.domain.constants import CONFIG_SECTION, MANIFEST_FILE
from typebuild.infra import jsonc
from typebuild.infra.fs import write_text_atomic

logger = logging.getLogger(__name__)


@dataclass
class BuildManifest:
    """
    In-memory view of package.json.

    Attributes:
        path: Absolute path the manifest was read from.
        data: Decoded document, mutated in place.
    """
    path: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def scripts(self) -> Dict[str, str]:
        """The 'scripts' mapping, created on first access."""
        scripts = self.data.get("scripts")
        if not isinstance(scripts, dict):
            scripts = {}
            self.data["scripts"] = scripts
        return scripts

    @property
    def typebuild(self) -> Dict[str, Any]:
        """The 'typebuild' sub-record, created on first access."""
        section = self.data.get(CONFIG_SECTION)
        if not isinstance(section, dict):
            section = {}
            self.data[CONFIG_SECTION] = section
        return section

    @property
    def asked_user(self) -> bool:
        section = self.data.get(CONFIG_SECTION)
        return isinstance(section, dict) and bool(section.get("askedUser"))

    @property
    def is_module(self) -> bool:
        return self.data.get("type") == "module"


# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

def manifest_path(project_dir: str) -> str:
    return os.path.join(os.path.abspath(project_dir), MANIFEST_FILE)


def load_manifest(path: str) -> BuildManifest:
    """
    Read package.json.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ValueError: If the manifest is not a JSON object.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(
            f"{MANIFEST_FILE} not found at '{path}'. "
            f"Run typebuild from the root directory of your project."
        )
    try:
        data = jsonc.load_file(path)
    except ValueError as e:
        raise ValueError(f"Invalid {MANIFEST_FILE}: {e}") from e
    return BuildManifest(path=path, data=data)


def save_manifest(manifest: BuildManifest) -> None:
    """
    Persist the manifest to the location it was read from.

    Raises:
        OSError: If the file cannot be written.
    """
    content = json.dumps(manifest.data, ensure_ascii=False, indent=2) + "\n"
    write_text_atomic(manifest.path, content)
    logger.debug(f"Manifest saved to {manifest.path}")


def require_module_manifest(path: str) -> BuildManifest:
    """
    Load the manifest and check it declares ES module mode.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ValueError: If it is invalid or 'type' is not 'module'.
    """
    manifest = load_manifest(path)
    if not manifest.is_module:
        raise ValueError(f"{MANIFEST_FILE} must have 'type' set to 'module' for ES module support.")
    return manifest


@contextmanager
def manifest_transaction(path: str) -> Iterator[BuildManifest]:
    """
    Load the manifest, yield it for mutation and save it on clean exit.

    Nothing is written if the body raises.

    Usage:
        with manifest_transaction(path) as manifest:
            manifest.scripts["start"] = "node dist/index.js"
    """
    manifest = load_manifest(path)
    yield manifest
    save_manifest(manifest)
