from __future__ import annotations

"""
Manifest Updater Stage.

Records the resolved entry point and the user's automation preference in
package.json. Each operation mutates the manifest it is given; the
'persist_*' helpers wrap them in their own load/save transaction.
"""

import logging
import posixpath
from typing import Optional

from typebuild.domain.constants import (
    AUTOMATION_COMMAND,
    AUTOMATION_SCRIPTS,
    DEFAULT_CHOICE,
)
from typebuild.domain.manifest import BuildManifest, manifest_transaction

logger = logging.getLogger(__name__)

INVALID_CHOICE = "invalid"


# -----------------------------------------------------------------------------
# ENTRY POINT
# -----------------------------------------------------------------------------

def start_script_for(out_dir: str, relative_entry_path: str) -> str:
    """
    Build the 'start' command for an entry file.

    >>> start_script_for("./dist", "server/index.js")
    'node dist/server/index.js'
    """
    joined = posixpath.normpath(posixpath.join(out_dir.replace("\\", "/"), relative_entry_path))
    return f"node {joined}"


def record_entry_point(manifest: BuildManifest, out_dir: str, relative_entry_path: str) -> str:
    """
    Set scripts.start to run the resolved entry file.

    Args:
        manifest: Manifest to mutate.
        out_dir: Output directory as configured (e.g. './dist').
        relative_entry_path: Entry path relative to out_dir.

    Returns:
        str: The recorded start command.
    """
    command = start_script_for(out_dir, relative_entry_path)
    manifest.scripts["start"] = command
    logger.info(f"Found index file: {command[len('node '):]}")
    return command


def persist_entry_point(manifest_file: str, out_dir: str, relative_entry_path: str) -> str:
    """Record the entry point inside its own manifest transaction."""
    with manifest_transaction(manifest_file) as manifest:
        return record_entry_point(manifest, out_dir, relative_entry_path)


# -----------------------------------------------------------------------------
# AUTOMATION PREFERENCE
# -----------------------------------------------------------------------------

def normalize_choice(raw: Optional[str]) -> str:
    """
    Map a raw answer onto 'y', 's', 'b', 'n' or 'invalid'.

    An empty answer selects the default (build only).
    """
    answer = (raw or "").strip().lower()
    if not answer:
        return DEFAULT_CHOICE
    if answer in AUTOMATION_SCRIPTS:
        return answer
    return INVALID_CHOICE


def needs_automation_prompt(manifest: BuildManifest) -> bool:
    """True until the automation question has been answered once."""
    return not manifest.asked_user


def record_automation_choice(manifest: BuildManifest, choice: Optional[str]) -> str:
    """
    Install the scripts matching the automation choice.

    | choice | scripts set          |
    |--------|----------------------|
    | y      | prestart, build      |
    | s      | prestart             |
    | b / '' | build (default)      |
    | n      | none                 |
    | other  | none (warning)       |

    'typebuild.askedUser' is set to true in every case.

    Args:
        manifest: Manifest to mutate.
        choice: Raw or normalized answer.

    Returns:
        str: The normalized choice.
    """
    normalized = normalize_choice(choice)

    if normalized == INVALID_CHOICE:
        logger.warning("Invalid choice! No scripts added to package.json!")
    else:
        script_names = AUTOMATION_SCRIPTS[normalized]
        for name in script_names:
            manifest.scripts[name] = AUTOMATION_COMMAND
        if script_names:
            logger.info(f"Added {' and '.join(script_names)} script(s) to package.json!")
        else:
            logger.warning("No scripts added to package.json!")

    manifest.typebuild["askedUser"] = True
    return normalized


def persist_automation_choice(manifest_file: str, choice: Optional[str]) -> str:
    """Record the automation choice inside its own manifest transaction."""
    with manifest_transaction(manifest_file) as manifest:
        return record_automation_choice(manifest, choice)
