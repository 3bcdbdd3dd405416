from __future__ import annotations

"""
Logging Handlers and Low-Level Utilities.

Provides the build log handler factory and the tagging mechanism that lets
the application tell its own handlers apart from handlers injected by test
runners or embedding applications.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from typebuild.infra.fs import safe_mkdir

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_typebuild_handler"


def _tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as managed by typebuild."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """Verify if a handler carries the typebuild tag."""
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Initialize the build log handler.

    A failure to open the log file must never break a build, so I/O errors
    are reported on stderr and None is returned.

    Args:
        log_file: Target path for the log file.
        level_int: Numeric logging level.
        formatter: Pre-configured logging formatter.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived files to keep.

    Returns:
        Optional[RotatingFileHandler]: Configured handler or None if I/O fails.
    """
    ok, err = safe_mkdir(os.path.dirname(os.path.abspath(log_file)))
    if not ok:
        sys.stderr.write(f"WARNING: Cannot create build log directory for '{log_file}': {err}\n")
        return None

    try:
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open build log at '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    _tag_handler(fh)
    return fh
