from __future__ import annotations

"""
Logging Configuration Models.

Defines the data structures and constants required to initialize the
logging subsystem for a build run.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Build log location, relative to the project directory
BUILD_LOG_RELPATH: str = os.path.join("build", "logs", "build.log")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem initialization.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable stderr stream output.
        log_file: Optional absolute path for the persistent build log.
        max_bytes: Maximum size per log segment before rotation.
        backup_count: Number of historical log segments to preserve.
        console_fmt: Structural format for terminal output.
        file_fmt: Structural format for file entries.
        datefmt: Chronological format for timestamp generation.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024  # 1MB per build log segment
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "[%(asctime)s] - %(levelname)s - %(name)s - %(message)s"
    datefmt: str = "%Y-%m-%dT%H:%M:%S"


def default_build_log_path(project_dir: str) -> str:
    """Return the build log path for a given project directory."""
    return os.path.join(os.path.abspath(project_dir), BUILD_LOG_RELPATH)
