from __future__ import annotations

from .config import BUILD_LOG_RELPATH, LoggingConfig, default_build_log_path
from .core import configure_logging, get_logger, stop_logging

__all__ = [
    "BUILD_LOG_RELPATH",
    "LoggingConfig",
    "configure_logging",
    "default_build_log_path",
    "get_logger",
    "stop_logging",
]
