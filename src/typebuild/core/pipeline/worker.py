from __future__ import annotations

"""
Per-File Task Dispatcher.

Runs an independent read-modify-write task over a list of files. Tasks have
no ordering dependency between files, so they may run on a thread pool; the
results are still returned in input order and progress is reported as files
complete.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

DEFAULT_WORKERS = 4


def run_file_tasks(
        paths: Sequence[str],
        task: Callable[[str], bool],
        *,
        max_workers: int = DEFAULT_WORKERS,
        progress_callback: Optional[ProgressCallback] = None,
) -> List[bool]:
    """
    Execute 'task' once per file and collect its modified flags.

    A task that raises OSError or UnicodeDecodeError is logged and counted
    as "not modified"; other exceptions propagate.

    Args:
        paths: Files to process.
        task: Callable returning True if it rewrote the file.
        max_workers: Thread pool size; 1 runs sequentially in the caller thread.
        progress_callback: Receives the completion percentage (0.0 - 100.0).

    Returns:
        List[bool]: Modified flag per input path, in input order.
    """
    total = len(paths)
    if total == 0:
        return []

    def _guarded(path: str) -> bool:
        try:
            return task(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to process {path}: {e}")
            return False

    results: List[bool] = []

    if max_workers <= 1:
        for path in paths:
            results.append(_guarded(path))
            _report(progress_callback, len(results), total)
        return results

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="TypebuildWorker") as executor:
        for modified in executor.map(_guarded, paths):
            results.append(modified)
            _report(progress_callback, len(results), total)

    return results


def _report(progress_callback: Optional[ProgressCallback], current: int, total: int) -> None:
    if progress_callback:
        progress_callback((current / total) * 100)
