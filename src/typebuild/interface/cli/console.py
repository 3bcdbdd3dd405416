from __future__ import annotations

"""
Terminal Interaction Helpers.

Renders stage progress bars on stdout and asks the one-time automation
question. Both are presentation concerns only: the build engine receives
them as plain callables.
"""

import sys
from typing import Callable, Optional, TextIO

BAR_LENGTH = 40

AUTOMATION_QUESTION = (
    "\nDo you want to run typebuild automatically? "
    "[Y] - All [S] - Prestart script [B - Default] - Build only [N] - None: "
)


def render_bar(percent: float, prefix: str = "", bar_length: int = BAR_LENGTH) -> str:
    """
    Format a text progress bar.

    >>> render_bar(50, "Copy:", bar_length=4)
    'Copy: [██░░] 50%'
    """
    percent = max(0.0, min(100.0, percent))
    filled = int(round(percent / 100 * bar_length))
    bar = "█" * filled + "░" * (bar_length - filled)
    return f"{prefix} [{bar}] {int(round(percent))}%"


def make_progress_factory(
        stream: Optional[TextIO] = None,
        enabled: bool = True,
) -> Callable[[str], Optional[Callable[[float], None]]]:
    """
    Create the per-stage progress callback factory used by the engine.

    On a TTY the bar is redrawn in place; otherwise only the completed bar
    is printed once.
    """
    if stream is None:
        stream = sys.stdout
    interactive = bool(getattr(stream, "isatty", lambda: False)())

    def factory(label: str) -> Optional[Callable[[float], None]]:
        if not enabled:
            return None

        def update(percent: float) -> None:
            line = render_bar(percent, label)
            if interactive:
                stream.write("\r" + line)
                if percent >= 100:
                    stream.write("\n")
            elif percent >= 100:
                stream.write(line + "\n")
            stream.flush()

        return update

    return factory


def ask_automation(
        input_fn: Callable[[str], str] = input,
        interactive: Optional[bool] = None,
) -> Optional[str]:
    """
    Ask whether typebuild should be wired into package.json scripts.

    Returns None when stdin is not interactive or closed, so the question
    is deferred to a later run instead of being answered by default.
    """
    if interactive is None:
        interactive = sys.stdin.isatty()
    if not interactive:
        return None
    try:
        return input_fn(AUTOMATION_QUESTION)
    except EOFError:
        return None
