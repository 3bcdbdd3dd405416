from __future__ import annotations

"""
JSON-with-Comments Reader.

TypeScript configuration files allow '//' and '/* */' comments as well as
trailing commas. This module removes both while leaving string literals
untouched, then delegates to the standard JSON decoder.
"""

import json
import re
from typing import Any, Dict, List

_TRAILING_COMMA_RX = re.compile(r",(\s*[}\]])")


def strip_comments(text: str) -> str:
    """
    Remove line and block comments from JSONC text.

    Newlines inside removed comments are preserved so decoder error
    positions still point at the right line.

    Args:
        text: Raw JSONC document.

    Returns:
        str: Document without comments.
    """
    out: List[str] = []
    i = 0
    n = len(text)
    in_string = False
    escaped = False

    while i < n:
        c = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if in_string:
            out.append(c)
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_string = False
            i += 1
            continue

        if c == '"':
            in_string = True
            out.append(c)
            i += 1
            continue

        if c == "/" and nxt == "/":
            while i < n and text[i] != "\n":
                i += 1
            continue

        if c == "/" and nxt == "*":
            i += 2
            while i < n and not (text[i] == "*" and i + 1 < n and text[i + 1] == "/"):
                if text[i] == "\n":
                    out.append("\n")
                i += 1
            i += 2
            continue

        out.append(c)
        i += 1

    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing brace or bracket, outside strings."""
    parts = re.split(r'("(?:\\.|[^"\\])*")', text)
    for idx in range(0, len(parts), 2):
        parts[idx] = _TRAILING_COMMA_RX.sub(r"\1", parts[idx])
    return "".join(parts)


def loads(text: str) -> Any:
    """
    Decode a JSONC document.

    Raises:
        ValueError: If the cleaned document is not valid JSON.
    """
    cleaned = _strip_trailing_commas(strip_comments(text)).strip()
    if not cleaned:
        return None
    return json.loads(cleaned)


def load_file(path: str) -> Dict[str, Any]:
    """
    Read and decode a JSONC file that must contain a JSON object.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content is not a JSON object.
    """
    with open(path, "r", encoding="utf-8-sig") as f:
        raw = f.read()
    data = loads(raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in '{path}', found {type(data).__name__}.")
    return data
