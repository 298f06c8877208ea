"""JSON state file I/O with atomic writes.

Readers never raise for missing or malformed files; they return the
caller's default instead.
"""

from __future__ import annotations

import json
import os
import pathlib
import tempfile
from typing import Any, TypeVar

T = TypeVar("T", dict[str, Any], list[Any])


def safe_parse_json(
    text: str,
    default: T | None = None,
) -> dict[str, Any] | list[Any]:
    """Parse JSON text, returning *default* (``{}`` if omitted) on failure.

    Examples:
        >>> safe_parse_json('[{"id": "a"}]')
        [{'id': 'a'}]
        >>> safe_parse_json('not json', default=[])
        []
    """
    if default is None:
        default = {}  # type: ignore[assignment]
    if not text or not text.strip():
        return default
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return default


def read_json_file(
    path: pathlib.Path,
    default: T | None = None,
) -> dict[str, Any] | list[Any]:
    """Read and parse a JSON file.

    Returns *default* (or ``{}``) if the file is missing, unreadable, not UTF-8, empty
    or not valid JSON.
    """
    if default is None:
        default = {}  # type: ignore[assignment]
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError):
        return default
    return safe_parse_json(text, default)


def write_json_file(
    path: pathlib.Path,
    data: dict[str, Any] | list[Any],
) -> None:
    """Write *data* to *path* atomically via a temp file and ``os.replace``.

    Output is indented and newline-terminated.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
