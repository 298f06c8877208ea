"""Project root detection."""

from __future__ import annotations

import pathlib

from warden_tools.common.paths import WardenPaths


def find_project_root(start: pathlib.Path | None = None) -> pathlib.Path:
    """Walk up from *start* (default cwd) to the directory holding ``.warden/``.

    Raises ``FileNotFoundError`` if no such directory is found.
    """
    current = (start or pathlib.Path.cwd()).resolve()

    while True:
        if (current / WardenPaths.WARDEN_DIR).is_dir():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent

    raise FileNotFoundError(
        f"Could not find a project directory containing {WardenPaths.WARDEN_DIR}/"
    )
