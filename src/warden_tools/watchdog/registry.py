"""Load and persist the session registry (``.warden/sessions.json``)."""

from __future__ import annotations

import pathlib

from warden_tools.common.logging import log_warning
from warden_tools.common.state import read_json_file, write_json_file
from warden_tools.errors import RegistryError
from warden_tools.models.session import AgentSession


def load_sessions(path: pathlib.Path) -> list[AgentSession]:
    """Load every session record from *path*.

    A missing file, invalid JSON, or a top-level value that is not a list
    all read as an empty registry. Entries that are not objects are skipped.
    """
    data = read_json_file(path, default=[])
    if not isinstance(data, list):
        log_warning(f"Session registry {path} is not a JSON array; treating as empty")
        return []
    return [AgentSession.from_dict(entry) for entry in data if isinstance(entry, dict)]


def save_sessions(path: pathlib.Path, sessions: list[AgentSession]) -> None:
    """Atomically replace *path* with *sessions*.

    Raises :class:`RegistryError` if the file cannot be written.
    """
    try:
        write_json_file(path, [s.to_dict() for s in sessions])
    except OSError as e:
        raise RegistryError(str(path), f"write failed: {e}") from e
