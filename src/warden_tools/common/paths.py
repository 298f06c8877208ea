"""Path constants for the ``.warden`` control directory.

Usage:
    paths = WardenPaths(project_root)
    print(paths.sessions_file)  # project_root/.warden/sessions.json
"""

from __future__ import annotations

from pathlib import Path


class WardenPaths:
    """Single source of truth for files under ``.warden/``."""

    WARDEN_DIR = ".warden"

    SESSIONS_FILE = "sessions.json"
    NUDGE_STATE_FILE = "nudge-state.json"
    PID_FILE = "watchdog.pid"
    STOP_WATCHDOG_FILE = "stop-watchdog"

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def warden_dir(self) -> Path:
        """Path to the .warden directory."""
        return self.root / self.WARDEN_DIR

    @property
    def sessions_file(self) -> Path:
        """Path to .warden/sessions.json (the session registry)."""
        return self.warden_dir / self.SESSIONS_FILE

    @property
    def nudge_state_file(self) -> Path:
        """Path to .warden/nudge-state.json (per-agent last nudge times)."""
        return self.warden_dir / self.NUDGE_STATE_FILE

    @property
    def pid_file(self) -> Path:
        return self.warden_dir / self.PID_FILE

    @property
    def stop_watchdog_file(self) -> Path:
        """Path to .warden/stop-watchdog (shutdown signal)."""
        return self.warden_dir / self.STOP_WATCHDOG_FILE
