"""Thin wrapper around the tmux CLI for agent sessions.

Every method swallows subprocess failures and reports them through its
return value; callers decide whether a failure matters.
"""

from __future__ import annotations

import subprocess


class TmuxSession:
    """A single named tmux session, optionally on a dedicated ``-L`` socket."""

    def __init__(self, name: str, server_name: str = "") -> None:
        self.name = name
        self.server_name = server_name

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a tmux command against this session's server."""
        cmd = ["tmux"]
        if self.server_name:
            cmd += ["-L", self.server_name]
        return subprocess.run(
            [*cmd, *args],
            capture_output=True,
            text=True,
            check=False,
        )

    def exists(self) -> bool:
        """Check if this tmux session exists."""
        try:
            result = self._run("has-session", "-t", self.name)
            return result.returncode == 0
        except Exception:
            return False

    def kill(self) -> bool:
        """Kill this tmux session. Returns False if tmux reported a failure."""
        try:
            result = self._run("kill-session", "-t", self.name)
            return result.returncode == 0
        except Exception:
            return False

    def send_keys(self, keys: str, *extra: str) -> bool:
        """Send keys to this tmux session.

        Extra arguments go straight to ``tmux send-keys`` (e.g. "Enter").
        """
        try:
            result = self._run("send-keys", "-t", self.name, keys, *extra)
            return result.returncode == 0
        except Exception:
            return False

    def capture_scrollback(self, lines: int = 200) -> str:
        """Capture the last *lines* lines of pane history, or "" on failure."""
        try:
            result = self._run(
                "capture-pane", "-t", self.name, "-p", "-S", f"-{lines}"
            )
            return result.stdout if result.returncode == 0 else ""
        except Exception:
            return ""
