"""Deliver a text nudge into an agent's tmux session.

Nudges to the same agent are debounced so a burst of callers does not
spam the agent's prompt. The watchdog always forces delivery; the debounce
exists for manual and agent-to-agent use.

Exit codes:
    0 - Nudge delivered
    1 - Not delivered (no session, dead session, debounced, send failed)
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from datetime import datetime
from typing import Sequence

from warden_tools.common.logging import log_error, log_success
from warden_tools.common.paths import WardenPaths
from warden_tools.common.repo import find_project_root
from warden_tools.common.state import read_json_file, write_json_file
from warden_tools.common.time_utils import (
    elapsed_ms,
    format_iso_timestamp,
    now_utc,
    parse_iso_timestamp,
)
from warden_tools.common.tmux_session import TmuxSession
from warden_tools.models.health import NudgeResult
from warden_tools.models.session import AgentSession, AgentState
from warden_tools.watchdog.registry import load_sessions

DEFAULT_DEBOUNCE_MS = 500
DEFAULT_MESSAGE = "Please check your current task and report status."

# Anything else, including states written by other tools, counts as active.
_TERMINAL_STATES = (AgentState.ZOMBIE, AgentState.COMPLETED)


def find_active_session(root: pathlib.Path, agent_name: str) -> AgentSession | None:
    """Return the non-terminal session registered for *agent_name*, if any."""
    for session in load_sessions(WardenPaths(root).sessions_file):
        if session.agent_name == agent_name and session.state not in _TERMINAL_STATES:
            return session
    return None


def _last_nudge(root: pathlib.Path, agent_name: str) -> datetime | None:
    data = read_json_file(WardenPaths(root).nudge_state_file)
    if not isinstance(data, dict):
        return None
    ts = data.get(agent_name)
    if not isinstance(ts, str):
        return None
    try:
        return parse_iso_timestamp(ts)
    except ValueError:
        return None


def _record_nudge(root: pathlib.Path, agent_name: str, when: datetime) -> None:
    path = WardenPaths(root).nudge_state_file
    data = read_json_file(path)
    if not isinstance(data, dict):
        data = {}
    data[agent_name] = format_iso_timestamp(when)
    write_json_file(path, data)


def nudge_agent(
    root: pathlib.Path,
    agent_name: str,
    message: str = DEFAULT_MESSAGE,
    force: bool = False,
    *,
    tmux_socket: str = "",
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    now: datetime | None = None,
) -> NudgeResult:
    """Type *message* into the agent's tmux session and press Enter.

    Business-level failures come back as ``NudgeResult(delivered=False)``
    with a reason; nothing is raised for them.
    """
    now = now or now_utc()

    session = find_active_session(root, agent_name)
    if session is None:
        return NudgeResult(False, f'No active session for agent "{agent_name}"')

    if not force:
        last = _last_nudge(root, agent_name)
        if last is not None:
            since = elapsed_ms(last, now)
            if 0 <= since < debounce_ms:
                return NudgeResult(False, f"Debounced: last nudge {since}ms ago")

    tmux = TmuxSession(session.tmux_session, tmux_socket)
    if not tmux.exists():
        return NudgeResult(False, f'Tmux session "{session.tmux_session}" is not alive')

    if not tmux.send_keys(message, "Enter"):
        return NudgeResult(False, f'Failed to send keys to "{session.tmux_session}"')

    _record_nudge(root, agent_name, now)
    return NudgeResult(True)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="warden-nudge",
        description="Send a nudge message to a running agent's tmux session",
    )
    parser.add_argument("agent", help="Agent name as recorded in .warden/sessions.json")
    parser.add_argument("message", nargs="?", default=DEFAULT_MESSAGE, help="Text to send")
    parser.add_argument(
        "--force", "-f", action="store_true", help="Skip the per-agent debounce"
    )
    args = parser.parse_args(argv)

    try:
        root = find_project_root()
    except FileNotFoundError as e:
        log_error(str(e))
        return 1

    result = nudge_agent(root, args.agent, args.message, args.force)
    if result.delivered:
        log_success(f"Nudged {args.agent}")
        return 0
    log_error(f"Nudge not delivered: {result.reason}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
