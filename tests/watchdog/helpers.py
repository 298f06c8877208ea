"""Fake collaborators and registry helpers shared by the watchdog tests."""

from __future__ import annotations

import json
import pathlib
from datetime import datetime, timedelta, timezone
from typing import Any

from warden_tools.common.time_utils import format_iso_timestamp
from warden_tools.models.health import NudgeResult, TriageVerdict
from warden_tools.watchdog.backends import WatchdogBackends

NOW = datetime(2026, 1, 25, 12, 0, 0, tzinfo=timezone.utc)


def ago(seconds: float, now: datetime = NOW) -> str:
    return format_iso_timestamp(now - timedelta(seconds=seconds))


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeLiveness:
    def __init__(self, alive: dict[str, bool] | None = None, kill_error: Exception | None = None) -> None:
        self.alive = dict(alive or {})
        self.kill_error = kill_error
        self.probed: list[str] = []
        self.killed: list[str] = []

    def is_alive(self, tmux_session: str) -> bool:
        self.probed.append(tmux_session)
        return self.alive.get(tmux_session, False)

    def kill(self, tmux_session: str) -> bool:
        self.killed.append(tmux_session)
        if self.kill_error is not None:
            raise self.kill_error
        self.alive[tmux_session] = False
        return True


class FakeNudge:
    def __init__(self, result: NudgeResult | None = None, error: Exception | None = None) -> None:
        self.result = result or NudgeResult(True)
        self.error = error
        self.calls: list[tuple[pathlib.Path, str, str, bool]] = []

    def __call__(self, root: pathlib.Path, agent_name: str, message: str, force: bool) -> NudgeResult:
        self.calls.append((root, agent_name, message, force))
        if self.error is not None:
            raise self.error
        return self.result


class FakeTriage:
    def __init__(self, verdict: Any = TriageVerdict.EXTEND, error: Exception | None = None) -> None:
        self.verdict = verdict
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, agent_name: str, root: pathlib.Path, last_activity: str) -> Any:
        self.calls.append(
            {"agent_name": agent_name, "root": root, "last_activity": last_activity}
        )
        if self.error is not None:
            raise self.error
        return self.verdict


def make_backends(
    *,
    alive: dict[str, bool] | None = None,
    liveness: FakeLiveness | None = None,
    nudge: FakeNudge | None = None,
    triage: FakeTriage | None = None,
    clock: FakeClock | None = None,
) -> WatchdogBackends:
    return WatchdogBackends(
        liveness=liveness or FakeLiveness(alive),
        nudge=nudge or FakeNudge(),
        triage=triage or FakeTriage(),
        clock=clock or FakeClock(),
    )


def make_record(**overrides: Any) -> dict[str, Any]:
    """A raw sessions.json record for agent "builder-1"."""
    record: dict[str, Any] = {
        "id": "session-1-builder-1",
        "agentName": "builder-1",
        "capability": "builder",
        "worktreePath": "/tmp/wt/builder-1",
        "branchName": "agents/builder-1/task-1",
        "beadId": "task-1",
        "tmuxSession": "warden-builder-1",
        "state": "working",
        "pid": 4242,
        "parentAgent": None,
        "depth": 0,
        "startedAt": ago(3600),
        "lastActivity": ago(10),
        "escalationLevel": 0,
        "stalledSince": None,
    }
    record.update(overrides)
    return record


def sessions_path(root: pathlib.Path) -> pathlib.Path:
    return root / ".warden" / "sessions.json"


def write_registry(root: pathlib.Path, records: list[dict[str, Any]]) -> None:
    path = sessions_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2) + "\n")


def read_registry(root: pathlib.Path) -> list[dict[str, Any]]:
    return json.loads(sessions_path(root).read_text())
