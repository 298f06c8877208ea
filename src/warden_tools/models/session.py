"""Model for one record of ``.warden/sessions.json``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AgentState(str, Enum):
    """Lifecycle states the watchdog cares about.

    Upstream tooling may write other values; those are kept verbatim as
    plain strings and treated as active.
    """

    BOOTING = "booting"
    WORKING = "working"
    ZOMBIE = "zombie"
    COMPLETED = "completed"


# JSON key -> attribute name, in the order records are written.
_FIELD_KEYS: dict[str, str] = {
    "id": "id",
    "agentName": "agent_name",
    "capability": "capability",
    "worktreePath": "worktree_path",
    "branchName": "branch_name",
    "beadId": "bead_id",
    "tmuxSession": "tmux_session",
    "state": "state",
    "pid": "pid",
    "parentAgent": "parent_agent",
    "depth": "depth",
    "startedAt": "started_at",
    "lastActivity": "last_activity",
    "escalationLevel": "escalation_level",
    "stalledSince": "stalled_since",
}


def parse_state(value: Any) -> AgentState | str:
    """Map a raw ``state`` value to :class:`AgentState` when it is a known one."""
    try:
        return AgentState(value)
    except ValueError:
        return str(value)


@dataclass
class AgentSession:
    id: str = ""
    agent_name: str = ""
    capability: str = ""
    worktree_path: str = ""
    branch_name: str = ""
    bead_id: str = ""
    tmux_session: str = ""
    state: AgentState | str = AgentState.BOOTING
    pid: int | None = None
    parent_agent: str | None = None
    depth: int = 0
    started_at: str = ""
    last_activity: str = ""
    escalation_level: int = 0
    stalled_since: str | None = None
    # Keys this model does not know about, written back untouched.
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_stalled(self) -> bool:
        return self.stalled_since is not None

    def clear_escalation(self) -> None:
        """End the current stall episode (level and start time reset together)."""
        self.escalation_level = 0
        self.stalled_since = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentSession:
        """Build a session from a registry record.

        Records written before escalation tracking existed lack
        ``escalationLevel``/``stalledSince``; they load as level 0, not stalled.
        """
        level = data.get("escalationLevel")
        return cls(
            id=data.get("id", ""),
            agent_name=data.get("agentName", ""),
            capability=data.get("capability", ""),
            worktree_path=data.get("worktreePath", ""),
            branch_name=data.get("branchName", ""),
            bead_id=data.get("beadId", ""),
            tmux_session=data.get("tmuxSession", ""),
            state=parse_state(data.get("state", AgentState.BOOTING.value)),
            pid=data.get("pid"),
            parent_agent=data.get("parentAgent"),
            depth=data.get("depth", 0),
            started_at=data.get("startedAt", ""),
            last_activity=data.get("lastActivity", ""),
            escalation_level=level if isinstance(level, int) and not isinstance(level, bool) else 0,
            stalled_since=data.get("stalledSince"),
            extra={k: v for k, v in data.items() if k not in _FIELD_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, attr in _FIELD_KEYS.items():
            value = getattr(self, attr)
            if isinstance(value, AgentState):
                value = value.value
            result[key] = value
        result.update(self.extra)
        return result
