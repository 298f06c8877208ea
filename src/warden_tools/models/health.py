"""Models for health verdicts, escalation levels and remedial action results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


class HealthAction(Enum):
    """What the watchdog should do about a session this tick."""

    NONE = "none"
    ESCALATE = "escalate"
    INVESTIGATE = "investigate"
    TERMINATE = "terminate"


class HealthClass(Enum):
    """Why a verdict was reached."""

    HEALTHY = "healthy"
    STALLED = "stalled"
    UNRESPONSIVE = "unresponsive"  # alive, silent past the zombie threshold
    DEAD = "dead"  # tmux gone while the record says active
    CONFLICT = "conflict"  # record says zombie, tmux alive
    ZOMBIE = "zombie"  # record says zombie, tmux gone


class EscalationLevel(IntEnum):
    """Stages of the progressive stall policy."""

    WARN = 0
    NUDGE = 1
    TRIAGE = 2
    TERMINATE = 3


MAX_ESCALATION_LEVEL = EscalationLevel.TERMINATE


class TriageVerdict(Enum):
    """Decision returned by the higher-tier triage call."""

    RETRY = "retry"
    TERMINATE = "terminate"
    EXTEND = "extend"


@dataclass
class HealthCheck:
    """Per-tick, per-session verdict handed to the observer callback."""

    agent_name: str
    timestamp: str
    tmux_alive: bool
    last_activity: str
    state: str
    classification: HealthClass
    action: HealthAction
    reconciliation_note: str | None = None
    elapsed_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "agentName": self.agent_name,
            "timestamp": self.timestamp,
            "tmuxAlive": self.tmux_alive,
            "lastActivity": self.last_activity,
            "state": self.state,
            "classification": self.classification.value,
            "action": self.action.value,
            "reconciliationNote": self.reconciliation_note,
            "elapsedMs": self.elapsed_ms,
        }


@dataclass
class NudgeResult:
    delivered: bool
    reason: str | None = None


@dataclass
class ActionResult:
    """Outcome of a best-effort collaborator call whose failure is tolerated."""

    ok: bool
    error: str | None = None
