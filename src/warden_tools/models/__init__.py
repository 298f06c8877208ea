"""Data models for the watchdog's state files and verdicts."""

from warden_tools.models.health import (
    MAX_ESCALATION_LEVEL,
    ActionResult,
    EscalationLevel,
    HealthAction,
    HealthCheck,
    HealthClass,
    NudgeResult,
    TriageVerdict,
)
from warden_tools.models.session import AgentSession, AgentState

__all__ = [
    # health
    "MAX_ESCALATION_LEVEL",
    "ActionResult",
    "EscalationLevel",
    "HealthAction",
    "HealthCheck",
    "HealthClass",
    "NudgeResult",
    "TriageVerdict",
    # session
    "AgentSession",
    "AgentState",
]
