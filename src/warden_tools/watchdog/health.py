"""Health evaluation and lifecycle transitions for agent sessions.

Observable state is the source of truth: whether the tmux session is alive
outranks whatever the registry says. When the two disagree the record is
reconciled toward reality, except for one case that is only reported: a
record marked ``zombie`` whose tmux session is alive again. That needs a
human (or a higher tier) to decide, so it yields ``investigate`` and the
record is left alone.

Both functions here are pure; the tick orchestrator applies their results.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from warden_tools.common.logging import log_warning
from warden_tools.common.time_utils import elapsed_ms, format_iso_timestamp, parse_iso_timestamp
from warden_tools.models.health import HealthAction, HealthCheck, HealthClass
from warden_tools.models.session import AgentSession, AgentState

# Forward-only lifecycle ordering. Unknown upstream states rank with WORKING.
_STATE_RANK: dict[str, int] = {
    AgentState.BOOTING.value: 0,
    AgentState.WORKING.value: 1,
    AgentState.ZOMBIE.value: 2,
    AgentState.COMPLETED.value: 2,
}


@dataclass(frozen=True)
class HealthThresholds:
    stale_ms: int
    zombie_ms: int


def state_value(state: AgentState | str) -> str:
    return state.value if isinstance(state, AgentState) else state


def _activity_elapsed_ms(session: AgentSession, now: datetime) -> int:
    """Milliseconds since the session's last recorded activity.

    An unparseable timestamp counts as zero elapsed, so the session reads
    as healthy instead of being killed on bad bookkeeping.
    """
    try:
        last = parse_iso_timestamp(session.last_activity)
    except (ValueError, TypeError, AttributeError):
        log_warning(
            f"{session.agent_name}: unparseable lastActivity "
            f"{session.last_activity!r}; treating as recent"
        )
        return 0
    return elapsed_ms(last, now)


def evaluate_health(
    session: AgentSession,
    tmux_alive: bool,
    thresholds: HealthThresholds,
    now: datetime,
) -> HealthCheck:
    """Classify *session* and recommend an action for this tick."""
    state = state_value(session.state)
    elapsed = _activity_elapsed_ms(session, now)

    def verdict(
        classification: HealthClass, action: HealthAction, note: str | None = None
    ) -> HealthCheck:
        return HealthCheck(
            agent_name=session.agent_name,
            timestamp=format_iso_timestamp(now),
            tmux_alive=tmux_alive,
            last_activity=session.last_activity,
            state=state,
            classification=classification,
            action=action,
            reconciliation_note=note,
            elapsed_ms=elapsed,
        )

    if state == AgentState.ZOMBIE.value:
        if tmux_alive:
            return verdict(
                HealthClass.CONFLICT,
                HealthAction.INVESTIGATE,
                "Registry says zombie but tmux session is alive; needs investigation",
            )
        return verdict(HealthClass.ZOMBIE, HealthAction.NONE)

    if not tmux_alive:
        return verdict(
            HealthClass.DEAD,
            HealthAction.TERMINATE,
            f"tmux session is gone but registry says {state}; marking zombie",
        )

    if elapsed >= thresholds.zombie_ms:
        return verdict(
            HealthClass.UNRESPONSIVE,
            HealthAction.TERMINATE,
            f"No activity for {elapsed}ms (zombie threshold {thresholds.zombie_ms}ms)",
        )

    if elapsed >= thresholds.stale_ms:
        return verdict(HealthClass.STALLED, HealthAction.ESCALATE)

    return verdict(HealthClass.HEALTHY, HealthAction.NONE)


def transition_state(current: AgentState | str, action: HealthAction) -> AgentState | str:
    """Next lifecycle state for *current* given a verdict's *action*.

    Only ``terminate`` moves a session (to ``zombie``). The result never
    ranks below *current*.
    """
    if action is HealthAction.TERMINATE:
        target: AgentState | str = AgentState.ZOMBIE
    elif action in (HealthAction.INVESTIGATE, HealthAction.ESCALATE, HealthAction.NONE):
        target = current
    else:
        raise ValueError(f"Unhandled health action: {action!r}")

    if _state_rank(target) < _state_rank(current):
        return current
    return target


def _state_rank(state: AgentState | str) -> int:
    # Unknown upstream states rank as active.
    return _STATE_RANK.get(state_value(state), _STATE_RANK[AgentState.WORKING.value])


def resolve_next_state(
    transitioned: AgentState | str, escalation_terminated: bool
) -> AgentState | str:
    """Combine the transition result with the escalation controller's outcome.

    A termination decided by the escalation controller always wins over the
    transition function, which holds state for ``escalate``.
    """
    if escalation_terminated:
        return AgentState.ZOMBIE
    return transitioned
