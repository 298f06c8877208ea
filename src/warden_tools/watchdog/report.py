"""Human-readable output for health verdicts and registry status."""

from __future__ import annotations

from datetime import datetime

from warden_tools.common.logging import log_debug, log_error, log_warning
from warden_tools.common.time_utils import elapsed_ms, format_duration, parse_iso_timestamp
from warden_tools.models.health import HealthAction, HealthCheck
from warden_tools.models.session import AgentSession
from warden_tools.watchdog.health import state_value


def log_health_check(check: HealthCheck) -> None:
    """Default observer: log each verdict at a level matching its action."""
    idle = format_duration(check.elapsed_ms // 1000)
    line = (
        f"{check.agent_name}: {check.classification.value} -> {check.action.value} "
        f"(state={check.state}, tmux={'alive' if check.tmux_alive else 'dead'}, idle={idle})"
    )
    if check.reconciliation_note:
        line += f" - {check.reconciliation_note}"

    if check.action is HealthAction.TERMINATE:
        log_error(line)
    elif check.action in (HealthAction.ESCALATE, HealthAction.INVESTIGATE):
        log_warning(line)
    else:
        log_debug(line)


def _idle(session: AgentSession, now: datetime) -> str:
    try:
        last = parse_iso_timestamp(session.last_activity)
    except (ValueError, TypeError, AttributeError):
        return "?"
    return format_duration(elapsed_ms(last, now) // 1000)


def format_status(sessions: list[AgentSession], now: datetime) -> str:
    """Render the registry as a fixed-width table."""
    if not sessions:
        return "No sessions registered"

    header = f"{'AGENT':<24} {'STATE':<10} {'IDLE':<12} {'LEVEL':<6} TMUX"
    lines = [header, "-" * len(header)]
    for s in sessions:
        lines.append(
            f"{s.agent_name:<24} {state_value(s.state):<10} {_idle(s, now):<12} "
            f"{s.escalation_level:<6} {s.tmux_session}"
        )
    return "\n".join(lines)
