"""Progressive escalation for stalled agents.

Once a session is judged stalled it climbs one level per nudge interval
of continuous stall time:

    Level 0 (warn):      No direct action; the health-check observer is the warning
    Level 1 (nudge):     Forced tmux nudge asking the agent to report status
    Level 2 (triage):    Ask the Tier 1 triage agent (if enabled), else wait
    Level 3 (terminate): Kill the tmux session

The level is recomputed from wall-clock time on every tick, not bumped per
tick, so a paused daemon catches up to the right level on its next run and
repeated ticks at the same moment change nothing.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass
from datetime import datetime

from warden_tools.common.logging import log_info, log_warning
from warden_tools.common.time_utils import elapsed_ms, format_iso_timestamp, parse_iso_timestamp
from warden_tools.models.health import (
    MAX_ESCALATION_LEVEL,
    ActionResult,
    EscalationLevel,
    TriageVerdict,
)
from warden_tools.models.session import AgentSession, AgentState
from warden_tools.watchdog.backends import WatchdogBackends, attempt


def stall_message(agent_name: str) -> str:
    return (
        f'[WATCHDOG] Agent "{agent_name}" appears stalled. '
        "Please check your current task and report status."
    )


RETRY_MESSAGE = (
    "[WATCHDOG] Triage suggests recovery is possible. "
    "Please retry your current operation or check for errors."
)


@dataclass
class EscalationOutcome:
    terminated: bool = False
    # True when the session record was mutated (stall start or level raise).
    changed: bool = False


def target_level(stalled_ms: int, nudge_interval_ms: int) -> int:
    """Escalation level implied by *stalled_ms* of continuous stall."""
    if stalled_ms <= 0:
        return int(EscalationLevel.WARN)
    return min(stalled_ms // nudge_interval_ms, int(MAX_ESCALATION_LEVEL))


def kill_if_alive(
    backends: WatchdogBackends, session: AgentSession, tmux_alive: bool
) -> ActionResult | None:
    """Kill the session's tmux session if it was alive at evaluation time.

    Returns None when no kill was attempted. A failed kill is benign: the
    session may have died between the probe and the kill.
    """
    if not tmux_alive:
        return None
    return attempt(
        f"Kill tmux session {session.tmux_session}",
        backends.liveness.kill,
        session.tmux_session,
    )


def send_nudge(
    backends: WatchdogBackends, root: pathlib.Path, session: AgentSession, message: str
) -> ActionResult:
    # Watchdog nudges always bypass the delivery debounce.
    return attempt(
        f"Nudge {session.agent_name}",
        backends.nudge,
        root,
        session.agent_name,
        message,
        True,
    )


class EscalationController:
    """Applies the escalation policy to one stalled session at a time."""

    def __init__(
        self,
        root: pathlib.Path,
        backends: WatchdogBackends,
        *,
        nudge_interval_ms: int,
        tier1_enabled: bool = False,
    ) -> None:
        self.root = root
        self.backends = backends
        self.nudge_interval_ms = nudge_interval_ms
        self.tier1_enabled = tier1_enabled

    def advance(self, session: AgentSession, tmux_alive: bool, now: datetime) -> EscalationOutcome:
        """Start or continue the stall episode and run the current level's action."""
        outcome = EscalationOutcome()

        stalled_ms = self._stalled_ms(session, now)
        if stalled_ms is None:
            session.stalled_since = format_iso_timestamp(now)
            session.escalation_level = int(EscalationLevel.WARN)
            outcome.changed = True
            stalled_ms = 0
            log_warning(f"{session.agent_name}: stall detected, escalation level 0 (warn)")

        level = target_level(stalled_ms, self.nudge_interval_ms)
        if level > session.escalation_level:
            log_warning(
                f"{session.agent_name}: escalation level "
                f"{session.escalation_level} -> {level}"
            )
            session.escalation_level = level
            outcome.changed = True

        if self._execute(session, tmux_alive):
            session.state = AgentState.ZOMBIE
            session.clear_escalation()
            outcome.terminated = True
            outcome.changed = True

        return outcome

    @staticmethod
    def _stalled_ms(session: AgentSession, now: datetime) -> int | None:
        """Stall duration so far, or None when no valid episode is running.

        An unparseable ``stalledSince`` restarts the episode.
        """
        if session.stalled_since is None:
            return None
        try:
            since = parse_iso_timestamp(session.stalled_since)
        except (ValueError, TypeError, AttributeError):
            return None
        return elapsed_ms(since, now)

    def _execute(self, session: AgentSession, tmux_alive: bool) -> bool:
        """Run the action for the session's current level. Returns True if terminated."""
        level = session.escalation_level

        if level <= EscalationLevel.WARN:
            return False

        if level == EscalationLevel.NUDGE:
            send_nudge(self.backends, self.root, session, stall_message(session.agent_name))
            return False

        if level == EscalationLevel.TRIAGE:
            if not self.tier1_enabled:
                return False
            return self._triage(session, tmux_alive)

        log_warning(f"{session.agent_name}: escalation level {level} reached, terminating")
        kill_if_alive(self.backends, session, tmux_alive)
        return True

    def _triage(self, session: AgentSession, tmux_alive: bool) -> bool:
        try:
            verdict = TriageVerdict(
                self.backends.triage(
                    agent_name=session.agent_name,
                    root=self.root,
                    last_activity=session.last_activity,
                )
            )
        except Exception as e:
            log_warning(f"{session.agent_name}: triage failed ({e}); extending")
            verdict = TriageVerdict.EXTEND

        log_info(f"{session.agent_name}: triage verdict {verdict.value}")

        if verdict is TriageVerdict.TERMINATE:
            kill_if_alive(self.backends, session, tmux_alive)
            return True
        if verdict is TriageVerdict.RETRY:
            send_nudge(self.backends, self.root, session, RETRY_MESSAGE)
            return False
        if verdict is TriageVerdict.EXTEND:
            return False
        raise ValueError(f"Unhandled triage verdict: {verdict!r}")
