"""Collaborator contracts used by the watchdog, and their tmux-backed defaults.

The tick and the escalation controller only talk to the three protocols
below. Production wiring comes from :meth:`WatchdogBackends.default`;
tests pass their own fakes.
"""

from __future__ import annotations

import functools
import pathlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Protocol

from warden_tools.common.logging import log_debug, log_warning
from warden_tools.common.time_utils import now_utc
from warden_tools.common.tmux_session import TmuxSession
from warden_tools.models.health import ActionResult, NudgeResult, TriageVerdict


class LivenessProbe(Protocol):
    def is_alive(self, tmux_session: str) -> bool: ...

    def kill(self, tmux_session: str) -> bool: ...


class NudgeSender(Protocol):
    def __call__(
        self, root: pathlib.Path, agent_name: str, message: str, force: bool
    ) -> NudgeResult: ...


class TriageDecider(Protocol):
    def __call__(
        self, agent_name: str, root: pathlib.Path, last_activity: str
    ) -> TriageVerdict: ...


class TmuxLivenessProbe:
    """Liveness via ``tmux has-session`` / ``tmux kill-session``."""

    def __init__(self, server_name: str = "") -> None:
        self.server_name = server_name

    def is_alive(self, tmux_session: str) -> bool:
        return TmuxSession(tmux_session, self.server_name).exists()

    def kill(self, tmux_session: str) -> bool:
        return TmuxSession(tmux_session, self.server_name).kill()


@dataclass
class WatchdogBackends:
    """Everything the control loop touches outside the registry."""

    liveness: LivenessProbe
    nudge: NudgeSender
    triage: TriageDecider
    clock: Callable[[], datetime] = field(default=now_utc)

    @classmethod
    def default(cls, tmux_socket: str = "") -> WatchdogBackends:
        # Imported here so the command modules can import the registry
        # helpers without a cycle.
        from warden_tools.nudge import nudge_agent
        from warden_tools.triage import triage_agent

        return cls(
            liveness=TmuxLivenessProbe(tmux_socket),
            nudge=functools.partial(nudge_agent, tmux_socket=tmux_socket),
            triage=functools.partial(triage_agent, tmux_socket=tmux_socket),
        )


def attempt(description: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> ActionResult:
    """Call *fn* and fold any exception or ``False`` return into an ActionResult.

    Used for every collaborator call whose failure must not stop the tick.
    """
    try:
        outcome = fn(*args, **kwargs)
    except Exception as e:
        log_warning(f"{description} failed: {e}")
        return ActionResult(ok=False, error=str(e))
    if outcome is False:
        log_debug(f"{description} reported failure")
        return ActionResult(ok=False, error="reported failure")
    if isinstance(outcome, NudgeResult) and not outcome.delivered:
        log_debug(f"{description} not delivered: {outcome.reason}")
        return ActionResult(ok=False, error=outcome.reason)
    return ActionResult(ok=True)
