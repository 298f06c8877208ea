"""One reconciliation pass over the session registry.

On each tick:
1. Load ``.warden/sessions.json``
2. For every session that is not ``completed`` (zombies included: their
   tmux session may have come back), probe tmux, evaluate health, apply
   the state transition and report the verdict to the observer
3. ``terminate``: kill tmux if it was alive, mark zombie, clear escalation
4. ``investigate``: report only; never resolved automatically
5. ``escalate``: hand off to the escalation controller
6. ``none``: if the session was stalled, it recovered; clear escalation
7. Write the registry back once, only if something changed
"""

from __future__ import annotations

import pathlib
import threading
from dataclasses import dataclass, field
from typing import Callable

from warden_tools.common.logging import log_debug, log_info
from warden_tools.common.paths import WardenPaths
from warden_tools.models.health import HealthAction, HealthCheck
from warden_tools.models.session import AgentSession, AgentState
from warden_tools.watchdog.backends import WatchdogBackends
from warden_tools.watchdog.config import WatchdogConfig
from warden_tools.watchdog.escalation import EscalationController, kill_if_alive
from warden_tools.watchdog.health import (
    HealthThresholds,
    evaluate_health,
    resolve_next_state,
    transition_state,
)
from warden_tools.watchdog.registry import load_sessions, save_sessions

HealthObserver = Callable[[HealthCheck], None]

_locks_guard = threading.Lock()
_registry_locks: dict[pathlib.Path, threading.Lock] = {}


def registry_lock(path: pathlib.Path) -> threading.Lock:
    """Process-wide lock serialising ticks that share a registry file."""
    key = path.resolve()
    with _locks_guard:
        lock = _registry_locks.get(key)
        if lock is None:
            lock = _registry_locks[key] = threading.Lock()
        return lock


@dataclass
class TickResult:
    evaluated: int = 0
    terminated: list[str] = field(default_factory=list)
    escalated: list[str] = field(default_factory=list)
    recovered: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    saved: bool = False

    @property
    def summary(self) -> str:
        parts = [f"evaluated={self.evaluated}"]
        for name in ("terminated", "escalated", "recovered", "conflicts"):
            agents = getattr(self, name)
            if agents:
                parts.append(f"{name}={','.join(agents)}")
        if self.saved:
            parts.append("registry saved")
        return " ".join(parts)


def _mark_zombie(session: AgentSession) -> None:
    session.state = AgentState.ZOMBIE
    session.clear_escalation()


def run_daemon_tick(
    root: pathlib.Path,
    config: WatchdogConfig,
    backends: WatchdogBackends,
    on_health_check: HealthObserver | None = None,
) -> TickResult:
    """Run a single watchdog pass over ``<root>/.warden/sessions.json``.

    Raises :class:`ConfigError` if *config* has unusable thresholds.
    """
    config.validate()
    sessions_path = WardenPaths(root).sessions_file
    with registry_lock(sessions_path):
        return _run_tick_locked(root, sessions_path, config, backends, on_health_check)


def _run_tick_locked(
    root: pathlib.Path,
    sessions_path: pathlib.Path,
    config: WatchdogConfig,
    backends: WatchdogBackends,
    on_health_check: HealthObserver | None,
) -> TickResult:
    thresholds = HealthThresholds(
        stale_ms=config.stale_threshold_ms,
        zombie_ms=config.zombie_threshold_ms,
    )
    controller = EscalationController(
        root,
        backends,
        nudge_interval_ms=config.nudge_interval_ms,
        tier1_enabled=config.tier1_enabled,
    )
    result = TickResult()
    sessions = load_sessions(sessions_path)
    updated = False

    for session in sessions:
        if session.state == AgentState.COMPLETED:
            continue

        result.evaluated += 1
        now = backends.clock()
        tmux_alive = backends.liveness.is_alive(session.tmux_session)
        check = evaluate_health(session, tmux_alive, thresholds, now)

        new_state = transition_state(session.state, check.action)
        if new_state != session.state:
            session.state = new_state
            updated = True

        if on_health_check is not None:
            on_health_check(check)

        action = check.action
        if action is HealthAction.TERMINATE:
            log_info(f"{session.agent_name}: terminating ({check.reconciliation_note})")
            kill_if_alive(backends, session, tmux_alive)
            _mark_zombie(session)
            updated = True
            result.terminated.append(session.agent_name)

        elif action is HealthAction.INVESTIGATE:
            # Left as zombie until a human or higher tier decides.
            result.conflicts.append(session.agent_name)

        elif action is HealthAction.ESCALATE:
            outcome = controller.advance(session, tmux_alive, now)
            session.state = resolve_next_state(session.state, outcome.terminated)
            if outcome.terminated:
                _mark_zombie(session)
                result.terminated.append(session.agent_name)
            else:
                result.escalated.append(session.agent_name)
            if outcome.changed:
                updated = True

        elif action is HealthAction.NONE:
            if session.stalled_since is not None:
                log_info(f"{session.agent_name}: recovered, clearing escalation")
                session.clear_escalation()
                updated = True
                result.recovered.append(session.agent_name)

        else:
            raise ValueError(f"Unhandled health action: {action!r}")

    if updated:
        save_sessions(sessions_path, sessions)
        result.saved = True
        log_debug(f"Saved {len(sessions)} session(s) to {sessions_path}")

    return result
