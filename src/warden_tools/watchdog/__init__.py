"""Tier 0 mechanical watchdog for agent sessions.

Each tick reconciles ``.warden/sessions.json`` against live tmux state and
walks stalled agents up a staged escalation policy (warn, nudge, triage,
terminate).

Usage:
    warden-watchdog              # Run until stopped
    warden-watchdog --once       # Single reconciliation pass
    warden-watchdog --status     # Show registered sessions
"""

from warden_tools.watchdog.backends import WatchdogBackends
from warden_tools.watchdog.config import WatchdogConfig
from warden_tools.watchdog.daemon import WatchdogDaemon, start_daemon
from warden_tools.watchdog.tick import TickResult, run_daemon_tick

__all__ = [
    "TickResult",
    "WatchdogBackends",
    "WatchdogConfig",
    "WatchdogDaemon",
    "run_daemon_tick",
    "start_daemon",
]
