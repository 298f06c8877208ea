"""Typed environment variable helpers.

Examples::

    from warden_tools.common.config import env_bool, env_int, env_str

    enabled = env_bool("WARDEN_TIER1_ENABLED", default=False)
    interval = env_int("WARDEN_WATCHDOG_INTERVAL_MS", default=30_000)
    socket = env_str("WARDEN_TMUX_SOCKET")
"""

from __future__ import annotations

import os

_TRUTHY = ("true", "1", "yes", "on")
_FALSY = ("false", "0", "no", "off")


def env_str(name: str, default: str = "") -> str:
    """Get string environment variable, or *default* if not set."""
    return os.environ.get(name, default)


def env_bool(name: str, default: bool = False) -> bool:
    """Get boolean environment variable.

    True values: "true", "1", "yes", "on" (case-insensitive)
    False values: "false", "0", "no", "off" (case-insensitive)
    Missing or anything else: returns default
    """
    val = os.environ.get(name)
    if val is None:
        return default
    lower = val.strip().lower()
    if lower in _TRUTHY:
        return True
    if lower in _FALSY:
        return False
    return default


def env_int(name: str, default: int = 0) -> int:
    """Get integer environment variable, or *default* if unset or invalid."""
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return int(val.strip())
    except ValueError:
        return default
