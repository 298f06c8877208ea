"""Watchdog configuration."""

from __future__ import annotations

from dataclasses import dataclass

from warden_tools.common.config import env_bool, env_int, env_str
from warden_tools.errors import ConfigError

DEFAULT_INTERVAL_MS = 30_000
DEFAULT_STALE_THRESHOLD_MS = 300_000  # 5 minutes without activity
DEFAULT_ZOMBIE_THRESHOLD_MS = 600_000  # 10 minutes without activity
DEFAULT_NUDGE_INTERVAL_MS = 60_000  # time spent at each escalation level


@dataclass
class WatchdogConfig:
    """Thresholds and switches for the watchdog.

    Loaded from WARDEN_* environment variables with the defaults above.
    All durations are milliseconds.
    """

    interval_ms: int = DEFAULT_INTERVAL_MS
    stale_threshold_ms: int = DEFAULT_STALE_THRESHOLD_MS
    zombie_threshold_ms: int = DEFAULT_ZOMBIE_THRESHOLD_MS
    nudge_interval_ms: int = DEFAULT_NUDGE_INTERVAL_MS
    tier1_enabled: bool = False
    tmux_socket: str = ""
    debug_mode: bool = False

    @classmethod
    def from_env(cls, *, tier1_enabled: bool = False, debug_mode: bool = False) -> WatchdogConfig:
        """Create config from environment variables.

        Flag arguments can only switch features on; the environment cannot
        override an explicit ``True``.
        """
        return cls(
            interval_ms=env_int("WARDEN_WATCHDOG_INTERVAL_MS", DEFAULT_INTERVAL_MS),
            stale_threshold_ms=env_int("WARDEN_STALE_THRESHOLD_MS", DEFAULT_STALE_THRESHOLD_MS),
            zombie_threshold_ms=env_int("WARDEN_ZOMBIE_THRESHOLD_MS", DEFAULT_ZOMBIE_THRESHOLD_MS),
            nudge_interval_ms=env_int("WARDEN_NUDGE_INTERVAL_MS", DEFAULT_NUDGE_INTERVAL_MS),
            tier1_enabled=tier1_enabled or env_bool("WARDEN_TIER1_ENABLED", False),
            tmux_socket=env_str("WARDEN_TMUX_SOCKET"),
            debug_mode=debug_mode or env_bool("WARDEN_DEBUG", False),
        )

    def validate(self) -> None:
        """Raise :class:`ConfigError` if the thresholds are unusable."""
        for name in ("interval_ms", "stale_threshold_ms", "zombie_threshold_ms", "nudge_interval_ms"):
            if getattr(self, name) <= 0:
                raise ConfigError(name, f"must be positive, got {getattr(self, name)}")
        if self.stale_threshold_ms >= self.zombie_threshold_ms:
            raise ConfigError(
                "stale_threshold_ms",
                f"must be below zombie_threshold_ms "
                f"({self.stale_threshold_ms} >= {self.zombie_threshold_ms})",
            )

    def mode_display(self) -> str:
        """Return a display string for the current mode."""
        parts = ["Tier 1 triage" if self.tier1_enabled else "Mechanical only"]
        if self.debug_mode:
            parts.append("Debug")
        return " + ".join(parts)
