"""Fixed-interval scheduler for the watchdog tick.

The first tick runs as soon as the daemon starts, then one per interval.
A tick that raises is logged and dropped; the schedule carries on.
"""

from __future__ import annotations

import pathlib
import threading
import time
from typing import Callable

from warden_tools.common.logging import log_debug, log_error, log_info
from warden_tools.watchdog.backends import WatchdogBackends
from warden_tools.watchdog.config import WatchdogConfig
from warden_tools.watchdog.tick import HealthObserver, TickResult, run_daemon_tick


class WatchdogDaemon:
    """Runs a tick function on a background thread until :meth:`stop`.

    Ticks never overlap: the next wait starts only after the previous tick
    has returned.
    """

    def __init__(
        self,
        tick: Callable[[], object],
        interval_ms: int,
        *,
        name: str = "warden-watchdog",
    ) -> None:
        self._tick = tick
        self._interval = interval_ms / 1000
        self._stop_event = threading.Event()
        self._state_lock = threading.Lock()
        self._thread = threading.Thread(target=self._loop, name=name, daemon=True)
        self.ticks = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> WatchdogDaemon:
        self._thread.start()
        return self

    def stop(self) -> None:
        """Stop scheduling ticks. Safe to call more than once.

        An in-flight tick finishes normally; no tick starts after this returns.
        """
        with self._state_lock:
            self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _begin_tick(self) -> bool:
        with self._state_lock:
            if self._stop_event.is_set():
                return False
            self.ticks += 1
            return True

    def _loop(self) -> None:
        while self._begin_tick():
            started = time.monotonic()
            try:
                result = self._tick()
            except Exception as e:
                self.failures += 1
                log_error(f"Watchdog tick {self.ticks} failed: {e}")
            else:
                duration = time.monotonic() - started
                summary = getattr(result, "summary", "")
                log_debug(f"Watchdog tick {self.ticks}: {summary} ({duration:.2f}s)")
            if self._stop_event.wait(self._interval):
                break


def start_daemon(
    root: pathlib.Path,
    config: WatchdogConfig,
    backends: WatchdogBackends | None = None,
    on_health_check: HealthObserver | None = None,
) -> WatchdogDaemon:
    """Start the watchdog for *root* and return the running daemon.

    Raises :class:`ConfigError` before starting if *config* is invalid.
    """
    config.validate()
    resolved = backends or WatchdogBackends.default(config.tmux_socket)

    def tick() -> TickResult:
        return run_daemon_tick(root, config, resolved, on_health_check)

    log_info(
        f"Watchdog started: interval={config.interval_ms}ms "
        f"stale={config.stale_threshold_ms}ms zombie={config.zombie_threshold_ms}ms "
        f"nudge={config.nudge_interval_ms}ms ({config.mode_display()})"
    )
    return WatchdogDaemon(tick, config.interval_ms).start()
