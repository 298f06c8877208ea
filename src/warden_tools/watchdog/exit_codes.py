"""Watchdog exit codes."""

from __future__ import annotations

from enum import IntEnum


class WatchdogExitCode(IntEnum):
    """Exit codes for the watchdog process."""

    SUCCESS = 0  # Graceful shutdown
    STARTUP_FAILED = 1  # Bad config or no project root
    ALREADY_RUNNING = 2  # Another watchdog holds the PID file
    ERROR = 3  # Unhandled error
