"""Watchdog logging to stderr with optional color output."""

from __future__ import annotations

import io
import os
import sys
from datetime import datetime, timezone

# Colors are only emitted when stderr is a tty.
_RED = "\033[0;31m"
_GREEN = "\033[0;32m"
_YELLOW = "\033[0;33m"
_BLUE = "\033[0;34m"
_GRAY = "\033[0;90m"
_RESET = "\033[0m"

_DEBUG_ENV = "WARDEN_DEBUG"

_debug_override: bool | None = None


def _use_color() -> bool:
    try:
        return os.isatty(sys.stderr.fileno())
    except (OSError, ValueError, io.UnsupportedOperation):
        return False


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("[%Y-%m-%dT%H:%M:%SZ]")


def _emit(color: str, label: str, message: str) -> None:
    ts = _timestamp()
    if _use_color():
        line = f"{color}{ts} [{label}]{_RESET} {message}"
    else:
        line = f"{ts} [{label}] {message}"
    print(line, file=sys.stderr, flush=True)


def set_debug(enabled: bool | None) -> None:
    """Force debug output on or off. ``None`` defers to ``WARDEN_DEBUG``."""
    global _debug_override
    _debug_override = enabled


def debug_enabled() -> bool:
    if _debug_override is not None:
        return _debug_override
    return os.environ.get(_DEBUG_ENV, "").lower() in ("1", "true", "yes", "on")


def log_debug(message: str) -> None:
    """Log a debug message to stderr when debug output is enabled."""
    if debug_enabled():
        _emit(_GRAY, "DEBUG", message)


def log_info(message: str) -> None:
    """Log an informational message to stderr."""
    _emit(_BLUE, "INFO", message)


def log_warning(message: str) -> None:
    """Log a warning message to stderr."""
    _emit(_YELLOW, "WARN", message)


def log_error(message: str) -> None:
    """Log an error message to stderr."""
    _emit(_RED, "ERROR", message)


def log_success(message: str) -> None:
    """Log a success message to stderr."""
    _emit(_GREEN, "OK", message)
