"""PID file and stop-signal file handling for the foreground watchdog."""

from __future__ import annotations

import os

from warden_tools.common.logging import log_info
from warden_tools.common.paths import WardenPaths


def check_existing_pid(paths: WardenPaths) -> tuple[bool, int | None]:
    """Check whether another watchdog process is running.

    Returns (is_running, pid). Stale or unreadable PID files are removed.
    """
    if not paths.pid_file.exists():
        return False, None

    try:
        existing_pid = int(paths.pid_file.read_text().strip())
        os.kill(existing_pid, 0)
        return True, existing_pid
    except ProcessLookupError:
        log_info("Removing stale watchdog PID file")
        paths.pid_file.unlink(missing_ok=True)
        return False, None
    except PermissionError:
        # Process exists but belongs to someone else.
        return True, existing_pid
    except ValueError:
        paths.pid_file.unlink(missing_ok=True)
        return False, None


def write_pid_file(paths: WardenPaths) -> None:
    paths.pid_file.parent.mkdir(parents=True, exist_ok=True)
    paths.pid_file.write_text(str(os.getpid()))


def check_stop_signal(paths: WardenPaths) -> bool:
    """True if ``.warden/stop-watchdog`` exists."""
    return paths.stop_watchdog_file.exists()


def clear_stop_signal(paths: WardenPaths) -> None:
    paths.stop_watchdog_file.unlink(missing_ok=True)


def cleanup_on_exit(paths: WardenPaths) -> None:
    """Remove the stop signal and PID file on exit."""
    for path in (paths.stop_watchdog_file, paths.pid_file):
        try:
            path.unlink(missing_ok=True)
        except OSError:
            pass
