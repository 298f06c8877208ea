"""CLI entry point for the watchdog."""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from typing import Any, Sequence

from warden_tools.common.logging import log_error, log_info, log_success, set_debug
from warden_tools.common.paths import WardenPaths
from warden_tools.common.repo import find_project_root
from warden_tools.common.time_utils import now_utc
from warden_tools.errors import ConfigError
from warden_tools.watchdog.backends import WatchdogBackends
from warden_tools.watchdog.config import WatchdogConfig
from warden_tools.watchdog.daemon import start_daemon
from warden_tools.watchdog.exit_codes import WatchdogExitCode
from warden_tools.watchdog.registry import load_sessions
from warden_tools.watchdog.report import format_status, log_health_check
from warden_tools.watchdog.signals import (
    check_existing_pid,
    check_stop_signal,
    cleanup_on_exit,
    clear_stop_signal,
    write_pid_file,
)
from warden_tools.watchdog.tick import run_daemon_tick

# How often the foreground process checks for the stop-signal file.
STOP_POLL_SECONDS = 1.0


def _build_config(args: argparse.Namespace) -> WatchdogConfig:
    config = WatchdogConfig.from_env(tier1_enabled=args.tier1, debug_mode=args.debug)
    if args.interval_ms is not None:
        config.interval_ms = args.interval_ms
    if args.stale_ms is not None:
        config.stale_threshold_ms = args.stale_ms
    if args.zombie_ms is not None:
        config.zombie_threshold_ms = args.zombie_ms
    if args.nudge_interval_ms is not None:
        config.nudge_interval_ms = args.nudge_interval_ms
    config.validate()
    return config


def show_status(paths: WardenPaths) -> int:
    print(format_status(load_sessions(paths.sessions_file), now_utc()))
    running, pid = check_existing_pid(paths)
    print(f"\nWatchdog: {'running (PID: ' + str(pid) + ')' if running else 'not running'}")
    return WatchdogExitCode.SUCCESS


def run_foreground(paths: WardenPaths, config: WatchdogConfig) -> int:
    """Run the daemon until SIGINT/SIGTERM or ``.warden/stop-watchdog``."""
    is_running, existing_pid = check_existing_pid(paths)
    if is_running:
        log_error(f"Watchdog already running (PID: {existing_pid})")
        return WatchdogExitCode.ALREADY_RUNNING

    write_pid_file(paths)
    clear_stop_signal(paths)
    shutdown = threading.Event()

    def signal_handler(signum: int, frame: Any) -> None:
        shutdown.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        daemon = start_daemon(paths.root, config, on_health_check=log_health_check)
        while not shutdown.wait(STOP_POLL_SECONDS):
            if check_stop_signal(paths):
                log_info("Stop signal detected")
                break
        daemon.stop()
        daemon.join()
        log_success("Watchdog stopped")
        return WatchdogExitCode.SUCCESS
    except Exception as e:
        log_error(f"Watchdog error: {e}")
        return WatchdogExitCode.ERROR
    finally:
        cleanup_on_exit(paths)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the watchdog CLI."""
    parser = argparse.ArgumentParser(
        prog="warden-watchdog",
        description="Tier 0 watchdog - reconcile agent sessions and escalate stalls",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Environment Variables:
    WARDEN_WATCHDOG_INTERVAL_MS  Milliseconds between ticks (default: 30000)
    WARDEN_STALE_THRESHOLD_MS    Idle time before escalation starts (default: 300000)
    WARDEN_ZOMBIE_THRESHOLD_MS   Idle time before termination (default: 600000)
    WARDEN_NUDGE_INTERVAL_MS     Time spent at each escalation level (default: 60000)
    WARDEN_TIER1_ENABLED         Consult triage at escalation level 2 (default: false)
    WARDEN_TMUX_SOCKET           tmux -L socket name (default: default server)
    WARDEN_DEBUG                 Verbose logging (default: false)

To stop the watchdog gracefully:
    touch .warden/stop-watchdog

Examples:
    warden-watchdog              # Run in the foreground
    warden-watchdog --tier1      # Enable Tier 1 triage at level 2
    warden-watchdog --once       # Run a single tick and exit
    warden-watchdog --status     # Show registered sessions
""",
    )
    parser.add_argument("--once", action="store_true", help="Run one tick and exit")
    parser.add_argument("--status", action="store_true", help="Show session status and exit")
    parser.add_argument("--tier1", action="store_true", help="Enable Tier 1 triage")
    parser.add_argument("--debug", "-d", action="store_true", help="Verbose logging")
    parser.add_argument("--interval-ms", type=int, metavar="MS", help="Tick interval")
    parser.add_argument("--stale-ms", type=int, metavar="MS", help="Stale threshold")
    parser.add_argument("--zombie-ms", type=int, metavar="MS", help="Zombie threshold")
    parser.add_argument(
        "--nudge-interval-ms", type=int, metavar="MS", help="Escalation stage interval"
    )
    args = parser.parse_args(argv)

    try:
        root = find_project_root()
    except FileNotFoundError as e:
        log_error(str(e))
        log_info("Run this command from a directory containing .warden/")
        return WatchdogExitCode.STARTUP_FAILED
    paths = WardenPaths(root)

    if args.status:
        return show_status(paths)

    try:
        config = _build_config(args)
    except ConfigError as e:
        log_error(f"Invalid configuration: {e}")
        return WatchdogExitCode.STARTUP_FAILED
    set_debug(config.debug_mode)

    if args.once:
        backends = WatchdogBackends.default(config.tmux_socket)
        result = run_daemon_tick(root, config, backends, log_health_check)
        log_info(f"Tick complete: {result.summary}")
        return WatchdogExitCode.SUCCESS

    return run_foreground(paths, config)


if __name__ == "__main__":
    sys.exit(main())
