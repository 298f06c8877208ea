"""Tests for the fixed-interval watchdog scheduler."""

from __future__ import annotations

import threading
import time

import pytest

from warden_tools.errors import ConfigError
from warden_tools.watchdog.config import WatchdogConfig
from warden_tools.watchdog.daemon import WatchdogDaemon, start_daemon
from tests.watchdog.helpers import make_backends, make_record, read_registry, write_registry

WAIT = 5.0


def _wait_for(predicate, timeout: float = WAIT) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestWatchdogDaemon:
    def test_first_tick_runs_immediately(self):
        ran = threading.Event()
        daemon = WatchdogDaemon(ran.set, interval_ms=60_000).start()
        try:
            assert ran.wait(WAIT)
        finally:
            daemon.stop()
            daemon.join(WAIT)
        assert daemon.ticks == 1

    def test_ticks_repeat_on_interval(self):
        daemon = WatchdogDaemon(lambda: None, interval_ms=10).start()
        try:
            assert _wait_for(lambda: daemon.ticks >= 3)
        finally:
            daemon.stop()
            daemon.join(WAIT)

    def test_failing_tick_does_not_stop_schedule(self):
        calls = []
        done = threading.Event()

        def tick():
            calls.append(1)
            if len(calls) < 3:
                raise RuntimeError("registry unreadable")
            done.set()

        daemon = WatchdogDaemon(tick, interval_ms=10).start()
        try:
            assert done.wait(WAIT)
        finally:
            daemon.stop()
            daemon.join(WAIT)
        assert daemon.failures == 2
        assert not daemon.running

    def test_stop_prevents_further_ticks(self):
        daemon = WatchdogDaemon(lambda: None, interval_ms=10).start()
        assert _wait_for(lambda: daemon.ticks >= 2)
        daemon.stop()
        daemon.join(WAIT)
        count = daemon.ticks
        time.sleep(0.05)
        assert daemon.ticks == count
        assert not daemon.running

    def test_stop_is_idempotent(self):
        daemon = WatchdogDaemon(lambda: None, interval_ms=60_000).start()
        daemon.stop()
        daemon.stop()
        daemon.join(WAIT)
        assert not daemon.running

    def test_in_flight_tick_finishes_after_stop(self):
        entered = threading.Event()
        release = threading.Event()
        finished = threading.Event()

        def tick():
            entered.set()
            release.wait(WAIT)
            finished.set()

        daemon = WatchdogDaemon(tick, interval_ms=10).start()
        assert entered.wait(WAIT)
        daemon.stop()
        release.set()
        daemon.join(WAIT)

        assert finished.is_set()
        assert daemon.ticks == 1


class TestStartDaemon:
    def test_runs_real_tick_against_registry(self, tmp_path):
        write_registry(tmp_path, [make_record()])
        backends = make_backends(alive={})
        config = WatchdogConfig(interval_ms=60_000)

        daemon = start_daemon(tmp_path, config, backends)
        try:
            assert _wait_for(lambda: read_registry(tmp_path)[0]["state"] == "zombie")
        finally:
            daemon.stop()
            daemon.join(WAIT)

    def test_observer_receives_checks(self, tmp_path):
        write_registry(tmp_path, [make_record()])
        checks = []
        daemon = start_daemon(
            tmp_path,
            WatchdogConfig(interval_ms=60_000),
            make_backends(alive={"warden-builder-1": True}),
            on_health_check=checks.append,
        )
        try:
            assert _wait_for(lambda: len(checks) == 1)
        finally:
            daemon.stop()
            daemon.join(WAIT)
        assert checks[0].agent_name == "builder-1"

    def test_invalid_config_refuses_to_start(self, tmp_path):
        write_registry(tmp_path, [make_record()])
        backends = make_backends()
        with pytest.raises(ConfigError):
            start_daemon(tmp_path, WatchdogConfig(nudge_interval_ms=0), backends)
        assert backends.liveness.probed == []
