"""Tests for warden_tools.common.logging."""

from __future__ import annotations

import pytest

from warden_tools.common import logging as wlog


@pytest.fixture(autouse=True)
def _reset_debug():
    wlog.set_debug(None)
    yield
    wlog.set_debug(None)


def test_levels_write_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    wlog.log_info("test info")
    wlog.log_warning("test warning")
    wlog.log_error("test error")
    wlog.log_success("test success")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[INFO] test info" in captured.err
    assert "[WARN] test warning" in captured.err
    assert "[ERROR] test error" in captured.err
    assert "[OK] test success" in captured.err


def test_no_color_when_not_a_tty(capsys: pytest.CaptureFixture[str]) -> None:
    wlog.log_error("plain")
    assert "\033[" not in capsys.readouterr().err


def test_debug_hidden_by_default(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("WARDEN_DEBUG", raising=False)
    wlog.log_debug("hidden")
    assert capsys.readouterr().err == ""


def test_debug_from_env(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("WARDEN_DEBUG", "true")
    wlog.log_debug("shown")
    assert "[DEBUG] shown" in capsys.readouterr().err


def test_set_debug_overrides_env(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("WARDEN_DEBUG", "true")
    wlog.set_debug(False)
    wlog.log_debug("suppressed")
    assert capsys.readouterr().err == ""
    wlog.set_debug(True)
    assert wlog.debug_enabled() is True
