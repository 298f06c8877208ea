"""Tests for Tier 1 triage."""

from __future__ import annotations

import subprocess
from unittest import mock

import pytest

from warden_tools import triage
from warden_tools.models.health import TriageVerdict
from warden_tools.triage import build_triage_prompt, classify_response, triage_agent
from tests.watchdog.helpers import make_record, write_registry


class TestClassifyResponse:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("retry", TriageVerdict.RETRY),
            ("  RETRY\n", TriageVerdict.RETRY),
            ("The error looks recoverable", TriageVerdict.RETRY),
            ("terminate", TriageVerdict.TERMINATE),
            ("build failed permanently", TriageVerdict.TERMINATE),
            ("unrecoverable - terminate", TriageVerdict.TERMINATE),
            ("terminate (do not retry)", TriageVerdict.TERMINATE),
            ("Unrecoverable.", TriageVerdict.TERMINATE),
            ("retrying", TriageVerdict.EXTEND),
            ("extend", TriageVerdict.EXTEND),
            ("", TriageVerdict.EXTEND),
            ("no idea", TriageVerdict.EXTEND),
        ],
    )
    def test_classify(self, text, expected):
        assert classify_response(text) is expected


class TestBuildPrompt:
    def test_contains_context(self):
        prompt = build_triage_prompt("builder-1", "2026-01-25T12:00:00Z", "Error: oops")
        assert "builder-1" in prompt
        assert "2026-01-25T12:00:00Z" in prompt
        assert "Error: oops" in prompt

    def test_empty_scrollback(self):
        assert "(no output captured)" in build_triage_prompt("a", "t", "")


class TestTriageAgent:
    @pytest.fixture
    def project(self, tmp_path):
        write_registry(tmp_path, [make_record()])
        return tmp_path

    def _completed(self, returncode: int = 0, stdout: str = "") -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")

    def test_uses_scrollback_and_parses_verdict(self, project):
        tmux = mock.Mock()
        tmux.capture_scrollback.return_value = "Traceback: boom"
        with mock.patch.object(triage, "TmuxSession", return_value=tmux), mock.patch(
            "subprocess.run", return_value=self._completed(stdout="terminate")
        ) as mock_run:
            verdict = triage_agent("builder-1", project, "2026-01-25T11:50:00Z")
        assert verdict is TriageVerdict.TERMINATE
        cmd = mock_run.call_args[0][0]
        assert cmd[:2] == ["claude", "--print"]
        assert "Traceback: boom" in cmd[2]
        assert mock_run.call_args.kwargs["cwd"] == project

    def test_nonzero_exit_extends(self, project):
        with mock.patch.object(triage, "TmuxSession"), mock.patch(
            "subprocess.run", return_value=self._completed(returncode=1, stdout="terminate")
        ):
            assert triage_agent("builder-1", project, "t") is TriageVerdict.EXTEND

    def test_timeout_extends(self, project):
        with mock.patch.object(triage, "TmuxSession"), mock.patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="claude", timeout=1)
        ):
            assert triage_agent("builder-1", project, "t") is TriageVerdict.EXTEND

    def test_missing_cli_extends(self, project):
        with mock.patch.object(triage, "TmuxSession"), mock.patch(
            "subprocess.run", side_effect=FileNotFoundError("claude")
        ):
            assert triage_agent("builder-1", project, "t") is TriageVerdict.EXTEND

    def test_unknown_agent_still_asks(self, tmp_path):
        with mock.patch("subprocess.run", return_value=self._completed(stdout="retry")) as mock_run:
            assert triage_agent("ghost", tmp_path, "t") is TriageVerdict.RETRY
        assert "(no output captured)" in mock_run.call_args[0][0][2]
