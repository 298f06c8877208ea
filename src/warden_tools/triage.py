"""Tier 1 triage: ask an LLM whether a stalled agent should be retried,
given more time, or terminated.

The watchdog calls :func:`triage_agent` at escalation level 2 when triage
is enabled. Any failure along the way (no tmux output, CLI missing,
timeout, unrecognised answer) yields ``extend`` so the mechanical policy
keeps running.
"""

from __future__ import annotations

import pathlib
import re
import subprocess

from warden_tools.common.logging import log_debug, log_warning
from warden_tools.common.tmux_session import TmuxSession
from warden_tools.models.health import TriageVerdict
from warden_tools.nudge import find_active_session

TRIAGE_TIMEOUT_SECONDS = 120
SCROLLBACK_LINES = 100
TRIAGE_COMMAND = ("claude", "--print")


def build_triage_prompt(agent_name: str, last_activity: str, scrollback: str) -> str:
    return (
        f'Agent "{agent_name}" has shown no activity since {last_activity}.\n'
        "Below is the tail of its terminal. Decide what the watchdog should do.\n"
        "Answer with exactly one word:\n"
        "  retry     - the agent hit a recoverable error and should try again\n"
        "  extend    - the agent is still making progress, give it more time\n"
        "  terminate - the agent is stuck or failed and should be killed\n"
        "\n--- terminal output ---\n"
        f"{scrollback or '(no output captured)'}\n"
    )


_WORD_RE = re.compile(r"[a-z]+")

_TERMINATE_WORDS = frozenset({"terminate", "fatal", "failed", "unrecoverable"})
_RETRY_WORDS = frozenset({"retry", "recoverable"})


def classify_response(text: str) -> TriageVerdict:
    """Map free-form model output to a verdict, defaulting to ``extend``.

    Matches whole words only. When the answer names more than one verdict,
    ``terminate`` wins over ``retry``.
    """
    words = set(_WORD_RE.findall(text.lower()))
    if words & _TERMINATE_WORDS:
        return TriageVerdict.TERMINATE
    if words & _RETRY_WORDS:
        return TriageVerdict.RETRY
    return TriageVerdict.EXTEND


def triage_agent(
    agent_name: str,
    root: pathlib.Path,
    last_activity: str,
    *,
    tmux_socket: str = "",
    command: tuple[str, ...] = TRIAGE_COMMAND,
    timeout: int = TRIAGE_TIMEOUT_SECONDS,
) -> TriageVerdict:
    scrollback = ""
    session = find_active_session(root, agent_name)
    if session is not None:
        scrollback = TmuxSession(session.tmux_session, tmux_socket).capture_scrollback(
            SCROLLBACK_LINES
        )

    prompt = build_triage_prompt(agent_name, last_activity, scrollback)
    try:
        result = subprocess.run(
            [*command, prompt],
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=root,
            check=False,
        )
    except subprocess.TimeoutExpired:
        log_warning(f"Triage for {agent_name} timed out after {timeout}s; extending")
        return TriageVerdict.EXTEND
    except OSError as e:
        log_warning(f"Triage for {agent_name} could not run {command[0]}: {e}; extending")
        return TriageVerdict.EXTEND

    if result.returncode != 0:
        log_warning(
            f"Triage for {agent_name} exited {result.returncode}; extending"
        )
        return TriageVerdict.EXTEND

    verdict = classify_response(result.stdout)
    log_debug(f"Triage for {agent_name}: {verdict.value}")
    return verdict
