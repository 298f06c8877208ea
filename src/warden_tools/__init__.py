"""Watchdog tooling for long-running tmux-backed agent sessions."""

__version__ = "0.1.0"
