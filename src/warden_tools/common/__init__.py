"""Common utilities for warden-tools."""

from warden_tools.common.paths import WardenPaths
from warden_tools.common.tmux_session import TmuxSession

__all__ = ["TmuxSession", "WardenPaths"]
