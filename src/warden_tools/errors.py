"""Custom exceptions raised at the watchdog's outer surfaces.

The control loop itself never raises these; collaborator failures inside
a tick are absorbed where they happen.
"""

from __future__ import annotations


class WardenError(Exception):
    """Base exception for warden-tools errors."""


class ConfigError(WardenError):
    """Watchdog configuration is invalid."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class RegistryError(WardenError):
    """The session registry could not be written."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
