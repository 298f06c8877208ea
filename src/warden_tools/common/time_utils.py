"""Timestamp helpers for ISO-8601 parsing, formatting and durations."""

from __future__ import annotations

from datetime import datetime, timezone


def parse_iso_timestamp(s: str) -> datetime:
    """Parse an ISO-8601 timestamp like ``2026-01-23T10:00:00.000Z``.

    Accepts a trailing ``Z`` and ``+HH:MM`` offsets. Naive timestamps are
    assumed to be UTC.
    """
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_iso_timestamp(dt: datetime) -> str:
    """Format *dt* as UTC ISO-8601 with millisecond precision and ``Z``."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def now_utc() -> datetime:
    """Return the current time in UTC with timezone info."""
    return datetime.now(timezone.utc)


def elapsed_ms(since: datetime, now: datetime) -> int:
    """Whole milliseconds from *since* to *now* (negative if *since* is later)."""
    return int((now - since).total_seconds() * 1000)


def format_duration(seconds: int) -> str:
    """Format *seconds* as a human-readable string.

    Examples::

        format_duration(90)   -> "1m 30s"
        format_duration(3661) -> "1h 1m 1s"
        format_duration(5)    -> "5s"
    """
    if seconds < 0:
        return "0s"
    parts: list[str] = []
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)
