"""Common utility helpers used across the project."""

from __future__ import annotations

import time

__all__ = ["now_ts", "format_duration", "truncate"]


def now_ts() -> float:
    """Return current Unix timestamp."""
    return time.time()


def format_duration(seconds: float) -> str:
    """Render a duration as `1h 05m`, `12m 30s` or `45s`."""
    seconds = max(0, int(round(seconds)))
    hours, rem = divmod(seconds, 3600)
    mins, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {mins:02d}m"
    if mins:
        return f"{mins}m {secs:02d}s"
    return f"{secs}s"


def truncate(text: str | None, limit: int) -> str:
    """Hard-cut text to at most `limit` characters."""
    if not text:
        return ""
    return text[:max(0, limit)]
