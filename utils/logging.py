"""Logging utilities for the meme bot."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pytz

if TYPE_CHECKING:
    from pytz.tzinfo import BaseTzInfo

# Default timezone for timestamps
DEFAULT_TZ: BaseTzInfo = pytz.timezone(os.getenv("BOT_TIMEZONE", "UTC"))

_DEBUG = os.getenv("DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


def set_debug(enabled: bool) -> None:
    """Toggle printing of log_debug() lines."""
    global _DEBUG
    _DEBUG = bool(enabled)


def _stamp(tz: BaseTzInfo | None = None) -> str:
    tz = tz or DEFAULT_TZ
    return datetime.now(tz).strftime("%Y-%m-%d %H:%M:%S")


def log(message: str, tz: BaseTzInfo | None = None) -> None:
    """Print console messages with a local timestamp."""
    print(f"[{_stamp(tz)}] {message}")


def log_warn(message: str) -> None:
    log(f"[WARN] {message}")


def log_debug(message: str) -> None:
    """Like log(), but only when debug output is enabled."""
    if _DEBUG:
        log(f"[DEBUG] {message}")


def log_to_file(
    filepath: str | Path,
    message: str,
    *,
    tz: BaseTzInfo | None = None,
    create_parents: bool = True,
) -> None:
    """Append a timestamped message to a file."""
    ts = _stamp(tz)

    path = Path(filepath)
    if create_parents:
        path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"[{ts}] {message}\n")
    except OSError as e:
        # Logging should never break the bot
        print(f"[{ts}] log write failed: {e} | path={filepath}")
