"""
Configuration for the meme bot, read from the environment (and a local .env).

Required:
- DISCORD_TOKEN, SERPAPI_API_KEY

Optional:
- MEME_COUNT (5), CHECK_INTERVAL_MINUTES (15), COOLDOWN_MINUTES (60)
- SEND_MEMES ("true" to actually send; anything else is test mode)
- TARGET_USER_IDS (comma separated; empty = all friends)
- COMMAND_CHANNEL_IDS, ADMIN_USER_IDS (comma separated)
- LANGUAGE (en / pt), DEBUG, DISPATCH_LOG_FILE
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.settings import (
    DEFAULT_COOLDOWN_MINUTES,
    DEFAULT_DISPATCH_COUNT,
    DEFAULT_POLL_MINUTES,
    EngineConfig,
)
from utils.errors import ConfigError

load_dotenv()

REQUIRED_ENV_VARS = ("DISCORD_TOKEN", "SERPAPI_API_KEY")


# =========================
# Parsing helpers
# =========================

def parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_id_list(value: Optional[str]) -> list[str]:
    """`"1, 2,,3"` -> `["1", "2", "3"]` (order kept, duplicates dropped)."""
    out: list[str] = []
    for part in (value or "").split(","):
        part = part.strip()
        if part and part not in out:
            out.append(part)
    return out


def missing_env_vars(env: Mapping[str, str] = os.environ) -> list[str]:
    return [name for name in REQUIRED_ENV_VARS if not (env.get(name) or "").strip()]


def require_env(env: Mapping[str, str] = os.environ) -> None:
    """Raise ConfigError naming every required variable that is unset."""
    missing = missing_env_vars(env)
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Create a .env file or export them."
        )


def load_engine_config(env: Mapping[str, str] = os.environ) -> EngineConfig:
    """Build the dispatch engine's configuration from `env`."""
    try:
        return EngineConfig(
            cooldown_minutes=parse_float(env.get("COOLDOWN_MINUTES"), DEFAULT_COOLDOWN_MINUTES),
            poll_interval_minutes=parse_float(env.get("CHECK_INTERVAL_MINUTES"), DEFAULT_POLL_MINUTES),
            dispatch_count=parse_int(env.get("MEME_COUNT"), DEFAULT_DISPATCH_COUNT),
            delivery_enabled=parse_bool(env.get("SEND_MEMES")),
            initial_roster=tuple(parse_id_list(env.get("TARGET_USER_IDS"))),
            dispatch_log_file=(env.get("DISPATCH_LOG_FILE") or "").strip() or None,
        )
    except ValueError as e:
        raise ConfigError(f"Invalid engine configuration: {e}", cause=e) from e


# =========================
# Module-level settings
# =========================

DISCORD_TOKEN = os.getenv("DISCORD_TOKEN", "")
SERPAPI_API_KEY = os.getenv("SERPAPI_API_KEY", "")
LANGUAGE = os.getenv("LANGUAGE", "en")
DEBUG = parse_bool(os.getenv("DEBUG"))

# Where !target / !cooldown / !status are accepted (empty = any channel)
COMMAND_CHANNEL_IDS: set[int] = {int(x) for x in parse_id_list(os.getenv("COMMAND_CHANNEL_IDS")) if x.isdigit()}
# Users allowed to run admin commands besides guild administrators
ADMIN_USER_IDS: set[int] = {int(x) for x in parse_id_list(os.getenv("ADMIN_USER_IDS")) if x.isdigit()}
