# utils package - shared utilities for the meme bot
from utils.helpers import now_ts, format_duration, truncate
from utils.logging import log, log_warn, log_debug, log_to_file, set_debug, DEFAULT_TZ
from utils.i18n import t, set_language, get_language
from utils.errors import BotError, ConfigError, SearchError, DeliveryError, log_error

__all__ = [
    # helpers
    "now_ts",
    "format_duration",
    "truncate",
    # logging
    "log",
    "log_warn",
    "log_debug",
    "log_to_file",
    "set_debug",
    "DEFAULT_TZ",
    # i18n
    "t",
    "set_language",
    "get_language",
    # errors
    "BotError",
    "ConfigError",
    "SearchError",
    "DeliveryError",
    "log_error",
]
