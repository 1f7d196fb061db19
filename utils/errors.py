"""
Error types and reporting helpers for the meme bot.

This module provides:
- `BotError`, the base class for the bot's own exceptions, plus the
  narrower `ConfigError`, `SearchError` and `DeliveryError`
- `log_error` for logging an error together with its traceback
- `report_discord_error` for replying to a command with a failure notice
- `wrap_discord_errors`, a decorator that keeps event handlers from raising

Usage:
	from utils.errors import log_error
	try:
		...
	except Exception as exc:
		log_error("Failed to process event.", exc)
"""

from __future__ import annotations
import traceback
from functools import wraps
from typing import Any, Callable, Coroutine, TypeVar
from utils.logging import log

import discord

__all__ = [
	"BotError",
	"ConfigError",
	"SearchError",
	"DeliveryError",
	"log_error",
	"report_discord_error",
	"wrap_discord_errors",
]

class BotError(Exception):
	"""Base exception for meme bot errors."""
	def __init__(self, message: str, *, cause: Exception | None = None):
		super().__init__(message)
		self.cause = cause

class ConfigError(BotError):
	"""Required configuration is missing or malformed."""

class SearchError(BotError):
	"""The content search provider returned an unusable response."""

class DeliveryError(BotError):
	"""A direct message could not be delivered."""

def log_error(message: str, exc: BaseException | None = None) -> None:
	"""Log an error with traceback if available."""
	if exc:
		tb = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
		log(f"[ERROR] {message}\n{tb}")
	else:
		log(f"[ERROR] {message}")

async def report_discord_error(channel: discord.abc.Messageable, message: str, exc: Exception | None = None) -> None:
	"""Send a short error notice to Discord and log details."""
	log_error(message, exc)
	try:
		await channel.send(f"❌ {message}")
	except discord.DiscordException as e:
		log(f"[ERROR] Failed to send error to Discord: {e}")

F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, Any]])
def wrap_discord_errors(func: F) -> F:
	"""Decorator: catch and report errors in Discord event handlers."""
	@wraps(func)
	async def wrapper(*args, **kwargs):
		try:
			return await func(*args, **kwargs)
		except Exception as exc:
			channel = None
			for arg in args:
				if isinstance(arg, discord.abc.Messageable):
					channel = arg
					break
				if hasattr(arg, "channel") and isinstance(arg.channel, discord.abc.Messageable):
					channel = arg.channel
					break
			msg = "An internal error occurred. Please try again later."
			if channel:
				await report_discord_error(channel, msg, exc)
			else:
				log_error(msg, exc)
	return wrapper  # type: ignore
