"""Admin check shared by the roster / cooldown commands."""
from __future__ import annotations

from typing import Iterable

import discord

def is_admin(message: discord.Message, admin_ids: Iterable[int] = ()) -> bool:
	"""Explicit admin ids always pass; otherwise guild administrators only."""
	if message.author.id in set(admin_ids):
		return True
	if not message.guild:
		return False
	perms = getattr(message.author, "guild_permissions", None)
	return bool(perms and getattr(perms, "administrator", False))
