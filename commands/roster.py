"""Runtime control of the dispatch engine.

- !targets                     -> list the target roster
- !target add <id>             -> watch one more user
- !target remove <id>          -> stop watching a user
- !target set <id> [<id> ...]  -> replace the roster
- !target clear                -> empty roster (watch everyone)
- !cooldown reset [<id>]       -> forget one or all cooldowns
- !status                      -> monitor state and counters
"""
from __future__ import annotations

import re

from core.monitor import ActivityMonitor

_MENTION = re.compile(r"^<@!?(\d+)>$")

TARGET_USAGE = (
	"Usage:\n"
	"`!target add <user id>` / `!target remove <user id>`\n"
	"`!target set <id> [<id> ...]` / `!target clear`"
)

def parse_user_id(token: str) -> str | None:
	"""Accept a raw numeric id or a mention like `<@123>`."""
	token = token.strip()
	m = _MENTION.match(token)
	if m:
		return m.group(1)
	return token if token.isdigit() else None

async def handle_targets(message, monitor: ActivityMonitor) -> bool:
	roster = monitor.roster
	if len(roster) == 0:
		await message.channel.send("🎯 No target list set, watching **all friends**.")
	else:
		await message.channel.send(f"🎯 Watching {len(roster)} user(s): {roster.describe()}")
	return True

async def handle_target(message, content: str, monitor: ActivityMonitor) -> bool:
	parts = content.split()
	if len(parts) < 2:
		await message.channel.send(TARGET_USAGE)
		return True
	action = parts[1].lower()
	args = parts[2:]
	roster = monitor.roster

	if action == "clear":
		roster.replace([])
		await message.channel.send("🎯 Target list cleared, watching **all friends**.")
		return True

	ids = [parse_user_id(a) for a in args]
	if not ids or any(i is None for i in ids):
		await message.channel.send("Please give numeric user ids or mentions.\n" + TARGET_USAGE)
		return True

	if action == "add" and len(ids) == 1:
		added = roster.add(ids[0])
		await message.channel.send(f"✅ Now watching `{ids[0]}`." if added else f"`{ids[0]}` is already a target.")
	elif action == "remove" and len(ids) == 1:
		removed = roster.remove(ids[0])
		await message.channel.send(f"✅ Stopped watching `{ids[0]}`." if removed else f"`{ids[0]}` is not a target.")
	elif action == "set":
		roster.replace(ids)
		await message.channel.send(f"🎯 Target list replaced: {roster.describe()}")
	else:
		await message.channel.send(TARGET_USAGE)
	return True

async def handle_cooldown(message, content: str, monitor: ActivityMonitor) -> bool:
	parts = content.split()
	if len(parts) < 2 or parts[1].lower() != "reset":
		await message.channel.send("Usage: `!cooldown reset [<user id>]`")
		return True
	cooldowns = monitor.orchestrator.cooldowns
	if len(parts) >= 3:
		peer_id = parse_user_id(parts[2])
		if peer_id is None:
			await message.channel.send("Please give a numeric user id or mention.")
			return True
		dropped = cooldowns.clear(peer_id)
		await message.channel.send(
			f"⏳ Cooldown for `{peer_id}` reset." if dropped else f"`{peer_id}` has no cooldown."
		)
	else:
		dropped = cooldowns.clear()
		await message.channel.send(f"⏳ Cleared {dropped} cooldown(s).")
	return True

async def handle_status(message, monitor: ActivityMonitor) -> bool:
	await message.channel.send(monitor.format_status())
	return True
