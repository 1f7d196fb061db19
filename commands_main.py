"""commands_main.py

Central command router.

Important design rule:
- bot.py only calls this for messages in COMMAND_CHANNEL_IDS (when set)
- every command here changes engine state, so all of them are admin-only
"""

from typing import Iterable

from commands.admin import is_admin
from commands.roster import handle_cooldown, handle_status, handle_target, handle_targets

async def handle_commands(
    message,  # discord.Message
    content: str,
    *,
    monitor,  # core.monitor.ActivityMonitor
    admin_ids: Iterable[int] = (),
) -> bool:
    """
    Route a `!` command.
    Returns True if a command was handled (caller should return).
    """
    content_lower = content.lower()
    command = content_lower.split(maxsplit=1)[0] if content_lower else ""
    if command not in ("!targets", "!target", "!cooldown", "!status"):
        return False
    if not is_admin(message, admin_ids):
        await message.channel.send("You don't have permission to control the meme bot.")
        return True
    if command == "!targets":
        return await handle_targets(message, monitor)
    if command == "!target":
        return await handle_target(message, content, monitor)
    if command == "!cooldown":
        return await handle_cooldown(message, content, monitor)
    return await handle_status(message, monitor)
