"""
Discord meme bot (presence-triggered)

Watches friends' Discord presences. When someone starts playing a game or
listening to an artist, it searches for memes about it and DMs them, at most
once per cooldown window per person.

Key rules:
- With SEND_MEMES unset the bot runs in test mode: it logs what it would send.
- TARGET_USER_IDS limits who is watched; empty means everyone visible.
- Admin commands live in commands/ and are routed by commands_main.py.

Notes:
- The SerpAPI client is synchronous, so searches run in a thread to avoid
  blocking Discord's event loop.
"""

from __future__ import annotations

import asyncio
import signal
from typing import Iterable, Optional

import discord

import config
from commands_main import handle_commands
from core.dispatch import DispatchOrchestrator
from core.monitor import ActivityMonitor
from core.settings import EngineConfig
from presence import DiscordPresenceSource
from searcher import MemeSearcher, SerpApiConfig
from utils.errors import BotError, log_error, wrap_discord_errors
from utils.i18n import set_language
from utils.logging import log, log_warn, set_debug


# =========================
# Discord client setup
# =========================

def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.presences = True
    intents.members = True
    intents.message_content = True
    return intents


class MemeBot:
    """Owns the Discord client and the dispatch engine for one process."""

    def __init__(
        self,
        engine_config: EngineConfig,
        *,
        serpapi_key: str,
        admin_ids: Iterable[int] = (),
        command_channel_ids: Iterable[int] = (),
    ):
        self.client = discord.Client(intents=build_intents())
        self.platform = DiscordPresenceSource(self.client)
        self.searcher = MemeSearcher(SerpApiConfig(api_key=serpapi_key))
        self.orchestrator = DispatchOrchestrator(self.platform, self.searcher, engine_config)
        self.monitor = ActivityMonitor(self.platform, self.orchestrator)
        self.admin_ids = set(admin_ids)
        self.command_channel_ids = set(command_channel_ids)
        self._shutdown_task: Optional[asyncio.Task] = None
        self._register_events()

    def _register_events(self) -> None:
        client = self.client

        @client.event
        async def on_ready() -> None:
            """Fired on every (re)connect; the monitor is started only once."""
            log(f"Logged in as {client.user} (ID: {client.user.id})")
            if not self.monitor.is_running:
                self.monitor.start()

        @client.event
        async def on_presence_update(before: discord.Member, after: discord.Member) -> None:
            self.platform.handle_presence_update(before, after)

        @client.event
        @wrap_discord_errors
        async def on_message(message: discord.Message) -> None:
            await self.on_message(message)

    async def on_message(self, message: discord.Message) -> None:
        """
        Order:
        1) Ignore self / bots / empty messages
        2) Enforce command channels (when configured)
        3) Route `!` commands
        """
        if message.author == self.client.user or message.author.bot:
            return
        content = (message.content or "").strip()
        if not content.startswith("!"):
            return
        if self.command_channel_ids and message.channel.id not in self.command_channel_ids:
            return
        await handle_commands(message, content, monitor=self.monitor, admin_ids=self.admin_ids)

    def log_startup_summary(self) -> None:
        cfg = self.orchestrator.config
        log(f"[Config] {cfg.dispatch_count} meme(s) per send, checking every {cfg.poll_interval_minutes:g} minute(s)")
        log(f"[Config] Cooldown per friend: {cfg.cooldown_minutes:g} minute(s)")
        if cfg.delivery_enabled:
            log("[Config] Meme sending ENABLED.")
        else:
            log("[Config] Meme sending disabled (test mode), nothing will be sent.")
        roster = self.orchestrator.roster
        if len(roster):
            log(f"[Config] Targeting {len(roster)} specific user(s): {roster.describe()}")
        else:
            log("[Config] Targeting all friends.")

    def request_shutdown(self, signame: str) -> None:
        """Signal handler: closing the client unwinds run() through its finally block."""
        log(f"Received {signame}, shutting down.")
        self._shutdown_task = asyncio.create_task(self.client.close())

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGTERM, self.request_shutdown, "SIGTERM")
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            log_warn("SIGTERM handler not available on this platform.")

    async def run(self, token: str) -> None:
        self.log_startup_summary()
        self.install_signal_handlers()
        try:
            async with self.client:
                await self.client.start(token)
        finally:
            if self.monitor.is_running:
                self.monitor.stop()
            log("Meme bot stopped.")


def main() -> None:
    set_language(config.LANGUAGE)
    set_debug(config.DEBUG)
    try:
        config.require_env()
        engine_config = config.load_engine_config()
    except BotError as e:
        log_error(str(e))
        raise SystemExit(1) from e

    bot = MemeBot(
        engine_config,
        serpapi_key=config.SERPAPI_API_KEY,
        admin_ids=config.ADMIN_USER_IDS,
        command_channel_ids=config.COMMAND_CHANNEL_IDS,
    )
    try:
        asyncio.run(bot.run(config.DISCORD_TOKEN))
    except KeyboardInterrupt:
        log("Interrupted, shutting down.")


# =========================
# Start bot
# =========================

if __name__ == "__main__":
    main()
