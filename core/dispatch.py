"""Dispatch orchestration: gate, fetch, deliver.

`try_dispatch` is the single entry point for both the poll path and the
push-event path. Order of operations for one peer:

1) Roster filter (no side effects when filtered)
2) Cooldown gate (no side effects when gated)
3) Record the cooldown, before anything can fail
4) Search for content about the game / artist
5) Dry-run: log a summary. Otherwise: greeting -> items -> closing

Failures stay local: a failed item falls back to its plain URL, a failed
fallback skips that item, and anything unexpected is logged and swallowed at
the top so the monitor never sees it.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Optional, Sequence

from core.cooldown import CooldownTracker
from core.roster import TargetRoster
from core.settings import EngineConfig
from core.signals import (
    ActivityPlatform,
    ActivitySignal,
    ContentItem,
    ContentProvider,
    Game,
    Listening,
    Peer,
    RichContent,
    describe_signal,
    search_subject,
)
from utils.errors import log_error
from utils.helpers import format_duration, truncate
from utils.i18n import t
from utils.logging import log, log_debug, log_to_file, log_warn

__all__ = ["DispatchOutcome", "DispatchOrchestrator", "greeting_for", "closing_for"]

# Dry-run preview of item URLs is cut to this many characters
PREVIEW_CHARS = 50


class DispatchOutcome(str, Enum):
    SKIPPED_ROSTER = "skipped_roster"
    SKIPPED_COOLDOWN = "skipped_cooldown"
    EMPTY = "empty"
    DRY_RUN = "dry_run"
    DELIVERED = "delivered"
    FAILED = "failed"


def greeting_for(peer: Peer, signal: ActivitySignal) -> str:
    if isinstance(signal, Game):
        return t("dm.greeting.game", username=peer.display_name, game=signal.name)
    return t("dm.greeting.listening", username=peer.display_name, track=signal.track())


def closing_for(signal: ActivitySignal) -> str:
    if isinstance(signal, Listening):
        return t("dm.closing.listening")
    return t("dm.closing.game")


class DispatchOrchestrator:
    def __init__(
        self,
        platform: ActivityPlatform,
        provider: ContentProvider,
        config: EngineConfig,
        *,
        roster: Optional[TargetRoster] = None,
        cooldowns: Optional[CooldownTracker] = None,
    ):
        self.platform = platform
        self.provider = provider
        self.config = config
        self.roster = roster if roster is not None else TargetRoster(config.initial_roster)
        self.cooldowns = cooldowns if cooldowns is not None else CooldownTracker(config.cooldown_seconds)

        # Stats
        self.counts: dict[str, int] = {outcome.value: 0 for outcome in DispatchOutcome}
        self.items_sent = 0
        self.items_fallback = 0
        self.items_failed = 0

    async def try_dispatch(self, peer: Peer, signal: ActivitySignal) -> DispatchOutcome:
        """Run one dispatch sequence for `peer`. Never raises."""
        try:
            outcome = await self._dispatch(peer, signal)
        except Exception as e:
            log_error(f"[Dispatch] Sequence for {peer.display_name} ({peer.id}) failed", e)
            outcome = DispatchOutcome.FAILED
        self.counts[outcome.value] += 1
        return outcome

    async def _dispatch(self, peer: Peer, signal: ActivitySignal) -> DispatchOutcome:
        if not self.roster.allows(peer.id):
            log_debug(f"[Dispatch] {peer.display_name} ({peer.id}) is not a target, ignoring")
            return DispatchOutcome.SKIPPED_ROSTER

        if not self.cooldowns.gate(peer.id):
            left = format_duration(self.cooldowns.remaining(peer.id))
            log(f"[Dispatch] Skipping {peer.display_name}: on cooldown for another {left}")
            return DispatchOutcome.SKIPPED_COOLDOWN

        # Consumed even if the search comes back empty
        self.cooldowns.record(peer.id)

        context = describe_signal(signal)
        query = search_subject(signal)
        count = self.config.dispatch_count
        log(f"[Dispatch] Fetching {count} meme(s) for {peer.display_name} ({context})")

        # The search client is blocking (requests); keep it off the event loop
        items: Sequence[ContentItem] = await asyncio.to_thread(self.provider.search, query, count)
        if not items:
            log_warn(f"[Dispatch] No memes found for '{query}', nothing sent to {peer.display_name}")
            return DispatchOutcome.EMPTY

        if not self.config.delivery_enabled:
            log(f"[Dispatch] Test mode: would have sent {len(items)} meme(s) to {peer.display_name} ({context})")
            urls = truncate(", ".join(item.url for item in items), PREVIEW_CHARS)
            log(f"[Dispatch] Test mode URLs: {urls}")
            return DispatchOutcome.DRY_RUN

        await self._deliver(peer, signal, items)
        return DispatchOutcome.DELIVERED

    async def _deliver(self, peer: Peer, signal: ActivitySignal, items: Sequence[ContentItem]) -> None:
        await self.platform.send_message(peer, greeting_for(peer, signal))

        delivered = 0
        for index, item in enumerate(items, start=1):
            if await self._deliver_item(peer, item, index):
                delivered += 1

        await self.platform.send_message(peer, closing_for(signal))

        log(f"[Dispatch] Sent {delivered}/{len(items)} meme(s) to {peer.display_name}")
        if self.config.dispatch_log_file:
            log_to_file(
                self.config.dispatch_log_file,
                f"{peer.id} {peer.display_name} | {describe_signal(signal)} | {delivered}/{len(items)}",
            )

    async def _deliver_item(self, peer: Peer, item: ContentItem, index: int) -> bool:
        rich = RichContent(text=item.title, attachment_url=item.url, title=item.title, source=item.source)
        try:
            await self.platform.send_message(peer, rich)
            self.items_sent += 1
            return True
        except Exception as e:
            log_warn(f"[Dispatch] Rich send #{index} to {peer.display_name} failed ({e}), sending link instead")

        try:
            await self.platform.send_message(peer, item.url)
            self.items_fallback += 1
            return True
        except Exception as e:
            self.items_failed += 1
            log_error(f"[Dispatch] Could not send meme #{index} to {peer.display_name} ({peer.id}): {e}")
            return False

    def stats(self) -> dict:
        return {
            **self.counts,
            "items_sent": self.items_sent,
            "items_fallback": self.items_fallback,
            "items_failed": self.items_failed,
            "cooldowns": len(self.cooldowns),
        }
