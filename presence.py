"""presence.py

Discord side of the engine: turns member presences into activity signals
and sends direct messages.

bot.py forwards `on_presence_update` here. Listeners (the activity monitor)
are called only when a member starts a *new* session: a different game, or a
different artist/song. Repeated presence updates for the same activity are
dropped, and members who stop are forgotten.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import discord

from core.signals import (
    ActivitySignal,
    Game,
    Listening,
    MessageContent,
    Peer,
    RichContent,
    SignalListener,
    describe_signal,
)
from utils.errors import DeliveryError, log_error
from utils.logging import log, log_debug

__all__ = ["DiscordPresenceSource", "extract_signal", "build_embed"]

# Discord rejects message content above this
DISCORD_MAX = 2000


def extract_signal(activities: Iterable[object]) -> Optional[ActivitySignal]:
    """Pick the first game or listening activity out of a member's activities."""
    for activity in activities or ():
        if isinstance(activity, discord.Spotify):
            artists = list(activity.artists or [])
            artist = artists[0] if artists else activity.artist
            if artist:
                return Listening(artist=artist, song=activity.title or None, player="Spotify")
            continue

        kind = getattr(activity, "type", None)
        name = getattr(activity, "name", None)

        if kind == discord.ActivityType.playing and name:
            return Game(name=name)

        if kind == discord.ActivityType.listening:
            artist = getattr(activity, "details", None) or name
            if artist:
                song = getattr(activity, "state", None) or None
                player = name if name and name != artist else None
                return Listening(artist=artist, song=song, player=player)
    return None


def build_embed(content: RichContent) -> discord.Embed:
    embed = discord.Embed(title=(content.title or None), url=content.attachment_url)
    embed.set_image(url=content.attachment_url)
    if content.source:
        embed.set_footer(text=f"Source: {content.source}")
    return embed


class DiscordPresenceSource:
    """Implements the engine's ActivityPlatform on top of a discord.Client."""

    def __init__(self, client: discord.Client):
        self.client = client
        self._listeners: List[SignalListener] = []
        # peer id -> (peer, last seen signal)
        self._active: dict[str, tuple[Peer, ActivitySignal]] = {}

    # --- listener registration ---

    def add_listener(self, listener: SignalListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SignalListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- inbound ---

    def is_ready(self) -> bool:
        return self.client.is_ready()

    def _is_watchable(self, member: object) -> bool:
        if getattr(member, "bot", False):
            return False
        me = self.client.user
        return not (me is not None and getattr(member, "id", None) == me.id)

    def handle_presence_update(self, before: object, after: object) -> None:
        """Feed a presence change; notifies listeners on a new activity session."""
        if after is None or not self._is_watchable(after):
            return

        peer = Peer(id=str(after.id), display_name=getattr(after, "display_name", None) or str(after))
        signal = extract_signal(getattr(after, "activities", ()))
        previous = self._active.get(peer.id)

        if signal is None:
            if previous is not None:
                log(f"[Presence] {peer.display_name} stopped {describe_signal(previous[1])}")
                del self._active[peer.id]
            return

        self._active[peer.id] = (peer, signal)
        if previous is not None and previous[1] == signal:
            return

        log(f"[Presence] {peer.display_name} is {describe_signal(signal)}")
        for listener in list(self._listeners):
            try:
                listener(peer, signal)
            except Exception as e:
                log_error(f"[Presence] Listener failed for {peer.display_name}", e)

    def current_activities(self) -> List[tuple[Peer, ActivitySignal]]:
        """Everyone visible in a shared guild who is playing or listening right now."""
        seen: set[str] = set()
        found: dict[str, tuple[Peer, ActivitySignal]] = {}
        for guild in self.client.guilds:
            for member in guild.members:
                peer_id = str(member.id)
                if peer_id in seen or not self._is_watchable(member):
                    continue
                seen.add(peer_id)
                signal = extract_signal(member.activities)
                if signal is not None:
                    found[peer_id] = (Peer(id=peer_id, display_name=member.display_name), signal)
        log_debug(f"[Presence] Scanned {len(seen)} member(s), {len(found)} active")

        self._active = found
        return list(found.values())

    # --- outbound ---

    async def _resolve_user(self, peer: Peer) -> discord.abc.Messageable:
        user = self.client.get_user(int(peer.id))
        if user is None:
            user = await self.client.fetch_user(int(peer.id))
        return user

    async def send_message(self, peer: Peer, content: MessageContent) -> None:
        """DM `peer`. Raises DeliveryError if Discord refuses."""
        try:
            user = await self._resolve_user(peer)
            if isinstance(content, RichContent):
                await user.send(content=content.text[:DISCORD_MAX] or None, embed=build_embed(content))
            else:
                await user.send(content[:DISCORD_MAX])
        except (discord.DiscordException, ValueError) as e:
            raise DeliveryError(f"DM to {peer.display_name} ({peer.id}) failed: {e}", cause=e) from e
