"""Data model shared by the dispatch engine and its collaborators.

An activity signal is a tagged union of `Game` and `Listening`; both are
frozen so they compare by value (the presence adapter relies on that to tell
a new session from a repeated presence update).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol, Sequence, Union

from utils.i18n import t

__all__ = [
    "Peer",
    "Game",
    "Listening",
    "ActivitySignal",
    "ContentItem",
    "RichContent",
    "MessageContent",
    "SignalListener",
    "ActivityPlatform",
    "ContentProvider",
    "search_subject",
    "describe_signal",
]


@dataclass(frozen=True)
class Peer:
    """A tracked user. `id` is the platform user id as a string."""
    id: str
    display_name: str


@dataclass(frozen=True)
class Game:
    name: str


@dataclass(frozen=True)
class Listening:
    artist: str
    song: Optional[str] = None
    player: Optional[str] = None

    def track(self) -> str:
        """Human-readable track line: `song by artist on player`."""
        text = t("track.song", song=self.song, artist=self.artist) if self.song else self.artist
        if self.player:
            text = t("track.player", track=text, player=self.player)
        return text


ActivitySignal = Union[Game, Listening]


@dataclass(frozen=True)
class ContentItem:
    url: str
    title: str
    source: Optional[str] = None


@dataclass(frozen=True)
class RichContent:
    """Text plus an attachment reference (rendered as an embed image on Discord)."""
    text: str
    attachment_url: str
    title: Optional[str] = None
    source: Optional[str] = None


MessageContent = Union[str, RichContent]

SignalListener = Callable[[Peer, ActivitySignal], None]


class ActivityPlatform(Protocol):
    """What the engine needs from the chat platform."""

    def add_listener(self, listener: SignalListener) -> None: ...

    def remove_listener(self, listener: SignalListener) -> None: ...

    def is_ready(self) -> bool: ...

    def current_activities(self) -> Sequence[tuple[Peer, ActivitySignal]]: ...

    def send_message(self, peer: Peer, content: MessageContent) -> Awaitable[None]: ...


class ContentProvider(Protocol):
    def search(self, query: str, count: int) -> list[ContentItem]: ...


def search_subject(signal: ActivitySignal) -> str:
    """The search query for a signal: game name, or the artist when listening."""
    if isinstance(signal, Game):
        return signal.name
    if isinstance(signal, Listening):
        return signal.artist
    raise TypeError(f"Unknown activity signal: {signal!r}")


def describe_signal(signal: ActivitySignal) -> str:
    if isinstance(signal, Game):
        return t("signal.game", name=signal.name)
    return t("signal.listening", track=signal.track())
