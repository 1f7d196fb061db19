"""Shared fakes for the dispatch engine tests."""

from __future__ import annotations

import asyncio

import pytest

from core.signals import ContentItem, RichContent


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePlatform:
    """In-memory stand-in for the Discord presence adapter."""

    def __init__(self, activities=None, ready: bool = True):
        self.activities = list(activities or [])
        self.ready = ready
        self.listeners = []
        self.attempts = []  # every send attempt, including failed ones
        self.sent = []      # only successful sends
        self.fail_rich = False
        self.fail_text: set[str] = set()
        self.hold: asyncio.Event | None = None  # when set, every send waits on it

    def add_listener(self, listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener) -> None:
        self.listeners.remove(listener)

    def is_ready(self) -> bool:
        return self.ready

    def current_activities(self):
        return list(self.activities)

    async def send_message(self, peer, content) -> None:
        self.attempts.append((peer.id, content))
        if self.hold is not None:
            await self.hold.wait()
        if isinstance(content, RichContent) and self.fail_rich:
            raise RuntimeError("embed rejected")
        if isinstance(content, str) and content in self.fail_text:
            raise RuntimeError("cannot send messages to this user")
        self.sent.append((peer.id, content))

    def emit(self, peer, signal) -> None:
        for listener in list(self.listeners):
            listener(peer, signal)


class FakeProvider:
    def __init__(self, items=None, error: Exception | None = None):
        self.items = list(items or [])
        self.error = error
        self.calls = []

    def search(self, query, count):
        self.calls.append((query, count))
        if self.error is not None:
            raise self.error
        return self.items[:count]


def make_items(n: int) -> list[ContentItem]:
    return [
        ContentItem(url=f"https://img.example/{i}.png", title=f"meme {i}", source="example")
        for i in range(1, n + 1)
    ]


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Yield to the loop until predicate() is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def platform():
    return FakePlatform()
