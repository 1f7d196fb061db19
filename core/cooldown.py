"""Per-peer dispatch cooldowns (in memory, process lifetime)."""

from __future__ import annotations

import time
from typing import Callable, Optional

from core.settings import DEFAULT_COOLDOWN_MINUTES

__all__ = ["CooldownTracker"]


class CooldownTracker:
    """
    Remembers when each peer last received a dispatch.

    `gate()` and `record()` are deliberately separate: a caller that gates and
    then awaits something before recording can interleave with another
    trigger for the same peer. All access happens on the event loop thread.
    """

    def __init__(
        self,
        window_s: float = DEFAULT_COOLDOWN_MINUTES * 60,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.window_s = float(window_s)
        self._clock = clock
        self._last: dict[str, float] = {}

    def now(self) -> float:
        return self._clock()

    def gate(self, peer_id: str) -> bool:
        """True if `peer_id` may receive a dispatch right now."""
        last = self._last.get(peer_id)
        if last is None:
            return True
        return self._clock() - last >= self.window_s

    def record(self, peer_id: str, timestamp: Optional[float] = None) -> None:
        """Overwrite the last-dispatch time for `peer_id`."""
        self._last[peer_id] = self._clock() if timestamp is None else float(timestamp)

    def last_dispatch(self, peer_id: str) -> Optional[float]:
        return self._last.get(peer_id)

    def remaining(self, peer_id: str) -> float:
        """Seconds until `peer_id` is eligible again (0 if already eligible)."""
        last = self._last.get(peer_id)
        if last is None:
            return 0.0
        return max(0.0, self.window_s - (self._clock() - last))

    def clear(self, peer_id: Optional[str] = None) -> int:
        """Forget one peer (or everyone). Returns how many entries were dropped."""
        if peer_id is None:
            dropped = len(self._last)
            self._last.clear()
            return dropped
        return 1 if self._last.pop(peer_id, None) is not None else 0

    def __len__(self) -> int:
        return len(self._last)
