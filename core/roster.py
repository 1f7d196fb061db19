"""Target roster: the set of peer ids to watch. Empty means everyone."""

from __future__ import annotations

from typing import Iterable, Optional

from utils.logging import log

__all__ = ["TargetRoster"]


class TargetRoster:
    def __init__(self, peer_ids: Optional[Iterable[str]] = None):
        self._ids: frozenset[str] = frozenset(_clean(peer_ids or ()))

    def allows(self, peer_id: str) -> bool:
        """An empty roster allows every peer."""
        return not self._ids or str(peer_id) in self._ids

    def replace(self, peer_ids: Optional[Iterable[str]]) -> None:
        """Swap the whole allow-set in one assignment."""
        self._ids = frozenset(_clean(peer_ids or ()))
        log(f"[Roster] Targets replaced: {self.describe()}")

    def add(self, peer_id: str) -> bool:
        """Add a peer. Returns False if it was already present."""
        peer_id = str(peer_id).strip()
        if not peer_id or peer_id in self._ids:
            return False
        self._ids = self._ids | {peer_id}
        log(f"[Roster] Added {peer_id} ({len(self._ids)} targets)")
        return True

    def remove(self, peer_id: str) -> bool:
        """Remove a peer. Returns False if it was not present."""
        peer_id = str(peer_id).strip()
        if peer_id not in self._ids:
            return False
        self._ids = self._ids - {peer_id}
        log(f"[Roster] Removed {peer_id} ({len(self._ids)} targets)")
        return True

    def ids(self) -> list[str]:
        return sorted(self._ids)

    def describe(self) -> str:
        return ", ".join(self.ids()) if self._ids else "all friends"

    def __contains__(self, peer_id: object) -> bool:
        return str(peer_id) in self._ids

    def __len__(self) -> int:
        return len(self._ids)


def _clean(peer_ids: Iterable[str]) -> set[str]:
    return {str(p).strip() for p in peer_ids if str(p).strip()}
