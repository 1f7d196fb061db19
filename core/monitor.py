"""Activity monitor - push events plus a periodic reconciliation poll."""

from __future__ import annotations

import asyncio
import time
from datetime import timedelta
from enum import Enum
from typing import Optional

from core.dispatch import DispatchOrchestrator
from core.signals import ActivityPlatform, ActivitySignal, Peer
from utils.errors import log_error
from utils.logging import log, log_warn

__all__ = ["MonitorState", "ActivityMonitor"]


class MonitorState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class ActivityMonitor:
    """
    Routes activity signals into the dispatch orchestrator.

    Two triggers feed it:
    - the platform's push listener (registered in start(), removed in stop())
    - a poll task that calls check_all() right away and then every interval

    Neither path waits for the other; the cooldown gate is what keeps a peer
    from being served twice.
    """

    def __init__(
        self,
        platform: ActivityPlatform,
        orchestrator: DispatchOrchestrator,
        poll_interval_s: Optional[float] = None,
    ):
        self.platform = platform
        self.orchestrator = orchestrator
        self.roster = orchestrator.roster
        self.poll_interval_s = (
            float(poll_interval_s) if poll_interval_s is not None
            else orchestrator.config.poll_interval_seconds
        )

        self.state = MonitorState.STOPPED
        self._poll_task: Optional[asyncio.Task] = None
        # Running dispatch sequences from either trigger; stop() leaves them alone
        self._inflight: set[asyncio.Task] = set()

        # Stats
        self.started_mono: Optional[float] = None
        self.polls = 0
        self.polls_skipped = 0
        self.events = 0

    @property
    def is_running(self) -> bool:
        return self.state is MonitorState.RUNNING

    def start(self) -> None:
        """Begin watching. Must be called from inside the running event loop."""
        if self.is_running:
            log_warn("[Monitor] Already running.")
            return

        log("[Monitor] Starting.")
        self.state = MonitorState.RUNNING
        self.started_mono = time.monotonic()
        self.platform.add_listener(self.on_signal_event)
        self._poll_task = asyncio.create_task(self._poll_loop())

    def stop(self) -> None:
        """Stop scheduling new work. In-flight dispatches are left to finish."""
        if not self.is_running:
            log_warn("[Monitor] Not running.")
            return

        log("[Monitor] Stopping.")
        self.state = MonitorState.STOPPED
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        self.platform.remove_listener(self.on_signal_event)
        log("[Monitor] Stopped.")

    async def _poll_loop(self) -> None:
        try:
            while True:
                await self.check_all()
                await asyncio.sleep(self.poll_interval_s)
        except asyncio.CancelledError:
            log("[Monitor] Poll loop cancelled.")
            raise

    async def check_all(self) -> None:
        """Reconcile against the platform's full list of current activities."""
        if not self.platform.is_ready():
            self.polls_skipped += 1
            log_warn("[Monitor] Discord client not ready yet, skipping this check.")
            return

        self.polls += 1
        try:
            activities = list(self.platform.current_activities())
            log(f"[Monitor] Found {len(activities)} friend(s) with an activity.")

            targets = [(peer, signal) for peer, signal in activities if self.roster.allows(peer.id)]
            if len(self.roster) > 0 and not targets:
                log(f"[Monitor] Target user(s) {self.roster.describe()} not active right now.")
                return

            for peer, signal in targets:
                # Shielded: cancelling the poll loop only stops scheduling further peers
                await asyncio.shield(self._spawn_dispatch(peer, signal))

            log("[Monitor] Status check completed.")
        except Exception as e:
            log_error("[Monitor] Error while checking friends", e)

    def on_signal_event(self, peer: Peer, signal: ActivitySignal) -> None:
        """Push listener: dispatch immediately, without waiting for the next poll."""
        if not self.is_running:
            return
        self.events += 1
        log(f"[Monitor] {peer.display_name} just started an activity, responding now.")
        self._spawn_dispatch(peer, signal)

    def _spawn_dispatch(self, peer: Peer, signal: ActivitySignal) -> asyncio.Task:
        task = asyncio.create_task(self.orchestrator.try_dispatch(peer, signal))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    def uptime(self) -> timedelta:
        if self.started_mono is None or not self.is_running:
            return timedelta(0)
        return timedelta(seconds=int(time.monotonic() - self.started_mono))

    def stats(self) -> dict:
        return {
            "state": self.state.value,
            "polls": self.polls,
            "polls_skipped": self.polls_skipped,
            "events": self.events,
            "inflight": self.inflight,
            **self.orchestrator.stats(),
        }

    def format_status(self) -> str:
        s = self.stats()
        up = self.uptime()
        hours, rem = divmod(up.seconds, 3600)
        mins, secs = divmod(rem, 60)
        up_str = (f"{up.days}d " if up.days else "") + f"{hours:02d}:{mins:02d}:{secs:02d}"
        mode = "sending" if self.orchestrator.config.delivery_enabled else "test mode"

        return (
            f"📡 Monitor: **{s['state']}** ({mode}), up **{up_str}**\n"
            f"🎯 Targets: {self.roster.describe()}\n"
            f"🔁 Polls: **{s['polls']}** (skipped {s['polls_skipped']}), events: **{s['events']}**\n"
            f"📨 Delivered: **{s['delivered']}**, dry runs: {s['dry_run']}, empty: {s['empty']}, "
            f"failed: {s['failed']}\n"
            f"⏳ Cooldown skips: {s['skipped_cooldown']}, peers on record: {s['cooldowns']}"
        )
