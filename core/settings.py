"""Engine configuration value.

Built once by the bootstrap (see config.load_engine_config) and handed to the
monitor and the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_COOLDOWN_MINUTES = 60.0
DEFAULT_POLL_MINUTES = 15.0
DEFAULT_DISPATCH_COUNT = 5


@dataclass(frozen=True)
class EngineConfig:
    cooldown_minutes: float = DEFAULT_COOLDOWN_MINUTES
    poll_interval_minutes: float = DEFAULT_POLL_MINUTES
    dispatch_count: int = DEFAULT_DISPATCH_COUNT
    delivery_enabled: bool = False
    initial_roster: tuple[str, ...] = field(default_factory=tuple)
    # Optional audit trail of dispatches (one line per sent sequence)
    dispatch_log_file: str | None = None

    def __post_init__(self) -> None:
        if self.cooldown_minutes < 0:
            raise ValueError("cooldown_minutes must be >= 0")
        if self.poll_interval_minutes <= 0:
            raise ValueError("poll_interval_minutes must be > 0")
        if self.dispatch_count < 1:
            raise ValueError("dispatch_count must be >= 1")

    @property
    def cooldown_seconds(self) -> float:
        return self.cooldown_minutes * 60.0

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_minutes * 60.0
