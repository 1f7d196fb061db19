# core package - presence-triggered dispatch engine

from .signals import Peer, Game, Listening, ActivitySignal, ContentItem, RichContent
from .settings import EngineConfig
from .cooldown import CooldownTracker
from .roster import TargetRoster
from .dispatch import DispatchOrchestrator, DispatchOutcome
from .monitor import ActivityMonitor, MonitorState

__all__ = [
    "Peer",
    "Game",
    "Listening",
    "ActivitySignal",
    "ContentItem",
    "RichContent",
    "EngineConfig",
    "CooldownTracker",
    "TargetRoster",
    "DispatchOrchestrator",
    "DispatchOutcome",
    "ActivityMonitor",
    "MonitorState",
]
