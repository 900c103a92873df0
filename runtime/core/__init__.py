"""
Core runtime module.

Exports:
- SessionConfig: Session configuration
- EventBus, Event: Event system and event enums
- AdventureError and subclasses: Recoverable error taxonomy
- configure_logging: Logging setup for programs
"""

from runtime.core.config import SessionConfig
from runtime.core.events import (
    EventBus,
    Event,
    AssetEvent,
    AdventureEvent,
    TransitionEvent,
    StoryEvent,
    QuestEvent,
    UIEvent,
)
from runtime.core.errors import (
    AdventureError,
    LoadFailed,
    UnknownScene,
    TransitionRejected,
    MalformedParameter,
    AssetNotFound,
)
from runtime.core.logs import configure_logging

__all__ = [
    # Config
    "SessionConfig",
    # Events
    "EventBus",
    "Event",
    "AssetEvent",
    "AdventureEvent",
    "TransitionEvent",
    "StoryEvent",
    "QuestEvent",
    "UIEvent",
    # Errors
    "AdventureError",
    "LoadFailed",
    "UnknownScene",
    "TransitionRejected",
    "MalformedParameter",
    "AssetNotFound",
    # Logging
    "configure_logging",
]
