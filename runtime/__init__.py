"""
Adventure runtime.

Content-agnostic layer under the adventure framework: the deduplicating
asset cache, its loader backends, transition effects, events and config.

Quick Start:
    from runtime import AssetCache, MemoryLoader

    cache = AssetCache(MemoryLoader({"ShopDatabase": {...}}))
    shop = await cache.acquire("ShopDatabase")
"""

__version__ = "0.1.0"

from runtime.core import (
    SessionConfig,
    EventBus,
    Event,
    AdventureError,
    LoadFailed,
    UnknownScene,
    TransitionRejected,
    MalformedParameter,
    AssetNotFound,
)
from runtime.resources import (
    AssetCache,
    AssetHandle,
    AssetStatus,
    AssetLoader,
    MemoryLoader,
    JsonFileLoader,
    DirectorySearchLoader,
    FallbackLoader,
)
from runtime.transitions import TransitionEffect, TimedTransition, ScreenFader

__all__ = [
    "SessionConfig",
    "EventBus",
    "Event",
    "AdventureError",
    "LoadFailed",
    "UnknownScene",
    "TransitionRejected",
    "MalformedParameter",
    "AssetNotFound",
    "AssetCache",
    "AssetHandle",
    "AssetStatus",
    "AssetLoader",
    "MemoryLoader",
    "JsonFileLoader",
    "DirectorySearchLoader",
    "FallbackLoader",
    "TransitionEffect",
    "TimedTransition",
    "ScreenFader",
]
