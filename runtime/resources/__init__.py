"""
Asset loading.

Exports:
- AssetCache, AssetHandle, AssetStatus: Deduplicating asset cache
- AssetLoader and backends: Where assets come from
- SchemaRegistry: JSON schema validation for loaded content
"""

from runtime.resources.cache import AssetCache, AssetHandle, AssetStatus
from runtime.resources.loaders import (
    AssetLoader,
    MemoryLoader,
    JsonFileLoader,
    DirectorySearchLoader,
    FallbackLoader,
)
from runtime.resources.schemas import SchemaRegistry

__all__ = [
    "AssetCache",
    "AssetHandle",
    "AssetStatus",
    "AssetLoader",
    "MemoryLoader",
    "JsonFileLoader",
    "DirectorySearchLoader",
    "FallbackLoader",
    "SchemaRegistry",
]
