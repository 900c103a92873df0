"""
Loader backends for the asset cache.

A backend turns an address into an asset. The cache never knows how:

- MemoryLoader: assets from a dict (tests, demos, generated content)
- JsonFileLoader: `<root>/<address>.json`
- DirectorySearchLoader: first `<address>.json` found under search roots
- FallbackLoader: primary backend, then lower-priority ones
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Mapping

from runtime.core.errors import AssetNotFound
from runtime.resources.schemas import SchemaRegistry

logger = logging.getLogger(__name__)


class AssetLoader(ABC):
    """Backend contract used by AssetCache."""

    @abstractmethod
    async def load(self, address: str) -> Any:
        """
        Load the asset at an address.

        Raises:
            AssetNotFound: This backend has no asset for the address
            Exception: Any other error fails the load
        """

    def release(self, address: str, asset: Any) -> None:
        """Called when the cache drops its last reference to an asset."""


class MemoryLoader(AssetLoader):
    """
    Serves assets from an in-memory mapping.

    Args:
        assets: address -> asset
        delay: Seconds to suspend before each load completes
    """

    def __init__(self, assets: Mapping[str, Any] | None = None, delay: float = 0.0):
        self.assets: dict[str, Any] = dict(assets or {})
        self.delay = delay
        self.load_counts: Counter[str] = Counter()
        self.released: list[str] = []

    def add(self, address: str, asset: Any) -> None:
        self.assets[address] = asset

    async def load(self, address: str) -> Any:
        self.load_counts[address] += 1
        await asyncio.sleep(self.delay)
        if address not in self.assets:
            raise AssetNotFound(address)
        return self.assets[address]

    def release(self, address: str, asset: Any) -> None:
        self.released.append(address)


def _read_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


class JsonFileLoader(AssetLoader):
    """
    Loads `<root>/<address>.json`.

    File reads run in a worker thread; the result is returned to the
    event loop. When a schema registry is given, content is validated
    against the schema whose name matches the address (if any).
    """

    def __init__(self, root: Path | str, schemas: SchemaRegistry | None = None):
        self.root = Path(root)
        self.schemas = schemas

    def path_for(self, address: str) -> Path:
        return self.root / f"{address}.json"

    async def load(self, address: str) -> Any:
        path = self.path_for(address)
        if not path.is_file():
            raise AssetNotFound(address)

        data = await asyncio.to_thread(_read_json, path)
        if self.schemas is not None:
            self.schemas.validate(address, data)
        logger.debug(f"[JsonFileLoader] Loaded {path}")
        return data


class DirectorySearchLoader(AssetLoader):
    """
    Secondary lookup that searches directories for `<address>.json`.

    Search roots are scanned in order, recursively; the first match wins.
    """

    def __init__(self, roots: Iterable[Path | str], schemas: SchemaRegistry | None = None):
        self.roots = [Path(r) for r in roots]
        self.schemas = schemas

    def find(self, address: str) -> Path | None:
        filename = f"{address}.json"
        for root in self.roots:
            if not root.is_dir():
                continue
            for candidate in sorted(root.rglob(filename)):
                if candidate.is_file():
                    return candidate
        return None

    async def load(self, address: str) -> Any:
        path = await asyncio.to_thread(self.find, address)
        if path is None:
            raise AssetNotFound(address)

        logger.info(f"[DirectorySearchLoader] Found {address} at {path}")
        data = await asyncio.to_thread(_read_json, path)
        if self.schemas is not None:
            self.schemas.validate(address, data)
        return data


class FallbackLoader(AssetLoader):
    """
    Tries backends in priority order.

    The next backend is consulted only when the previous one has no asset
    for the address (AssetNotFound or None). Any other error fails the load.
    """

    def __init__(self, primary: AssetLoader, *fallbacks: AssetLoader):
        self.backends: list[AssetLoader] = [primary, *fallbacks]
        self._owners: dict[str, AssetLoader] = {}

    async def load(self, address: str) -> Any:
        for index, backend in enumerate(self.backends):
            try:
                asset = await backend.load(address)
            except AssetNotFound:
                asset = None

            if asset is not None:
                if index > 0:
                    logger.info(
                        f"[FallbackLoader] {address} served by fallback "
                        f"{type(backend).__name__}"
                    )
                self._owners[address] = backend
                return asset

        raise AssetNotFound(address)

    def release(self, address: str, asset: Any) -> None:
        backend = self._owners.pop(address, None)
        if backend is not None:
            backend.release(address, asset)
