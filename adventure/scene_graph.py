"""
Scene graph - read model over the loaded adventure database.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from adventure.models import AdventureDatabase, AdventureScene
from runtime.core.errors import LoadFailed

if TYPE_CHECKING:
    from runtime.resources.cache import AssetCache

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_ADDRESS = "AdventureDatabase"


class SceneGraph:
    """
    Read-only scene lookup backed by a database asset from the cache.

    Until initialize() succeeds the graph reports itself uninitialized
    and every lookup returns None.
    """

    def __init__(self, cache: AssetCache, address: str = DEFAULT_DATABASE_ADDRESS):
        self.cache = cache
        self.address = address
        self._database: Optional[AdventureDatabase] = None

    @property
    def is_initialized(self) -> bool:
        return self._database is not None

    @property
    def database(self) -> Optional[AdventureDatabase]:
        return self._database

    @property
    def start_scene_id(self) -> Optional[str]:
        """First scene in the database, or None."""
        if self._database is None:
            return None
        return self._database.start_scene_id

    @property
    def scene_ids(self) -> list[str]:
        if self._database is None:
            return []
        return [scene.scene_id for scene in self._database.scenes]

    async def initialize(self) -> bool:
        """
        Load the database through the asset cache.

        Returns:
            True if the graph is ready
        """
        if self._database is not None:
            return True

        try:
            raw = await self.cache.acquire(self.address)
        except LoadFailed:
            logger.warning(f"[Adventure] {self.address} failed to load!")
            return False

        if self._database is not None:
            # A concurrent initialize() finished first
            self.cache.release(self.address)
            return True

        try:
            if isinstance(raw, AdventureDatabase):
                database = raw
            else:
                database = AdventureDatabase.model_validate(raw)
        except ValidationError as e:
            logger.error(f"[Adventure] {self.address} is not a valid scene database: {e}")
            self.cache.release(self.address)
            return False

        self._database = database
        logger.info(f"[Adventure] Scene database loaded ({len(database.scenes)} scenes).")
        return True

    def get_scene(self, scene_id: str) -> Optional[AdventureScene]:
        if self._database is None:
            return None
        return self._database.get_scene(scene_id)

    def release(self) -> None:
        """Drop the database and its cache reference."""
        if self._database is None:
            return
        self._database = None
        self.cache.release(self.address)
