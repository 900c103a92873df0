"""
Adventure session - one explicit context per running session.

Owns the event bus, asset cache, scene graph, navigator and the default
collaborators. Components receive what they need from the session instead
of reaching for global managers.

Usage:
    config = SessionConfig(data_dir="game/data")
    async with AdventureSession.from_config(config) as session:
        await session.start()
        for command in session.current_scene.commands:
            ...
        await session.execute_command(command)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from adventure.models import ADVENTURE_DATABASE_SCHEMA, AdventureCommand, AdventureScene
from adventure.navigator import SceneNavigator
from adventure.panels import PanelManager, PanelSurface
from adventure.quests import QuestLog, QuestNotifier
from adventure.scene_graph import SceneGraph
from adventure.story import StoryPlayback, StoryPlayer
from runtime.core.config import SessionConfig
from runtime.core.events import EventBus
from runtime.resources.cache import AssetCache
from runtime.resources.loaders import (
    AssetLoader,
    DirectorySearchLoader,
    FallbackLoader,
    JsonFileLoader,
)
from runtime.resources.schemas import SchemaRegistry
from runtime.transitions import ScreenFader, TimedTransition, TransitionEffect

logger = logging.getLogger(__name__)


def build_loader(config: SessionConfig, schemas: Optional[SchemaRegistry] = None) -> AssetLoader:
    """
    Build the loader chain described by a config.

    The data directory is the primary backend; search directories are
    consulted only for addresses it does not have.

    Raises:
        ValueError: The config names no data or search directory
    """
    backends: list[AssetLoader] = []
    if config.data_dir is not None:
        backends.append(JsonFileLoader(config.data_dir, schemas=schemas))
    if config.search_dirs:
        backends.append(DirectorySearchLoader(config.search_dirs, schemas=schemas))

    if not backends:
        raise ValueError("SessionConfig needs data_dir or search_dirs to build a loader")
    if len(backends) == 1:
        return backends[0]
    return FallbackLoader(*backends)


class AdventureSession:
    """Session context for the adventure runtime."""

    def __init__(
        self,
        loader: AssetLoader,
        config: Optional[SessionConfig] = None,
        event_bus: Optional[EventBus] = None,
        transition: Optional[TransitionEffect] = None,
        story: Optional[StoryPlayback] = None,
        quests: Optional[QuestNotifier] = None,
        panels: Optional[PanelSurface] = None,
    ):
        self.config = config or SessionConfig()
        self.event_bus = event_bus or EventBus()

        self.cache = AssetCache(loader, event_bus=self.event_bus)
        self.scene_graph = SceneGraph(self.cache, address=self.config.database_address)

        self.story = story if story is not None else StoryPlayer(self.event_bus)
        self.quests = quests if quests is not None else QuestLog(self.event_bus)
        self.panels = panels if panels is not None else PanelManager(self.event_bus)

        if transition is None and self.config.use_fader:
            transition = ScreenFader(duration=self.config.fade_duration, event_bus=self.event_bus)
        elif transition is None:
            transition = TimedTransition(
                fade_out_seconds=self.config.fade_out_fallback,
                fade_in_seconds=self.config.fade_in_fallback,
            )

        self.navigator = SceneNavigator(
            self.scene_graph,
            cache=self.cache,
            transition=transition,
            story=self.story,
            quests=self.quests,
            panels=self.panels,
            event_bus=self.event_bus,
            settle_delay=self.config.settle_delay,
            default_shop_id=self.config.default_shop_id,
            shop_panel=self.config.shop_panel,
        )

        if isinstance(self.quests, QuestLog):
            self.navigator.add_scene_listener(self.quests.on_scene_entered)

        self._started = False
        self._torn_down = False

    @classmethod
    def from_config(cls, config: SessionConfig, **kwargs: Any) -> AdventureSession:
        """
        Build a session whose loader comes from the config.

        A `loader` keyword overrides the config's directories.
        """
        loader = kwargs.pop("loader", None)
        if loader is None:
            schemas = SchemaRegistry(config.schema_dir)
            schemas.load_all()
            if config.database_address not in schemas:
                schemas.register(config.database_address, ADVENTURE_DATABASE_SCHEMA)
            loader = build_loader(config, schemas)
        return cls(loader, config=config, **kwargs)

    @property
    def current_scene(self) -> Optional[AdventureScene]:
        return self.navigator.current_scene

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    async def start(self, start_scene_id: Optional[str] = None) -> bool:
        """
        Preload databases, load the scene graph and enter the first scene.

        Returns:
            True if a start scene was entered
        """
        if self._torn_down:
            logger.warning("[Session] Cannot start a torn down session")
            return False

        if self.config.preload:
            loaded = await self.cache.preload(self.config.preload)
            logger.info(f"[Session] Preloaded {len(loaded)}/{len(set(self.config.preload))} databases.")

        if not await self.scene_graph.initialize():
            logger.warning("[Session] Scene database unavailable, navigation disabled.")
            return False

        self._started = True
        scene_id = start_scene_id or self.scene_graph.start_scene_id
        if scene_id is None:
            logger.warning("[Session] Scene database has no scenes.")
            return False

        return await self.navigator.enter_scene(scene_id)

    async def enter_scene(self, scene_id: str) -> bool:
        return await self.navigator.enter_scene(scene_id)

    async def execute_command(self, command: Optional[AdventureCommand]) -> None:
        await self.navigator.execute_command(command)

    def teardown(self) -> None:
        """Release everything the session holds. Safe to call once."""
        if self._torn_down:
            logger.warning("[Session] teardown() called more than once")
            return

        self._torn_down = True
        self.navigator.clear_listeners()
        self.navigator.release_shop()
        self.scene_graph.release()
        self.cache.teardown()
        self.event_bus.clear()
        logger.info("[Session] Session torn down.")

    async def __aenter__(self) -> AdventureSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self._torn_down:
            self.teardown()
