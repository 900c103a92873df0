"""
Scene navigator - state machine over the current scene.

Entering a scene:
- First scene of a session, or the scene the player is already in: no
  visual transition
- Any other scene: fade out, apply, settle, fade in

Only one transition runs at a time. A request made while one is running
is rejected, never queued.

Applying a scene is synchronous: listeners are notified in registration
order, then the scene's auto-trigger story (if any) is dispatched as a
Talk command. All of this happens before fade-in starts.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from adventure.dispatcher import CommandDispatcher, DEFAULT_SHOP_ID, parse_shop_parameter
from adventure.models import AdventureCommand, AdventureScene, CommandType
from adventure.panels import ShopPanelPayload
from runtime.core.errors import (
    AdventureError,
    LoadFailed,
    MalformedParameter,
    TransitionRejected,
    UnknownScene,
)
from runtime.core.events import AdventureEvent, UIEvent
from runtime.transitions import TimedTransition

if TYPE_CHECKING:
    from adventure.panels import PanelSurface
    from adventure.quests import QuestNotifier
    from adventure.scene_graph import SceneGraph
    from adventure.story import StoryPlayback
    from runtime.core.events import EventBus
    from runtime.resources.cache import AssetCache
    from runtime.transitions import TransitionEffect

logger = logging.getLogger(__name__)

SceneListener = Callable[[AdventureScene], None]

SHOP_PANEL = "ShopCanvas"


class NavigatorStatus(Enum):
    """Navigator states."""
    IDLE = auto()
    TRANSITIONING = auto()


@dataclass
class NavigatorState:
    """Mutable navigation state, owned by one SceneNavigator."""
    current_scene: Optional[AdventureScene] = None
    transition_in_progress: bool = False


class SceneNavigator:
    """
    Drives scene changes and routes scene commands.

    Collaborators are optional. A missing story, quest or panel
    collaborator turns the matching command into a logged no-op; a missing
    transition effect falls back to a timed wait.
    """

    def __init__(
        self,
        scene_graph: SceneGraph,
        cache: Optional[AssetCache] = None,
        transition: Optional[TransitionEffect] = None,
        story: Optional[StoryPlayback] = None,
        quests: Optional[QuestNotifier] = None,
        panels: Optional[PanelSurface] = None,
        event_bus: Optional[EventBus] = None,
        settle_delay: float = 0.1,
        default_shop_id: str = DEFAULT_SHOP_ID,
        shop_panel: str = SHOP_PANEL,
    ):
        self.scene_graph = scene_graph
        self.cache = cache if cache is not None else scene_graph.cache
        self.transition = transition if transition is not None else TimedTransition()
        self.story = story
        self.quests = quests
        self.panels = panels
        self.event_bus = event_bus
        self.settle_delay = settle_delay
        self.default_shop_id = default_shop_id
        self.shop_panel = shop_panel

        self.state = NavigatorState()
        self._transition_target: Optional[str] = None
        self._listeners: list[SceneListener] = []
        self._background: set[asyncio.Task] = set()
        self._shop_address: Optional[str] = None

        self.dispatcher = CommandDispatcher()
        self.dispatcher.register(CommandType.MOVE, self._handle_move)
        self.dispatcher.register(CommandType.TALK, self._handle_talk)
        self.dispatcher.register(CommandType.SHOP, self._handle_shop)
        self.dispatcher.register(CommandType.EXPLORE, self._handle_explore)
        self.dispatcher.register(CommandType.BATTLE, self._handle_battle)
        self.dispatcher.register(CommandType.SYSTEM, self._handle_system)

        if self.event_bus is not None:
            self.event_bus.subscribe(UIEvent.PANEL_CLOSED, self._on_panel_closed)

    @property
    def current_scene(self) -> Optional[AdventureScene]:
        return self.state.current_scene

    @property
    def status(self) -> NavigatorStatus:
        if self.state.transition_in_progress:
            return NavigatorStatus.TRANSITIONING
        return NavigatorStatus.IDLE

    @property
    def is_transitioning(self) -> bool:
        return self.state.transition_in_progress

    # Listeners

    def add_scene_listener(self, listener: SceneListener) -> None:
        """Call listener(scene) on every scene change, in registration order."""
        self._listeners.append(listener)

    def remove_scene_listener(self, listener: SceneListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear_listeners(self) -> None:
        self._listeners.clear()

    # Navigation

    async def enter_scene(self, scene_id: str, raise_errors: bool = False) -> bool:
        """
        Enter a scene by id.

        Args:
            scene_id: Target scene
            raise_errors: Propagate UnknownScene / TransitionRejected instead
                of logging them

        Returns:
            True if the player is in the scene afterwards
        """
        if not self.scene_graph.is_initialized:
            logger.warning(f"[Adventure] Scene database not initialized, cannot enter: {scene_id}")
            return False

        try:
            return await self._enter(scene_id)
        except AdventureError as e:
            if raise_errors:
                raise
            if isinstance(e, TransitionRejected):
                logger.warning(f"[Adventure] {e}")
            else:
                logger.error(f"[Adventure] {e}")
            return False

    async def _enter(self, scene_id: str) -> bool:
        scene = self.scene_graph.get_scene(scene_id)
        if scene is None:
            raise UnknownScene(scene_id)

        current = self.state.current_scene
        if current is None:
            self._apply_scene_change(scene)
            return True

        if current.scene_id == scene_id:
            logger.debug(f"[Adventure] Already in scene: {scene_id}")
            return True

        if self.state.transition_in_progress:
            self._publish(
                AdventureEvent.TRANSITION_REJECTED,
                scene_id=scene_id,
                active_scene_id=self._transition_target,
            )
            raise TransitionRejected(scene_id, self._transition_target)

        await self._transition_to(scene)
        return True

    async def _transition_to(self, scene: AdventureScene) -> None:
        previous = self.state.current_scene
        self.state.transition_in_progress = True
        self._transition_target = scene.scene_id
        self._publish(
            AdventureEvent.TRANSITION_STARTED,
            from_scene_id=previous.scene_id if previous else None,
            to_scene_id=scene.scene_id,
        )

        try:
            await self._run_effect(self.transition.fade_out, "fade-out")
            self._apply_scene_change(scene)
            if self.settle_delay > 0:
                await asyncio.sleep(self.settle_delay)
            await self._run_effect(self.transition.fade_in, "fade-in")
        finally:
            self.state.transition_in_progress = False
            self._transition_target = None
            self._publish(AdventureEvent.TRANSITION_FINISHED, scene_id=scene.scene_id)

    async def _run_effect(self, effect: Callable[[], Awaitable[None]], name: str) -> None:
        try:
            await effect()
        except Exception:
            logger.exception(f"[Adventure] Transition {name} failed, continuing")

    def _apply_scene_change(self, scene: AdventureScene) -> None:
        self.state.current_scene = scene
        logger.info(f"[Adventure] Entering scene: {scene.scene_name} ({scene.scene_id})")

        for listener in list(self._listeners):
            try:
                listener(scene)
            except Exception:
                logger.exception(f"[Adventure] Scene listener failed for {scene.scene_id}")

        self._publish(AdventureEvent.SCENE_CHANGED, scene=scene)

        if scene.auto_trigger_story_id:
            self._dispatch_now(AdventureCommand(
                type=CommandType.TALK.value,
                parameter=scene.auto_trigger_story_id,
                label="auto-trigger",
            ))

    # Commands

    async def execute_command(self, command: Optional[AdventureCommand]) -> None:
        """Route a command to its handler. None and unknown types are no-ops."""
        if command is None:
            return

        logger.debug(f"[Adventure] Executing command: {command.label} ({command.type})")
        result = self.dispatcher.dispatch(command)
        if inspect.isawaitable(result):
            await result

        self._publish(AdventureEvent.COMMAND_EXECUTED, command=command)

    def _dispatch_now(self, command: AdventureCommand) -> None:
        try:
            result = self.dispatcher.dispatch(command)
        except Exception:
            logger.exception(f"[Adventure] Command failed: {command.label} ({command.type})")
            return
        if inspect.isawaitable(result):
            # Replaced handlers may be async; they still start before fade-in
            task = asyncio.ensure_future(result)
            self._background.add(task)
            task.add_done_callback(self._background.discard)

    def _handle_move(self, target_scene_id: str) -> Awaitable[bool]:
        return self.enter_scene(target_scene_id)

    def _handle_talk(self, story_id: str) -> None:
        if self.story is None:
            logger.error("[Adventure] Story playback not available!")
            return

        try:
            self.story.start(story_id)
        except Exception:
            logger.exception(f"[Adventure] Story failed to start: {story_id}")
            return

        if self.quests is not None:
            try:
                self.quests.on_talked_to(story_id)
            except Exception:
                logger.exception(f"[Adventure] Quest update failed for story: {story_id}")

    async def _handle_shop(self, parameter: str) -> None:
        try:
            shop = parse_shop_parameter(parameter, self.default_shop_id)
        except MalformedParameter as e:
            logger.warning(f"[Adventure] {e}")
            return

        logger.info(f"[Adventure] Attempting to load shop with key: {shop.address}")
        try:
            dataset = await self.cache.acquire(shop.address)
        except LoadFailed:
            # Already logged by the cache
            return

        if self.panels is None:
            logger.warning(f"[Adventure] No panel surface, shop not opened: {shop.shop_id}")
            self.cache.release(shop.address)
            return

        # One shop dataset reference at a time; the new one is held before
        # the old one goes so reopening the same shop never reloads it
        self.release_shop()
        self._shop_address = shop.address
        self.panels.open_panel(self.shop_panel, ShopPanelPayload(dataset=dataset, shop_id=shop.shop_id))

    def release_shop(self) -> None:
        """Give back the dataset reference held for the shop panel."""
        if self._shop_address is None:
            return
        address, self._shop_address = self._shop_address, None
        self.cache.release(address)

    def _on_panel_closed(self, event) -> None:
        if event.get("kind") == self.shop_panel:
            self.release_shop()

    def _handle_explore(self, parameter: str) -> None:
        pass

    def _handle_battle(self, parameter: str) -> None:
        pass

    def _handle_system(self, parameter: str) -> None:
        pass

    def _publish(self, event_type: AdventureEvent, **data: Any) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)
