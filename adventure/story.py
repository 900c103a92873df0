"""
Story playback collaborator.

The navigator only needs `start(story_id)`. StoryPlayer is the default
in-process implementation: it tracks which story is playing and announces
start/finish on the event bus so the presentation layer can show it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from runtime.core.events import StoryEvent

if TYPE_CHECKING:
    from runtime.core.events import EventBus

logger = logging.getLogger(__name__)


class StoryPlayback(ABC):
    """Entry point used by the Talk command."""

    @abstractmethod
    def start(self, story_id: str) -> None:
        """Begin playing a story."""


class StoryPlayer(StoryPlayback):
    """
    Tracks story playback.

    Starting a story while another is playing replaces it; the replaced
    story is reported as finished first.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self._current: Optional[str] = None
        self._history: list[str] = []

    @property
    def current_story(self) -> Optional[str]:
        return self._current

    @property
    def is_playing(self) -> bool:
        return self._current is not None

    @property
    def history(self) -> list[str]:
        """Story ids in the order they were started."""
        return list(self._history)

    def has_played(self, story_id: str) -> bool:
        return story_id in self._history

    def start(self, story_id: str) -> None:
        if not story_id:
            logger.warning("[Story] Ignoring start with empty story id")
            return

        if self._current is not None:
            self.finish()

        self._current = story_id
        self._history.append(story_id)
        logger.info(f"[Story] Starting story: {story_id}")

        if self.event_bus:
            self.event_bus.publish(StoryEvent.STARTED, story_id=story_id)

    def finish(self) -> Optional[str]:
        """End the current story. Returns its id."""
        story_id = self._current
        if story_id is None:
            return None

        self._current = None
        if self.event_bus:
            self.event_bus.publish(StoryEvent.FINISHED, story_id=story_id)
        return story_id
