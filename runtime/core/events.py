"""
Typed event bus for decoupled communication.

Event types are Enum members so subscribers never match on magic strings.

Usage:
    bus = EventBus()
    bus.subscribe(AssetEvent.LOAD_FAILED, on_load_failed)
    bus.publish(AssetEvent.LOAD_FAILED, address="ShopDatabase")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class AssetEvent(Enum):
    """Asset cache events."""
    LOAD_STARTED = auto()
    LOAD_SUCCEEDED = auto()
    LOAD_FAILED = auto()
    RELEASED = auto()


class AdventureEvent(Enum):
    """Scene navigation events."""
    SCENE_CHANGED = auto()
    TRANSITION_STARTED = auto()
    TRANSITION_FINISHED = auto()
    TRANSITION_REJECTED = auto()
    COMMAND_EXECUTED = auto()


class TransitionEvent(Enum):
    """Screen fade events."""
    FADE_OUT_STARTED = auto()
    FADE_OUT_FINISHED = auto()
    FADE_IN_STARTED = auto()
    FADE_IN_FINISHED = auto()


class StoryEvent(Enum):
    """Story playback events."""
    STARTED = auto()
    FINISHED = auto()


class QuestEvent(Enum):
    """Quest progress events."""
    ACCEPTED = auto()
    UPDATED = auto()
    COMPLETED = auto()


class UIEvent(Enum):
    """Panel surface events."""
    PANEL_OPENED = auto()
    PANEL_CLOSED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering, registration order within a priority
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)
    """

    def __init__(self):
        # event type -> list of (priority, handler_ref, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Events published while a dispatch is running
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, hold a weak reference to the handler
        """
        handlers = self._handlers.setdefault(event_type, [])

        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (p, h, o) for p, h, o in self._handlers[event_type]
            if self._get_handler(h) != handler
        ]

    def has_subscribers(self, event_type: Enum) -> bool:
        return bool(self._handlers.get(event_type))

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Events published from inside a handler are queued and dispatched
        after the current dispatch finishes.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Clear handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if handlers:
            self._is_publishing = True
            to_remove = []

            try:
                for i, (_, handler_ref, one_shot) in enumerate(handlers):
                    handler = self._get_handler(handler_ref)

                    if handler is None:
                        # Weak reference was garbage collected
                        to_remove.append(i)
                        continue

                    try:
                        handler(event)
                    except Exception:
                        logger.exception(f"[EventBus] Error in handler for {event.type}")

                    if one_shot:
                        to_remove.append(i)

                    if event.consumed:
                        break
            finally:
                for i in reversed(to_remove):
                    handlers.pop(i)
                self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
