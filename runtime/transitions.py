"""
Scene transition effects.

A transition effect suspends the navigator while the screen fades out and
back in. The presentation layer reads ScreenFader.progress each frame to
draw the overlay (0 = clear, 1 = fully black).
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from runtime.core.events import TransitionEvent

if TYPE_CHECKING:
    from runtime.core.events import EventBus


class TransitionEffect(ABC):
    """Fade-out / fade-in provider."""

    @abstractmethod
    async def fade_out(self) -> None:
        """Fade from scene to black."""

    @abstractmethod
    async def fade_in(self) -> None:
        """Fade from black to scene."""


class TimedTransition(TransitionEffect):
    """Fixed-duration wait used when no visual effect is available."""

    def __init__(self, fade_out_seconds: float = 0.2, fade_in_seconds: float = 0.0):
        self.fade_out_seconds = fade_out_seconds
        self.fade_in_seconds = fade_in_seconds

    async def fade_out(self) -> None:
        await asyncio.sleep(self.fade_out_seconds)

    async def fade_in(self) -> None:
        await asyncio.sleep(self.fade_in_seconds)


class ScreenFader(TransitionEffect):
    """
    Stepped screen fade.

    Advances progress once per tick until it reaches the target, so the
    fade takes roughly `duration` seconds regardless of tick length.
    """

    def __init__(
        self,
        duration: float = 0.3,
        tick: float = 1 / 60,
        event_bus: EventBus | None = None,
    ):
        if tick <= 0:
            raise ValueError("tick must be > 0")
        self.duration = duration
        self.tick = tick
        self.event_bus = event_bus
        self.progress = 0.0

    @property
    def is_black(self) -> bool:
        return self.progress >= 1.0

    def step_out(self, dt: float) -> bool:
        """Advance toward black. Returns True when complete."""
        if self.duration <= 0:
            self.progress = 1.0
        else:
            self.progress = min(1.0, self.progress + dt / self.duration)
        return self.progress >= 1.0

    def step_in(self, dt: float) -> bool:
        """Advance toward clear. Returns True when complete."""
        if self.duration <= 0:
            self.progress = 0.0
        else:
            self.progress = max(0.0, self.progress - dt / self.duration)
        return self.progress <= 0.0

    async def fade_out(self) -> None:
        self._publish(TransitionEvent.FADE_OUT_STARTED)
        while not self.step_out(self.tick):
            await asyncio.sleep(self.tick)
        self._publish(TransitionEvent.FADE_OUT_FINISHED)

    async def fade_in(self) -> None:
        self._publish(TransitionEvent.FADE_IN_STARTED)
        while not self.step_in(self.tick):
            await asyncio.sleep(self.tick)
        self._publish(TransitionEvent.FADE_IN_FINISHED)

    def _publish(self, event_type: TransitionEvent) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, progress=self.progress)
