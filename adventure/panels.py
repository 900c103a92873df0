"""
Panel-opening UI surface.

The runtime never draws panels. It asks the surface to open one by kind
with a payload and the presentation layer reacts to PANEL_OPENED.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from runtime.core.events import UIEvent

if TYPE_CHECKING:
    from runtime.core.events import EventBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShopPanelPayload:
    """What a shop panel needs to open."""
    dataset: Any
    shop_id: str


class PanelSurface(ABC):
    """Entry point used by the Shop command."""

    @abstractmethod
    def open_panel(self, kind: str, payload: Any = None) -> None:
        """Open a panel of the given kind."""


class PanelManager(PanelSurface):
    """
    Tracks open panels by kind.

    Opening a kind that is already open replaces its payload.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self._open: dict[str, Any] = {}

    @property
    def open_panels(self) -> list[str]:
        return list(self._open)

    def is_open(self, kind: str) -> bool:
        return kind in self._open

    def get_payload(self, kind: str) -> Any:
        return self._open.get(kind)

    def open_panel(self, kind: str, payload: Any = None) -> None:
        self._open[kind] = payload
        logger.info(f"[UI] Opening panel: {kind}")
        if self.event_bus:
            self.event_bus.publish(UIEvent.PANEL_OPENED, kind=kind, payload=payload)

    def close_panel(self, kind: str) -> bool:
        if kind not in self._open:
            return False
        del self._open[kind]
        if self.event_bus:
            self.event_bus.publish(UIEvent.PANEL_CLOSED, kind=kind)
        return True

    def close_all(self) -> None:
        for kind in list(self._open):
            self.close_panel(kind)
