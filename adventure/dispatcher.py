"""
Command dispatch table.

Maps a command type to exactly one handler. Handlers take the command
parameter; a handler may return an awaitable, which the caller awaits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from adventure.models import AdventureCommand, CommandType
from runtime.core.errors import MalformedParameter

logger = logging.getLogger(__name__)

CommandHandler = Callable[[str], Any]

DEFAULT_SHOP_ID = "Default"


@dataclass(frozen=True)
class ShopParameter:
    """Parsed Shop command parameter (`path|shopId`)."""
    path: str
    shop_id: str
    address: str


def parse_shop_parameter(parameter: str, default_shop_id: str = DEFAULT_SHOP_ID) -> ShopParameter:
    """
    Split a Shop parameter into path, shop id and cache address.

    The first `|` segment is the asset path, the second the shop id. The
    cache address is the last `/` segment of the path.

        >>> parse_shop_parameter("Data/Shops/Blacksmith|shop_bk")
        ShopParameter(path='Data/Shops/Blacksmith', shop_id='shop_bk', address='Blacksmith')

    Raises:
        MalformedParameter: The path or its last segment is empty
    """
    parts = (parameter or "").split("|")
    path = parts[0].strip()
    shop_id = parts[1].strip() if len(parts) > 1 else ""

    if not path:
        raise MalformedParameter(CommandType.SHOP.value, parameter, "empty path")

    address = path.split("/")[-1]
    if not address:
        raise MalformedParameter(CommandType.SHOP.value, parameter, "path has no asset name")

    return ShopParameter(path=path, shop_id=shop_id or default_shop_id, address=address)


class CommandDispatcher:
    """
    Routes commands to handlers by type.

    Usage:
        dispatcher = CommandDispatcher()
        dispatcher.register(CommandType.MOVE, navigator.enter_scene)
        dispatcher.dispatch(command)
    """

    def __init__(self):
        self._handlers: dict[CommandType, CommandHandler] = {}

    def register(self, command_type: CommandType, handler: CommandHandler) -> None:
        """Install the handler for a type, replacing any previous one."""
        self._handlers[CommandType(command_type)] = handler

    def unregister(self, command_type: CommandType) -> None:
        self._handlers.pop(CommandType(command_type), None)

    def handles(self, command_type: CommandType) -> bool:
        return command_type in self._handlers

    def get_handler(self, command_type: CommandType) -> Optional[CommandHandler]:
        return self._handlers.get(command_type)

    def dispatch(self, command: Optional[AdventureCommand]) -> Any:
        """
        Invoke the handler for a command.

        Returns:
            Whatever the handler returned, or None when the command is None
            or has no handler
        """
        if command is None:
            return None

        command_type = command.command_type
        handler = self._handlers.get(command_type) if command_type is not None else None
        if handler is None:
            logger.debug(f"[Adventure] No handler for command type {command.type!r}, ignored")
            return None

        return handler(command.parameter)
