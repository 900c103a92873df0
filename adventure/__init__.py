"""
Adventure framework.

Scene database models, the scene graph, the navigator with its command
dispatch table, the default story/quest/panel collaborators, and the
session context that wires them to the runtime.

Exports:
- AdventureSession: Session context
- SceneNavigator, NavigatorState, NavigatorStatus: Scene state machine
- SceneGraph: Scene lookup
- CommandDispatcher, parse_shop_parameter: Command routing
- AdventureDatabase, AdventureScene, AdventureCommand, CommandType: Content
"""

from adventure.models import (
    AdventureCommand,
    AdventureDatabase,
    AdventureScene,
    CommandType,
)
from adventure.scene_graph import SceneGraph
from adventure.dispatcher import CommandDispatcher, ShopParameter, parse_shop_parameter
from adventure.navigator import NavigatorState, NavigatorStatus, SceneNavigator
from adventure.story import StoryPlayback, StoryPlayer
from adventure.quests import Quest, QuestLog, QuestNotifier, QuestObjective, ObjectiveType
from adventure.panels import PanelManager, PanelSurface, ShopPanelPayload
from adventure.session import AdventureSession, build_loader

__all__ = [
    # Content
    "AdventureCommand",
    "AdventureDatabase",
    "AdventureScene",
    "CommandType",
    # Navigation
    "SceneGraph",
    "CommandDispatcher",
    "ShopParameter",
    "parse_shop_parameter",
    "NavigatorState",
    "NavigatorStatus",
    "SceneNavigator",
    # Collaborators
    "StoryPlayback",
    "StoryPlayer",
    "Quest",
    "QuestLog",
    "QuestNotifier",
    "QuestObjective",
    "ObjectiveType",
    "PanelManager",
    "PanelSurface",
    "ShopPanelPayload",
    # Session
    "AdventureSession",
    "build_loader",
]
