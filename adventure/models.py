"""
Adventure database content.

Scenes and their commands are read-only data owned by the loaded database
asset. Pydantic handles validation of the raw mapping:

    database = AdventureDatabase.model_validate({
        "scenes": [
            {
                "scene_id": "town",
                "scene_name": "Riverside Town",
                "commands": [
                    {"type": "Move", "parameter": "forest", "label": "Go to the forest"},
                    {"type": "Shop", "parameter": "Data/Shops/Blacksmith|shop_bk", "label": "Smithy"},
                ],
            },
        ],
    })
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class CommandType(str, Enum):
    """Command type tags. Values match the database encoding."""
    MOVE = "Move"
    TALK = "Talk"
    SHOP = "Shop"
    EXPLORE = "Explore"
    BATTLE = "Battle"
    SYSTEM = "System"


class ContentModel(BaseModel):
    """Base for immutable database content."""

    model_config = ConfigDict(
        frozen=True,
        extra='ignore',
        populate_by_name=True,
    )


class AdventureCommand(ContentModel):
    """
    A typed action attached to a scene.

    The type is stored as its tag string. Unknown tags load fine so newer
    databases work on older runtimes; the dispatcher ignores them.
    """
    type: str
    parameter: str = ""
    label: str = ""

    @property
    def command_type(self) -> CommandType | None:
        """The known command type, or None for unrecognized tags."""
        try:
            return CommandType(self.type)
        except ValueError:
            return None


class AdventureScene(ContentModel):
    """A navigable location."""
    scene_id: str = Field(alias="sceneId", min_length=1)
    scene_name: str = Field(default="", alias="sceneName")
    description: str = ""
    auto_trigger_story_id: str = Field(default="", alias="autoTriggerStoryId")
    commands: tuple[AdventureCommand, ...] = ()

    @property
    def has_auto_trigger(self) -> bool:
        return bool(self.auto_trigger_story_id)

    def commands_of(self, command_type: CommandType) -> list[AdventureCommand]:
        return [c for c in self.commands if c.type == command_type]


class AdventureDatabase(ContentModel):
    """The scene database asset."""
    scenes: tuple[AdventureScene, ...] = ()

    _index: dict[str, AdventureScene] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        # First occurrence wins for duplicate ids
        for scene in self.scenes:
            self._index.setdefault(scene.scene_id, scene)

    @property
    def start_scene_id(self) -> Optional[str]:
        return self.scenes[0].scene_id if self.scenes else None

    def get_scene(self, scene_id: str) -> Optional[AdventureScene]:
        return self._index.get(scene_id)


ADVENTURE_DATABASE_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["scenes"],
    "properties": {
        "scenes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "scene_id": {"type": "string", "minLength": 1},
                    "sceneId": {"type": "string", "minLength": 1},
                    "scene_name": {"type": "string"},
                    "sceneName": {"type": "string"},
                    "description": {"type": "string"},
                    "auto_trigger_story_id": {"type": "string"},
                    "autoTriggerStoryId": {"type": "string"},
                    "commands": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["type"],
                            "properties": {
                                "type": {"type": "string"},
                                "parameter": {"type": "string"},
                                "label": {"type": "string"},
                            },
                        },
                    },
                },
                "anyOf": [
                    {"required": ["scene_id"]},
                    {"required": ["sceneId"]},
                ],
            },
        },
    },
}
