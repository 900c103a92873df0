"""
Quest progress tracking.

Only progress is tracked here: accepting quests, advancing objectives when
the player talks to someone or reaches a scene, and marking quests
complete. Rewards belong to whatever system consumes QuestEvent.COMPLETED.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Iterable, Optional

from runtime.core.events import QuestEvent

if TYPE_CHECKING:
    from adventure.models import AdventureScene
    from runtime.core.events import EventBus

logger = logging.getLogger(__name__)


class QuestStatus(Enum):
    """Quest progress status."""
    AVAILABLE = auto()    # Can be accepted
    ACTIVE = auto()       # Currently in progress
    COMPLETED = auto()    # All required objectives done


class ObjectiveType(Enum):
    """Types of quest objectives."""
    TALK = auto()         # Talk to NPC / play a story
    REACH = auto()        # Enter a scene
    CUSTOM = auto()       # Advanced by game code


@dataclass
class QuestObjective:
    """A single quest objective."""
    id: str
    objective_type: ObjectiveType
    description: str = ""
    target_id: str = ""
    target_count: int = 1
    current_count: int = 0
    is_complete: bool = False
    is_optional: bool = False

    @property
    def progress(self) -> float:
        if self.target_count <= 0:
            return 1.0 if self.is_complete else 0.0
        return min(1.0, self.current_count / self.target_count)

    def update_progress(self, amount: int = 1) -> bool:
        """
        Advance the objective.

        Returns:
            True if the objective became complete
        """
        if self.is_complete:
            return False

        self.current_count = min(self.current_count + amount, self.target_count)
        if self.current_count >= self.target_count:
            self.is_complete = True
            return True
        return False


@dataclass
class Quest:
    """A quest definition, or an accepted instance of one."""
    id: str
    title: str
    description: str = ""
    status: QuestStatus = QuestStatus.AVAILABLE
    objectives: list[QuestObjective] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """All required objectives are complete."""
        return all(obj.is_complete for obj in self.objectives if not obj.is_optional)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quest:
        quest = cls(
            id=data['id'],
            title=data.get('title', data['id']),
            description=data.get('description', ''),
        )
        for obj_data in data.get('objectives', []):
            quest.objectives.append(QuestObjective(
                id=obj_data['id'],
                objective_type=ObjectiveType[obj_data.get('type', 'CUSTOM').upper()],
                description=obj_data.get('description', ''),
                target_id=obj_data.get('target', ''),
                target_count=obj_data.get('count', 1),
                is_optional=obj_data.get('optional', False),
            ))
        return quest


class QuestNotifier(ABC):
    """Entry point used by the Talk command."""

    @abstractmethod
    def on_talked_to(self, npc_id: str) -> None:
        """The player talked to an NPC or triggered a story."""


class QuestLog(QuestNotifier):
    """
    Tracks accepted and completed quests.

    Usage:
        quests = QuestLog(event_bus)
        quests.register_quests(data["quests"])
        quests.accept_quest("find_the_smith")
        quests.on_talked_to("smith_intro")
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self._templates: dict[str, Quest] = {}
        self._active: dict[str, Quest] = {}
        self._completed: list[str] = []

    def register_quest(self, quest: Quest | dict[str, Any]) -> Quest:
        if isinstance(quest, dict):
            quest = Quest.from_dict(quest)
        self._templates[quest.id] = quest
        return quest

    def register_quests(self, quests: Iterable[Quest | dict[str, Any]]) -> int:
        count = 0
        for quest in quests:
            self.register_quest(quest)
            count += 1
        return count

    @property
    def active_quests(self) -> list[Quest]:
        return list(self._active.values())

    @property
    def completed_quest_ids(self) -> list[str]:
        return list(self._completed)

    def get_quest(self, quest_id: str) -> Optional[Quest]:
        return self._active.get(quest_id)

    def is_active(self, quest_id: str) -> bool:
        return quest_id in self._active

    def is_completed(self, quest_id: str) -> bool:
        return quest_id in self._completed

    def accept_quest(self, quest_id: str) -> bool:
        """
        Start tracking a registered quest.

        Returns:
            False if the quest is unknown, already active or completed
        """
        if self.is_completed(quest_id) or self.is_active(quest_id):
            return False

        template = self._templates.get(quest_id)
        if template is None:
            logger.warning(f"[Quest] Unknown quest: {quest_id}")
            return False

        quest = copy.deepcopy(template)
        quest.status = QuestStatus.ACTIVE
        self._active[quest_id] = quest
        logger.info(f"[Quest] Accepted: {quest.title}")

        if self.event_bus:
            self.event_bus.publish(QuestEvent.ACCEPTED, quest_id=quest_id)

        return True

    def on_talked_to(self, npc_id: str) -> None:
        self.update_objective(ObjectiveType.TALK, npc_id)

    def on_scene_entered(self, scene: AdventureScene) -> None:
        """Scene listener: advances REACH objectives."""
        self.update_objective(ObjectiveType.REACH, scene.scene_id)

    def update_objective(
        self,
        objective_type: ObjectiveType,
        target_id: str,
        amount: int = 1,
    ) -> list[str]:
        """
        Advance matching objectives across all active quests.

        Returns:
            Ids of quests that had an objective completed
        """
        updated = []

        for quest in list(self._active.values()):
            for obj in quest.objectives:
                if obj.objective_type == objective_type and obj.target_id == target_id:
                    if obj.update_progress(amount):
                        updated.append(quest.id)

            if quest.id in updated:
                if self.event_bus:
                    self.event_bus.publish(QuestEvent.UPDATED, quest_id=quest.id)
                if quest.is_complete:
                    self._complete(quest)

        return updated

    def _complete(self, quest: Quest) -> None:
        quest.status = QuestStatus.COMPLETED
        del self._active[quest.id]
        self._completed.append(quest.id)
        logger.info(f"[Quest] Completed: {quest.title}")

        if self.event_bus:
            self.event_bus.publish(QuestEvent.COMPLETED, quest_id=quest.id)
