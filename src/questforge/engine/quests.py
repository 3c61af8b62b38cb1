"""Quest log: accepting, abandoning and advancing character quests."""

from __future__ import annotations

from dataclasses import dataclass, field

from questforge.core.exceptions import BusinessRuleViolation, NotFoundError, StorageError
from questforge.core.logging import get_logger
from questforge.models.enums import QuestType
from questforge.models.world import CharacterQuest, Quest, RewardItem
from questforge.storage.repository import Repository


logger = get_logger(__name__)


@dataclass
class QuestRewards:
    """Rewards accumulated from quests completed by one kill.

    Attributes:
        experience: Total reward experience.
        gold: Total reward gold.
        items: Reward item stacks in completion order.
        completed_quest_ids: Quest template ids completed by this kill.
    """

    experience: int = 0
    gold: int = 0
    items: list[RewardItem] = field(default_factory=list)
    completed_quest_ids: list[str] = field(default_factory=list)

    @property
    def any_completed(self) -> bool:
        return bool(self.completed_quest_ids)

    def add(self, quest: Quest) -> None:
        self.experience += quest.reward.experience
        self.gold += quest.reward.gold
        self.items.extend(quest.reward.items)
        self.completed_quest_ids.append(quest.id)


class QuestLog:
    """Per-character quest bookkeeping on top of a repository."""

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def accept(self, character_id: str, quest_id: str) -> CharacterQuest:
        """Start tracking a quest for a character.

        Raises:
            NotFoundError: If the character or quest does not exist.
            BusinessRuleViolation: If the quest is already active or completed.
        """
        if self._repository.get_character(character_id) is None:
            raise NotFoundError(
                "Character not found", entity_type="character", entity_id=character_id
            )
        quest = self._repository.get_quest(quest_id)
        if quest is None:
            raise NotFoundError("Quest not found", entity_type="quest", entity_id=quest_id)

        for entry in self._repository.list_character_quests(character_id):
            if entry.quest_id == quest_id and (entry.active or entry.completed):
                raise BusinessRuleViolation(
                    "Quest already accepted",
                    rule="quest_already_accepted",
                    details={"quest_id": quest_id},
                )

        entry = self._repository.create_character_quest(
            CharacterQuest(character_id=character_id, quest_id=quest_id)
        )
        logger.info("Quest accepted", character_id=character_id, quest_id=quest_id)
        return entry

    def abandon(self, character_id: str, character_quest_id: str) -> None:
        """Drop a quest entry and its progress.

        Raises:
            NotFoundError: If the entry does not exist or belongs to someone else.
        """
        entry = self._repository.get_character_quest(character_quest_id)
        if entry is None or entry.character_id != character_id:
            raise NotFoundError(
                "Character quest not found",
                entity_type="character_quest",
                entity_id=character_quest_id,
            )
        self._repository.delete_character_quest(character_quest_id)
        logger.info("Quest abandoned", character_id=character_id, quest_id=entry.quest_id)

    def quests_for(self, character_id: str) -> list[CharacterQuest]:
        return self._repository.list_character_quests(character_id)

    def record_kill(self, character_id: str, enemy_id: str) -> QuestRewards:
        """Advance every open kill quest targeting ``enemy_id`` by one.

        Quests reaching their target amount are marked completed and
        inactive, and their rewards are accumulated. Lookup failures are
        logged and skipped; write failures propagate.

        Returns:
            Rewards of the quests this kill completed.
        """
        rewards = QuestRewards()
        try:
            entries = self._repository.list_character_quests(character_id)
        except StorageError as exc:
            logger.warning(
                "Quest lookup failed, skipping quest progress",
                character_id=character_id,
                error=str(exc),
            )
            return rewards

        for entry in entries:
            if not entry.is_open:
                continue
            try:
                quest = self._repository.get_quest(entry.quest_id)
            except StorageError as exc:
                logger.warning("Quest lookup failed", quest_id=entry.quest_id, error=str(exc))
                continue
            if quest is None:
                logger.warning("Quest template missing", quest_id=entry.quest_id)
                continue
            if quest.type != QuestType.KILL or quest.target != enemy_id:
                continue

            progress = min(entry.progress + 1, quest.target_amount)
            completed = progress >= quest.target_amount
            self._repository.update_character_quest(
                entry.id,
                {"progress": progress, "completed": completed, "active": not completed},
            )
            if completed:
                rewards.add(quest)
                logger.info("Quest completed", character_id=character_id, quest_id=quest.id)

        return rewards


__all__ = [
    "QuestRewards",
    "QuestLog",
]
