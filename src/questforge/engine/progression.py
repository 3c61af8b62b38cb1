"""Victory reconciliation.

When an enemy falls, experience, gold, quest progress, level ups, reward
items and the end of the combat session are applied as one unit inside a
repository transaction. If any write fails, none of them persist.
"""

from __future__ import annotations

from typing import Any

from questforge.core.constants import (
    FULL_HEAL_LEVEL_THRESHOLD,
    GOLD_PER_LEVEL,
    MAX_HEALTH_CEILING,
    MAX_HEALTH_PER_LEVEL,
    REWARD_ITEM_ICON,
)
from questforge.core.exceptions import StorageError
from questforge.core.logging import get_logger
from questforge.engine.leveling import apply_level_ups
from questforge.engine.quests import QuestLog, QuestRewards
from questforge.models.character import Character, InventoryEntry, add_to_inventory
from questforge.models.combat import CombatActionResult, CombatSession, VictorySummary
from questforge.models.world import Enemy
from questforge.storage.repository import Repository


logger = get_logger(__name__)


def format_victory_message(enemy: Enemy, summary: VictorySummary) -> str:
    """Build the single narrative line reported for a victory.

    Example:
        ``Enemy defeated! +25 EXP, +10 gold, LEVEL UP! (+3 stat points,
        +5 bonus gold, +5 max HP & fully healed)``
    """
    message = f"Enemy defeated! +{enemy.experience} EXP, +{enemy.gold} gold"
    if summary.levels_gained > 0:
        heal_note = "fully healed" if summary.fully_healed else "healed"
        message += (
            f", LEVEL UP! (+{summary.stat_points_gained} stat points,"
            f" +{summary.bonus_gold} bonus gold,"
            f" +{summary.max_health_gain} max HP & {heal_note})"
        )
    if summary.quest_experience or summary.quest_gold or summary.quest_items:
        parts = []
        if summary.quest_experience:
            parts.append(f"+{summary.quest_experience} EXP")
        if summary.quest_gold:
            parts.append(f"+{summary.quest_gold} gold")
        if summary.quest_items:
            parts.append("+items")
        message += " Quest Rewards: " + " ".join(parts)
    return message


class ProgressionReconciler:
    """Applies every consequence of an enemy defeat atomically."""

    def __init__(self, repository: Repository, quest_log: QuestLog | None = None) -> None:
        self._repository = repository
        self._quest_log = quest_log or QuestLog(repository)

    def reconcile_victory(
        self,
        character: Character,
        enemy: Enemy,
        session: CombatSession,
    ) -> CombatActionResult:
        """Grant rewards for defeating ``enemy`` and close ``session``.

        Args:
            character: Character snapshot taken before the killing blow.
            enemy: The defeated enemy template.
            session: The session that just ended.

        Returns:
            Victory result with the updated character and a summary.
        """
        with self._repository.transaction():
            quest_rewards = self._quest_log.record_kill(character.id, enemy.id)

            experience = character.experience + enemy.experience + quest_rewards.experience
            gold = character.gold + enemy.gold + quest_rewards.gold

            level_up = apply_level_ups(character.level, experience)
            updates: dict[str, Any] = {"experience": experience}

            max_health = character.max_health
            health = character.health
            bonus_gold = 0
            fully_healed = False
            if level_up.leveled_up:
                gained_max = MAX_HEALTH_PER_LEVEL * level_up.levels_gained
                max_health = min(MAX_HEALTH_CEILING, character.max_health + gained_max)
                if level_up.level <= FULL_HEAL_LEVEL_THRESHOLD:
                    health = max_health
                    fully_healed = True
                else:
                    health = min(character.health + gained_max, max_health)
                bonus_gold = GOLD_PER_LEVEL * level_up.levels_gained
                updates["unspent_points"] = character.unspent_points + level_up.stat_points_gained

            updates.update(
                gold=gold + bonus_gold,
                level=level_up.level,
                max_health=max_health,
                health=min(health, max_health),
            )

            if quest_rewards.items:
                updates["inventory"] = self._merge_reward_items(character, quest_rewards)

            updated = self._repository.update_character(character.id, updates)
            self._repository.delete_combat_session(session.id)

        summary = VictorySummary(
            experience_gained=enemy.experience,
            gold_gained=enemy.gold,
            levels_gained=level_up.levels_gained,
            stat_points_gained=level_up.stat_points_gained,
            bonus_gold=bonus_gold,
            max_health_gain=max_health - character.max_health,
            fully_healed=fully_healed,
            quest_experience=quest_rewards.experience,
            quest_gold=quest_rewards.gold,
            quest_items=[reward.item_id for reward in quest_rewards.items],
            completed_quest_ids=quest_rewards.completed_quest_ids,
        )

        logger.info(
            "Enemy defeated",
            character_id=character.id,
            enemy_id=enemy.id,
            experience=experience,
            quests_completed=len(quest_rewards.completed_quest_ids),
        )
        if level_up.leveled_up:
            logger.info(
                "Level up",
                character_id=character.id,
                level=level_up.level,
                levels_gained=level_up.levels_gained,
            )

        return CombatActionResult(
            message=format_victory_message(enemy, summary),
            victory=True,
            enemy_health=0,
            character=updated,
            summary=summary,
        )

    def _merge_reward_items(
        self,
        character: Character,
        quest_rewards: QuestRewards,
    ) -> list[InventoryEntry]:
        inventory = list(character.inventory)
        for reward in quest_rewards.items:
            try:
                item = self._repository.get_item(reward.item_id)
            except StorageError as exc:
                logger.warning("Reward item lookup failed", item_id=reward.item_id, error=str(exc))
                item = None
            inventory = add_to_inventory(
                inventory,
                InventoryEntry(
                    item_id=reward.item_id,
                    quantity=reward.quantity,
                    name=item.name if item else reward.item_id,
                    type=item.type.value if item else "misc",
                    icon=REWARD_ITEM_ICON,
                ),
            )
        return inventory


__all__ = [
    "ProgressionReconciler",
    "format_victory_message",
]
