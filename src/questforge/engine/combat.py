"""Combat resolution: starting fights, idle auto-attacks and player actions.

A character is either out of combat or in exactly one active session.
Victory, defeat and fleeing all destroy the session.

Damage formulas (``rand(n)`` is an integer in ``[0, n)``):

- attack: ``max(1, strength + weapon_attack + rand(10) - enemy.defense)``
- magic: ``max(1, magic + rand(15) - enemy.defense)``
- retaliation: ``max(1, floor(attack*0.8 + rand(max(4, ceil(attack*0.6)))
  + floor(level*0.3) - floor((defense + armor_defense)*0.4)))``
- auto-attack: ``max(1, floor(attack*0.75 + rand(max(4, ceil(attack*0.5)))
  + floor(level*0.25) - floor(defense*0.35)))``
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from questforge.core.config import GameSettings
from questforge.core.constants import (
    TRAINING_BASE_HEALTH,
    TRAINING_HEALTH_PER_LEVEL,
    TRAINING_HEALTH_SCALING_LEVELS,
)
from questforge.core.exceptions import NotFoundError, ValidationError
from questforge.core.logging import get_logger
from questforge.engine.dice import DiceRoller
from questforge.engine.leveling import level_from_experience
from questforge.engine.progression import ProgressionReconciler
from questforge.models.character import Character
from questforge.models.combat import CombatActionResult, CombatPollResult, CombatSession
from questforge.models.enums import CombatAction, EquipmentSlot
from questforge.models.world import Enemy
from questforge.storage.repository import Repository


logger = get_logger(__name__)

Clock = Callable[[], int]
"""Returns the current time in epoch milliseconds."""

DEFEAT_MESSAGE = "You have been defeated!"
FLEE_MESSAGE = "You fled from combat!"


def system_clock() -> int:
    return time.time_ns() // 1_000_000


def effective_level(character: Character) -> int:
    """Level derived from experience; a stored level may be stale."""
    return level_from_experience(character.experience)


def training_enemy_health(level: int) -> int:
    """Starting health of the training enemy for a character ``level``."""
    scaled = TRAINING_BASE_HEALTH + (level - 1) * TRAINING_HEALTH_PER_LEVEL
    cap = TRAINING_BASE_HEALTH + TRAINING_HEALTH_PER_LEVEL * TRAINING_HEALTH_SCALING_LEVELS
    return min(scaled, cap)


class CombatResolver:
    """Turn resolution for one repository.

    Args:
        repository: Record store.
        roller: Random source for every roll.
        settings: Timing settings and the training enemy id.
        clock: Epoch-millisecond clock.
        reconciler: Applies victory rewards.
    """

    def __init__(
        self,
        repository: Repository,
        roller: DiceRoller,
        settings: GameSettings,
        clock: Clock = system_clock,
        reconciler: ProgressionReconciler | None = None,
    ) -> None:
        self._repository = repository
        self._roller = roller
        self._settings = settings
        self._clock = clock
        self._reconciler = reconciler or ProgressionReconciler(repository)

    def is_training_enemy(self, enemy: Enemy) -> bool:
        return enemy.id == self._settings.training_enemy_id

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, character_id: str, enemy_id: str) -> CombatSession:
        """Open a fight, replacing any session the character already has.

        Raises:
            NotFoundError: If the enemy or character does not exist.
        """
        enemy = self._repository.get_enemy(enemy_id)
        if enemy is None:
            raise NotFoundError("Enemy not found", entity_type="enemy", entity_id=enemy_id)
        character = self._require_character(character_id)

        enemy_health = enemy.health
        if self.is_training_enemy(enemy):
            enemy_health = training_enemy_health(effective_level(character))

        with self._repository.transaction():
            existing = self._repository.get_active_combat_session(character_id)
            if existing is not None:
                self._repository.delete_combat_session(existing.id)
                logger.info("Combat replaced", character_id=character_id, session_id=existing.id)

            session = self._repository.create_combat_session(
                CombatSession(
                    character_id=character_id,
                    enemy_id=enemy_id,
                    enemy_health=enemy_health,
                    next_enemy_attack_at=self._clock() + self._settings.first_enemy_attack_delay_ms,
                )
            )

        logger.info(
            "Combat started",
            character_id=character_id,
            enemy_id=enemy_id,
            enemy_health=enemy_health,
        )
        return session

    def poll(self, character_id: str) -> CombatPollResult:
        """Return the current session after catching up every due auto-attack.

        Each attack lands at its scheduled time and schedules the next one
        from that time, so one late poll matches a poll at every due moment.
        Catch-up stops at defeat.
        """
        session = self._repository.get_active_combat_session(character_id)
        if session is None:
            return CombatPollResult()

        enemy = self._repository.get_enemy(session.enemy_id)
        character = self._repository.get_character(character_id)
        if enemy is None or character is None:
            return CombatPollResult(session=session, character=character)

        now = self._clock()
        attack_at = session.next_enemy_attack_at
        if self.is_training_enemy(enemy) or attack_at is None or now < attack_at:
            return CombatPollResult(session=session, character=character)

        health = character.health
        total_damage = 0
        attacks = 0
        last_at = session.last_enemy_attack_at
        last_damage = session.last_enemy_attack_damage
        while attack_at <= now and health > 0:
            damage = self.auto_attack_damage(enemy, character)
            health = max(0, health - damage)
            total_damage += damage
            attacks += 1
            last_at, last_damage = attack_at, damage
            attack_at += self._roller.roll_between(
                self._settings.enemy_attack_min_interval_ms,
                self._settings.enemy_attack_max_interval_ms,
            )

        with self._repository.transaction():
            character = self._repository.update_character(character_id, {"health": health})
            if health <= 0:
                self._repository.delete_combat_session(session.id)
            else:
                session = self._repository.update_combat_session(
                    session.id,
                    {
                        "last_enemy_attack_at": last_at,
                        "last_enemy_attack_damage": last_damage,
                        "next_enemy_attack_at": attack_at,
                    },
                )

        logger.debug(
            "Enemy auto-attacks",
            character_id=character_id,
            attacks=attacks,
            damage=total_damage,
            health=health,
        )
        if health <= 0:
            logger.info("Character defeated", character_id=character_id, enemy_id=enemy.id)
            return CombatPollResult(
                defeated=True,
                message=DEFEAT_MESSAGE,
                enemy_damage=total_damage,
                attacks=attacks,
                character=character,
            )
        return CombatPollResult(
            session=session,
            enemy_damage=total_damage,
            attacks=attacks,
            character=character,
        )

    def act(self, character_id: str, action: str) -> CombatActionResult:
        """Resolve one player action and the enemy's answer.

        Raises:
            ValidationError: If ``action`` is not a known combat action.
            NotFoundError: If there is no active session, or its character or
                enemy no longer exists.
        """
        try:
            combat_action = CombatAction(action)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown combat action: {action!r}",
                field_name="action",
                invalid_value=action,
            ) from exc

        session = self._repository.get_active_combat_session(character_id)
        if session is None:
            raise NotFoundError(
                "No active combat session",
                entity_type="combat_session",
                entity_id=character_id,
            )
        character = self._repository.get_character(character_id)
        enemy = self._repository.get_enemy(session.enemy_id)
        if character is None or enemy is None:
            raise NotFoundError(
                "Character or enemy not found",
                entity_type="character" if character is None else "enemy",
                entity_id=character_id if character is None else session.enemy_id,
            )

        if combat_action is CombatAction.FLEE:
            self._repository.delete_combat_session(session.id)
            logger.info("Combat fled", character_id=character_id, enemy_id=enemy.id)
            return CombatActionResult(message=FLEE_MESSAGE, fled=True)

        damage, message = self._player_damage(combat_action, character, enemy)
        enemy_health = max(0, session.enemy_health - damage)

        if enemy_health <= 0:
            return self._reconciler.reconcile_victory(character, enemy, session)

        if self.is_training_enemy(enemy):
            self._repository.update_combat_session(session.id, {"enemy_health": enemy_health})
            return CombatActionResult(
                message=message,
                enemy_damage=0,
                enemy_message=f"{enemy.name} harmlessly sways.",
                enemy_health=enemy_health,
                character=character,
                last_enemy_attack_at=session.last_enemy_attack_at,
                last_enemy_attack_damage=session.last_enemy_attack_damage,
            )

        retaliation = self.retaliation_damage(enemy, character)
        if combat_action is CombatAction.DEFEND:
            retaliation = max(1, retaliation // 2)
        health = max(0, character.health - retaliation)

        with self._repository.transaction():
            character = self._repository.update_character(character_id, {"health": health})
            if health <= 0:
                self._repository.delete_combat_session(session.id)
            else:
                self._repository.update_combat_session(session.id, {"enemy_health": enemy_health})

        if health <= 0:
            logger.info("Character defeated", character_id=character_id, enemy_id=enemy.id)
            return CombatActionResult(
                message=DEFEAT_MESSAGE,
                defeated=True,
                enemy_damage=retaliation,
                character=character,
            )

        return CombatActionResult(
            message=message,
            enemy_damage=retaliation,
            enemy_message=f"{enemy.name} attacks for {retaliation} damage!",
            enemy_health=enemy_health,
            character=character,
            last_enemy_attack_at=session.last_enemy_attack_at,
            last_enemy_attack_damage=session.last_enemy_attack_damage,
        )

    # =========================================================================
    # Formulas
    # =========================================================================

    def _player_damage(
        self,
        action: CombatAction,
        character: Character,
        enemy: Enemy,
    ) -> tuple[int, str]:
        if action is CombatAction.ATTACK:
            weapon_attack = self._equipped_stat(character, EquipmentSlot.WEAPON, "attack")
            damage = max(
                1,
                character.strength + weapon_attack + self._roller.roll_below(10) - enemy.defense,
            )
            return damage, f"You deal {damage} damage!"
        if action is CombatAction.MAGIC:
            damage = max(1, character.magic + self._roller.roll_below(15) - enemy.defense)
            return damage, f"Your magic deals {damage} damage!"
        return 0, "You defend and reduce incoming damage!"

    def retaliation_damage(self, enemy: Enemy, character: Character) -> int:
        """Damage an enemy deals in answer to a player action, before defend."""
        armor_defense = self._equipped_stat(character, EquipmentSlot.ARMOR, "defense")
        spread = max(4, math.ceil(enemy.attack * 0.6))
        raw = (
            enemy.attack * 0.8
            + self._roller.roll_below(spread)
            + math.floor(effective_level(character) * 0.3)
        )
        mitigation = math.floor((character.defense + armor_defense) * 0.4)
        return max(1, math.floor(raw - mitigation))

    def auto_attack_damage(self, enemy: Enemy, character: Character) -> int:
        """Damage of one idle auto-attack. Armor does not apply."""
        spread = max(4, math.ceil(enemy.attack * 0.5))
        raw = (
            enemy.attack * 0.75
            + self._roller.roll_below(spread)
            + math.floor(effective_level(character) * 0.25)
        )
        mitigation = math.floor(character.defense * 0.35)
        return max(1, math.floor(raw - mitigation))

    def _equipped_stat(self, character: Character, slot: EquipmentSlot, stat: str) -> int:
        item_id = character.equipment.get(slot)
        if item_id is None:
            return 0
        item = self._repository.get_item(item_id)
        if item is None:
            return 0
        return getattr(item.stats, stat)

    def _require_character(self, character_id: str) -> Character:
        character = self._repository.get_character(character_id)
        if character is None:
            raise NotFoundError(
                "Character not found", entity_type="character", entity_id=character_id
            )
        return character


__all__ = [
    "Clock",
    "CombatResolver",
    "DEFEAT_MESSAGE",
    "effective_level",
    "FLEE_MESSAGE",
    "system_clock",
    "training_enemy_health",
]
