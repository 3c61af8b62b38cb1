"""Exploration: discovering a random set of enemies, rate limited per character."""

from __future__ import annotations

from questforge.core.config import GameSettings
from questforge.core.exceptions import ExploreCooldownError, NotFoundError
from questforge.core.logging import get_logger
from questforge.engine.combat import Clock, system_clock
from questforge.engine.dice import DiceRoller
from questforge.models.results import ExploreResult
from questforge.models.world import Enemy
from questforge.storage.repository import Repository


logger = get_logger(__name__)


class ExplorationGate:
    """Builds exploration encounters and enforces the explore cooldown."""

    def __init__(
        self,
        repository: Repository,
        roller: DiceRoller,
        settings: GameSettings,
        clock: Clock = system_clock,
    ) -> None:
        self._repository = repository
        self._roller = roller
        self._settings = settings
        self._clock = clock

    def explore(self, character_id: str) -> ExploreResult:
        """Reveal enemies around the character's current location.

        The pool is the location's native enemies plus the training enemy.
        Between ``explore_min_enemies`` and ``explore_max_enemies`` of them
        are returned in random order, bounded by the pool size. The cooldown
        restarts even when nothing is found.

        Raises:
            NotFoundError: If the character does not exist.
            ExploreCooldownError: If the previous exploration is too recent.
        """
        character = self._repository.get_character(character_id)
        if character is None:
            raise NotFoundError(
                "Character not found", entity_type="character", entity_id=character_id
            )

        now = self._clock()
        next_allowed = self._repository.get_explore_cooldown(character_id)
        if now < next_allowed:
            raise ExploreCooldownError("Explore cooldown active", retry_at=next_allowed)

        pool = self._enemy_pool(character.current_location_id)
        count = self._roller.roll_between(
            self._settings.explore_min_enemies,
            self._settings.explore_max_enemies + 1,
        )
        enemies = self._roller.shuffle(pool)[: min(count, len(pool))]

        next_allowed = now + self._settings.explore_cooldown_ms
        self._repository.set_explore_cooldown(character_id, next_allowed)

        logger.info(
            "Explored",
            character_id=character_id,
            location_id=character.current_location_id,
            found=len(enemies),
        )
        return ExploreResult(
            enemies=enemies,
            cooldown_ms=self._settings.explore_cooldown_ms,
            next_allowed=next_allowed,
        )

    def _enemy_pool(self, location_id: str) -> list[Enemy]:
        pool = self._repository.list_enemies_by_location(location_id)
        training = self._repository.get_enemy(self._settings.training_enemy_id)
        if training is not None and all(enemy.id != training.id for enemy in pool):
            pool.append(training)
        return pool


__all__ = [
    "ExplorationGate",
]
