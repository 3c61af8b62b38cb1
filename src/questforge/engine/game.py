"""Game service facade.

``GameService`` is the one entry point a transport layer needs: it wires
the repository, random source, clock and settings into the engine
components and serializes every mutating call per character.

Example:
    >>> from questforge.engine import GameService
    >>> service = GameService()
    >>> hero = service.create_character({"name": "Ayla", "class": "warrior"})
    >>> session = service.start_combat(hero.id, "training_dummy")
    >>> result = service.perform_combat_action(hero.id, "attack")
"""

from __future__ import annotations

import threading
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any

import pydantic

from questforge.core.config import GameSettings, get_settings
from questforge.core.constants import (
    ALLOCATABLE_STATS,
    DEFAULT_ITEM_ICON,
    STARTER_EQUIPMENT,
    STARTER_INVENTORY,
)
from questforge.core.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from questforge.core.logging import get_logger, log_context
from questforge.engine.combat import Clock, CombatResolver, system_clock
from questforge.engine.dice import DiceRoller
from questforge.engine.exploration import ExplorationGate
from questforge.engine.leveling import level_from_experience
from questforge.engine.progression import ProgressionReconciler
from questforge.engine.quests import QuestLog
from questforge.engine.shop import ShopAdjudicator
from questforge.models.character import Character, CharacterCreate, Equipment, InventoryEntry
from questforge.models.combat import CombatActionResult, CombatPollResult, CombatSession
from questforge.models.results import CharacterActionResult, ExploreResult, PurchaseResult
from questforge.models.world import CharacterQuest, Enemy, Item, Location
from questforge.storage.factory import get_repository
from questforge.storage.repository import Repository, to_validation_error


logger = get_logger(__name__)

_UPDATABLE_FIELDS = frozenset(Character.model_fields) - {"id"}
_FIELD_ALIASES = {"class": "character_class"}


class GameService:
    """Operations of the combat and progression engine.

    Args:
        repository: Record store. Defaults to the configured global repository.
        settings: Game settings. Defaults to the application settings.
        roller: Random source. Defaults to one seeded with ``settings.rng_seed``.
        clock: Epoch-millisecond clock.
    """

    def __init__(
        self,
        repository: Repository | None = None,
        *,
        settings: GameSettings | None = None,
        roller: DiceRoller | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.settings = settings or get_settings().game
        self.repository = repository or get_repository()
        self.roller = roller or DiceRoller(seed=self.settings.rng_seed)
        self.clock = clock

        self.quest_log = QuestLog(self.repository)
        self.reconciler = ProgressionReconciler(self.repository, self.quest_log)
        self.combat = CombatResolver(
            self.repository, self.roller, self.settings, clock, self.reconciler
        )
        self.exploration = ExplorationGate(self.repository, self.roller, self.settings, clock)
        self.shop = ShopAdjudicator(self.repository)

        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

        logger.info("GameService initialized", training_enemy=self.settings.training_enemy_id)

    @contextmanager
    def _character_lock(self, character_id: str) -> Generator[None, None, None]:
        with self._locks_guard:
            lock = self._locks.setdefault(character_id, threading.RLock())
        with lock, log_context(character_id=character_id):
            yield

    # =========================================================================
    # Characters
    # =========================================================================

    def create_character(self, data: CharacterCreate | Mapping[str, Any]) -> Character:
        """Create a character, filling omitted fields with the starting defaults.

        Raises:
            ValidationError: If the data is malformed or a base stat is outside 5..25.
        """
        try:
            request = (
                data if isinstance(data, CharacterCreate) else CharacterCreate.model_validate(data)
            )
            fields = request.model_dump(exclude={"equipment", "inventory"})
            character = Character(
                **fields,
                equipment=request.equipment or Equipment(**STARTER_EQUIPMENT),
                inventory=(
                    request.inventory if request.inventory is not None else self._starter_inventory()
                ),
            )
        except pydantic.ValidationError as exc:
            raise to_validation_error(exc, "character") from exc

        return self.repository.create_character(character)

    def _starter_inventory(self) -> list[InventoryEntry]:
        inventory = []
        for item_id, quantity in STARTER_INVENTORY:
            item = self.repository.get_item(item_id)
            inventory.append(
                InventoryEntry(
                    item_id=item_id,
                    quantity=quantity,
                    name=item.name if item else item_id,
                    type=item.type.value if item else "misc",
                    icon=(item.icon or DEFAULT_ITEM_ICON) if item else DEFAULT_ITEM_ICON,
                )
            )
        return inventory

    def get_character(self, character_id: str) -> Character:
        """Fetch a character, correcting a stored level that drifted from experience.

        Raises:
            NotFoundError: If the character does not exist.
        """
        with self._character_lock(character_id):
            character = self._require_character(character_id)
            derived = level_from_experience(character.experience)
            if derived != character.level:
                logger.info(
                    "Correcting stale level",
                    character_id=character_id,
                    stored=character.level,
                    derived=derived,
                )
                character = self.repository.update_character(character_id, {"level": derived})
            return character

    def update_character(self, character_id: str, updates: Mapping[str, Any]) -> Character:
        """Apply a partial update.

        Raises:
            NotFoundError: If the character does not exist.
            ValidationError: On unknown fields or values breaking a constraint.
        """
        normalized: dict[str, Any] = {}
        for key, value in updates.items():
            field = _FIELD_ALIASES.get(key, key)
            if field not in _UPDATABLE_FIELDS:
                raise ValidationError(
                    f"Unknown character field: {key!r}", field_name=key, invalid_value=value
                )
            normalized[field] = value

        with self._character_lock(character_id):
            return self.repository.update_character(character_id, normalized)

    def move_character(self, character_id: str, location_id: str) -> Character:
        """Move a character to any existing location.

        Raises:
            NotFoundError: If the character or location does not exist.
        """
        with self._character_lock(character_id):
            self._require_character(character_id)
            if self.repository.get_location(location_id) is None:
                raise NotFoundError(
                    "Location not found", entity_type="location", entity_id=location_id
                )
            character = self.repository.update_character(
                character_id, {"current_location_id": location_id}
            )
        logger.info("Character moved", character_id=character_id, location_id=location_id)
        return character

    def allocate_stat_point(self, character_id: str, stat: str) -> Character:
        """Spend one unspent point on ``stat``.

        Raises:
            ValidationError: If ``stat`` is not an allocatable stat.
            NotFoundError: If the character does not exist.
            BusinessRuleViolation: If no points are left.
        """
        if stat not in ALLOCATABLE_STATS:
            raise ValidationError(
                f"Cannot allocate points to {stat!r}", field_name="stat", invalid_value=stat
            )
        with self._character_lock(character_id):
            character = self._require_character(character_id)
            if character.unspent_points <= 0:
                raise BusinessRuleViolation("No unspent stat points", rule="no_unspent_points")
            updated = self.repository.update_character(
                character_id,
                {
                    stat: getattr(character, stat) + 1,
                    "unspent_points": character.unspent_points - 1,
                },
            )
        logger.info("Stat point allocated", character_id=character_id, stat=stat)
        return updated

    # =========================================================================
    # Combat
    # =========================================================================

    def start_combat(self, character_id: str, enemy_id: str) -> CombatSession:
        with self._character_lock(character_id):
            return self.combat.start(character_id, enemy_id)

    def poll_combat(self, character_id: str) -> CombatPollResult:
        with self._character_lock(character_id):
            return self.combat.poll(character_id)

    def perform_combat_action(self, character_id: str, action: str) -> CombatActionResult:
        with self._character_lock(character_id):
            return self.combat.act(character_id, action)

    # =========================================================================
    # Exploration and items
    # =========================================================================

    def explore(self, character_id: str) -> ExploreResult:
        with self._character_lock(character_id):
            return self.exploration.explore(character_id)

    def buy_item(self, character_id: str, item_id: str) -> PurchaseResult:
        with self._character_lock(character_id):
            return self.shop.buy(character_id, item_id)

    def equip_item(self, character_id: str, item_id: str, slot: str) -> CharacterActionResult:
        with self._character_lock(character_id):
            return self.shop.equip(character_id, item_id, slot)

    def use_item(self, character_id: str, item_id: str) -> CharacterActionResult:
        with self._character_lock(character_id):
            return self.shop.use_item(character_id, item_id)

    # =========================================================================
    # Quests
    # =========================================================================

    def accept_quest(self, character_id: str, quest_id: str) -> CharacterQuest:
        with self._character_lock(character_id):
            return self.quest_log.accept(character_id, quest_id)

    def abandon_quest(self, character_id: str, character_quest_id: str) -> None:
        with self._character_lock(character_id):
            self.quest_log.abandon(character_id, character_quest_id)

    def list_character_quests(self, character_id: str) -> list[CharacterQuest]:
        return self.quest_log.quests_for(character_id)

    # =========================================================================
    # World
    # =========================================================================

    def list_locations(self) -> list[Location]:
        return self.repository.list_locations()

    def shop_items(self, location_id: str) -> list[Item]:
        return self.shop.shop_items(location_id)

    def enemies_at(self, location_id: str) -> list[Enemy]:
        return self.repository.list_enemies_by_location(location_id)

    def _require_character(self, character_id: str) -> Character:
        character = self.repository.get_character(character_id)
        if character is None:
            raise NotFoundError(
                "Character not found", entity_type="character", entity_id=character_id
            )
        return character


__all__ = [
    "GameService",
]
