"""Repository abstraction over the game's persistent records.

The engine talks to storage only through :class:`Repository`. Concrete
backends implement a small set of document primitives (fetch, scan, put,
remove, transaction) and inherit the typed CRUD methods for every entity
type from this base class, so swapping the in-memory backend for SQLite
never touches combat or progression logic.

Documents are JSON-compatible dictionaries. Every read returns a freshly
validated model, so callers own their copy and cannot mutate stored state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import AbstractContextManager
from enum import StrEnum
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from questforge.core.exceptions import NotFoundError, StorageError, ValidationError
from questforge.core.logging import get_logger
from questforge.models.character import Character
from questforge.models.combat import CombatSession
from questforge.models.world import CharacterQuest, Enemy, Item, Location, Quest

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Collection(StrEnum):
    """Named record collections."""

    CHARACTERS = "characters"
    LOCATIONS = "locations"
    ITEMS = "items"
    ENEMIES = "enemies"
    QUESTS = "quests"
    CHARACTER_QUESTS = "character_quests"
    COMBAT_SESSIONS = "combat_sessions"
    SHOP_INVENTORIES = "shop_inventories"
    EXPLORE_COOLDOWNS = "explore_cooldowns"


def to_validation_error(exc: pydantic.ValidationError, entity_type: str) -> ValidationError:
    """Convert a pydantic error into the application's ValidationError."""
    first = exc.errors()[0] if exc.errors() else {}
    field_name = ".".join(str(part) for part in first.get("loc", ())) or None
    return ValidationError(
        f"Invalid {entity_type}: {first.get('msg', str(exc))}",
        field_name=field_name,
        details={"error_count": exc.error_count()},
    )


class Repository(ABC):
    """Key-value repository with typed CRUD per entity type.

    Subclasses implement the document primitives. ``owner`` is a secondary
    index key: the character id for quests and combat sessions, the location
    id for enemies and quest templates.
    """

    # =========================================================================
    # Document primitives
    # =========================================================================

    @abstractmethod
    def _fetch(self, collection: Collection, key: str) -> dict[str, Any] | None:
        """Return the stored document or None."""

    @abstractmethod
    def _scan(self, collection: Collection, owner: str | None = None) -> list[dict[str, Any]]:
        """Return documents in insertion order, optionally filtered by owner."""

    @abstractmethod
    def _put(
        self,
        collection: Collection,
        key: str,
        document: dict[str, Any],
        *,
        owner: str | None = None,
    ) -> None:
        """Insert or replace a document, keeping its original insertion slot."""

    @abstractmethod
    def _remove(self, collection: Collection, key: str) -> bool:
        """Delete a document. Returns True if it existed."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes so they apply together or not at all.

        Nested calls join the outermost transaction.
        """

    # =========================================================================
    # Generic helpers
    # =========================================================================

    def _get_model(self, collection: Collection, key: str, model: type[ModelT]) -> ModelT | None:
        document = self._fetch(collection, key)
        if document is None:
            return None
        return model.model_validate(document)

    def _list_models(
        self,
        collection: Collection,
        model: type[ModelT],
        owner: str | None = None,
    ) -> list[ModelT]:
        return [model.model_validate(doc) for doc in self._scan(collection, owner)]

    def _save_model(self, collection: Collection, key: str, record: BaseModel, owner: str | None = None) -> None:
        self._put(collection, key, record.model_dump(mode="json"), owner=owner)

    def _merge(
        self,
        current: ModelT,
        updates: Mapping[str, Any],
        model: type[ModelT],
        entity_type: str,
    ) -> ModelT:
        data = current.model_dump()
        data.update(updates)
        data["id"] = getattr(current, "id")
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as exc:
            raise to_validation_error(exc, entity_type) from exc

    # =========================================================================
    # Characters
    # =========================================================================

    def get_character(self, character_id: str) -> Character | None:
        return self._get_model(Collection.CHARACTERS, character_id, Character)

    def list_characters(self) -> list[Character]:
        return self._list_models(Collection.CHARACTERS, Character)

    def create_character(self, character: Character) -> Character:
        if self._fetch(Collection.CHARACTERS, character.id) is not None:
            raise StorageError(
                f"Character {character.id} already exists",
                collection=Collection.CHARACTERS,
            )
        self._save_model(Collection.CHARACTERS, character.id, character)
        logger.info("Character created", character_id=character.id, name=character.name)
        return character.model_copy(deep=True)

    def update_character(self, character_id: str, updates: Mapping[str, Any]) -> Character:
        """Apply a partial update and return the new character snapshot.

        Raises:
            NotFoundError: If the character does not exist.
            ValidationError: If the merged record breaks a model constraint.
        """
        current = self.get_character(character_id)
        if current is None:
            raise NotFoundError(
                "Character not found",
                entity_type="character",
                entity_id=character_id,
            )
        updated = self._merge(current, updates, Character, "character")
        self._save_model(Collection.CHARACTERS, character_id, updated)
        return updated

    def delete_character(self, character_id: str) -> bool:
        return self._remove(Collection.CHARACTERS, character_id)

    # =========================================================================
    # Locations
    # =========================================================================

    def get_location(self, location_id: str) -> Location | None:
        return self._get_model(Collection.LOCATIONS, location_id, Location)

    def list_locations(self) -> list[Location]:
        return self._list_models(Collection.LOCATIONS, Location)

    def save_location(self, location: Location) -> Location:
        self._save_model(Collection.LOCATIONS, location.id, location)
        return location

    # =========================================================================
    # Items and shops
    # =========================================================================

    def get_item(self, item_id: str) -> Item | None:
        return self._get_model(Collection.ITEMS, item_id, Item)

    def list_items(self) -> list[Item]:
        return self._list_models(Collection.ITEMS, Item)

    def save_item(self, item: Item) -> Item:
        self._save_model(Collection.ITEMS, item.id, item)
        return item

    def set_shop_inventory(self, location_id: str, item_ids: list[str]) -> None:
        """Restrict what the shop at ``location_id`` sells."""
        self._put(
            Collection.SHOP_INVENTORIES,
            location_id,
            {"location_id": location_id, "item_ids": list(item_ids)},
        )

    def get_shop_items(self, location_id: str) -> list[Item]:
        """Items sold at a location. Empty when the location has no shop list."""
        document = self._fetch(Collection.SHOP_INVENTORIES, location_id)
        if document is None:
            return []
        items = (self.get_item(item_id) for item_id in document["item_ids"])
        return [item for item in items if item is not None]

    # =========================================================================
    # Enemies
    # =========================================================================

    def get_enemy(self, enemy_id: str) -> Enemy | None:
        return self._get_model(Collection.ENEMIES, enemy_id, Enemy)

    def list_enemies(self) -> list[Enemy]:
        return self._list_models(Collection.ENEMIES, Enemy)

    def list_enemies_by_location(self, location_id: str) -> list[Enemy]:
        return self._list_models(Collection.ENEMIES, Enemy, owner=location_id)

    def save_enemy(self, enemy: Enemy) -> Enemy:
        self._save_model(Collection.ENEMIES, enemy.id, enemy, owner=enemy.location_id)
        return enemy

    # =========================================================================
    # Quests
    # =========================================================================

    def get_quest(self, quest_id: str) -> Quest | None:
        return self._get_model(Collection.QUESTS, quest_id, Quest)

    def list_quests(self) -> list[Quest]:
        return self._list_models(Collection.QUESTS, Quest)

    def list_quests_by_location(self, location_id: str) -> list[Quest]:
        return self._list_models(Collection.QUESTS, Quest, owner=location_id)

    def save_quest(self, quest: Quest) -> Quest:
        self._save_model(Collection.QUESTS, quest.id, quest, owner=quest.location_id)
        return quest

    # =========================================================================
    # Character quests
    # =========================================================================

    def get_character_quest(self, character_quest_id: str) -> CharacterQuest | None:
        return self._get_model(Collection.CHARACTER_QUESTS, character_quest_id, CharacterQuest)

    def list_character_quests(self, character_id: str) -> list[CharacterQuest]:
        return self._list_models(Collection.CHARACTER_QUESTS, CharacterQuest, owner=character_id)

    def create_character_quest(self, character_quest: CharacterQuest) -> CharacterQuest:
        self._save_model(
            Collection.CHARACTER_QUESTS,
            character_quest.id,
            character_quest,
            owner=character_quest.character_id,
        )
        return character_quest.model_copy()

    def update_character_quest(
        self,
        character_quest_id: str,
        updates: Mapping[str, Any],
    ) -> CharacterQuest:
        current = self.get_character_quest(character_quest_id)
        if current is None:
            raise NotFoundError(
                "Character quest not found",
                entity_type="character_quest",
                entity_id=character_quest_id,
            )
        updated = self._merge(current, updates, CharacterQuest, "character quest")
        self._save_model(
            Collection.CHARACTER_QUESTS,
            character_quest_id,
            updated,
            owner=updated.character_id,
        )
        return updated

    def delete_character_quest(self, character_quest_id: str) -> bool:
        return self._remove(Collection.CHARACTER_QUESTS, character_quest_id)

    # =========================================================================
    # Combat sessions
    # =========================================================================

    def get_combat_session(self, session_id: str) -> CombatSession | None:
        return self._get_model(Collection.COMBAT_SESSIONS, session_id, CombatSession)

    def get_active_combat_session(self, character_id: str) -> CombatSession | None:
        """Return the character's single active session, if any."""
        for session in self._list_models(
            Collection.COMBAT_SESSIONS, CombatSession, owner=character_id
        ):
            if session.active:
                return session
        return None

    def create_combat_session(self, session: CombatSession) -> CombatSession:
        """Store a new session.

        Raises:
            StorageError: If the character already has an active session.
        """
        existing = self.get_active_combat_session(session.character_id)
        if existing is not None:
            raise StorageError(
                "Character already has an active combat session",
                collection=Collection.COMBAT_SESSIONS,
                details={"character_id": session.character_id, "session_id": existing.id},
            )
        self._save_model(
            Collection.COMBAT_SESSIONS, session.id, session, owner=session.character_id
        )
        return session.model_copy()

    def update_combat_session(self, session_id: str, updates: Mapping[str, Any]) -> CombatSession:
        current = self.get_combat_session(session_id)
        if current is None:
            raise NotFoundError(
                "Combat session not found",
                entity_type="combat_session",
                entity_id=session_id,
            )
        updated = self._merge(current, updates, CombatSession, "combat session")
        self._save_model(
            Collection.COMBAT_SESSIONS, session_id, updated, owner=updated.character_id
        )
        return updated

    def delete_combat_session(self, session_id: str) -> bool:
        return self._remove(Collection.COMBAT_SESSIONS, session_id)

    # =========================================================================
    # Exploration cooldowns
    # =========================================================================

    def get_explore_cooldown(self, character_id: str) -> int:
        """Epoch ms before which the character may not explore (0 if never)."""
        document = self._fetch(Collection.EXPLORE_COOLDOWNS, character_id)
        return int(document["next_allowed"]) if document else 0

    def set_explore_cooldown(self, character_id: str, next_allowed: int) -> None:
        self._put(
            Collection.EXPLORE_COOLDOWNS,
            character_id,
            {"character_id": character_id, "next_allowed": next_allowed},
        )


__all__ = [
    "Collection",
    "to_validation_error",
    "Repository",
]
