"""Integration tests for persistence.

Tests that game state survives reopening the SQLite database and that the
victory reconciliation is atomic on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from questforge.core.config import GameSettings
from questforge.core.exceptions import StorageError
from questforge.engine.game import GameService
from questforge.storage.database import SQLiteRepository
from questforge.storage.repository import Collection


@pytest.fixture
def sqlite_service(sqlite_repository: SQLiteRepository, roller: Any, clock: Any) -> GameService:
    """Provide a GameService backed by SQLite."""
    return GameService(sqlite_repository, settings=GameSettings(), roller=roller, clock=clock)


class TestSessionPersistence:
    """Test state persistence across repository instances."""

    def test_state_survives_reopen(
        self,
        sqlite_service: GameService,
        sqlite_repository: SQLiteRepository,
        roller: Any,
        clock: Any,
    ) -> None:
        """Progress, quests and an open fight reload from disk."""
        hero = sqlite_service.create_character({"name": "Ayla", "class": "warrior"})
        sqlite_service.accept_quest(hero.id, "goblin_problem")
        sqlite_service.move_character(hero.id, "forest")
        sqlite_service.start_combat(hero.id, "goblin")
        roller.queue(5)
        sqlite_service.perform_combat_action(hero.id, "attack")

        reopened = SQLiteRepository(sqlite_repository.db_path)
        service = GameService(reopened, settings=GameSettings(), roller=roller, clock=clock)

        character = service.get_character(hero.id)
        assert character.current_location_id == "forest"
        assert character.inventory == hero.inventory
        assert reopened.get_active_combat_session(hero.id).enemy_health == 30
        assert [entry.quest_id for entry in service.list_character_quests(hero.id)] == [
            "goblin_problem"
        ]

    def test_victory_persisted(self, sqlite_service: GameService) -> None:
        """A victory with quest completion is fully written."""
        hero = sqlite_service.create_character(
            {"name": "Ayla", "class": "warrior", "strength": 25}
        )
        sqlite_service.update_character(hero.id, {"strength": 100})
        entry = sqlite_service.accept_quest(hero.id, "training_drills")
        sqlite_service.repository.update_character_quest(entry.id, {"progress": 2})

        sqlite_service.start_combat(hero.id, "training_dummy")
        result = sqlite_service.perform_combat_action(hero.id, "attack")

        assert result.victory is True
        stored = sqlite_service.repository.get_character(hero.id)
        assert stored.experience == 40
        assert stored.gold == 60
        [quest] = sqlite_service.list_character_quests(hero.id)
        assert quest.completed is True
        assert sqlite_service.repository.get_active_combat_session(hero.id) is None

    def test_victory_rolled_back_on_disk(
        self,
        sqlite_service: GameService,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A failure at the last reconciliation step leaves nothing written."""
        repository = sqlite_service.repository
        hero = sqlite_service.create_character({"name": "Ayla", "class": "warrior"})
        sqlite_service.update_character(hero.id, {"strength": 100})
        sqlite_service.accept_quest(hero.id, "training_drills")
        session = sqlite_service.start_combat(hero.id, "training_dummy")

        def broken_delete(session_id: str) -> bool:
            raise StorageError("disk full", collection=Collection.COMBAT_SESSIONS)

        monkeypatch.setattr(repository, "delete_combat_session", broken_delete)

        with pytest.raises(StorageError):
            sqlite_service.perform_combat_action(hero.id, "attack")

        monkeypatch.undo()
        reopened = SQLiteRepository(Path(repository.db_path))
        assert reopened.get_character(hero.id).experience == 0
        assert reopened.list_character_quests(hero.id)[0].progress == 0
        assert reopened.get_active_combat_session(hero.id).id == session.id

    def test_document_count(self, sqlite_repository: SQLiteRepository) -> None:
        """Each template is stored once."""
        from questforge.storage.seed import ENEMIES, LOCATIONS

        assert sqlite_repository.count(Collection.ENEMIES) == len(ENEMIES)
        assert sqlite_repository.count(Collection.LOCATIONS) == len(LOCATIONS)


class TestSQLiteQuestLookupFailure:
    """Test best-effort quest lookups on the SQLite backend."""

    def test_error_inside_transaction_is_storage_error(
        self, sqlite_repository: SQLiteRepository
    ) -> None:
        """SQLite errors on the shared connection surface as StorageError."""
        with pytest.raises(StorageError), sqlite_repository.transaction():
            with sqlite_repository._get_connection() as conn:
                conn.execute("SELECT data FROM no_such_table")

    def test_victory_survives_failed_quest_lookup(
        self,
        sqlite_service: GameService,
        sqlite_repository: SQLiteRepository,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A failing quest scan is skipped and the victory is committed."""
        hero = sqlite_service.create_character({"name": "Ayla", "class": "warrior"})
        sqlite_service.update_character(hero.id, {"strength": 100})
        sqlite_service.accept_quest(hero.id, "training_drills")
        sqlite_service.start_combat(hero.id, "training_dummy")
        original = sqlite_repository._scan

        def scan(collection: Collection, owner: str | None = None) -> list[dict[str, Any]]:
            if collection is Collection.CHARACTER_QUESTS:
                with sqlite_repository._get_connection() as conn:
                    conn.execute("SELECT data FROM no_such_table")
            return original(collection, owner)

        monkeypatch.setattr(sqlite_repository, "_scan", scan)

        result = sqlite_service.perform_combat_action(hero.id, "attack")

        assert result.victory is True
        assert result.character.experience == 10
        assert sqlite_repository.get_character(hero.id).experience == 10
        assert sqlite_repository.get_active_combat_session(hero.id) is None
