"""Tests for building the configured repository."""

from __future__ import annotations

from pathlib import Path

import pytest

from questforge.core.config import StorageSettings
from questforge.storage import (
    InMemoryRepository,
    SQLiteRepository,
    create_repository,
    get_repository,
)


class TestCreateRepository:
    """Tests for create_repository."""

    def test_memory_backend_seeded(self) -> None:
        """Test the default backend is in-memory and seeded."""
        repo = create_repository(StorageSettings())

        assert isinstance(repo, InMemoryRepository)
        assert repo.get_enemy("goblin") is not None

    def test_sqlite_backend(self, tmp_path: Path) -> None:
        """Test the SQLite backend writes its database file."""
        path = tmp_path / "nested" / "game.db"

        repo = create_repository(StorageSettings(backend="sqlite", database_path=path))

        assert isinstance(repo, SQLiteRepository)
        assert path.exists()
        assert repo.get_item("health_potion") is not None

    def test_unseeded(self) -> None:
        """Test seeding can be disabled."""
        repo = create_repository(StorageSettings(seed_world=False))

        assert repo.list_locations() == []


class TestGetRepository:
    """Tests for the global repository."""

    def test_singleton(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the global repository is built once from settings."""
        monkeypatch.chdir(tmp_path)

        assert get_repository() is get_repository()
