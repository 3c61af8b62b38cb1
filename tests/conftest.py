"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the QuestForge test suite.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import pytest

from questforge.engine.dice import DiceRoller


if TYPE_CHECKING:
    from collections.abc import Generator


T = TypeVar("T")

START_TIME_MS = 1_700_000_000_000


class ScriptedRoller(DiceRoller):
    """DiceRoller returning queued values, then 0. Shuffles keep order."""

    def __init__(self) -> None:
        super().__init__(seed=0)
        self.pending: list[int] = []
        self.bounds: list[int] = []

    def queue(self, *values: int) -> None:
        self.pending.extend(values)

    def roll_below(self, upper: int) -> int:
        self.bounds.append(upper)
        if upper <= 1 or not self.pending:
            return 0
        value = self.pending.pop(0)
        assert 0 <= value < max(upper, 1), f"scripted roll {value} outside [0, {upper})"
        return value

    def shuffle(self, items: Sequence[T]) -> list[T]:
        return list(items)


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = START_TIME_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from questforge.core.config import clear_settings_cache
    from questforge.storage.factory import reset_repository

    clear_settings_cache()
    reset_repository()
    yield
    clear_settings_cache()
    reset_repository()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "QUESTFORGE_DEBUG": "true",
        "QUESTFORGE_LOG_LEVEL": "DEBUG",
        "QUESTFORGE_GAME_RNG_SEED": "7",
        "QUESTFORGE_STORAGE_BACKEND": "memory",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def game_settings() -> Any:
    """Provide default game settings."""
    from questforge.core.config import GameSettings

    return GameSettings()


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded dice roller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def roller() -> ScriptedRoller:
    """Provide a roller whose results are queued by the test."""
    return ScriptedRoller()


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed instant."""
    return FakeClock()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def repository() -> Any:
    """Provide an in-memory repository seeded with the default world."""
    from questforge.storage.memory import InMemoryRepository
    from questforge.storage.seed import seed_world

    repo = InMemoryRepository()
    seed_world(repo)
    return repo


@pytest.fixture
def sqlite_repository(tmp_path: Path) -> Any:
    """Provide a SQLite repository in a temporary directory, seeded."""
    from questforge.storage.database import SQLiteRepository
    from questforge.storage.seed import seed_world

    repo = SQLiteRepository(tmp_path / "questforge.db")
    seed_world(repo)
    return repo


@pytest.fixture
def service(
    repository: Any,
    game_settings: Any,
    roller: ScriptedRoller,
    clock: FakeClock,
) -> Any:
    """Provide a GameService with scripted randomness and a fake clock."""
    from questforge.engine.game import GameService

    return GameService(repository, settings=game_settings, roller=roller, clock=clock)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_character_data() -> dict[str, Any]:
    """Provide sample character creation data.

    Returns:
        Dictionary accepted by GameService.create_character.
    """
    return {"name": "Ayla", "class": "warrior"}


@pytest.fixture
def hero(service: Any, sample_character_data: dict[str, Any]) -> Any:
    """Provide a freshly created character with default stats."""
    return service.create_character(sample_character_data)
