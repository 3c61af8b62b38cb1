"""Build the configured repository backend."""

from __future__ import annotations

from questforge.core.config import StorageSettings, get_settings
from questforge.core.logging import get_logger
from questforge.storage.database import SQLiteRepository
from questforge.storage.memory import InMemoryRepository
from questforge.storage.repository import Repository
from questforge.storage.seed import seed_world

logger = get_logger(__name__)


def create_repository(settings: StorageSettings | None = None) -> Repository:
    """Create a repository from storage settings.

    Args:
        settings: Storage settings. Defaults to the application settings.

    Returns:
        A new repository, seeded with the default world when enabled.
    """
    settings = settings or get_settings().storage

    repository: Repository
    if settings.backend == "sqlite":
        repository = SQLiteRepository(settings.database_path)
    else:
        repository = InMemoryRepository()

    if settings.seed_world:
        seed_world(repository)

    logger.info("Repository ready", backend=settings.backend, seeded=settings.seed_world)
    return repository


_repository_instance: Repository | None = None


def get_repository() -> Repository:
    """Get the global repository instance.

    Returns:
        Repository singleton instance.
    """
    global _repository_instance

    if _repository_instance is None:
        _repository_instance = create_repository()

    return _repository_instance


def reset_repository() -> None:
    """Drop the global repository so the next access rebuilds it."""
    global _repository_instance
    _repository_instance = None


__all__ = [
    "create_repository",
    "get_repository",
    "reset_repository",
]
