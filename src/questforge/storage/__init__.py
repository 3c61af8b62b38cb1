"""Storage module for QuestForge persistence.

Provides one repository interface with two backends:
- In-memory (default, snapshot-based transactions)
- SQLite (persistent across restarts)
"""

from questforge.storage.database import SQLiteRepository
from questforge.storage.factory import create_repository, get_repository, reset_repository
from questforge.storage.memory import InMemoryRepository
from questforge.storage.repository import Collection, Repository
from questforge.storage.seed import seed_world

__all__ = [
    "Collection",
    "Repository",
    "InMemoryRepository",
    "SQLiteRepository",
    "create_repository",
    "get_repository",
    "reset_repository",
    "seed_world",
]
