"""QuestForge - Combat & Progression Engine for a turn-based RPG.

A character explores locations, fights enemies, gains experience and
levels, manages inventory and equipment, and completes quests.

RULES ARCHITECTURE:
- The leveling curve is the only authority for level
- Every random roll goes through an injectable DiceRoller
- Victory rewards are applied in one repository transaction

Example:
    >>> from questforge import GameService
    >>>
    >>> service = GameService()
    >>> hero = service.create_character({"name": "Thorin", "class": "warrior"})
    >>> service.move_character(hero.id, "training_grounds")
    >>> service.start_combat(hero.id, "training_dummy")
    >>> result = service.perform_combat_action(hero.id, "attack")
    >>> print(result.message)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for characters, world templates and combat.
    storage: Repository interface with in-memory and SQLite backends.
    engine: Leveling, combat, progression, quests, exploration and shops.
"""

from __future__ import annotations

# Core
from questforge.core.config import Settings, get_settings
from questforge.core.exceptions import QuestForgeError
from questforge.core.logging import configure_logging, get_logger

# Models
from questforge.models import (
    Character,
    CharacterCreate,
    CombatActionResult,
    CombatPollResult,
    CombatSession,
)

# Storage
from questforge.storage import InMemoryRepository, Repository, SQLiteRepository

# Engine
from questforge.engine import DiceRoller, GameService


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "QuestForgeError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Character",
    "CharacterCreate",
    "CombatSession",
    "CombatActionResult",
    "CombatPollResult",
    # Storage
    "Repository",
    "InMemoryRepository",
    "SQLiteRepository",
    # Engine
    "DiceRoller",
    "GameService",
]
