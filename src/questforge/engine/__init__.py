"""Game engine module for QuestForge.

This module provides the combat and progression rules: leveling, turn
resolution, victory reconciliation, quests, exploration and shops.

Submodules:
    leveling: Experience curve and level-up rewards
    dice: Seedable random source
    combat: Combat sessions, player actions and idle auto-attacks
    progression: Atomic victory reconciliation
    quests: Quest acceptance and kill progress
    exploration: Random encounters with a cooldown
    shop: Purchases, equipping and consumables
    game: GameService facade with per-character locking

Example:
    >>> from questforge.engine import GameService
    >>> service = GameService()
    >>> hero = service.create_character({"name": "Ayla", "class": "mage"})
    >>> service.explore(hero.id).enemies
"""

from __future__ import annotations

# =============================================================================
# Leveling
# =============================================================================
from questforge.engine.leveling import (
    LevelUpResult,
    apply_level_ups,
    cumulative_xp_for_level,
    level_from_experience,
    xp_increment_for_level_up,
    xp_needed_for_next,
    xp_progress,
)

# =============================================================================
# Randomness
# =============================================================================
from questforge.engine.dice import DiceRoller

# =============================================================================
# Rules
# =============================================================================
from questforge.engine.quests import QuestLog, QuestRewards
from questforge.engine.progression import ProgressionReconciler, format_victory_message
from questforge.engine.combat import (
    Clock,
    CombatResolver,
    system_clock,
    training_enemy_health,
)
from questforge.engine.exploration import ExplorationGate
from questforge.engine.shop import ShopAdjudicator

# =============================================================================
# Facade
# =============================================================================
from questforge.engine.game import GameService


__all__ = [
    # Leveling
    "LevelUpResult",
    "apply_level_ups",
    "cumulative_xp_for_level",
    "level_from_experience",
    "xp_increment_for_level_up",
    "xp_needed_for_next",
    "xp_progress",
    # Randomness
    "DiceRoller",
    # Rules
    "QuestLog",
    "QuestRewards",
    "ProgressionReconciler",
    "format_victory_message",
    "Clock",
    "CombatResolver",
    "system_clock",
    "training_enemy_health",
    "ExplorationGate",
    "ShopAdjudicator",
    # Facade
    "GameService",
]
