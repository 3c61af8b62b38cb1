"""Game rule constants for the QuestForge engine.

These values are fixed rules of the game rather than deployment settings,
which live in ``questforge.core.config``.
"""

from __future__ import annotations

# =============================================================================
# Leveling
# =============================================================================

MIN_LEVEL = 1
"""Level of a freshly created character."""

LEVEL_SAFETY_CAP = 200
"""Highest level ``level_from_experience`` will ever return."""

STAT_POINTS_PER_LEVEL = 3
"""Unspent stat points awarded per level gained."""

MAX_HEALTH_PER_LEVEL = 5
"""Max-health increase per level gained."""

GOLD_PER_LEVEL = 5
"""Bonus gold awarded per level gained."""

FULL_HEAL_LEVEL_THRESHOLD = 5
"""Level-ups landing at or below this level fully restore health."""

# =============================================================================
# Character
# =============================================================================

MAX_HEALTH_CEILING = 250
"""Absolute ceiling for a character's maximum health."""

MIN_BASE_STAT = 5
"""Lowest base stat accepted at character creation."""

MAX_BASE_STAT = 25
"""Highest base stat accepted at character creation."""

ALLOCATABLE_STATS = ("strength", "magic", "agility", "defense")
"""Stats that unspent points can be spent on."""

STARTING_LOCATION_ID = "village"
"""Location new characters start in."""

STARTER_EQUIPMENT = {"weapon": "wooden_sword", "armor": "shield"}
"""Equipment a new character starts with when none is supplied."""

STARTER_INVENTORY = (("wooden_sword", 1), ("shield", 1), ("health_potion", 3))
"""(item id, quantity) stacks a new character starts with when none is supplied."""

# =============================================================================
# Combat
# =============================================================================

TRAINING_BASE_HEALTH = 30
"""Training enemy health at character level 1."""

TRAINING_HEALTH_PER_LEVEL = 10
"""Training enemy health added per character level above 1."""

TRAINING_HEALTH_SCALING_LEVELS = 20
"""Number of level steps after which training enemy health stops growing."""

# =============================================================================
# Inventory
# =============================================================================

REWARD_ITEM_ICON = "\N{WRAPPED PRESENT}"
"""Placeholder icon for quest-reward stacks created from scratch."""

DEFAULT_ITEM_ICON = "\N{PACKAGE}"
"""Icon used when an item template defines none."""


__all__ = [
    "MIN_LEVEL",
    "LEVEL_SAFETY_CAP",
    "STAT_POINTS_PER_LEVEL",
    "MAX_HEALTH_PER_LEVEL",
    "GOLD_PER_LEVEL",
    "FULL_HEAL_LEVEL_THRESHOLD",
    "MAX_HEALTH_CEILING",
    "MIN_BASE_STAT",
    "MAX_BASE_STAT",
    "ALLOCATABLE_STATS",
    "STARTING_LOCATION_ID",
    "STARTER_EQUIPMENT",
    "STARTER_INVENTORY",
    "TRAINING_BASE_HEALTH",
    "TRAINING_HEALTH_PER_LEVEL",
    "TRAINING_HEALTH_SCALING_LEVELS",
    "REWARD_ITEM_ICON",
    "DEFAULT_ITEM_ICON",
]
