"""Pydantic V2 domain models for QuestForge.

Modules:
    enums: Item types, equipment slots, quest types, combat actions.
    character: Character, equipment and inventory stacks.
    world: Location, item, enemy and quest templates plus quest progress.
    combat: Combat sessions and combat outcomes.
    results: Exploration, purchase and inventory outcomes.
"""

from __future__ import annotations

from questforge.models.character import (
    Character,
    CharacterCreate,
    Equipment,
    InventoryEntry,
    add_to_inventory,
    remove_from_inventory,
)
from questforge.models.combat import (
    CombatActionResult,
    CombatPollResult,
    CombatSession,
    VictorySummary,
)
from questforge.models.enums import (
    SLOT_ITEM_TYPES,
    CombatAction,
    EquipmentSlot,
    ItemType,
    QuestType,
    Turn,
)
from questforge.models.results import (
    CharacterActionResult,
    ExploreResult,
    PurchaseResult,
)
from questforge.models.world import (
    CharacterQuest,
    Enemy,
    Item,
    ItemStats,
    Location,
    Quest,
    QuestReward,
    RewardItem,
)


__all__ = [
    # Enums
    "ItemType",
    "EquipmentSlot",
    "SLOT_ITEM_TYPES",
    "QuestType",
    "CombatAction",
    "Turn",
    # Character
    "Character",
    "CharacterCreate",
    "Equipment",
    "InventoryEntry",
    "add_to_inventory",
    "remove_from_inventory",
    # World
    "Location",
    "ItemStats",
    "Item",
    "Enemy",
    "RewardItem",
    "QuestReward",
    "Quest",
    "CharacterQuest",
    # Combat
    "CombatSession",
    "VictorySummary",
    "CombatActionResult",
    "CombatPollResult",
    # Results
    "ExploreResult",
    "PurchaseResult",
    "CharacterActionResult",
]
