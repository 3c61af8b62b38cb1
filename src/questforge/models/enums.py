"""Enumerations shared by the QuestForge domain models."""

from __future__ import annotations

from enum import StrEnum


class ItemType(StrEnum):
    """Item categories. Equipment categories match their slot names."""

    WEAPON = "weapon"
    ARMOR = "armor"
    HELMET = "helmet"
    BOOTS = "boots"
    ACCESSORY = "accessory"
    CONSUMABLE = "consumable"
    MISC = "misc"


class EquipmentSlot(StrEnum):
    """The five fixed equipment slots of a character."""

    WEAPON = "weapon"
    ARMOR = "armor"
    HELMET = "helmet"
    BOOTS = "boots"
    ACCESSORY = "accessory"


SLOT_ITEM_TYPES: dict[EquipmentSlot, ItemType] = {
    EquipmentSlot.WEAPON: ItemType.WEAPON,
    EquipmentSlot.ARMOR: ItemType.ARMOR,
    EquipmentSlot.HELMET: ItemType.HELMET,
    EquipmentSlot.BOOTS: ItemType.BOOTS,
    EquipmentSlot.ACCESSORY: ItemType.ACCESSORY,
}
"""Item type each slot accepts."""


class QuestType(StrEnum):
    """Quest objective kinds."""

    KILL = "kill"
    COLLECT = "collect"
    EXPLORE = "explore"


class CombatAction(StrEnum):
    """Actions a player can take during combat."""

    ATTACK = "attack"
    DEFEND = "defend"
    MAGIC = "magic"
    FLEE = "flee"


class Turn(StrEnum):
    """Whose turn a combat session reports. Informational only."""

    PLAYER = "player"
    ENEMY = "enemy"


__all__ = [
    "ItemType",
    "EquipmentSlot",
    "SLOT_ITEM_TYPES",
    "QuestType",
    "CombatAction",
    "Turn",
]
