"""Pydantic V2 schemas for characters, their equipment and inventory.

A Character owns its inventory and equipment by value. Every mutation
produces new lists and models instead of editing the stored ones.
"""

from __future__ import annotations

from typing import Annotated, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from questforge.core.constants import (
    MAX_BASE_STAT,
    MAX_HEALTH_CEILING,
    MIN_BASE_STAT,
    MIN_LEVEL,
    STARTING_LOCATION_ID,
)
from questforge.models.enums import EquipmentSlot


BaseStat = Annotated[
    int,
    Field(ge=MIN_BASE_STAT, le=MAX_BASE_STAT, description="Base stat at creation (5-25)"),
]


class Equipment(BaseModel):
    """Item ids equipped in each slot.

    Attributes:
        weapon: Equipped weapon id.
        armor: Equipped armor id.
        helmet: Equipped helmet id.
        boots: Equipped boots id.
        accessory: Equipped accessory id.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    weapon: str | None = None
    armor: str | None = None
    helmet: str | None = None
    boots: str | None = None
    accessory: str | None = None

    def get(self, slot: EquipmentSlot) -> str | None:
        """Return the item id equipped in ``slot``."""
        return getattr(self, slot.value)

    def with_item(self, slot: EquipmentSlot, item_id: str) -> Equipment:
        """Return a copy with ``item_id`` equipped in ``slot``."""
        return self.model_copy(update={slot.value: item_id})


class InventoryEntry(BaseModel):
    """A stack of one item in a character's inventory.

    ``name``, ``type`` and ``icon`` are display metadata copied from the item
    template when the stack is created.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    item_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    name: str = ""
    type: str = "misc"
    icon: str = ""


def add_to_inventory(
    inventory: list[InventoryEntry],
    entry: InventoryEntry,
) -> list[InventoryEntry]:
    """Return a new inventory with ``entry`` merged in.

    Quantities are added to an existing stack with the same item id,
    otherwise the entry is appended as a new stack.
    """
    merged: list[InventoryEntry] = []
    found = False
    for existing in inventory:
        if existing.item_id == entry.item_id:
            merged.append(
                existing.model_copy(update={"quantity": existing.quantity + entry.quantity})
            )
            found = True
        else:
            merged.append(existing.model_copy())
    if not found:
        merged.append(entry.model_copy())
    return merged


def remove_from_inventory(
    inventory: list[InventoryEntry],
    item_id: str,
    quantity: int = 1,
) -> list[InventoryEntry]:
    """Return a new inventory with ``quantity`` of ``item_id`` taken out.

    A stack that reaches zero is dropped entirely.
    """
    remaining: list[InventoryEntry] = []
    for existing in inventory:
        if existing.item_id != item_id:
            remaining.append(existing.model_copy())
            continue
        left = existing.quantity - quantity
        if left > 0:
            remaining.append(existing.model_copy(update={"quantity": left}))
    return remaining


class Character(BaseModel):
    """Player character record.

    ``level`` is a cached projection of ``experience``. It may drift, for
    example after a direct debug write, and is corrected whenever the
    character is read through ``GameService.get_character``.

    Attributes:
        id: Unique identifier.
        name: Display name.
        character_class: Class chosen at creation (serialized as ``class``).
        level: Cached level.
        experience: Total experience.
        health: Current health (0..max_health).
        max_health: Maximum health (capped at 250).
        strength: Physical damage stat.
        magic: Magic damage stat.
        agility: Agility stat.
        defense: Damage mitigation stat.
        gold: Gold held.
        unspent_points: Stat points awaiting allocation.
        current_location_id: Location the character stands in.
        equipment: Equipped item ids per slot.
        inventory: Item stacks, unique by item id.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        populate_by_name=True,
    )

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1, max_length=50)
    character_class: str = Field(alias="class", min_length=1, max_length=50)
    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL)
    experience: int = Field(default=0, ge=0)
    health: int = Field(default=100, ge=0)
    max_health: int = Field(default=100, ge=1, le=MAX_HEALTH_CEILING)
    strength: int = Field(default=10, ge=0)
    magic: int = Field(default=10, ge=0)
    agility: int = Field(default=10, ge=0)
    defense: int = Field(default=10, ge=0)
    gold: int = Field(default=50, ge=0)
    unspent_points: int = Field(default=0, ge=0)
    current_location_id: str = Field(default=STARTING_LOCATION_ID, min_length=1)
    equipment: Equipment = Field(default_factory=Equipment)
    inventory: list[InventoryEntry] = Field(default_factory=list)

    @field_validator("inventory")
    @classmethod
    def unique_stacks(cls, value: list[InventoryEntry]) -> list[InventoryEntry]:
        """Reject inventories holding two stacks of the same item."""
        seen: set[str] = set()
        for entry in value:
            if entry.item_id in seen:
                raise ValueError(f"duplicate inventory stack for item {entry.item_id!r}")
            seen.add(entry.item_id)
        return value

    @model_validator(mode="after")
    def health_within_max(self) -> Self:
        """Ensure current health never exceeds maximum health."""
        if self.health > self.max_health:
            raise ValueError(
                f"health ({self.health}) must not exceed max_health ({self.max_health})"
            )
        return self

    def inventory_entry(self, item_id: str) -> InventoryEntry | None:
        """Return the inventory stack for ``item_id``, if any."""
        for entry in self.inventory:
            if entry.item_id == item_id:
                return entry
        return None


class CharacterCreate(BaseModel):
    """Input accepted when creating a character.

    Omitted fields take the game's defaults. Base stats must lie in 5..25.
    ``equipment`` and ``inventory`` default to the starter kit when omitted.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1, max_length=50)
    character_class: str = Field(alias="class", min_length=1, max_length=50)
    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL)
    experience: int = Field(default=0, ge=0)
    health: int = Field(default=100, ge=0)
    max_health: int = Field(default=100, ge=1, le=MAX_HEALTH_CEILING)
    strength: BaseStat = 10
    magic: BaseStat = 10
    agility: BaseStat = 10
    defense: BaseStat = 10
    gold: int = Field(default=50, ge=0)
    unspent_points: int = Field(default=0, ge=0)
    current_location_id: str = Field(default=STARTING_LOCATION_ID, min_length=1)
    equipment: Equipment | None = None
    inventory: list[InventoryEntry] | None = None


__all__ = [
    "Equipment",
    "InventoryEntry",
    "Character",
    "CharacterCreate",
    "add_to_inventory",
    "remove_from_inventory",
]
