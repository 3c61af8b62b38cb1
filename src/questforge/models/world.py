"""Pydantic V2 schemas for the static world: locations, items, enemies, quests.

Templates are read-only at runtime. Per-character quest state lives in
``CharacterQuest``; per-fight enemy health lives in the combat session.
"""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from questforge.models.enums import ItemType, QuestType


class Location(BaseModel):
    """A place on the world map."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    level_recommendation: int = Field(default=1, ge=1)
    x: int = 0
    y: int = 0
    icon: str = ""
    accessible: bool = True


class ItemStats(BaseModel):
    """Stat bonuses or effects granted by an item. Absent stats are 0."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    attack: int = 0
    defense: int = 0
    health: int = 0
    magic: int = 0


class Item(BaseModel):
    """Item template.

    Attributes:
        id: Unique item id.
        name: Display name.
        type: Item category; equipment types match their slot.
        icon: Display icon.
        description: Flavor text.
        stats: Stat bonuses (equipment) or effects (consumables).
        consumable: Whether using the item consumes one from the stack.
        sell_value: Shop price in gold.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: ItemType
    icon: str = ""
    description: str = ""
    stats: ItemStats = Field(default_factory=ItemStats)
    consumable: bool = False
    sell_value: int = Field(default=1, ge=1)


class Enemy(BaseModel):
    """Enemy template. Combat health is tracked per session, not here."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    health: int = Field(ge=1)
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    experience: int = Field(ge=0)
    gold: int = Field(ge=0)
    icon: str = ""
    location_id: str = Field(min_length=1)


class RewardItem(BaseModel):
    """An item stack granted by a quest reward."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    item_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class QuestReward(BaseModel):
    """Experience, gold and items granted when a quest completes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    experience: int = Field(default=0, ge=0)
    gold: int = Field(default=0, ge=0)
    items: list[RewardItem] = Field(default_factory=list)


class Quest(BaseModel):
    """Quest template.

    For ``kill`` quests ``target`` is an enemy id; for ``collect`` quests it
    is an item id.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    type: QuestType
    target: str = Field(min_length=1)
    target_amount: int = Field(default=1, ge=1)
    reward: QuestReward = Field(default_factory=QuestReward)
    location_id: str | None = None


class CharacterQuest(BaseModel):
    """A character's progress on an accepted quest."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    character_id: str = Field(min_length=1)
    quest_id: str = Field(min_length=1)
    progress: int = Field(default=0, ge=0)
    completed: bool = False
    active: bool = True

    @property
    def is_open(self) -> bool:
        """True while the quest still accepts progress."""
        return self.active and not self.completed


__all__ = [
    "Location",
    "ItemStats",
    "Item",
    "Enemy",
    "RewardItem",
    "QuestReward",
    "Quest",
    "CharacterQuest",
]
