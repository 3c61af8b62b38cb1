"""Result schemas returned by exploration, shop and inventory operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from questforge.models.character import Character
from questforge.models.world import Enemy


class ExploreResult(BaseModel):
    """Enemies discovered by one exploration and the new cooldown."""

    model_config = ConfigDict(frozen=True)

    enemies: list[Enemy] = Field(default_factory=list)
    cooldown_ms: int
    next_allowed: int


class PurchaseResult(BaseModel):
    """Outcome of buying an item."""

    model_config = ConfigDict(frozen=True)

    character: Character
    purchased: str
    upgrade_message: str = ""


class CharacterActionResult(BaseModel):
    """Updated character plus a narrative message (equip, use item)."""

    model_config = ConfigDict(frozen=True)

    character: Character
    message: str


__all__ = [
    "ExploreResult",
    "PurchaseResult",
    "CharacterActionResult",
]
