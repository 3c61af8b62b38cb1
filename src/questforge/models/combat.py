"""Pydantic V2 schemas for combat sessions and combat outcomes."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from questforge.models.character import Character
from questforge.models.enums import Turn


class CombatSession(BaseModel):
    """An in-progress fight between one character and one enemy.

    Attributes:
        id: Unique session id.
        character_id: Fighting character. At most one active session each.
        enemy_id: Enemy template being fought.
        enemy_health: Remaining enemy health for this fight.
        turn: Informational turn marker; actions resolve synchronously.
        active: Whether the session still accepts actions.
        next_enemy_attack_at: Epoch ms when the idle enemy may auto-attack.
        last_enemy_attack_at: Epoch ms of the last auto-attack (0 if none).
        last_enemy_attack_damage: Damage of the last auto-attack.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    character_id: str = Field(min_length=1)
    enemy_id: str = Field(min_length=1)
    enemy_health: int = Field(ge=0)
    turn: Turn = Turn.PLAYER
    active: bool = True
    next_enemy_attack_at: int | None = None
    last_enemy_attack_at: int = 0
    last_enemy_attack_damage: int = 0


class VictorySummary(BaseModel):
    """Everything granted by one enemy defeat."""

    model_config = ConfigDict(frozen=True)

    experience_gained: int = 0
    gold_gained: int = 0
    levels_gained: int = 0
    stat_points_gained: int = 0
    bonus_gold: int = 0
    max_health_gain: int = 0
    fully_healed: bool = False
    quest_experience: int = 0
    quest_gold: int = 0
    quest_items: list[str] = Field(default_factory=list)
    completed_quest_ids: list[str] = Field(default_factory=list)


class CombatActionResult(BaseModel):
    """Outcome of one player combat action."""

    model_config = ConfigDict(frozen=True)

    message: str
    victory: bool = False
    defeated: bool = False
    fled: bool = False
    enemy_damage: int | None = None
    enemy_message: str | None = None
    enemy_health: int | None = None
    character: Character | None = None
    last_enemy_attack_at: int | None = None
    last_enemy_attack_damage: int | None = None
    summary: VictorySummary | None = None


class CombatPollResult(BaseModel):
    """State of a character's fight after idle auto-attacks are caught up.

    ``session`` is None when the character is not fighting, including right
    after an auto-attack defeated them (``defeated`` is then True).
    ``enemy_damage`` totals every auto-attack applied by this poll.
    """

    model_config = ConfigDict(frozen=True)

    session: CombatSession | None = None
    defeated: bool = False
    message: str | None = None
    enemy_damage: int = 0
    attacks: int = 0
    character: Character | None = None


__all__ = [
    "CombatSession",
    "VictorySummary",
    "CombatActionResult",
    "CombatPollResult",
]
