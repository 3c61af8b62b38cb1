"""Leveling curve: the single authority for level from experience.

Experience needed for each level up grows in brackets:

=========== ===================
From level  XP to next level
=========== ===================
1 - 4       50
5 - 25      100
26 - 50     250
51+         500
=========== ===================

All functions are pure.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from questforge.core.constants import LEVEL_SAFETY_CAP, MIN_LEVEL, STAT_POINTS_PER_LEVEL


@dataclass(frozen=True)
class LevelUpResult:
    """Level after applying experience, and what was gained.

    Attributes:
        level: Resulting level.
        levels_gained: Levels above the starting level.
        stat_points_gained: Unspent stat points earned.
    """

    level: int
    levels_gained: int = 0
    stat_points_gained: int = 0

    @property
    def leveled_up(self) -> bool:
        return self.levels_gained > 0


def xp_increment_for_level_up(from_level: int) -> int:
    """Experience needed to go from ``from_level`` to the next level."""
    if from_level < 1:
        return 0
    if from_level < 5:
        return 50
    if from_level <= 25:
        return 100
    if from_level <= 50:
        return 250
    return 500


@lru_cache(maxsize=None)
def cumulative_xp_for_level(level: int) -> int:
    """Total experience required to reach ``level``.

    Example:
        >>> cumulative_xp_for_level(5)
        200
    """
    if level <= 1:
        return 0
    return cumulative_xp_for_level(level - 1) + xp_increment_for_level_up(level - 1)


def level_from_experience(experience: int) -> int:
    """Highest level whose cumulative requirement is met, capped at 200."""
    level = MIN_LEVEL
    while level < LEVEL_SAFETY_CAP and cumulative_xp_for_level(level + 1) <= experience:
        level += 1
    return level


def apply_level_ups(current_level: int, experience: int) -> LevelUpResult:
    """Compare the stored level with the level ``experience`` supports.

    Args:
        current_level: Level currently stored on the character.
        experience: Total experience after the latest gains.

    Returns:
        The new level and 3 stat points per level gained. A derived level
        at or below ``current_level`` leaves the level untouched.
    """
    derived = level_from_experience(experience)
    if derived <= current_level:
        return LevelUpResult(level=current_level)
    gained = derived - current_level
    return LevelUpResult(
        level=derived,
        levels_gained=gained,
        stat_points_gained=gained * STAT_POINTS_PER_LEVEL,
    )


def xp_needed_for_next(level: int) -> int:
    """Experience between ``level`` and the next one. 0 at the level cap."""
    if level >= LEVEL_SAFETY_CAP:
        return 0
    return xp_increment_for_level_up(level)


def xp_progress(experience: int) -> tuple[int, int]:
    """Progress inside the current level as ``(earned, needed)``.

    Intended for progress bars: ``earned`` is the experience above the
    current level's threshold, ``needed`` the size of the current bracket.
    """
    level = level_from_experience(experience)
    earned = experience - cumulative_xp_for_level(level)
    return earned, xp_needed_for_next(level)


__all__ = [
    "LevelUpResult",
    "xp_increment_for_level_up",
    "cumulative_xp_for_level",
    "level_from_experience",
    "apply_level_ups",
    "xp_needed_for_next",
    "xp_progress",
]
