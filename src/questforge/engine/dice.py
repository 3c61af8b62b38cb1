"""Seedable random source for combat and exploration rolls.

Every random draw in the engine goes through a :class:`DiceRoller`, so a
fixed seed (or a scripted subclass in tests) makes fights reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from questforge.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class DiceRoller:
    """Integer rolls over half-open ranges.

    Each roller owns its own ``random.Random`` instance, so seeding one
    roller never disturbs another or the global random state.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> 0 <= roller.roll_below(10) < 10
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        self._random = random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def roll_below(self, upper: int) -> int:
        """Roll an integer in ``[0, upper)``.

        Args:
            upper: Exclusive upper bound. Values below 1 always roll 0.

        Returns:
            The rolled integer.
        """
        if upper <= 1:
            return 0
        return self._random.randrange(upper)

    def roll_between(self, low: int, high: int) -> int:
        """Roll an integer in ``[low, high)``. Returns ``low`` for empty ranges."""
        return low + self.roll_below(high - low)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy of ``items``."""
        shuffled = list(items)
        self._random.shuffle(shuffled)
        return shuffled


__all__ = [
    "DiceRoller",
]
