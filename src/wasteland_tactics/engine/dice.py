"""Random rolls for combat and lockpicking.

Every random decision of the simulation goes through a ``DiceRoller``
so that a session can be replayed from a seed and tests can substitute
scripted rolls.
"""

from __future__ import annotations

import random

from wasteland_tactics.core.exceptions import DiceRollError
from wasteland_tactics.core.logging import get_logger


logger = get_logger(__name__)


class DiceRoller:
    """Seedable source of game rolls.

    Each roller owns a private ``random.Random`` so that seeding one
    session never disturbs another.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> 1 <= roller.damage(1, 3) <= 3
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the roller.

        Args:
            seed: Optional seed for reproducible rolls.
        """
        self._seed = seed
        self._rng = random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def damage(self, minimum: int, maximum: int) -> int:
        """Roll a uniformly distributed integer in ``[minimum, maximum]``.

        Raises:
            DiceRollError: If ``minimum > maximum``.
        """
        if minimum > maximum:
            raise DiceRollError(
                f"Invalid damage range: min {minimum} exceeds max {maximum}",
                expression=f"{minimum}-{maximum}",
            )
        return self._rng.randint(minimum, maximum)

    def percentile(self) -> int:
        """Roll an integer in ``[0, 100)``."""
        return self._rng.randrange(100)

    def chance(self, percent: int) -> bool:
        """Succeed with probability ``percent`` out of 100."""
        return self.percentile() < percent


__all__ = ["DiceRoller"]
