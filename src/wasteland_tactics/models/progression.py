"""Experience and level progression.

Experience thresholds grow quadratically: reaching level ``L`` requires
``L * (L - 1) * 500`` total experience, so level 2 needs 1000, level 3
needs 3000, level 4 needs 6000 and so on.

A level-up grants skill points that the player converts into stat
bonuses through a ``LevelUpAllocation``. Allocations stay provisional
until confirmed; confirmation applies every delta in one step.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wasteland_tactics.core.constants import EXP_THRESHOLD_FACTOR
from wasteland_tactics.core.exceptions import ValidationError
from wasteland_tactics.core.logging import get_logger
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import StatKind


logger = get_logger(__name__)


# =============================================================================
# Experience Thresholds
# =============================================================================


def exp_threshold(level: int) -> int:
    """Total experience required to reach ``level``.

    Args:
        level: Target level (1 or higher).

    Returns:
        Experience threshold; zero for level 1.
    """
    if level < 1:
        raise ValidationError("Level must be at least 1", field_name="level", invalid_value=level)
    return level * (level - 1) * EXP_THRESHOLD_FACTOR


def next_level_exp(level: int) -> int:
    """Experience needed to leave ``level`` for ``level + 1``."""
    return exp_threshold(level + 1)


@dataclass
class ExpAward:
    """Outcome of an experience award.

    Attributes:
        amount: Experience awarded.
        levels_gained: Number of levels gained by this award.
        skill_points_gained: Skill points granted by those levels.
        new_level: Level after the award.
    """

    amount: int
    levels_gained: int = 0
    skill_points_gained: int = 0
    new_level: int = 1

    @property
    def leveled_up(self) -> bool:
        return self.levels_gained > 0


def award_exp(entity: Entity, amount: int, *, points_per_level: int = 3) -> ExpAward:
    """Add experience and resolve every level-up it causes.

    The threshold check repeats, so one large award can raise several
    levels at once.

    Args:
        entity: The entity gaining experience.
        amount: Experience to add (non-negative).
        points_per_level: Skill points granted per level gained.

    Returns:
        Summary of the award.

    Raises:
        ValidationError: If ``amount`` is negative.

    Example:
        >>> hero = Entity(id="player", type="player", name="Hero", grid_x=0,
        ...               grid_y=0, hp=10, max_hp=10, ap=5, max_ap=5)
        >>> award_exp(hero, 3000).levels_gained
        2
    """
    if amount < 0:
        raise ValidationError(
            "Experience awards cannot be negative",
            field_name="amount",
            invalid_value=amount,
        )

    entity.exp += amount
    result = ExpAward(amount=amount, new_level=entity.level)

    while entity.exp >= entity.next_level_exp:
        entity.level += 1
        entity.skill_points += points_per_level
        entity.next_level_exp = next_level_exp(entity.level)
        result.levels_gained += 1
        result.skill_points_gained += points_per_level

    result.new_level = entity.level
    if result.leveled_up:
        logger.info(
            "Level up",
            entity_id=entity.id,
            level=entity.level,
            skill_points=entity.skill_points,
        )
    return result


# =============================================================================
# Level-Up Allocation
# =============================================================================


@dataclass
class LevelUpAllocation:
    """Provisional conversion of skill points into stat bonuses.

    Attributes:
        available: Points available to allocate, refreshed from the entity.
        hp_per_point: Max HP (and HP) granted per point.
        ap_per_point: Max AP (and AP) granted per point.
        ac_per_point: Armor class granted per point.
        require_all_spent: Refuse confirmation while points remain.
        allocated: Points assigned to each stat so far.
    """

    available: int
    hp_per_point: int = 10
    ap_per_point: int = 1
    ac_per_point: int = 2
    require_all_spent: bool = True
    allocated: dict[StatKind, int] = field(
        default_factory=lambda: {stat: 0 for stat in StatKind}
    )

    @classmethod
    def for_entity(
        cls,
        entity: Entity,
        *,
        hp_per_point: int = 10,
        ap_per_point: int = 1,
        ac_per_point: int = 2,
        require_all_spent: bool = True,
    ) -> LevelUpAllocation:
        """Open an allocation over the entity's unspent skill points."""
        return cls(
            available=entity.skill_points,
            hp_per_point=hp_per_point,
            ap_per_point=ap_per_point,
            ac_per_point=ac_per_point,
            require_all_spent=require_all_spent,
        )

    @property
    def spent(self) -> int:
        return sum(self.allocated.values())

    @property
    def remaining(self) -> int:
        return self.available - self.spent

    @property
    def can_confirm(self) -> bool:
        return self.remaining == 0 or not self.require_all_spent

    def increase(self, stat: StatKind | str) -> bool:
        """Assign one point to ``stat``.

        Returns:
            False when no points remain, True otherwise.
        """
        if self.remaining <= 0:
            return False
        self.allocated[StatKind(stat)] += 1
        return True

    def reset(self) -> None:
        """Return every provisional point to the pool."""
        for stat in self.allocated:
            self.allocated[stat] = 0

    def refresh(self, entity: Entity) -> None:
        """Track the entity's current pool, keeping pending points that still fit."""
        self.available = entity.skill_points
        if self.spent > self.available:
            self.reset()

    def deltas(self) -> dict[str, int]:
        """Stat changes the allocation would apply."""
        return {
            "max_hp": self.allocated[StatKind.HP] * self.hp_per_point,
            "max_ap": self.allocated[StatKind.AP] * self.ap_per_point,
            "ac": self.allocated[StatKind.AC] * self.ac_per_point,
        }

    def confirm(self, entity: Entity) -> dict[str, int]:
        """Apply every pending delta to ``entity`` at once.

        HP and AP rise together with their maximums. Spent points are
        deducted from the entity's pool.

        Returns:
            The applied deltas.

        Raises:
            ValidationError: If points remain while ``require_all_spent`` is
                set, or the entity no longer has the points.
        """
        if not self.can_confirm:
            raise ValidationError(
                "All skill points must be allocated before confirming",
                field_name="skill_points",
                invalid_value=self.remaining,
            )
        if self.spent > entity.skill_points:
            raise ValidationError(
                "Allocation exceeds the entity's skill points",
                field_name="skill_points",
                invalid_value=self.spent,
            )

        deltas = self.deltas()
        entity.max_hp += deltas["max_hp"]
        entity.hp += deltas["max_hp"]
        entity.max_ap += deltas["max_ap"]
        entity.ap += deltas["max_ap"]
        entity.ac += deltas["ac"]
        entity.skill_points -= self.spent

        logger.info("Level-up allocation confirmed", entity_id=entity.id, **deltas)
        self.available = entity.skill_points
        self.reset()
        return deltas


__all__ = [
    "exp_threshold",
    "next_level_exp",
    "ExpAward",
    "award_exp",
    "LevelUpAllocation",
]
