"""Entity model for actors on the map.

An Entity is a mutable record owned by the game state: movement, combat,
levelling and inventory actions mutate it in place. Assignment is
validated, so an out-of-range value (negative HP, AP above its maximum)
fails immediately instead of drifting silently.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wasteland_tactics.models.enums import EntityType, Facing
from wasteland_tactics.models.grid import Point
from wasteland_tactics.models.items import Equipment, Inventory


class Entity(BaseModel):
    """A combatant or actor.

    Attributes:
        id: Unique, stable identifier.
        type: Player, enemy or NPC.
        name: Display name.
        grid_x: Column of the occupied cell.
        grid_y: Row of the occupied cell.
        facing: 8-way facing, unset until the entity first moves.
        hp: Current hit points (0..max_hp).
        max_hp: Maximum hit points.
        ap: Current action points (0..max_ap).
        max_ap: Action points restored at a turn hand-off.
        ac: Live armor class, including equipped armor.
        level: Character level.
        exp: Accumulated experience.
        next_level_exp: Experience needed for the next level.
        skill_points: Unallocated level-up points.
        exp_value: Experience granted to the player on this entity's death.
        equipment: Equipped weapon and armor.
        inventory: Carried items.
        detection_range: Manhattan radius at which an enemy notices the player.
        sprite_url: Presentation-only sprite reference; never read by the engine.
        is_moving: Whether a walk animation is in progress.

    Example:
        >>> roach = Entity(id="enemy-1", type="enemy", name="Radroach",
        ...                grid_x=12, grid_y=12, hp=40, max_hp=40,
        ...                ap=8, max_ap=8, ac=2, detection_range=5)
        >>> roach.position
        Point(x=12, y=12)
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(min_length=1)
    type: EntityType
    name: str

    grid_x: int = Field(ge=0)
    grid_y: int = Field(ge=0)
    facing: Facing | None = None

    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    ap: int = Field(ge=0)
    max_ap: int = Field(ge=0)
    ac: int = 0

    level: int = Field(default=1, ge=1)
    exp: int = Field(default=0, ge=0)
    next_level_exp: int = Field(default=1000, ge=1)
    skill_points: int = Field(default=0, ge=0)
    exp_value: int = Field(default=0, ge=0)

    equipment: Equipment | None = None
    inventory: Inventory | None = None

    detection_range: int | None = Field(default=None, ge=0)
    sprite_url: str | None = None
    is_moving: bool = False

    @model_validator(mode="after")
    def validate_pools(self) -> "Entity":
        """Keep HP and AP within their maximums."""
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) exceeds max_hp ({self.max_hp})")
        if self.ap > self.max_ap:
            raise ValueError(f"ap ({self.ap}) exceeds max_ap ({self.max_ap})")
        return self

    @property
    def position(self) -> Point:
        """Cell the entity occupies."""
        return Point(x=self.grid_x, y=self.grid_y)

    @property
    def is_player(self) -> bool:
        return self.type == EntityType.PLAYER

    @property
    def is_enemy(self) -> bool:
        return self.type == EntityType.ENEMY

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def place(self, point: Point, facing: Facing | None = None) -> None:
        """Move the entity to ``point``, optionally turning it."""
        self.grid_x = point.x
        self.grid_y = point.y
        if facing is not None:
            self.facing = facing

    def take_damage(self, amount: int) -> int:
        """Subtract damage, flooring HP at zero.

        Args:
            amount: Damage dealt.

        Returns:
            The HP actually lost.
        """
        lost = min(self.hp, max(0, amount))
        self.hp -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restore HP up to the maximum.

        Returns:
            The HP actually restored.
        """
        restored = min(self.max_hp - self.hp, max(0, amount))
        self.hp += restored
        return restored

    def spend_ap(self, amount: int) -> None:
        """Deduct action points; callers check affordability first."""
        self.ap -= amount

    def restore_ap(self) -> None:
        """Refill action points to the maximum."""
        self.ap = self.max_ap

    def ensure_equipment(self) -> Equipment:
        """Return the equipment slots, creating empty ones on first use."""
        if self.equipment is None:
            self.equipment = Equipment()
        return self.equipment

    def ensure_inventory(self, max_weight: float) -> Inventory:
        """Return the inventory, creating an empty one on first use."""
        if self.inventory is None:
            self.inventory = Inventory(max_weight=max_weight)
        return self.inventory


__all__ = ["Entity"]
