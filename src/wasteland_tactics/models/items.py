"""Item, equipment and inventory models.

Items are immutable value objects; stacks are represented by the
``quantity`` field and changed with ``model_copy``. An inventory is owned
by exactly one entity and enforces its weight limit when items are added
through ``can_carry``/``add``, never retroactively.

Item effects are decided when the item is loaded: a legacy descriptor
string such as ``"heal:30"`` is parsed into a typed ``HealEffect`` during
validation, so the engine never parses strings at use time.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from wasteland_tactics.core.exceptions import EffectDescriptorError, ItemNotFoundError
from wasteland_tactics.models.enums import ItemCategory
from wasteland_tactics.models.grid import Point


# =============================================================================
# Effects
# =============================================================================


class HealEffect(BaseModel):
    """Restore hit points, capped at the user's maximum.

    Attributes:
        kind: Discriminator tag, always ``"heal"``.
        amount: Hit points restored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["heal"] = "heal"
    amount: int = Field(gt=0, description="Hit points restored")

    @classmethod
    def parse(cls, descriptor: str) -> HealEffect:
        """Parse a ``heal:<amount>`` descriptor.

        Args:
            descriptor: The descriptor string.

        Returns:
            The parsed effect.

        Raises:
            EffectDescriptorError: If the descriptor is malformed.
        """
        kind, sep, raw_amount = descriptor.partition(":")
        if kind.strip() != "heal" or not sep:
            raise EffectDescriptorError(
                f"Unknown effect descriptor: {descriptor!r}",
                descriptor=descriptor,
            )
        try:
            amount = int(raw_amount)
        except ValueError as exc:
            raise EffectDescriptorError(
                f"Heal amount is not an integer: {raw_amount!r}",
                descriptor=descriptor,
            ) from exc
        if amount <= 0:
            raise EffectDescriptorError(
                f"Heal amount must be positive, got {amount}",
                descriptor=descriptor,
            )
        return cls(amount=amount)

    @property
    def descriptor(self) -> str:
        """Serialize back to the ``heal:<amount>`` form."""
        return f"heal:{self.amount}"


# =============================================================================
# Items
# =============================================================================


class DamageRange(BaseModel):
    """Inclusive damage range of a weapon."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min: int = Field(ge=0, description="Minimum damage")
    max: int = Field(ge=0, description="Maximum damage")

    @model_validator(mode="after")
    def validate_order(self) -> "DamageRange":
        if self.min > self.max:
            raise ValueError(f"Damage min ({self.min}) exceeds max ({self.max})")
        return self


class Item(BaseModel):
    """An inventory item.

    Equality for stacking purposes is by ``id`` only; two stacks of the
    same id merge regardless of their quantities.

    Attributes:
        id: Catalog id shared by every copy of the item.
        name: Display name.
        category: Item category.
        weight: Weight of a single unit.
        value: Trade value of a single unit.
        quantity: Units in this stack.
        stackable: Whether copies merge into one stack.
        damage: Weapon damage range.
        ap_cost: Weapon attack cost in AP.
        ac_bonus: Armor class granted while equipped.
        effect: Effect applied when a chem is used.
        description: Optional flavour text.

    Example:
        >>> stim = Item(id="stimpak", name="Stimpak", category="chem",
        ...             weight=0.1, value=100, effect="heal:30")
        >>> stim.effect.amount
        30
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, description="Catalog id")
    name: str = Field(min_length=1, description="Display name")
    category: ItemCategory
    weight: float = Field(ge=0, description="Weight per unit")
    value: int = Field(default=0, ge=0, description="Value per unit")
    quantity: int = Field(default=1, ge=1, description="Units in this stack")
    stackable: bool = False
    damage: DamageRange | None = None
    ap_cost: int | None = Field(default=None, ge=0)
    ac_bonus: int | None = None
    effect: HealEffect | None = None
    description: str = ""

    @field_validator("effect", mode="before")
    @classmethod
    def parse_effect_descriptor(cls, value: Any) -> Any:
        """Turn a ``"heal:<n>"`` string into a typed effect at load time."""
        if isinstance(value, str):
            return HealEffect.parse(value)
        return value

    @model_validator(mode="after")
    def validate_stack(self) -> "Item":
        if self.quantity > 1 and not self.stackable:
            raise ValueError(f"Item {self.id!r} is not stackable but has quantity {self.quantity}")
        return self

    @property
    def total_weight(self) -> float:
        """Weight of the whole stack (unit weight times quantity)."""
        return self.weight * self.quantity

    @property
    def armor_bonus(self) -> int:
        """AC granted while equipped; zero for items without a bonus."""
        return self.ac_bonus or 0

    def with_quantity(self, quantity: int) -> Item:
        """Return a copy of this stack holding ``quantity`` units."""
        return self.model_copy(update={"quantity": quantity})


# =============================================================================
# Equipment & Inventory
# =============================================================================


class Equipment(BaseModel):
    """Equipment slots of an entity: one weapon and one armor at most."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    weapon: Item | None = None
    armor: Item | None = None

    def is_equipped(self, item_id: str) -> bool:
        """Check whether an item id occupies either slot."""
        return any(slot is not None and slot.id == item_id for slot in (self.weapon, self.armor))


class Inventory(BaseModel):
    """Carried items of a single entity.

    Attributes:
        items: Item stacks; order is not significant.
        max_weight: Carry capacity.
    """

    model_config = ConfigDict(extra="forbid")

    items: list[Item] = Field(default_factory=list)
    max_weight: float = Field(default=150.0, ge=0)

    @property
    def total_weight(self) -> float:
        """Sum of ``weight * quantity`` over every stack."""
        return sum(item.total_weight for item in self.items)

    def can_carry(self, item: Item) -> bool:
        """Check whether adding ``item`` keeps the inventory within capacity."""
        return self.total_weight + item.total_weight <= self.max_weight

    def find(self, item_id: str) -> Item | None:
        """Return the stack with the given id, or None."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get(self, item_id: str, *, owner_id: str | None = None) -> Item:
        """Return the stack with the given id.

        Raises:
            ItemNotFoundError: If no such stack is carried.
        """
        item = self.find(item_id)
        if item is None:
            raise ItemNotFoundError(
                "Item is not in the inventory",
                item_id=item_id,
                owner_id=owner_id,
            )
        return item

    def add(self, item: Item) -> None:
        """Add a stack, merging into an existing stack of the same id when stackable.

        The weight limit is not checked here; callers use ``can_carry`` first.
        """
        if item.stackable:
            for index, existing in enumerate(self.items):
                if existing.id == item.id:
                    self.items[index] = existing.with_quantity(existing.quantity + item.quantity)
                    return
        self.items.append(item)

    def remove_one(self, item_id: str, *, owner_id: str | None = None) -> Item:
        """Remove a single unit of a stack.

        Returns:
            The removed unit as an item of quantity 1.

        Raises:
            ItemNotFoundError: If no such stack is carried.
        """
        item = self.get(item_id, owner_id=owner_id)
        index = self.items.index(item)
        if item.quantity > 1:
            self.items[index] = item.with_quantity(item.quantity - 1)
        else:
            del self.items[index]
        return item.with_quantity(1)

    def remove_stack(self, item_id: str, *, owner_id: str | None = None) -> Item:
        """Remove a whole stack and return it.

        Raises:
            ItemNotFoundError: If no such stack is carried.
        """
        item = self.get(item_id, owner_id=owner_id)
        self.items.remove(item)
        return item


class WorldItem(BaseModel):
    """An item lying on a map cell, waiting to be picked up."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    grid_x: int = Field(ge=0)
    grid_y: int = Field(ge=0)
    item: Item

    @property
    def position(self) -> Point:
        """Cell the item lies on."""
        return Point(x=self.grid_x, y=self.grid_y)


__all__ = [
    "HealEffect",
    "DamageRange",
    "Item",
    "Equipment",
    "Inventory",
    "WorldItem",
]
