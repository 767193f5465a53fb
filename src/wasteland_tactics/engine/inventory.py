"""Inventory and door actions.

Each action mutates the game state in place and returns an
``ActionResult``. Expected rejections (too far, too heavy, wrong item
category, locked door) leave the state untouched and are reported
through the result and the HUD log. Unknown ids raise.

Armor AC is folded into the wearer's live ``ac``: equipping adds the
armor's bonus, and unequipping, replacing or dropping it subtracts
exactly the same amount.
"""

from __future__ import annotations

from wasteland_tactics.core.config import RulesSettings, get_settings
from wasteland_tactics.core.constants import (
    MSG_CANNOT_DROP_QUEST,
    MSG_CANNOT_EQUIP,
    MSG_CANNOT_USE,
    MSG_DOOR_CANNOT_LOCK_OPEN,
    MSG_DOOR_CLOSED,
    MSG_DOOR_LOCKED,
    MSG_DOOR_LOCKED_NOW,
    MSG_DOOR_NOT_LOCKED,
    MSG_DOOR_OPENED,
    MSG_DOOR_UNLOCKED_NOW,
    MSG_DROPPED,
    MSG_EQUIPPED,
    MSG_PICKED_UP,
    MSG_PICKLOCK_FAILURE,
    MSG_PICKLOCK_SUCCESS,
    MSG_TOO_FAR_PICKUP,
    MSG_TOO_HEAVY,
    MSG_UNEQUIPPED,
    MSG_USED_HEAL,
)
from wasteland_tactics.core.exceptions import ItemNotFoundError
from wasteland_tactics.core.logging import get_logger
from wasteland_tactics.engine.dice import DiceRoller
from wasteland_tactics.engine.geometry import euclidean_distance
from wasteland_tactics.engine.results import ActionResult, rejected
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import DoorAction, ItemCategory
from wasteland_tactics.models.items import HealEffect, Item, WorldItem
from wasteland_tactics.models.world import GameState


logger = get_logger(__name__)


# =============================================================================
# Pick Up & Drop
# =============================================================================


def pick_up(
    state: GameState,
    entity_id: str,
    world_item_id: str,
    *,
    rules: RulesSettings | None = None,
) -> ActionResult:
    """Move a world item into an entity's inventory.

    The item must lie within ``pickup_range`` (Euclidean) and fit the
    remaining carry capacity. Stackable items merge into an existing
    stack of the same id.

    Raises:
        EntityNotFoundError: If the entity is not in the roster.
        ItemNotFoundError: If no world item has that id.
    """
    rules = rules or get_settings().rules
    entity = state.get_entity(entity_id)
    world_item = _get_world_item(state, world_item_id)

    if euclidean_distance(entity.position, world_item.position) > rules.pickup_range:
        return rejected(
            state,
            "pick_up",
            MSG_TOO_FAR_PICKUP,
            reason="too_far",
            world_item_id=world_item_id,
        )

    inventory = entity.ensure_inventory(rules.default_max_weight)
    if not inventory.can_carry(world_item.item):
        return rejected(
            state,
            "pick_up",
            MSG_TOO_HEAVY,
            reason="too_heavy",
            carried=inventory.total_weight,
            incoming=world_item.item.total_weight,
            max_weight=inventory.max_weight,
        )

    inventory.add(world_item.item)
    state.world_items.remove(world_item)
    result = ActionResult(action="pick_up", details={"item_id": world_item.item.id})
    result.emit(state, MSG_PICKED_UP.format(item=world_item.item.name))
    logger.debug("Item picked up", entity_id=entity_id, item_id=world_item.item.id)
    return result


def drop(state: GameState, entity_id: str, item_id: str) -> ActionResult:
    """Drop a whole stack onto the entity's cell.

    Quest items cannot be dropped. An equipped item is unequipped first,
    reversing its AC bonus.

    Raises:
        ItemNotFoundError: If the entity does not carry the item.
    """
    entity = state.get_entity(entity_id)
    item = _carried_item(entity, item_id)

    if item.category == ItemCategory.QUEST:
        return rejected(state, "drop", MSG_CANNOT_DROP_QUEST.format(item=item.name), item_id=item_id)

    _clear_slot(entity, item_id)
    stack = entity.inventory.remove_stack(item_id, owner_id=entity.id)  # type: ignore[union-attr]
    world_item = WorldItem(
        id=state.next_drop_id(),
        grid_x=entity.grid_x,
        grid_y=entity.grid_y,
        item=stack,
    )
    state.world_items.append(world_item)

    result = ActionResult(action="drop", details={"item_id": item_id, "world_item_id": world_item.id})
    result.emit(state, MSG_DROPPED.format(item=item.name))
    return result


# =============================================================================
# Equip & Use
# =============================================================================


def equip(state: GameState, entity_id: str, item_id: str) -> ActionResult:
    """Toggle an item in its equipment slot.

    Equipping the item already in the slot unequips it. Equipping a
    different item replaces the slot, reversing the previous armor's
    bonus before applying the new one.

    Raises:
        ItemNotFoundError: If the entity does not carry the item.
    """
    entity = state.get_entity(entity_id)
    item = _carried_item(entity, item_id)
    if not item.category.is_equippable:
        return rejected(state, "equip", MSG_CANNOT_EQUIP.format(item=item.name), item_id=item_id)

    equipment = entity.ensure_equipment()
    result = ActionResult(action="equip", details={"item_id": item_id})

    if item.category == ItemCategory.WEAPON:
        if equipment.weapon is not None and equipment.weapon.id == item.id:
            equipment.weapon = None
            result.details["equipped"] = False
            result.emit(state, MSG_UNEQUIPPED.format(item=item.name))
        else:
            equipment.weapon = item
            result.details["equipped"] = True
            result.emit(state, MSG_EQUIPPED.format(item=item.name))
        return result

    if equipment.armor is not None and equipment.armor.id == item.id:
        entity.ac -= equipment.armor.armor_bonus
        equipment.armor = None
        result.details["equipped"] = False
        result.emit(state, MSG_UNEQUIPPED.format(item=item.name))
        return result

    if equipment.armor is not None:
        entity.ac -= equipment.armor.armor_bonus
    equipment.armor = item
    entity.ac += item.armor_bonus
    result.details["equipped"] = True
    result.emit(state, MSG_EQUIPPED.format(item=item.name))
    logger.debug("Armor equipped", entity_id=entity_id, item_id=item_id, ac=entity.ac)
    return result


def use(state: GameState, entity_id: str, item_id: str) -> ActionResult:
    """Consume one unit of a chem and apply its effect.

    Only chems can be used. Healing is capped at the entity's max HP.

    Raises:
        ItemNotFoundError: If the entity does not carry the item.
    """
    entity = state.get_entity(entity_id)
    item = _carried_item(entity, item_id)
    if item.category != ItemCategory.CHEM or item.effect is None:
        return rejected(state, "use", MSG_CANNOT_USE.format(item=item.name), item_id=item_id)

    entity.inventory.remove_one(item_id, owner_id=entity.id)  # type: ignore[union-attr]
    result = ActionResult(action="use", details={"item_id": item_id})

    effect = item.effect
    if isinstance(effect, HealEffect):
        restored = entity.heal(effect.amount)
        result.details["restored"] = restored
        result.emit(state, MSG_USED_HEAL.format(item=item.name, amount=effect.amount))
    return result


# =============================================================================
# Doors
# =============================================================================


def door_action(
    state: GameState,
    object_id: str,
    action: DoorAction | str,
    *,
    roller: DiceRoller,
    rules: RulesSettings | None = None,
) -> ActionResult:
    """Apply a contextual action to a door.

    ``toggle`` opens or closes the door and is refused while it is closed
    and locked. ``lock`` locks or unlocks a closed door and is refused
    while it is open. ``picklock`` unlocks with ``picklock_chance``
    percent probability; a failure leaves the door locked.

    Raises:
        ObjectNotFoundError: If no object has that id.
    """
    rules = rules or get_settings().rules
    door = state.get_object(object_id)
    action = DoorAction(action)
    result = ActionResult(action=f"door_{action}", details={"object_id": object_id})

    if action == DoorAction.TOGGLE:
        if door.is_locked and not door.is_open:
            return rejected(state, result.action, MSG_DOOR_LOCKED.format(door=door.name))
        door.is_open = not door.is_open
        template = MSG_DOOR_OPENED if door.is_open else MSG_DOOR_CLOSED
        result.emit(state, template.format(door=door.name))

    elif action == DoorAction.LOCK:
        if door.is_open:
            return rejected(state, result.action, MSG_DOOR_CANNOT_LOCK_OPEN.format(door=door.name))
        door.is_locked = not door.is_locked
        template = MSG_DOOR_LOCKED_NOW if door.is_locked else MSG_DOOR_UNLOCKED_NOW
        result.emit(state, template.format(door=door.name))

    else:
        if not door.is_locked:
            return rejected(state, result.action, MSG_DOOR_NOT_LOCKED.format(door=door.name))
        if roller.chance(rules.picklock_chance):
            door.is_locked = False
            result.emit(state, MSG_PICKLOCK_SUCCESS.format(door=door.name))
        else:
            result.success = False
            result.emit(state, MSG_PICKLOCK_FAILURE.format(door=door.name))

    logger.debug(
        "Door action",
        object_id=object_id,
        action=str(action),
        is_open=door.is_open,
        is_locked=door.is_locked,
    )
    return result


# =============================================================================
# Helpers
# =============================================================================


def _get_world_item(state: GameState, world_item_id: str) -> WorldItem:
    for world_item in state.world_items:
        if world_item.id == world_item_id:
            return world_item
    raise ItemNotFoundError("World item does not exist", item_id=world_item_id)


def _carried_item(entity: Entity, item_id: str) -> Item:
    if entity.inventory is None:
        raise ItemNotFoundError("Entity has no inventory", item_id=item_id, owner_id=entity.id)
    return entity.inventory.get(item_id, owner_id=entity.id)


def _clear_slot(entity: Entity, item_id: str) -> None:
    """Empty whichever slot holds ``item_id``, reversing armor AC."""
    if entity.equipment is None:
        return
    if entity.equipment.weapon is not None and entity.equipment.weapon.id == item_id:
        entity.equipment.weapon = None
    if entity.equipment.armor is not None and entity.equipment.armor.id == item_id:
        entity.ac -= entity.equipment.armor.armor_bonus
        entity.equipment.armor = None


__all__ = [
    "pick_up",
    "drop",
    "equip",
    "use",
    "door_action",
]
