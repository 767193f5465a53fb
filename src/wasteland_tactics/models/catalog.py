"""Static item and scenario definitions.

The dictionaries below are the authoritative data for the reference
wasteland map: item stats, the starting roster, the wall layout, doors
and loot. Factories build fresh model instances so that no two sessions
share mutable state.
"""

from __future__ import annotations

from typing import Any

from wasteland_tactics.core.config import Settings, get_settings
from wasteland_tactics.core.constants import PLAYER_ID
from wasteland_tactics.core.exceptions import ItemNotFoundError
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import EntityType, Facing, ItemCategory, ObjectType
from wasteland_tactics.models.items import Equipment, Inventory, Item, WorldItem
from wasteland_tactics.models.world import GameState, MapObject


# =============================================================================
# Items
# =============================================================================

ITEMS: dict[str, dict[str, Any]] = {
    "10mm-pistol": {
        "name": "10mm Pistol",
        "description": "A reliable semi-automatic handgun.",
        "category": ItemCategory.WEAPON,
        "weight": 3.0,
        "value": 250,
        "damage": {"min": 5, "max": 12},
        "ap_cost": 5,
    },
    "leather-armor": {
        "name": "Leather Armor",
        "description": "Tough cured leather provides basic protection.",
        "category": ItemCategory.ARMOR,
        "weight": 15.0,
        "value": 700,
        "ac_bonus": 10,
    },
    "stimpak": {
        "name": "Stimpak",
        "description": "A healing syringe that restores HP.",
        "category": ItemCategory.CHEM,
        "weight": 0.1,
        "value": 100,
        "stackable": True,
        "effect": "heal:30",
    },
    "water-chip": {
        "name": "Water Chip",
        "description": "A critical component for a Vault water purification system.",
        "category": ItemCategory.QUEST,
        "weight": 1.0,
        "value": 0,
    },
}


def create_item(item_id: str, quantity: int = 1) -> Item:
    """Create an item from its catalog id.

    Args:
        item_id: Catalog id (e.g. ``"stimpak"``).
        quantity: Stack size; only stackable items accept more than one.

    Returns:
        A new Item.

    Raises:
        ItemNotFoundError: If the id is not in the catalog.
    """
    if item_id not in ITEMS:
        raise ItemNotFoundError("Unknown catalog item", item_id=item_id)
    return Item(id=item_id, quantity=quantity, **ITEMS[item_id])


# =============================================================================
# Scenario
# =============================================================================

ENTITIES: list[dict[str, Any]] = [
    {
        "id": PLAYER_ID,
        "type": EntityType.PLAYER,
        "name": "Vault Dweller",
        "grid_x": 2,
        "grid_y": 2,
        "hp": 100,
        "max_hp": 100,
        "ap": 10,
        "max_ap": 10,
        "ac": 5,
        "facing": Facing.S,
    },
    {
        "id": "enemy-1",
        "type": EntityType.ENEMY,
        "name": "Radroach",
        "grid_x": 12,
        "grid_y": 12,
        "hp": 40,
        "max_hp": 40,
        "ap": 8,
        "max_ap": 8,
        "ac": 2,
        "detection_range": 5,
        "exp_value": 50,
    },
    {
        "id": "enemy-2",
        "type": EntityType.ENEMY,
        "name": "Feral Ghoul",
        "grid_x": 18,
        "grid_y": 4,
        "hp": 60,
        "max_hp": 60,
        "ap": 8,
        "max_ap": 8,
        "ac": 3,
        "detection_range": 6,
        "exp_value": 100,
    },
    {
        "id": "enemy-3",
        "type": EntityType.ENEMY,
        "name": "Super Mutant",
        "grid_x": 5,
        "grid_y": 18,
        "hp": 120,
        "max_hp": 120,
        "ap": 6,
        "max_ap": 6,
        "ac": 10,
        "detection_range": 4,
        "exp_value": 300,
    },
]

WALLS: tuple[str, ...] = (
    "4,4", "4,5", "4,6", "5,4", "6,4",
    "10,10", "10,11", "10,12", "11,10", "12,10",
    "15,5", "15,6", "15,7", "16,5", "17,5",
    # Building
    "7,7", "7,8", "7,9", "7,10", "7,11",
    "8,7", "9,7", "11,7", "12,7",
    "12,8", "12,9", "12,10", "12,11",
    "8,11", "9,11", "10,11", "11,11",
)

OBJECTS: list[dict[str, Any]] = [
    {
        "id": "door-1",
        "type": ObjectType.DOOR,
        "name": "Wooden Door",
        "grid_x": 10,
        "grid_y": 7,
        "is_open": False,
        "is_locked": True,
    },
]

WORLD_ITEMS: list[tuple[str, int, int, str]] = [
    ("world-item-1", 5, 5, "10mm-pistol"),
    ("world-item-2", 8, 8, "stimpak"),
]

STARTING_INVENTORY: tuple[str, ...] = ("stimpak",)

WELCOME_LOGS: tuple[str, ...] = (
    "Welcome to the Wasteland.",
    "Wander mode active.",
)


def create_initial_state(settings: Settings | None = None) -> GameState:
    """Build the reference scenario as a fresh game state.

    Args:
        settings: Settings to size the map and log; defaults to the singleton.

    Returns:
        A new GameState in wander mode with the player's turn pending.
    """
    settings = settings or get_settings()
    rules = settings.rules

    entities = [Entity(**data) for data in ENTITIES]
    player = entities[0]
    player.equipment = Equipment()
    player.inventory = Inventory(
        items=[create_item(item_id) for item_id in STARTING_INVENTORY],
        max_weight=rules.default_max_weight,
    )

    state = GameState(
        entities=entities,
        walls=set(WALLS),
        objects=[MapObject(**data) for data in OBJECTS],
        world_items=[
            WorldItem(id=wid, grid_x=x, grid_y=y, item=create_item(item_id))
            for wid, x, y, item_id in WORLD_ITEMS
        ],
        grid_size=rules.grid_size,
        max_log_entries=rules.max_log_entries,
    )
    for message in reversed(WELCOME_LOGS):
        state.log(message)
    return state


__all__ = [
    "ITEMS",
    "ENTITIES",
    "WALLS",
    "OBJECTS",
    "WORLD_ITEMS",
    "create_item",
    "create_initial_state",
]
