"""Pydantic V2 data model for the Wasteland Tactics simulation.

Exports:
    Enums: EntityType, Facing, GameMode, Turn, ItemCategory, EffectKind,
        DoorAction, ObjectType, StatKind.
    Grid: Point, cell_key.
    Items: HealEffect, DamageRange, Item, Equipment, Inventory, WorldItem.
    Entities: Entity.
    World: MapObject, EffectTrigger, VisualEffect, GameState.
    Progression: exp_threshold, next_level_exp, award_exp, LevelUpAllocation.
    Catalog: create_item, create_initial_state.
"""

from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from wasteland_tactics.models.enums import (
    DoorAction,
    EffectKind,
    EntityType,
    Facing,
    GameMode,
    ItemCategory,
    ObjectType,
    StatKind,
    Turn,
)

# =============================================================================
# Value Types & Items
# =============================================================================
from wasteland_tactics.models.grid import Point, cell_key
from wasteland_tactics.models.items import (
    DamageRange,
    Equipment,
    HealEffect,
    Inventory,
    Item,
    WorldItem,
)

# =============================================================================
# Entities & World
# =============================================================================
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.world import EffectTrigger, GameState, MapObject, VisualEffect

# =============================================================================
# Progression & Catalog
# =============================================================================
from wasteland_tactics.models.progression import (
    ExpAward,
    LevelUpAllocation,
    award_exp,
    exp_threshold,
    next_level_exp,
)
from wasteland_tactics.models.catalog import create_initial_state, create_item


__all__ = [
    # Enums
    "DoorAction",
    "EffectKind",
    "EntityType",
    "Facing",
    "GameMode",
    "ItemCategory",
    "ObjectType",
    "StatKind",
    "Turn",
    # Grid
    "Point",
    "cell_key",
    # Items
    "DamageRange",
    "Equipment",
    "HealEffect",
    "Inventory",
    "Item",
    "WorldItem",
    # Entities & world
    "Entity",
    "EffectTrigger",
    "GameState",
    "MapObject",
    "VisualEffect",
    # Progression
    "ExpAward",
    "LevelUpAllocation",
    "award_exp",
    "exp_threshold",
    "next_level_exp",
    # Catalog
    "create_initial_state",
    "create_item",
]
