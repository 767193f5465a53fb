"""Enumeration types for Wasteland Tactics.

These enums are the vocabulary shared by the data model and the engine:
who an entity is, which way it faces, which mode and turn the game is in,
what kind of item something is and which notification an action emits.
"""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Kind of actor on the map."""

    PLAYER = "player"
    ENEMY = "enemy"
    NPC = "npc"


class Facing(StrEnum):
    """8-way compass facing used by the isometric sprites.

    On screen the grid's +x axis points south-east and +y points
    south-west, so orthogonal grid steps map onto diagonal compass
    directions.
    """

    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"


class GameMode(StrEnum):
    """Top-level simulation mode."""

    WANDER = "wander"
    """Real-time exploration: free movement, no AP economy."""

    COMBAT = "combat"
    """Turn-based: movement and attacks cost AP."""


class Turn(StrEnum):
    """Which side owns the current combat turn."""

    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def other(self) -> Turn:
        """Return the side that acts next."""
        return Turn.ENEMY if self is Turn.PLAYER else Turn.PLAYER


class ItemCategory(StrEnum):
    """Item categories; each one enables different fields and actions."""

    WEAPON = "weapon"
    ARMOR = "armor"
    CHEM = "chem"
    QUEST = "quest"
    MISC = "misc"

    @property
    def is_equippable(self) -> bool:
        """Check whether items of this category go into an equipment slot."""
        return self in (ItemCategory.WEAPON, ItemCategory.ARMOR)


class EffectKind(StrEnum):
    """Visual effect triggers emitted by attacks."""

    HIT = "hit"
    MISS = "miss"


class DoorAction(StrEnum):
    """Contextual actions available on a door."""

    TOGGLE = "toggle"
    LOCK = "lock"
    PICKLOCK = "picklock"


class ObjectType(StrEnum):
    """Kind of interactable map object."""

    DOOR = "door"


class StatKind(StrEnum):
    """Stats that level-up points can be allocated to."""

    HP = "hp"
    AP = "ap"
    AC = "ac"


__all__ = [
    "EntityType",
    "Facing",
    "GameMode",
    "Turn",
    "ItemCategory",
    "EffectKind",
    "DoorAction",
    "ObjectType",
    "StatKind",
]
