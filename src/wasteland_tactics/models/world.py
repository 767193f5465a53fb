"""Game state aggregate and the map objects it owns.

``GameState`` is the single source of truth of a session. It is owned by
exactly one writer (the ``GameLoop``) and mutated in place by the engine
functions. Besides the simulation fields it carries the observable side
effects the presentation layer renders: the HUD log, the hover path
preview, active visual effects and the screen-shake intensity.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wasteland_tactics.core.constants import DROPPED_ITEM_PREFIX, EFFECT_ID_PREFIX, PLAYER_ID
from wasteland_tactics.core.exceptions import (
    EntityNotFoundError,
    InvalidGameStateError,
    ObjectNotFoundError,
)
from wasteland_tactics.core.logging import get_logger
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import EffectKind, EntityType, GameMode, ObjectType, Turn
from wasteland_tactics.models.grid import Point, cell_key
from wasteland_tactics.models.items import WorldItem


logger = get_logger(__name__)


# =============================================================================
# Map Objects
# =============================================================================


class MapObject(BaseModel):
    """An interactable object on the map.

    Doors are the only kind. A closed door blocks movement whatever its
    lock state; the lock only gates opening it.

    Attributes:
        id: Unique object id.
        type: Object kind.
        name: Display name.
        grid_x: Column of the object.
        grid_y: Row of the object.
        is_open: Whether the door is open.
        is_locked: Whether the door is locked.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(min_length=1)
    type: ObjectType = ObjectType.DOOR
    name: str
    grid_x: int = Field(ge=0)
    grid_y: int = Field(ge=0)
    is_open: bool = False
    is_locked: bool = False

    @property
    def position(self) -> Point:
        return Point(x=self.grid_x, y=self.grid_y)

    @property
    def blocks_movement(self) -> bool:
        """Closed doors are obstacles."""
        return self.type == ObjectType.DOOR and not self.is_open


class EffectTrigger(BaseModel):
    """Notification that a visual effect should play on a cell."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: EffectKind
    x: int
    y: int


class VisualEffect(BaseModel):
    """An active visual effect, removed once its duration elapses."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    kind: EffectKind
    x: int
    y: int
    start: float = Field(description="Scheduler time at which the effect started")
    duration: float = Field(gt=0)


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """Aggregate root of a game session.

    Attributes:
        entities: Living roster; the player stays here even at 0 HP.
        walls: Static obstacle keys (``"x,y"``).
        objects: Interactable map objects.
        world_items: Items lying on the map.
        turn: Side owning the current combat turn.
        mode: Wander or combat.
        grid_size: Width and height of the map.
        logs: HUD log, newest first.
        max_log_entries: Length cap of ``logs``.
        selected_tile: Hovered cell, if any.
        path: Path preview towards ``selected_tile``.
        effects: Active visual effects.
        shake_intensity: Current screen-shake intensity.
        generation: Token bumped on every mode or turn transition.
        removed_ids: Ids of entities removed from the roster.
        drop_counter: Sequence used to mint dropped-item ids.
        effect_counter: Sequence used to mint effect ids.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    entities: list[Entity] = Field(default_factory=list)
    walls: set[str] = Field(default_factory=set)
    objects: list[MapObject] = Field(default_factory=list)
    world_items: list[WorldItem] = Field(default_factory=list)
    turn: Turn = Turn.PLAYER
    mode: GameMode = GameMode.WANDER
    grid_size: int = Field(default=20, ge=1)

    logs: list[str] = Field(default_factory=list)
    max_log_entries: int = Field(default=50, ge=1)
    selected_tile: Point | None = None
    path: list[Point] = Field(default_factory=list)
    effects: list[VisualEffect] = Field(default_factory=list)
    shake_intensity: int = Field(default=0, ge=0)

    generation: int = 0
    removed_ids: set[str] = Field(default_factory=set)
    drop_counter: int = 0
    effect_counter: int = 0

    @model_validator(mode="after")
    def validate_roster(self) -> "GameState":
        """Ensure entity ids are unique and exactly one player is present."""
        ids = [entity.id for entity in self.entities]
        duplicates = sorted({entity_id for entity_id in ids if ids.count(entity_id) > 1})
        if duplicates:
            msg = f"Duplicate entity ids in roster: {duplicates}"
            raise ValueError(msg)
        players = [entity for entity in self.entities if entity.type == EntityType.PLAYER]
        if len(players) != 1 or players[0].id != PLAYER_ID:
            msg = f"Roster must hold exactly one player with id '{PLAYER_ID}'"
            raise ValueError(msg)
        return self

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def find_entity(self, entity_id: str) -> Entity | None:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def get_entity(self, entity_id: str) -> Entity:
        """Return a living entity by id.

        Raises:
            EntityNotFoundError: If the id is not in the roster.
        """
        entity = self.find_entity(entity_id)
        if entity is None:
            raise EntityNotFoundError(
                "Entity is not in the roster",
                entity_id=entity_id,
                details={"removed": entity_id in self.removed_ids},
            )
        return entity

    @property
    def player(self) -> Entity:
        """The player entity.

        Raises:
            EntityNotFoundError: If the state has no player.
        """
        return self.get_entity(PLAYER_ID)

    @property
    def enemies(self) -> list[Entity]:
        """Enemies currently in the roster."""
        return [entity for entity in self.entities if entity.type == EntityType.ENEMY]

    @property
    def is_player_dead(self) -> bool:
        return not self.player.is_alive

    def entity_at(self, point: Point) -> Entity | None:
        """Return the entity standing on ``point``, if any."""
        for entity in self.entities:
            if entity.grid_x == point.x and entity.grid_y == point.y:
                return entity
        return None

    def enemy_at(self, point: Point) -> Entity | None:
        for entity in self.enemies:
            if entity.grid_x == point.x and entity.grid_y == point.y:
                return entity
        return None

    def object_at(self, point: Point) -> MapObject | None:
        for obj in self.objects:
            if obj.grid_x == point.x and obj.grid_y == point.y:
                return obj
        return None

    def get_object(self, object_id: str) -> MapObject:
        """Return a map object by id.

        Raises:
            ObjectNotFoundError: If no object has that id.
        """
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        raise ObjectNotFoundError("Map object does not exist", object_id=object_id)

    def world_item_at(self, point: Point) -> WorldItem | None:
        for world_item in self.world_items:
            if world_item.grid_x == point.x and world_item.grid_y == point.y:
                return world_item
        return None

    def obstacles(self) -> set[str]:
        """Walls plus the cells of closed doors, computed from current state."""
        blocked = set(self.walls)
        blocked.update(cell_key(obj.grid_x, obj.grid_y) for obj in self.objects if obj.blocks_movement)
        return blocked

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    def add_entity(self, entity: Entity) -> None:
        """Add an entity to the roster.

        Raises:
            InvalidGameStateError: If the id is already present or was removed.
        """
        if entity.id in self.removed_ids:
            raise InvalidGameStateError(
                "Removed entity ids cannot reappear",
                details={"entity_id": entity.id},
            )
        if self.find_entity(entity.id) is not None:
            raise InvalidGameStateError(
                "Duplicate entity id",
                details={"entity_id": entity.id},
            )
        self.entities.append(entity)

    def remove_entity(self, entity_id: str) -> Entity:
        """Remove a dead entity from the roster.

        Raises:
            InvalidGameStateError: If asked to remove the player.
            EntityNotFoundError: If the id is not in the roster.
        """
        if entity_id == PLAYER_ID:
            raise InvalidGameStateError(
                "The player is never removed from the roster",
                details={"entity_id": entity_id},
            )
        entity = self.get_entity(entity_id)
        self.entities.remove(entity)
        self.removed_ids.add(entity_id)
        logger.debug("Entity removed", entity_id=entity_id, name=entity.name)
        return entity

    # -------------------------------------------------------------------------
    # Observable side effects
    # -------------------------------------------------------------------------

    def log(self, message: str) -> None:
        """Prepend a HUD log line, keeping at most ``max_log_entries``."""
        self.logs.insert(0, message)
        del self.logs[self.max_log_entries :]

    def bump_generation(self) -> int:
        """Invalidate deferred work scheduled against the previous mode or turn."""
        self.generation += 1
        return self.generation

    def next_drop_id(self) -> str:
        self.drop_counter += 1
        return f"{DROPPED_ITEM_PREFIX}{self.drop_counter}"

    def next_effect_id(self) -> str:
        self.effect_counter += 1
        return f"{EFFECT_ID_PREFIX}{self.effect_counter}"


__all__ = [
    "MapObject",
    "EffectTrigger",
    "VisualEffect",
    "GameState",
]
