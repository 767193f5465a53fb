"""Mode and turn state machine.

States:
    wander: real-time exploration; movement is free.
    combat: turn-based; ``turn`` alternates between player and enemy and
        movement costs 1 AP per tile.

Transitions:
    wander -> combat: the player engages an enemy, or an enemy detects
        the player (Manhattan distance within its detection range).
    combat -> wander: no enemy remains after a combat action.
    player -> enemy: explicit end of the player's turn.
    enemy -> player: after every enemy has acted once.

Every transition bumps ``GameState.generation`` so that deferred work
scheduled against the previous state is discarded.

Each turn hand-off restores the AP of *every* entity, not only the side
about to act.
"""

from __future__ import annotations

from wasteland_tactics.core.config import RulesSettings, get_settings
from wasteland_tactics.core.constants import (
    MSG_COMBAT_INITIATED,
    MSG_ENEMY_HIT,
    MSG_ENEMY_MISS,
    MSG_ENEMY_TURN,
    MSG_NOT_ENOUGH_AP_MOVE,
    MSG_NOT_YOUR_TURN,
    MSG_PLAYER_DEAD,
    MSG_PLAYER_TURN,
)
from wasteland_tactics.core.exceptions import InvalidGameStateError
from wasteland_tactics.core.logging import get_logger
from wasteland_tactics.engine.combat import hit_chance, strike
from wasteland_tactics.engine.dice import DiceRoller
from wasteland_tactics.engine.geometry import facing_for_step, manhattan_distance
from wasteland_tactics.engine.pathfinding import find_path
from wasteland_tactics.engine.results import ActionResult, rejected
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import EffectKind, GameMode, Turn
from wasteland_tactics.models.grid import Point
from wasteland_tactics.models.world import EffectTrigger, GameState


logger = get_logger(__name__)


# =============================================================================
# Mode Transitions
# =============================================================================


def start_combat(state: GameState) -> ActionResult:
    """Enter combat mode with the player to act.

    Starting combat while already in combat is a no-op returning an
    unsuccessful result.
    """
    result = ActionResult(action="start_combat")
    if state.mode == GameMode.COMBAT:
        result.success = False
        return result

    state.mode = GameMode.COMBAT
    state.turn = Turn.PLAYER
    state.path = []
    for entity in state.entities:
        entity.is_moving = False
    state.bump_generation()
    result.emit(state, MSG_COMBAT_INITIATED)
    logger.info("Combat started", generation=state.generation, enemies=len(state.enemies))
    return result


def check_detection(state: GameState, rules: RulesSettings | None = None) -> ActionResult | None:
    """Start combat if any enemy can see the player while wandering.

    Returns:
        The combat-start result, or None when nothing detected the player.
    """
    if state.mode != GameMode.WANDER:
        return None
    rules = rules or get_settings().rules
    player = state.player
    for enemy in state.enemies:
        radius = enemy.detection_range
        if radius is None:
            radius = rules.default_detection_range
        distance = manhattan_distance(enemy.position, player.position)
        if distance <= radius:
            logger.info("Player detected", enemy=enemy.id, distance=distance, radius=radius)
            result = start_combat(state)
            result.details["detected_by"] = enemy.id
            return result
    return None


def restore_action_points(state: GameState) -> None:
    """Refill the AP of every entity in the roster."""
    for entity in state.entities:
        entity.restore_ap()


# =============================================================================
# Turn Transitions
# =============================================================================


def end_player_turn(state: GameState) -> ActionResult:
    """Hand the turn to the enemies.

    Returns:
        A rejected result if not in combat or not the player's turn.
    """
    if state.mode != GameMode.COMBAT or state.turn != Turn.PLAYER:
        return rejected(state, "end_turn", MSG_NOT_YOUR_TURN)

    restore_action_points(state)
    state.turn = Turn.ENEMY
    state.path = []
    state.bump_generation()
    result = ActionResult(action="end_turn")
    result.emit(state, MSG_ENEMY_TURN)
    logger.info("Enemy turn started", generation=state.generation)
    return result


def advance_enemy_turn(
    state: GameState,
    *,
    roller: DiceRoller,
    rules: RulesSettings | None = None,
) -> ActionResult:
    """Let every enemy act once, then give the turn back to the player.

    An enemy adjacent to the player attacks with the enemy baseline hit
    chance and the fixed enemy damage range; enemy attacks do not spend
    AP. Any other enemy takes one orthogonal step toward the player
    (see ``step_toward``).

    Raises:
        InvalidGameStateError: If called outside the enemy turn.
    """
    if state.mode != GameMode.COMBAT or state.turn != Turn.ENEMY:
        raise InvalidGameStateError(
            "Enemy turn can only advance during combat on the enemy's turn",
            current_state=f"{state.mode}/{state.turn}",
            expected_states=["combat/enemy"],
        )
    rules = rules or get_settings().rules
    result = ActionResult(action="enemy_turn")
    player = state.player

    for enemy in list(state.enemies):
        if not player.is_alive:
            break
        if manhattan_distance(enemy.position, player.position) <= rules.melee_range:
            _enemy_attack(state, enemy, player, result, roller, rules)
        else:
            step_toward(state, enemy, player.position)

    restore_action_points(state)
    state.turn = Turn.PLAYER
    state.bump_generation()
    result.emit(state, MSG_PLAYER_TURN)
    logger.info("Player turn started", generation=state.generation, player_hp=player.hp)
    return result


def _enemy_attack(
    state: GameState,
    enemy: Entity,
    player: Entity,
    result: ActionResult,
    roller: DiceRoller,
    rules: RulesSettings,
) -> None:
    chance = hit_chance(
        enemy.ap,
        player.ac,
        rules.enemy_base_hit_chance,
        minimum=rules.min_hit_chance,
        maximum=rules.max_hit_chance,
    )
    outcome = strike(
        state,
        enemy,
        player,
        chance=chance,
        damage_min=rules.enemy_damage_min,
        damage_max=rules.enemy_damage_max,
        roller=roller,
    )
    kind = EffectKind.HIT if outcome.hit else EffectKind.MISS
    result.effects.append(EffectTrigger(kind=kind, x=player.grid_x, y=player.grid_y))
    if outcome.hit:
        result.emit(state, MSG_ENEMY_HIT.format(attacker=enemy.name, damage=outcome.damage))
    else:
        result.emit(state, MSG_ENEMY_MISS.format(attacker=enemy.name))
    if outcome.killed:
        result.emit(state, MSG_PLAYER_DEAD)
        logger.warning("Player killed", killer=enemy.id)


def step_toward(state: GameState, entity: Entity, target: Point) -> bool:
    """Move ``entity`` one orthogonal tile toward ``target``.

    The axis with the larger remaining delta is tried first, x on ties.
    If that cell is blocked (wall, closed door, out of bounds or occupied)
    the other axis is tried; if both are blocked the entity stays.

    Returns:
        True if the entity moved.
    """
    dx = target.x - entity.grid_x
    dy = target.y - entity.grid_y
    step_x = ((dx > 0) - (dx < 0), 0)
    step_y = (0, (dy > 0) - (dy < 0))
    candidates = [step_x, step_y] if abs(dx) >= abs(dy) else [step_y, step_x]

    blocked = state.obstacles()
    for sx, sy in candidates:
        if (sx, sy) == (0, 0):
            continue
        cell = entity.position.offset(sx, sy)
        if not cell.in_bounds(state.grid_size) or cell.key in blocked:
            continue
        if state.entity_at(cell) is not None:
            continue
        entity.place(cell, facing_for_step(sx, sy, entity.facing))
        return True
    return False


# =============================================================================
# Movement
# =============================================================================


def preview_path(state: GameState, point: Point | None) -> list[Point]:
    """Store the hovered tile and the path a click on it would walk."""
    if point is None:
        state.selected_tile = None
        state.path = []
        return []
    path = find_path(state.player.position, point, state.obstacles(), state.grid_size)
    state.selected_tile = point
    state.path = path
    return path


def plan_move(state: GameState, entity_id: str, goal: Point) -> ActionResult:
    """Validate a move and pay for it.

    In wander mode movement is free. In combat only the player may move
    on the player's turn, and the whole path is paid up front (1 AP per
    tile) or rejected without any change.

    Returns:
        A result whose ``path`` holds the tiles to walk; an empty path
        with ``success=False`` when the goal is unreachable.
    """
    entity = state.get_entity(entity_id)
    path = find_path(entity.position, goal, state.obstacles(), state.grid_size)
    if not path:
        return ActionResult(action="move", success=False, details={"reason": "unreachable"})

    if state.mode == GameMode.COMBAT:
        if state.turn != Turn.PLAYER or not entity.is_player:
            return rejected(state, "move", MSG_NOT_YOUR_TURN)
        cost = len(path)
        if cost > entity.ap:
            return rejected(state, "move", MSG_NOT_ENOUGH_AP_MOVE, ap=entity.ap, cost=cost)
        entity.spend_ap(cost)
        state.path = []

    first = path[0]
    entity.facing = facing_for_step(first.x - entity.grid_x, first.y - entity.grid_y, entity.facing)
    entity.is_moving = True
    logger.debug("Move planned", entity_id=entity_id, goal=goal.key, steps=len(path), mode=state.mode)
    cost = len(path) if state.mode == GameMode.COMBAT else 0
    return ActionResult(action="move", path=path, details={"cost": cost})


def step_entity(state: GameState, entity_id: str, point: Point) -> None:
    """Commit one walked tile: position, facing and the walking flag."""
    entity = state.get_entity(entity_id)
    facing = facing_for_step(point.x - entity.grid_x, point.y - entity.grid_y, entity.facing)
    entity.place(point, facing)
    entity.is_moving = True


def stop_walking(state: GameState, entity_id: str) -> None:
    entity = state.find_entity(entity_id)
    if entity is not None:
        entity.is_moving = False


__all__ = [
    "start_combat",
    "check_detection",
    "restore_action_points",
    "end_player_turn",
    "advance_enemy_turn",
    "step_toward",
    "preview_path",
    "plan_move",
    "step_entity",
    "stop_walking",
]
