"""Simulation engine for Wasteland Tactics.

Submodules:
    geometry: Isometric coordinate mapping, distances and facing
    pathfinding: Breadth-first search on the 4-connected grid
    dice: Seedable random rolls
    combat: Hit chance, damage, death and combat end
    turn_manager: Wander/combat modes, turns and movement cost
    inventory: Pick up, equip, use, drop and door actions
    scheduler: Cooperative virtual-clock timer queue
    loop: Single-writer orchestrator owning a game state

Example:
    >>> from wasteland_tactics.engine import GameLoop, DiceRoller
    >>> from wasteland_tactics.models import Point
    >>>
    >>> loop = GameLoop(roller=DiceRoller(seed=1))
    >>> result = loop.click_tile(Point(x=3, y=3))
    >>> loop.advance(1.0)
"""

from __future__ import annotations

# =============================================================================
# Pure Rules
# =============================================================================
from wasteland_tactics.engine.geometry import (
    euclidean_distance,
    facing_for_step,
    grid_to_screen,
    manhattan_distance,
    screen_to_grid,
)
from wasteland_tactics.engine.pathfinding import find_path
from wasteland_tactics.engine.dice import DiceRoller
from wasteland_tactics.engine.results import ActionResult
from wasteland_tactics.engine.combat import (
    WeaponProfile,
    damage_roll,
    evaluate_combat_end,
    hit_chance,
    resolve_attack,
    weapon_profile,
)

# =============================================================================
# State Machine & Mutators
# =============================================================================
from wasteland_tactics.engine.turn_manager import (
    advance_enemy_turn,
    check_detection,
    end_player_turn,
    plan_move,
    preview_path,
    restore_action_points,
    start_combat,
    step_entity,
    step_toward,
)
from wasteland_tactics.engine.inventory import door_action, drop, equip, pick_up, use

# =============================================================================
# Orchestration
# =============================================================================
from wasteland_tactics.engine.scheduler import ScheduledTask, Scheduler
from wasteland_tactics.engine.loop import GameLoop


__all__ = [
    # Geometry & pathfinding
    "grid_to_screen",
    "screen_to_grid",
    "manhattan_distance",
    "euclidean_distance",
    "facing_for_step",
    "find_path",
    # Dice & combat
    "DiceRoller",
    "ActionResult",
    "WeaponProfile",
    "weapon_profile",
    "hit_chance",
    "damage_roll",
    "resolve_attack",
    "evaluate_combat_end",
    # State machine
    "start_combat",
    "check_detection",
    "restore_action_points",
    "end_player_turn",
    "advance_enemy_turn",
    "step_toward",
    "preview_path",
    "plan_move",
    "step_entity",
    # Inventory & doors
    "pick_up",
    "equip",
    "use",
    "drop",
    "door_action",
    # Orchestration
    "Scheduler",
    "ScheduledTask",
    "GameLoop",
]
