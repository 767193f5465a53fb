"""Game loop orchestrating input, timers and the simulation rules.

The GameLoop is the exclusive owner of one ``GameState``. It is the
single writer: presentation-layer input and scheduler callbacks both go
through it, and each one runs to completion before the next starts.

The GameLoop is the central coordinator for:
- Tile clicks and hover previews
- Walking animation (one tile per ``step_delay``)
- Wander/combat transitions and the enemy think delay
- Visual effect expiry and screen-shake decay
- Result notifications to registered callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from wasteland_tactics.core.config import Settings, get_settings
from wasteland_tactics.core.constants import (
    MSG_LEVEL_UP_CONFIRMED,
    MSG_NOT_YOUR_TURN,
    MSG_PATH_BLOCKED,
    MSG_PLAYER_DEAD,
    PLAYER_ID,
)
from wasteland_tactics.core.exceptions import InvalidGameStateError
from wasteland_tactics.core.logging import get_logger, scoped_context
from wasteland_tactics.engine import combat, inventory, turn_manager
from wasteland_tactics.engine.dice import DiceRoller
from wasteland_tactics.engine.geometry import grid_to_screen, screen_to_grid
from wasteland_tactics.engine.results import ActionResult, rejected
from wasteland_tactics.engine.scheduler import Scheduler
from wasteland_tactics.models.catalog import create_initial_state
from wasteland_tactics.models.enums import DoorAction, EffectKind, GameMode, StatKind, Turn
from wasteland_tactics.models.grid import Point
from wasteland_tactics.models.progression import LevelUpAllocation
from wasteland_tactics.models.world import EffectTrigger, GameState, VisualEffect


logger = get_logger(__name__)

WALK_TASK = "walk-step"
ENEMY_TURN_TASK = "enemy-turn"
EFFECT_TASK = "effect-expire"
SHAKE_TASK = "shake-decay"


class GameLoop:
    """Single-writer orchestrator of a game session.

    Attributes:
        state: The owned game state.
        scheduler: Virtual-clock timer queue.
        settings: Application settings in effect.

    Example:
        >>> loop = GameLoop(roller=DiceRoller(seed=7))
        >>> loop.move_player(Point(x=3, y=2)).success
        True
        >>> _ = loop.advance(0.25)
        >>> loop.state.player.position
        Point(x=3, y=2)
    """

    def __init__(
        self,
        state: GameState | None = None,
        *,
        settings: Settings | None = None,
        roller: DiceRoller | None = None,
    ) -> None:
        """Initialize the game loop.

        Args:
            state: State to own; the reference scenario when omitted.
            settings: Settings to use; the singleton when omitted.
            roller: Source of rolls; seeded from ``rules.rng_seed`` when omitted.
        """
        self._settings = settings or get_settings()
        self._state = state if state is not None else create_initial_state(self._settings)
        self._roller = roller or DiceRoller(seed=self._settings.rules.rng_seed)
        self._scheduler = Scheduler(generation=lambda: self._state.generation)
        self._walking_path: list[Point] = []
        self._walk_prepaid = False
        self._selected_object_id: str | None = None
        self._allocation: LevelUpAllocation | None = None
        self._result_callbacks: list[Callable[[ActionResult], None]] = []
        self._action_log: list[dict[str, Any]] = []
        self._closed = False

        logger.info(
            "GameLoop initialized",
            entities=len(self._state.entities),
            mode=str(self._state.mode),
            grid_size=self._state.grid_size,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._scheduler.now

    @property
    def is_walking(self) -> bool:
        return bool(self._walking_path)

    @property
    def walking_path(self) -> list[Point]:
        """Tiles still to be walked."""
        return list(self._walking_path)

    @property
    def selected_object_id(self) -> str | None:
        """Door picked by the last click, target of ``door_action``."""
        return self._selected_object_id

    @property
    def allocation(self) -> LevelUpAllocation | None:
        """Open level-up allocation, if any."""
        return self._allocation

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def action_log(self) -> list[dict[str, Any]]:
        """Get the log of actions taken."""
        return self._action_log.copy()

    def add_result_callback(self, callback: Callable[[ActionResult], None]) -> None:
        """Add a callback invoked with every published result.

        Args:
            callback: Function to call with the ActionResult.
        """
        self._result_callbacks.append(callback)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def click_tile(self, point: Point) -> ActionResult:
        """Dispatch a tile click the way the map's context implies.

        Priority: world item (pick up), door (select it for a door action),
        enemy (engage in wander, attack in combat), otherwise movement.
        Clicks are ignored while a walk is in progress.
        """
        self._ensure_open()
        if self.is_walking:
            return ActionResult(action="click", success=False, details={"reason": "walking"})

        world_item = self._state.world_item_at(point)
        pickup: ActionResult | None = None
        if world_item is not None:
            pickup = self.pick_up(world_item.id)
            if pickup.success or pickup.details.get("reason") != "too_far":
                return pickup

        door = self._state.object_at(point)
        if door is not None:
            self._selected_object_id = door.id
            return ActionResult(action="select_object", details={"object_id": door.id})
        self._selected_object_id = None

        enemy = self._state.enemy_at(point)
        if enemy is not None:
            if self._state.mode == GameMode.WANDER:
                return self.start_combat()
            if self._state.turn != Turn.PLAYER:
                return ActionResult(action="attack", success=False, details={"reason": "enemy_turn"})
            return self.attack(enemy.id)

        result = self.move_player(point)
        if pickup is not None:
            result.messages[:0] = pickup.messages
        return result

    def hover(self, point: Point | None) -> list[Point]:
        """Update the hovered tile and its path preview."""
        self._ensure_open()
        return turn_manager.preview_path(self._state, point)

    def to_screen(self, point: Point) -> tuple[float, float]:
        """Project a cell with the configured tile size."""
        rules = self._settings.rules
        return grid_to_screen(point.x, point.y, tile_width=rules.tile_width, tile_height=rules.tile_height)

    def to_grid(self, screen_x: float, screen_y: float) -> Point:
        """Map screen coordinates to a cell with the configured tile size."""
        rules = self._settings.rules
        return screen_to_grid(screen_x, screen_y, tile_width=rules.tile_width, tile_height=rules.tile_height)

    def click_screen(self, screen_x: float, screen_y: float) -> ActionResult:
        """Dispatch a click given in screen coordinates.

        Clicks landing outside the map are ignored.
        """
        point = self.to_grid(screen_x, screen_y)
        if not point.in_bounds(self._state.grid_size):
            return ActionResult(action="click", success=False, details={"reason": "out_of_bounds"})
        return self.click_tile(point)

    def hover_screen(self, screen_x: float, screen_y: float) -> list[Point]:
        """Hover the cell under screen coordinates; off-map clears the preview."""
        point = self.to_grid(screen_x, screen_y)
        return self.hover(point if point.in_bounds(self._state.grid_size) else None)

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------

    def move_player(self, goal: Point) -> ActionResult:
        """Start walking the player toward ``goal``.

        The path is validated and paid for immediately; the tiles are then
        walked one per ``step_delay`` seconds of scheduler time.
        """
        self._ensure_open()
        if self.is_walking:
            return ActionResult(action="move", success=False, details={"reason": "walking"})
        dead = self._reject_if_dead("move")
        if dead is not None:
            return dead

        result = turn_manager.plan_move(self._state, PLAYER_ID, goal)
        if result.success:
            self._walking_path = list(result.path)
            self._walk_prepaid = result.details.get("cost", 0) > 0
            self._schedule_step()
        return self._publish(result)

    def _schedule_step(self) -> None:
        self._scheduler.schedule(
            self._settings.timing.step_delay,
            self._walk_step,
            name=WALK_TASK,
            token=self._state.generation,
        )

    def _walk_step(self) -> None:
        if not self._walking_path:
            return
        tile = self._walking_path[0]
        if tile.key in self._state.obstacles():
            self._block_walk(tile)
            return
        self._walking_path.pop(0)
        turn_manager.step_entity(self._state, PLAYER_ID, tile)

        detected = turn_manager.check_detection(self._state, self._settings.rules)
        if detected is not None:
            self._stop_walk()
            self._publish(detected)
            return

        if self._walking_path:
            self._schedule_step()
        else:
            turn_manager.stop_walking(self._state, PLAYER_ID)

    def _block_walk(self, tile: Point) -> None:
        """End a walk whose next tile became an obstacle after it was planned.

        Tiles paid for in combat but not walked are refunded.
        """
        refund = 0
        if self._walk_prepaid and self._state.mode == GameMode.COMBAT:
            player = self._state.player
            refund = min(len(self._walking_path), player.max_ap - player.ap)
            player.ap += refund
        self._stop_walk()
        logger.debug("Walk blocked", tile=tile.key, refunded_ap=refund)
        self._publish(
            rejected(
                self._state,
                "move",
                MSG_PATH_BLOCKED,
                reason="blocked",
                tile=tile.key,
                refunded=refund,
            )
        )

    def _stop_walk(self) -> None:
        self._walking_path = []
        self._walk_prepaid = False
        self._scheduler.cancel_named(WALK_TASK)
        turn_manager.stop_walking(self._state, PLAYER_ID)

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def start_combat(self) -> ActionResult:
        """Enter combat, cancelling any walk in progress."""
        self._ensure_open()
        result = turn_manager.start_combat(self._state)
        if result.success:
            self._stop_walk()
        return self._publish(result)

    def attack(self, target_id: str) -> ActionResult:
        """Attack an enemy on the player's combat turn."""
        self._ensure_open()
        dead = self._reject_if_dead("attack")
        if dead is not None:
            return dead
        if self._state.mode != GameMode.COMBAT or self._state.turn != Turn.PLAYER:
            return self._publish(rejected(self._state, "attack", MSG_NOT_YOUR_TURN))

        result = combat.resolve_attack(
            self._state,
            PLAYER_ID,
            target_id,
            roller=self._roller,
            rules=self._settings.rules,
        )
        return self._publish(result)

    def end_turn(self) -> ActionResult:
        """End the player's turn and schedule the enemy turn."""
        self._ensure_open()
        dead = self._reject_if_dead("end_turn")
        if dead is not None:
            return dead
        result = turn_manager.end_player_turn(self._state)
        if result.success:
            self._stop_walk()
            self._scheduler.schedule(
                self._settings.timing.enemy_think_delay,
                self._run_enemy_turn,
                name=ENEMY_TURN_TASK,
                token=self._state.generation,
            )
        return self._publish(result)

    def _run_enemy_turn(self) -> None:
        result = turn_manager.advance_enemy_turn(
            self._state,
            roller=self._roller,
            rules=self._settings.rules,
        )
        self._publish(result)

    # -------------------------------------------------------------------------
    # Inventory & Doors
    # -------------------------------------------------------------------------

    def pick_up(self, world_item_id: str) -> ActionResult:
        self._ensure_open()
        dead = self._reject_if_dead("pick_up")
        if dead is not None:
            return dead
        result = inventory.pick_up(self._state, PLAYER_ID, world_item_id, rules=self._settings.rules)
        return self._publish(result)

    def equip(self, item_id: str) -> ActionResult:
        self._ensure_open()
        dead = self._reject_if_dead("equip")
        if dead is not None:
            return dead
        return self._publish(inventory.equip(self._state, PLAYER_ID, item_id))

    def use_item(self, item_id: str) -> ActionResult:
        self._ensure_open()
        dead = self._reject_if_dead("use")
        if dead is not None:
            return dead
        return self._publish(inventory.use(self._state, PLAYER_ID, item_id))

    def drop_item(self, item_id: str) -> ActionResult:
        self._ensure_open()
        dead = self._reject_if_dead("drop")
        if dead is not None:
            return dead
        return self._publish(inventory.drop(self._state, PLAYER_ID, item_id))

    def door_action(self, action: DoorAction | str, object_id: str | None = None) -> ActionResult:
        """Apply a door action to ``object_id`` or the selected door.

        Raises:
            InvalidGameStateError: If no door is given or selected.
        """
        self._ensure_open()
        target = object_id or self._selected_object_id
        if target is None:
            raise InvalidGameStateError("No door selected", current_state="no_selection")
        dead = self._reject_if_dead("door")
        if dead is not None:
            return dead
        result = inventory.door_action(
            self._state,
            target,
            action,
            roller=self._roller,
            rules=self._settings.rules,
        )
        self._selected_object_id = None
        return self._publish(result)

    # -------------------------------------------------------------------------
    # Level Up
    # -------------------------------------------------------------------------

    def open_level_up(self) -> LevelUpAllocation:
        """Open (or return the already open) allocation of the player's points.

        An open allocation is refreshed against the player's current pool,
        so points earned after opening it become available.
        """
        self._ensure_open()
        if self._allocation is not None:
            self._allocation.refresh(self._state.player)
        else:
            rules = self._settings.rules
            self._allocation = LevelUpAllocation.for_entity(
                self._state.player,
                hp_per_point=rules.hp_per_point,
                ap_per_point=rules.ap_per_point,
                ac_per_point=rules.ac_per_point,
                require_all_spent=rules.require_all_points_spent,
            )
        return self._allocation

    def allocate_point(self, stat: StatKind | str) -> bool:
        return self.open_level_up().increase(stat)

    def reset_level_up(self) -> None:
        self.open_level_up().reset()

    def confirm_level_up(self) -> ActionResult:
        """Apply the open allocation to the player.

        Raises:
            ValidationError: If points remain and the rules require spending all.
        """
        allocation = self.open_level_up()
        deltas = allocation.confirm(self._state.player)
        self._allocation = None
        result = ActionResult(action="level_up", details=deltas)
        result.emit(self._state, MSG_LEVEL_UP_CONFIRMED)
        return self._publish(result)

    # -------------------------------------------------------------------------
    # Time & Lifecycle
    # -------------------------------------------------------------------------

    def advance(self, seconds: float) -> int:
        """Advance scheduler time, running due callbacks in order.

        Returns:
            Number of callbacks executed.
        """
        self._ensure_open()
        return self._scheduler.advance(seconds)

    def run_until_idle(self, max_seconds: float = 3600.0) -> int:
        """Run scheduled work until the queue drains."""
        self._ensure_open()
        return self._scheduler.run_until_idle(max_seconds)

    def close(self) -> None:
        """Cancel every pending timer; the loop rejects further use."""
        if self._closed:
            return
        cancelled = self._scheduler.cancel_all()
        self._walking_path = []
        self._closed = True
        logger.info("GameLoop closed", cancelled_tasks=cancelled)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise InvalidGameStateError(
                "GameLoop has been closed",
                current_state="closed",
                expected_states=["open"],
            )

    def _reject_if_dead(self, action: str) -> ActionResult | None:
        if self._state.is_player_dead:
            return self._publish(rejected(self._state, action, MSG_PLAYER_DEAD))
        return None

    def _publish(self, result: ActionResult) -> ActionResult:
        """Start visual effects, record the action and notify callbacks."""
        for trigger in result.effects:
            self._start_effect(trigger)

        self._action_log.append(
            {
                "time": self.now,
                "action": result.action,
                "success": result.success,
                "messages": list(result.messages),
                "mode": str(self._state.mode),
                "turn": str(self._state.turn),
            }
        )
        with scoped_context(action=result.action, generation=self._state.generation):
            for callback in self._result_callbacks:
                try:
                    callback(result)
                except Exception:
                    logger.exception("Result callback failed")
        return result

    def _start_effect(self, trigger: EffectTrigger) -> None:
        timing = self._settings.timing
        effect = VisualEffect(
            id=self._state.next_effect_id(),
            kind=trigger.kind,
            x=trigger.x,
            y=trigger.y,
            start=self.now,
            duration=timing.effect_duration,
        )
        self._state.effects.append(effect)
        if trigger.kind == EffectKind.HIT:
            self._state.shake_intensity = timing.impact_shake
        else:
            self._state.shake_intensity = timing.miss_shake
        self._scheduler.schedule(
            timing.effect_duration,
            lambda: self._expire_effect(effect.id),
            name=EFFECT_TASK,
        )
        if self._state.shake_intensity > 0 and not self._scheduler.has_pending(SHAKE_TASK):
            self._scheduler.schedule(timing.shake_decay_interval, self._decay_shake, name=SHAKE_TASK)

    def _expire_effect(self, effect_id: str) -> None:
        self._state.effects = [effect for effect in self._state.effects if effect.id != effect_id]

    def _decay_shake(self) -> None:
        self._state.shake_intensity = max(0, self._state.shake_intensity - 1)
        if self._state.shake_intensity > 0:
            self._scheduler.schedule(
                self._settings.timing.shake_decay_interval,
                self._decay_shake,
                name=SHAKE_TASK,
            )


__all__ = [
    "GameLoop",
    "WALK_TASK",
    "ENEMY_TURN_TASK",
    "EFFECT_TASK",
    "SHAKE_TASK",
]
