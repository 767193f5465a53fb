"""Tests for the game loop orchestration."""

from __future__ import annotations

import pytest

from wasteland_tactics.core.config import RulesSettings, Settings
from wasteland_tactics.core.exceptions import InvalidGameStateError, ValidationError
from wasteland_tactics.engine.results import ActionResult
from wasteland_tactics.engine.loop import ENEMY_TURN_TASK, WALK_TASK, GameLoop
from wasteland_tactics.models.catalog import create_item
from wasteland_tactics.models.enums import GameMode, Turn
from wasteland_tactics.models.grid import Point
from wasteland_tactics.models.items import WorldItem
from wasteland_tactics.models.world import GameState, MapObject

from conftest import ScriptedRoller


@pytest.fixture
def quiet_state(small_state: GameState) -> GameState:
    """Small state with the raider far out of detection range."""
    small_state.get_entity("raider").place(Point(x=9, y=9))
    return small_state


@pytest.fixture
def roller() -> ScriptedRoller:
    return ScriptedRoller()


@pytest.fixture
def loop(quiet_state: GameState, settings: Settings, roller: ScriptedRoller) -> GameLoop:
    """Game loop over the quiet state."""
    return GameLoop(quiet_state, settings=settings, roller=roller)


@pytest.fixture
def gated_loop(loop: GameLoop) -> GameLoop:
    """Loop whose map is split by a wall at x=4 with an open door at (4, 2)."""
    loop.state.walls = {f"4,{y}" for y in range(10) if y != 2}
    loop.state.objects.append(MapObject(id="door-1", name="Door", grid_x=4, grid_y=2, is_open=True))
    return loop


class TestGameLoopInit:
    """Tests for GameLoop initialization."""

    def test_default_scenario(self, settings: Settings) -> None:
        loop = GameLoop(settings=settings)

        assert loop.state.player.position == Point(x=2, y=2)
        assert loop.now == 0.0
        assert not loop.is_walking
        assert loop.action_log == []

    def test_owns_given_state(self, loop: GameLoop, quiet_state: GameState) -> None:
        assert loop.state is quiet_state


class TestWalking:
    """Tests for scheduled movement."""

    def test_walks_one_tile_per_step(self, loop: GameLoop) -> None:
        result = loop.move_player(Point(x=2, y=5))

        assert result.success
        assert loop.is_walking
        assert loop.state.player.position == Point(x=2, y=2)

        loop.advance(0.25)
        assert loop.state.player.position == Point(x=2, y=3)

        loop.advance(0.5)
        assert loop.state.player.position == Point(x=2, y=5)
        assert not loop.is_walking
        assert loop.state.player.is_moving is False

    def test_clicks_ignored_while_walking(self, loop: GameLoop) -> None:
        loop.move_player(Point(x=2, y=5))

        result = loop.click_tile(Point(x=5, y=5))

        assert not result.success
        assert result.details["reason"] == "walking"
        assert loop.walking_path[-1] == Point(x=2, y=5)

    def test_detection_interrupts_walk(self, loop: GameLoop) -> None:
        """Test that stepping into detection range starts combat."""
        loop.state.get_entity("raider").place(Point(x=6, y=4))

        loop.move_player(Point(x=5, y=2))
        loop.advance(1.0)

        assert loop.state.mode == GameMode.COMBAT
        assert loop.state.player.position == Point(x=3, y=2)
        assert not loop.is_walking
        assert not loop.scheduler.has_pending(WALK_TASK)

    def test_combat_move_costs_ap(self, loop: GameLoop) -> None:
        loop.start_combat()

        loop.move_player(Point(x=2, y=4))
        loop.run_until_idle()

        assert loop.state.player.ap == 8
        assert loop.state.player.position == Point(x=2, y=4)

    def test_door_closed_mid_walk_stops_walk(self, gated_loop: GameLoop) -> None:
        """Test that a door closed behind the planned path is not walked through."""
        gated_loop.move_player(Point(x=6, y=2))
        gated_loop.advance(0.25)
        assert gated_loop.state.player.position == Point(x=3, y=2)

        gated_loop.door_action("toggle", "door-1")
        gated_loop.run_until_idle()

        assert gated_loop.state.player.position == Point(x=3, y=2)
        assert not gated_loop.is_walking
        assert gated_loop.state.player.is_moving is False
        assert gated_loop.state.logs[0] == "The way is blocked."
        assert gated_loop.action_log[-1]["action"] == "move"
        assert gated_loop.action_log[-1]["success"] is False

    def test_blocked_combat_walk_refunds_unwalked_tiles(self, gated_loop: GameLoop) -> None:
        gated_loop.start_combat()
        gated_loop.move_player(Point(x=6, y=2))
        assert gated_loop.state.player.ap == 6

        gated_loop.advance(0.25)
        gated_loop.door_action("toggle", "door-1")
        gated_loop.run_until_idle()

        assert gated_loop.state.player.position == Point(x=3, y=2)
        assert gated_loop.state.player.ap == 9

    def test_hover_preview(self, loop: GameLoop) -> None:
        path = loop.hover(Point(x=4, y=2))

        assert len(path) == 2
        assert loop.state.selected_tile == Point(x=4, y=2)


class TestScreenInput:
    """Tests for screen-coordinate input using the configured tile size."""

    def test_default_tile_size(self, loop: GameLoop) -> None:
        assert loop.to_screen(Point(x=1, y=0)) == (32.0, 16.0)
        assert loop.to_grid(*loop.to_screen(Point(x=5, y=3))) == Point(x=5, y=3)

    def test_configured_tile_size(self, quiet_state: GameState, roller: ScriptedRoller) -> None:
        settings = Settings(rules=RulesSettings(tile_width=32, tile_height=16))
        loop = GameLoop(quiet_state, settings=settings, roller=roller)

        assert loop.to_screen(Point(x=2, y=1)) == (16.0, 24.0)
        assert loop.to_grid(16.0, 28.0) == Point(x=2, y=1)

    def test_tile_size_from_environment(
        self,
        monkeypatch: pytest.MonkeyPatch,
        quiet_state: GameState,
        roller: ScriptedRoller,
    ) -> None:
        monkeypatch.setenv("WASTELAND_RULES__TILE_WIDTH", "128")
        loop = GameLoop(quiet_state, settings=Settings(), roller=roller)

        assert loop.to_screen(Point(x=1, y=0)) == (64.0, 16.0)

    def test_click_screen_moves(self, loop: GameLoop) -> None:
        result = loop.click_screen(*loop.to_screen(Point(x=4, y=2)))

        assert result.action == "move"
        assert loop.walking_path[-1] == Point(x=4, y=2)

    def test_click_off_map_ignored(self, loop: GameLoop) -> None:
        result = loop.click_screen(-1000.0, 0.0)

        assert not result.success
        assert result.details["reason"] == "out_of_bounds"
        assert not loop.is_walking

    def test_hover_off_map_clears_preview(self, loop: GameLoop) -> None:
        loop.hover(Point(x=4, y=2))

        assert loop.hover_screen(-1000.0, 0.0) == []
        assert loop.state.selected_tile is None


class TestClickDispatch:
    """Tests for context-sensitive clicks."""

    def test_click_enemy_in_wander_engages(self, loop: GameLoop) -> None:
        result = loop.click_tile(Point(x=9, y=9))

        assert result.action == "start_combat"
        assert loop.state.mode == GameMode.COMBAT
        assert loop.state.turn == Turn.PLAYER

    def test_click_adjacent_enemy_in_combat_attacks(self, loop: GameLoop, roller: ScriptedRoller) -> None:
        loop.state.get_entity("raider").place(Point(x=3, y=2))
        loop.start_combat()
        roller.percentiles.append(0)
        roller.damages.append(3)

        result = loop.click_tile(Point(x=3, y=2))

        assert result.action == "attack"
        assert loop.state.get_entity("raider").hp == 27

    def test_click_enemy_on_enemy_turn(self, loop: GameLoop) -> None:
        loop.start_combat()
        loop.state.turn = Turn.ENEMY

        result = loop.click_tile(Point(x=9, y=9))

        assert not result.success
        assert result.details["reason"] == "enemy_turn"

    def test_click_adjacent_item_picks_up(self, loop: GameLoop) -> None:
        loop.state.world_items.append(
            WorldItem(id="loot-1", grid_x=3, grid_y=2, item=create_item("stimpak"))
        )

        result = loop.click_tile(Point(x=3, y=2))

        assert result.action == "pick_up"
        assert result.success
        assert loop.state.world_items == []

    def test_click_far_item_walks_to_it(self, loop: GameLoop) -> None:
        loop.state.world_items.append(
            WorldItem(id="loot-1", grid_x=5, grid_y=2, item=create_item("stimpak"))
        )

        result = loop.click_tile(Point(x=5, y=2))

        assert result.action == "move"
        assert result.messages[0] == "Too far away to pick up."
        assert loop.is_walking

    def test_click_door_selects_it(self, loop: GameLoop) -> None:
        loop.state.objects.append(MapObject(id="door-1", name="Door", grid_x=4, grid_y=4))

        loop.click_tile(Point(x=4, y=4))
        assert loop.selected_object_id == "door-1"

        result = loop.door_action("toggle")
        assert result.success
        assert loop.state.get_object("door-1").is_open
        assert loop.selected_object_id is None

    def test_door_action_without_selection(self, loop: GameLoop) -> None:
        with pytest.raises(InvalidGameStateError):
            loop.door_action("toggle")

    def test_click_empty_tile_moves(self, loop: GameLoop) -> None:
        result = loop.click_tile(Point(x=4, y=2))

        assert result.action == "move"
        assert loop.is_walking


class TestCombatTurns:
    """Tests for combat turns driven by the scheduler."""

    def test_attack_in_wander_rejected(self, loop: GameLoop) -> None:
        result = loop.attack("raider")

        assert not result.success
        assert loop.state.logs[0] == "It is not your turn."

    def test_enemy_turn_after_think_delay(self, loop: GameLoop) -> None:
        loop.start_combat()
        loop.end_turn()

        assert loop.state.turn == Turn.ENEMY
        assert loop.scheduler.has_pending(ENEMY_TURN_TASK)

        loop.advance(0.5)
        assert loop.state.turn == Turn.ENEMY

        loop.advance(0.5)
        assert loop.state.turn == Turn.PLAYER
        assert loop.state.get_entity("raider").position == Point(x=8, y=9)

    def test_stale_enemy_turn_discarded(self, loop: GameLoop) -> None:
        loop.start_combat()
        loop.end_turn()
        loop.state.bump_generation()

        loop.advance(2.0)

        assert loop.state.turn == Turn.ENEMY
        assert loop.state.get_entity("raider").position == Point(x=9, y=9)

    def test_effects_expire_and_shake_decays(self, loop: GameLoop, roller: ScriptedRoller) -> None:
        loop.state.get_entity("raider").place(Point(x=3, y=2))
        loop.start_combat()
        roller.percentiles.append(0)
        roller.damages.append(1)

        loop.attack("raider")

        assert len(loop.state.effects) == 1
        assert loop.state.shake_intensity == 10

        loop.advance(1.0)

        assert loop.state.effects == []
        assert loop.state.shake_intensity == 0

    def test_miss_shakes_less(self, loop: GameLoop, roller: ScriptedRoller) -> None:
        loop.state.get_entity("raider").place(Point(x=3, y=2))
        loop.start_combat()
        roller.percentiles.append(99)

        loop.attack("raider")

        assert loop.state.shake_intensity == 3

    def test_dead_player_rejected(self, loop: GameLoop) -> None:
        loop.state.player.hp = 0

        result = loop.move_player(Point(x=3, y=2))

        assert not result.success
        assert result.message == "You are dead."
        assert not loop.is_walking


class TestLevelUp:
    """Tests for the level-up allocation flow."""

    def test_allocate_and_confirm(self, loop: GameLoop) -> None:
        loop.state.player.skill_points = 3

        assert loop.allocate_point("hp")
        assert loop.allocate_point("hp")
        assert loop.allocate_point("ac")
        assert not loop.allocate_point("ap")

        result = loop.confirm_level_up()

        assert result.details == {"max_hp": 20, "max_ap": 0, "ac": 2}
        assert loop.state.player.max_hp == 120
        assert loop.state.player.skill_points == 0
        assert loop.allocation is None
        assert loop.state.logs[0] == "Level-up bonuses applied."

    def test_confirm_requires_all_points(self, loop: GameLoop) -> None:
        loop.state.player.skill_points = 3
        loop.allocate_point("ap")

        with pytest.raises(ValidationError):
            loop.confirm_level_up()

        loop.reset_level_up()
        assert loop.allocation.remaining == 3

    def test_open_allocation_sees_new_points(self, loop: GameLoop) -> None:
        loop.state.player.skill_points = 3
        loop.allocate_point("hp")

        loop.state.player.skill_points = 6
        allocation = loop.open_level_up()

        assert allocation.available == 6
        assert allocation.remaining == 5
        assert allocation.allocated["hp"] == 1

    def test_open_allocation_resets_when_pool_shrinks(self, loop: GameLoop) -> None:
        loop.state.player.skill_points = 3
        loop.allocate_point("ac")
        loop.allocate_point("ac")

        loop.state.player.skill_points = 1
        allocation = loop.open_level_up()

        assert allocation.spent == 0
        assert allocation.remaining == 1


class TestCallbacksAndLifecycle:
    """Tests for result callbacks, the action log and close."""

    def test_callbacks_receive_results(self, loop: GameLoop) -> None:
        received: list[ActionResult] = []
        loop.add_result_callback(received.append)

        loop.start_combat()

        assert [result.action for result in received] == ["start_combat"]
        assert loop.action_log[-1]["mode"] == "combat"

    def test_failing_callback_does_not_break_loop(self, loop: GameLoop) -> None:
        def explode(result: ActionResult) -> None:
            raise RuntimeError("boom")

        loop.add_result_callback(explode)

        result = loop.start_combat()

        assert result.success

    def test_close_cancels_timers(self, loop: GameLoop) -> None:
        loop.move_player(Point(x=2, y=5))

        loop.close()

        assert loop.is_closed
        assert loop.scheduler.pending() == []
        with pytest.raises(InvalidGameStateError):
            loop.advance(1.0)
        loop.close()
