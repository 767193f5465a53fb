"""Tests for the mode and turn state machine."""

from __future__ import annotations

import pytest

from wasteland_tactics.core.exceptions import InvalidGameStateError
from wasteland_tactics.engine.turn_manager import (
    advance_enemy_turn,
    check_detection,
    end_player_turn,
    plan_move,
    preview_path,
    start_combat,
    step_toward,
)
from wasteland_tactics.models.enums import EffectKind, Facing, GameMode, Turn
from wasteland_tactics.models.grid import Point
from wasteland_tactics.models.world import GameState

from conftest import ScriptedRoller, make_entity


class TestStartCombat:
    """Tests for entering combat."""

    def test_enter_combat(self, small_state: GameState) -> None:
        small_state.player.is_moving = True

        result = start_combat(small_state)

        assert result.success
        assert small_state.mode == GameMode.COMBAT
        assert small_state.turn == Turn.PLAYER
        assert small_state.generation == 1
        assert small_state.player.is_moving is False
        assert small_state.logs[0] == "Combat initiated!"

    def test_already_in_combat(self, combat_state: GameState) -> None:
        result = start_combat(combat_state)

        assert not result.success
        assert combat_state.generation == 0


class TestDetection:
    """Tests for enemy detection in wander mode."""

    def test_detected_within_default_range(self, small_state: GameState) -> None:
        """Test that an enemy four tiles away detects the player."""
        result = check_detection(small_state)

        assert result is not None
        assert result.details["detected_by"] == "raider"
        assert small_state.mode == GameMode.COMBAT
        assert small_state.turn == Turn.PLAYER

    def test_entity_range_overrides_default(self, small_state: GameState) -> None:
        small_state.get_entity("raider").detection_range = 3
        assert check_detection(small_state) is None
        assert small_state.mode == GameMode.WANDER

    def test_ignored_in_combat(self, combat_state: GameState) -> None:
        assert check_detection(combat_state) is None


class TestTurnHandOff:
    """Tests for turn transitions."""

    def test_end_player_turn(self, combat_state: GameState) -> None:
        combat_state.player.ap = 2
        combat_state.get_entity("raider").ap = 0

        result = end_player_turn(combat_state)

        assert result.success
        assert combat_state.turn == Turn.ENEMY
        assert combat_state.player.ap == 10
        assert combat_state.get_entity("raider").ap == 8
        assert combat_state.logs[0] == "Enemy turn begins..."

    def test_end_turn_outside_combat(self, small_state: GameState) -> None:
        result = end_player_turn(small_state)

        assert not result.success
        assert small_state.turn == Turn.PLAYER

    def test_enemy_turn_requires_enemy_turn(self, combat_state: GameState) -> None:
        with pytest.raises(InvalidGameStateError):
            advance_enemy_turn(combat_state, roller=ScriptedRoller())

    def test_adjacent_enemy_attacks(self, combat_state: GameState) -> None:
        combat_state.turn = Turn.ENEMY
        roller = ScriptedRoller(percentiles=[0], damages=[5])

        result = advance_enemy_turn(combat_state, roller=roller)

        assert combat_state.player.hp == 95
        assert roller.damage_requests == [(2, 7)]
        assert "Raider raider hits you for 5 damage!" in result.messages
        assert result.effects[0].kind == EffectKind.HIT
        assert (result.effects[0].x, result.effects[0].y) == (2, 2)
        assert combat_state.get_entity("raider").ap == 8
        assert combat_state.turn == Turn.PLAYER
        assert combat_state.logs[0] == "Your turn begins. AP restored."

    def test_enemy_miss(self, combat_state: GameState) -> None:
        """Test that the enemy hit chance uses the enemy baseline."""
        combat_state.turn = Turn.ENEMY

        result = advance_enemy_turn(combat_state, roller=ScriptedRoller(percentiles=[57]))

        assert combat_state.player.hp == 100
        assert "Raider raider misses you." in result.messages

    def test_distant_enemy_steps_closer(self, small_state: GameState) -> None:
        small_state.mode = GameMode.COMBAT
        small_state.turn = Turn.ENEMY

        advance_enemy_turn(small_state, roller=ScriptedRoller())

        raider = small_state.get_entity("raider")
        assert raider.position == Point(x=5, y=2)
        assert raider.facing == Facing.NW

    def test_player_death_stops_enemy_turn(self, combat_state: GameState) -> None:
        combat_state.turn = Turn.ENEMY
        combat_state.player.hp = 3
        combat_state.add_entity(make_entity("raider-2", 2, 3))
        roller = ScriptedRoller(percentiles=[0, 0], damages=[5, 5])

        result = advance_enemy_turn(combat_state, roller=roller)

        assert combat_state.player.hp == 0
        assert combat_state.is_player_dead
        assert combat_state.find_entity("player") is not None
        assert "You are dead." in result.messages
        assert len(roller.damage_requests) == 1


class TestStepToward:
    """Tests for the single-step enemy approach."""

    def test_larger_axis_first(self, small_state: GameState) -> None:
        raider = small_state.get_entity("raider")
        raider.place(Point(x=3, y=6))

        assert step_toward(small_state, raider, small_state.player.position)
        assert raider.position == Point(x=3, y=5)

    def test_falls_back_to_other_axis(self, small_state: GameState) -> None:
        raider = small_state.get_entity("raider")
        raider.place(Point(x=6, y=3))
        small_state.walls.add("5,3")

        assert step_toward(small_state, raider, small_state.player.position)
        assert raider.position == Point(x=6, y=2)

    def test_blocked_stays(self, small_state: GameState) -> None:
        raider = small_state.get_entity("raider")
        small_state.walls.add("5,2")

        assert not step_toward(small_state, raider, small_state.player.position)
        assert raider.position == Point(x=6, y=2)

    def test_occupied_cell_not_entered(self, small_state: GameState) -> None:
        raider = small_state.get_entity("raider")
        small_state.add_entity(make_entity("raider-2", 5, 2))

        assert not step_toward(small_state, raider, small_state.player.position)


class TestMovement:
    """Tests for planning and paying for movement."""

    def test_preview_path(self, small_state: GameState) -> None:
        path = preview_path(small_state, Point(x=4, y=2))

        assert [point.key for point in path] == ["3,2", "4,2"]
        assert small_state.selected_tile == Point(x=4, y=2)
        assert small_state.path == path

        assert preview_path(small_state, None) == []
        assert small_state.selected_tile is None

    def test_free_in_wander(self, small_state: GameState) -> None:
        result = plan_move(small_state, "player", Point(x=2, y=7))

        assert result.success
        assert len(result.path) == 5
        assert small_state.player.ap == 10
        assert small_state.player.is_moving
        assert small_state.player.facing == Facing.SW

    def test_paid_in_combat(self, combat_state: GameState) -> None:
        result = plan_move(combat_state, "player", Point(x=2, y=5))

        assert result.success
        assert result.details["cost"] == 3
        assert combat_state.player.ap == 7

    def test_unaffordable_rejected_atomically(self, combat_state: GameState) -> None:
        combat_state.player.ap = 2

        result = plan_move(combat_state, "player", Point(x=2, y=5))

        assert not result.success
        assert result.path == []
        assert combat_state.player.ap == 2
        assert combat_state.player.position == Point(x=2, y=2)
        assert combat_state.logs[0] == "Not enough AP to move that far!"

    def test_enemy_turn_rejected(self, combat_state: GameState) -> None:
        combat_state.turn = Turn.ENEMY
        result = plan_move(combat_state, "player", Point(x=2, y=3))
        assert result.message == "It is not your turn."

    def test_unreachable(self, small_state: GameState) -> None:
        small_state.walls.update({"9,8", "8,9"})

        result = plan_move(small_state, "player", Point(x=9, y=9))

        assert not result.success
        assert result.details["reason"] == "unreachable"
        assert small_state.player.is_moving is False
