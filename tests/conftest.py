"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Wasteland Tactics test suite.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import pytest

from wasteland_tactics.core.config import Settings
from wasteland_tactics.engine.dice import DiceRoller
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import EntityType
from wasteland_tactics.models.items import Equipment, Inventory
from wasteland_tactics.models.world import GameState


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Helpers
# =============================================================================


class ScriptedRoller(DiceRoller):
    """DiceRoller returning queued values instead of random ones.

    Percentile rolls and damage rolls are consumed from separate queues.
    An exhausted queue falls back to the seeded generator.
    """

    def __init__(
        self,
        percentiles: Iterable[int] = (),
        damages: Iterable[int] = (),
    ) -> None:
        super().__init__(seed=0)
        self.percentiles = list(percentiles)
        self.damages = list(damages)
        self.damage_requests: list[tuple[int, int]] = []

    def percentile(self) -> int:
        if self.percentiles:
            return self.percentiles.pop(0)
        return super().percentile()

    def damage(self, minimum: int, maximum: int) -> int:
        self.damage_requests.append((minimum, maximum))
        if self.damages:
            return self.damages.pop(0)
        return super().damage(minimum, maximum)


def make_entity(entity_id: str, x: int, y: int, **overrides: Any) -> Entity:
    """Build an entity with sensible defaults for its type."""
    is_player = entity_id == "player"
    data: dict[str, Any] = {
        "id": entity_id,
        "type": EntityType.PLAYER if is_player else EntityType.ENEMY,
        "name": "Vault Dweller" if is_player else f"Raider {entity_id}",
        "grid_x": x,
        "grid_y": y,
        "hp": 100 if is_player else 30,
        "max_hp": 100 if is_player else 30,
        "ap": 10 if is_player else 8,
        "max_ap": 10 if is_player else 8,
        "ac": 5 if is_player else 2,
    }
    if is_player:
        data["equipment"] = Equipment()
        data["inventory"] = Inventory()
    data.update(overrides)
    return Entity(**data)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from wasteland_tactics.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """Provide default settings independent of the environment.

    Returns:
        A fresh Settings instance.
    """
    return Settings()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "WASTELAND_DEBUG": "true",
        "WASTELAND_LOG_LEVEL": "DEBUG",
        "WASTELAND_RULES__BASE_HIT_CHANCE": "70",
        "WASTELAND_TIMING__STEP_DELAY": "0.1",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def scripted_roller() -> ScriptedRoller:
    """Provide a roller with empty queues; tests push the rolls they need."""
    return ScriptedRoller()


@pytest.fixture
def player() -> Entity:
    """Player at (2, 2) with 100 HP, 10 AP and AC 5."""
    return make_entity("player", 2, 2)


@pytest.fixture
def raider() -> Entity:
    """Enemy at (6, 2), out of melee range of the player fixture."""
    return make_entity("raider", 6, 2, exp_value=100)


@pytest.fixture
def small_state(player: Entity, raider: Entity) -> GameState:
    """A 10x10 open map holding the player and one enemy.

    Returns:
        GameState in wander mode.
    """
    return GameState(entities=[player, raider], grid_size=10)


@pytest.fixture
def combat_state(small_state: GameState) -> GameState:
    """The small state in combat, player to act, raider adjacent at (3, 2)."""
    from wasteland_tactics.models.enums import GameMode, Turn

    small_state.get_entity("raider").grid_x = 3
    small_state.mode = GameMode.COMBAT
    small_state.turn = Turn.PLAYER
    return small_state
