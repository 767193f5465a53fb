"""Tests for the item catalog and reference scenario."""

from __future__ import annotations

import pytest

from wasteland_tactics.core.config import Settings
from wasteland_tactics.core.exceptions import ItemNotFoundError
from wasteland_tactics.models.catalog import ITEMS, WALLS, create_initial_state, create_item
from wasteland_tactics.models.enums import GameMode, ItemCategory, Turn
from wasteland_tactics.models.grid import Point


class TestCreateItem:
    """Tests for catalog item creation."""

    def test_every_catalog_item_loads(self) -> None:
        for item_id in ITEMS:
            assert create_item(item_id).id == item_id

    def test_stimpak_stack(self) -> None:
        stimpaks = create_item("stimpak", quantity=3)
        assert stimpaks.quantity == 3
        assert stimpaks.effect is not None
        assert stimpaks.effect.amount == 30

    def test_pistol_profile(self) -> None:
        pistol = create_item("10mm-pistol")
        assert pistol.category == ItemCategory.WEAPON
        assert pistol.ap_cost == 5
        assert (pistol.damage.min, pistol.damage.max) == (5, 12)

    def test_unknown_item(self) -> None:
        with pytest.raises(ItemNotFoundError):
            create_item("plasma-rifle")


class TestInitialState:
    """Tests for the reference scenario."""

    def test_fresh_state(self, settings: Settings) -> None:
        state = create_initial_state(settings)

        assert state.mode == GameMode.WANDER
        assert state.turn == Turn.PLAYER
        assert state.grid_size == 20
        assert state.player.position == Point(x=2, y=2)
        assert len(state.enemies) == 3
        assert state.logs == ["Welcome to the Wasteland.", "Wander mode active."]

    def test_player_kit(self, settings: Settings) -> None:
        state = create_initial_state(settings)

        assert state.player.inventory.find("stimpak") is not None
        assert state.player.equipment.weapon is None

    def test_locked_door_blocks(self, settings: Settings) -> None:
        state = create_initial_state(settings)

        assert state.get_object("door-1").is_locked
        assert "10,7" in state.obstacles()
        assert set(WALLS) <= state.obstacles()

    def test_states_are_independent(self, settings: Settings) -> None:
        first = create_initial_state(settings)
        second = create_initial_state(settings)

        first.player.hp = 1
        first.player.inventory.items.clear()

        assert second.player.hp == 100
        assert second.player.inventory.find("stimpak") is not None
