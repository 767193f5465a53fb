"""Tests for experience and level-up allocation."""

from __future__ import annotations

import pytest

from wasteland_tactics.core.exceptions import ValidationError
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import StatKind
from wasteland_tactics.models.progression import (
    LevelUpAllocation,
    award_exp,
    exp_threshold,
    next_level_exp,
)

from conftest import make_entity


class TestThresholds:
    """Tests for the experience curve."""

    @pytest.mark.parametrize(
        ("level", "threshold"),
        [(1, 0), (2, 1000), (3, 3000), (4, 6000), (5, 10000)],
    )
    def test_exp_threshold(self, level: int, threshold: int) -> None:
        assert exp_threshold(level) == threshold

    def test_next_level_exp(self) -> None:
        assert next_level_exp(1) == 1000
        assert next_level_exp(2) == 3000

    def test_level_below_one(self) -> None:
        with pytest.raises(ValidationError):
            exp_threshold(0)


class TestAwardExp:
    """Tests for experience awards."""

    def test_below_threshold(self, player: Entity) -> None:
        award = award_exp(player, 999)

        assert not award.leveled_up
        assert player.level == 1
        assert player.exp == 999

    def test_single_level(self, player: Entity) -> None:
        award = award_exp(player, 1000)

        assert award.levels_gained == 1
        assert player.level == 2
        assert player.skill_points == 3
        assert player.next_level_exp == 3000

    def test_double_level_up(self, player: Entity) -> None:
        """Test that one award can raise several levels."""
        award = award_exp(player, 3000)

        assert award.levels_gained == 2
        assert award.skill_points_gained == 6
        assert award.new_level == 3
        assert player.level == 3
        assert player.skill_points == 6
        assert player.next_level_exp == 6000

    def test_custom_points_per_level(self, player: Entity) -> None:
        award_exp(player, 1000, points_per_level=5)
        assert player.skill_points == 5

    def test_negative_rejected(self, player: Entity) -> None:
        with pytest.raises(ValidationError):
            award_exp(player, -10)


class TestLevelUpAllocation:
    """Tests for provisional stat allocation."""

    @pytest.fixture
    def hero(self) -> Entity:
        return make_entity("player", 0, 0, skill_points=3)

    def test_increase_until_exhausted(self, hero: Entity) -> None:
        allocation = LevelUpAllocation.for_entity(hero)

        assert allocation.increase(StatKind.HP)
        assert allocation.increase("ap")
        assert allocation.increase(StatKind.AC)
        assert allocation.increase(StatKind.HP) is False
        assert allocation.remaining == 0

    def test_confirm_applies_deltas(self, hero: Entity) -> None:
        allocation = LevelUpAllocation.for_entity(hero)
        allocation.increase(StatKind.HP)
        allocation.increase(StatKind.AP)
        allocation.increase(StatKind.AC)

        deltas = allocation.confirm(hero)

        assert deltas == {"max_hp": 10, "max_ap": 1, "ac": 2}
        assert (hero.hp, hero.max_hp) == (110, 110)
        assert (hero.ap, hero.max_ap) == (11, 11)
        assert hero.ac == 7
        assert hero.skill_points == 0

    def test_reset(self, hero: Entity) -> None:
        allocation = LevelUpAllocation.for_entity(hero)
        allocation.increase(StatKind.HP)
        allocation.reset()

        assert allocation.remaining == 3
        assert allocation.deltas() == {"max_hp": 0, "max_ap": 0, "ac": 0}

    def test_unspent_points_block_confirm(self, hero: Entity) -> None:
        allocation = LevelUpAllocation.for_entity(hero)
        allocation.increase(StatKind.HP)

        with pytest.raises(ValidationError):
            allocation.confirm(hero)
        assert hero.max_hp == 100

    def test_partial_confirm_when_allowed(self, hero: Entity) -> None:
        allocation = LevelUpAllocation.for_entity(hero, require_all_spent=False)
        allocation.increase(StatKind.AC)

        allocation.confirm(hero)

        assert hero.ac == 7
        assert hero.skill_points == 2

    def test_refresh_picks_up_new_points(self, hero: Entity) -> None:
        allocation = LevelUpAllocation.for_entity(hero)
        allocation.increase(StatKind.AP)
        hero.skill_points = 6

        allocation.refresh(hero)

        assert allocation.remaining == 5
        assert allocation.allocated[StatKind.AP] == 1
