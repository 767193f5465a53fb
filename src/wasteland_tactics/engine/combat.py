"""Combat resolution: hit chance, damage, death and combat end.

Formulas:
    hit chance = clamp(base + 2 * attacker AP - 2 * defender AC, 5, 95)
    a roll in [0, 100) hits when roll <= hit chance
    damage is uniform over the weapon's inclusive range

An attack is only resolved in melee range (Manhattan distance 1) and
when the attacker can pay the weapon's AP cost. Hits and misses both
cost AP.
"""

from __future__ import annotations

from dataclasses import dataclass

from wasteland_tactics.core.config import RulesSettings, get_settings
from wasteland_tactics.core.constants import (
    MSG_COMBAT_OVER,
    MSG_EXP_GAINED,
    MSG_HIT,
    MSG_KILLED,
    MSG_LEVEL_UP,
    MSG_MISS,
    MSG_NOT_ENOUGH_AP_ATTACK,
    MSG_PLAYER_DEAD,
    MSG_TOO_FAR_ATTACK,
)
from wasteland_tactics.core.exceptions import CombatError
from wasteland_tactics.core.logging import get_logger
from wasteland_tactics.engine.dice import DiceRoller
from wasteland_tactics.engine.geometry import manhattan_distance
from wasteland_tactics.engine.results import ActionResult, rejected
from wasteland_tactics.models.entities import Entity
from wasteland_tactics.models.enums import EffectKind, GameMode
from wasteland_tactics.models.progression import award_exp
from wasteland_tactics.models.world import EffectTrigger, GameState


logger = get_logger(__name__)

_default_roller = DiceRoller()


# =============================================================================
# Formulas
# =============================================================================


def hit_chance(
    attacker_ap: int,
    defender_ac: int,
    base: int = 60,
    *,
    minimum: int = 5,
    maximum: int = 95,
) -> int:
    """Percentage chance that an attack hits.

    Args:
        attacker_ap: Attacker's current action points.
        defender_ac: Defender's armor class.
        base: Baseline chance before modifiers.
        minimum: Lower clamp.
        maximum: Upper clamp.

    Returns:
        ``clamp(base + 2*ap - 2*ac, minimum, maximum)``.

    Example:
        >>> hit_chance(10, 2)
        76
    """
    return max(minimum, min(maximum, base + attacker_ap * 2 - defender_ac * 2))


def damage_roll(minimum: int, maximum: int, *, roller: DiceRoller | None = None) -> int:
    """Uniform integer damage in ``[minimum, maximum]``.

    Raises:
        DiceRollError: If ``minimum > maximum``.
    """
    return (roller or _default_roller).damage(minimum, maximum)


@dataclass(frozen=True)
class WeaponProfile:
    """Attack parameters of an entity's equipped weapon or bare hands."""

    name: str
    ap_cost: int
    damage_min: int
    damage_max: int


def weapon_profile(entity: Entity, rules: RulesSettings) -> WeaponProfile:
    """Return the attack profile of the entity's weapon, or unarmed defaults."""
    weapon = entity.equipment.weapon if entity.equipment else None
    if weapon is None:
        return WeaponProfile(
            name="Unarmed",
            ap_cost=rules.unarmed_ap_cost,
            damage_min=rules.unarmed_damage_min,
            damage_max=rules.unarmed_damage_max,
        )
    ap_cost = weapon.ap_cost if weapon.ap_cost is not None else rules.unarmed_ap_cost
    if weapon.damage is None:
        return WeaponProfile(weapon.name, ap_cost, rules.unarmed_damage_min, rules.unarmed_damage_max)
    return WeaponProfile(weapon.name, ap_cost, weapon.damage.min, weapon.damage.max)


# =============================================================================
# Attack Resolution
# =============================================================================


@dataclass
class StrikeOutcome:
    """Raw outcome of a single roll against a defender."""

    hit: bool
    roll: int
    chance: int
    damage: int = 0
    killed: bool = False


def strike(
    state: GameState,
    attacker: Entity,
    defender: Entity,
    *,
    chance: int,
    damage_min: int,
    damage_max: int,
    roller: DiceRoller,
) -> StrikeOutcome:
    """Roll to hit and apply damage, without range or AP checks.

    The defender's HP is floored at zero. A dead non-player defender is
    removed from the roster; the player stays in it.
    """
    roll = roller.percentile()
    if roll > chance:
        return StrikeOutcome(hit=False, roll=roll, chance=chance)

    damage = roller.damage(damage_min, damage_max)
    defender.take_damage(damage)
    outcome = StrikeOutcome(hit=True, roll=roll, chance=chance, damage=damage)
    if not defender.is_alive:
        outcome.killed = True
        if not defender.is_player:
            state.remove_entity(defender.id)
    logger.debug(
        "Strike resolved",
        attacker=attacker.id,
        defender=defender.id,
        roll=roll,
        chance=chance,
        damage=damage,
        killed=outcome.killed,
    )
    return outcome


def resolve_attack(
    state: GameState,
    attacker_id: str,
    target_id: str,
    *,
    roller: DiceRoller | None = None,
    rules: RulesSettings | None = None,
) -> ActionResult:
    """Resolve one weapon attack and re-evaluate whether combat continues.

    Args:
        state: The game state, mutated in place.
        attacker_id: Id of the attacking entity.
        target_id: Id of the defending entity.
        roller: Source of rolls; a shared default when omitted.
        rules: Rule settings; the settings singleton when omitted.

    Returns:
        The attack result. ``success`` is False for rejected attacks
        (out of range, not enough AP); a resolved miss is a success.

    Raises:
        EntityNotFoundError: If either id is not in the roster.
        CombatError: If an entity attacks itself.
    """
    rules = rules or get_settings().rules
    roller = roller or _default_roller
    attacker = state.get_entity(attacker_id)
    target = state.get_entity(target_id)
    if attacker is target:
        raise CombatError("An entity cannot attack itself", combatant_id=attacker_id)

    distance = manhattan_distance(attacker.position, target.position)
    if distance > rules.melee_range:
        return rejected(state, "attack", MSG_TOO_FAR_ATTACK, distance=distance)

    weapon = weapon_profile(attacker, rules)
    if attacker.ap < weapon.ap_cost:
        return rejected(state, "attack", MSG_NOT_ENOUGH_AP_ATTACK, ap=attacker.ap, cost=weapon.ap_cost)

    base = rules.base_hit_chance if attacker.is_player else rules.enemy_base_hit_chance
    chance = hit_chance(
        attacker.ap,
        target.ac,
        base,
        minimum=rules.min_hit_chance,
        maximum=rules.max_hit_chance,
    )
    outcome = strike(
        state,
        attacker,
        target,
        chance=chance,
        damage_min=weapon.damage_min,
        damage_max=weapon.damage_max,
        roller=roller,
    )
    attacker.spend_ap(weapon.ap_cost)

    result = ActionResult(
        action="attack",
        details={
            "hit": outcome.hit,
            "roll": outcome.roll,
            "chance": outcome.chance,
            "damage": outcome.damage,
            "killed": outcome.killed,
            "ap_cost": weapon.ap_cost,
        },
    )
    if outcome.hit:
        result.emit(state, MSG_HIT.format(target=target.name, damage=outcome.damage))
        result.effects.append(EffectTrigger(kind=EffectKind.HIT, x=target.grid_x, y=target.grid_y))
    else:
        result.emit(state, MSG_MISS.format(target=target.name))
        result.effects.append(EffectTrigger(kind=EffectKind.MISS, x=target.grid_x, y=target.grid_y))

    if outcome.killed:
        _handle_kill(state, attacker, target, result, rules)

    result.extend(evaluate_combat_end(state))
    logger.info(
        "Attack resolved",
        attacker=attacker.id,
        target=target.id,
        hit=outcome.hit,
        damage=outcome.damage,
        killed=outcome.killed,
    )
    return result


def _handle_kill(
    state: GameState,
    attacker: Entity,
    target: Entity,
    result: ActionResult,
    rules: RulesSettings,
) -> None:
    if target.is_player:
        result.emit(state, MSG_PLAYER_DEAD)
        return
    result.emit(state, MSG_KILLED.format(target=target.name))
    if attacker.is_player and target.exp_value > 0:
        award = award_exp(attacker, target.exp_value, points_per_level=rules.skill_points_per_level)
        result.emit(state, MSG_EXP_GAINED.format(amount=award.amount))
        if award.leveled_up:
            result.emit(state, MSG_LEVEL_UP.format(level=award.new_level))
        result.details["exp_awarded"] = award.amount
        result.details["levels_gained"] = award.levels_gained


# =============================================================================
# Combat Continuation
# =============================================================================


def evaluate_combat_end(state: GameState) -> ActionResult:
    """Return to wander mode once no enemy remains in the roster.

    Returns:
        A result with ``success=True`` when combat ended, False otherwise.
    """
    result = ActionResult(action="combat_end", success=False)
    if state.mode != GameMode.COMBAT or state.enemies:
        return result

    state.mode = GameMode.WANDER
    state.bump_generation()
    result.success = True
    result.emit(state, MSG_COMBAT_OVER)
    logger.info("Combat ended", generation=state.generation)
    return result


__all__ = [
    "hit_chance",
    "damage_roll",
    "WeaponProfile",
    "weapon_profile",
    "StrikeOutcome",
    "strike",
    "resolve_attack",
    "evaluate_combat_end",
]
