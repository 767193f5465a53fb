"""Application-wide constants for Wasteland Tactics.

Rule values that a deployment may want to tune live in the settings
(see ``core.config``). The constants below are fixed parts of the game:
reserved identifiers, search order and the HUD message templates.
"""

from __future__ import annotations

# =============================================================================
# Identifiers
# =============================================================================

PLAYER_ID = "player"
"""Reserved id of the single player entity."""

DROPPED_ITEM_PREFIX = "drop-"
"""Prefix of world items created by dropping an inventory item."""

EFFECT_ID_PREFIX = "fx-"
"""Prefix of visual effect ids."""

# =============================================================================
# Movement
# =============================================================================

NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
"""Breadth-first expansion order: +x, -x, +y, -y."""

# =============================================================================
# Progression
# =============================================================================

EXP_THRESHOLD_FACTOR = 500
"""Experience needed to reach level L is ``L * (L - 1) * EXP_THRESHOLD_FACTOR``."""

# =============================================================================
# HUD Messages
# =============================================================================

MSG_COMBAT_INITIATED = "Combat initiated!"
MSG_COMBAT_OVER = "All hostiles eliminated. Wander mode active."
MSG_ENEMY_TURN = "Enemy turn begins..."
MSG_PLAYER_TURN = "Your turn begins. AP restored."
MSG_NOT_ENOUGH_AP_MOVE = "Not enough AP to move that far!"
MSG_NOT_ENOUGH_AP_ATTACK = "Not enough AP to attack!"
MSG_TOO_FAR_ATTACK = "Too far to attack!"
MSG_NOT_YOUR_TURN = "It is not your turn."
MSG_PATH_BLOCKED = "The way is blocked."
MSG_PLAYER_DEAD = "You are dead."
MSG_HIT = "You hit {target} for {damage} damage!"
MSG_MISS = "You missed {target}!"
MSG_ENEMY_HIT = "{attacker} hits you for {damage} damage!"
MSG_ENEMY_MISS = "{attacker} misses you."
MSG_KILLED = "{target} is dead."
MSG_EXP_GAINED = "Gained {amount} XP."
MSG_LEVEL_UP = "Level up! You are now level {level}."

MSG_TOO_HEAVY = "Too heavy to pick up."
MSG_TOO_FAR_PICKUP = "Too far away to pick up."
MSG_PICKED_UP = "Picked up {item}."
MSG_EQUIPPED = "Equipped {item}."
MSG_UNEQUIPPED = "Unequipped {item}."
MSG_CANNOT_EQUIP = "{item} cannot be equipped."
MSG_USED_HEAL = "Used {item}. Restored {amount} HP."
MSG_CANNOT_USE = "{item} cannot be used."
MSG_DROPPED = "Dropped {item}."
MSG_CANNOT_DROP_QUEST = "{item} is too important to drop."

MSG_DOOR_LOCKED = "{door} is locked."
MSG_DOOR_OPENED = "{door} opened."
MSG_DOOR_CLOSED = "{door} closed."
MSG_DOOR_CANNOT_LOCK_OPEN = "Cannot lock {door} while it's open."
MSG_DOOR_LOCKED_NOW = "{door} locked."
MSG_DOOR_UNLOCKED_NOW = "{door} unlocked."
MSG_DOOR_NOT_LOCKED = "{door} is not locked."
MSG_PICKLOCK_SUCCESS = "Successfully picked the lock on {door}!"
MSG_PICKLOCK_FAILURE = "Failed to pick the lock on {door}."

MSG_LEVEL_UP_CONFIRMED = "Level-up bonuses applied."
