"""Result objects returned by engine actions.

Game-rule rejections are ordinary results with ``success=False``; the
rejection text is both returned and written to the HUD log. Exceptions
are reserved for broken invariants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wasteland_tactics.models.grid import Point
from wasteland_tactics.models.world import EffectTrigger


if TYPE_CHECKING:
    from wasteland_tactics.models.world import GameState


@dataclass
class ActionResult:
    """Outcome of one player or engine action.

    Attributes:
        action: Short action name (``"move"``, ``"attack"``, ...).
        success: Whether the action changed the state as requested.
        messages: HUD log lines emitted, oldest first.
        effects: Visual effect triggers for the presentation layer.
        path: Cells a movement action will walk through.
        details: Extra, action-specific values (rolls, damage, ids).
    """

    action: str
    success: bool = True
    messages: list[str] = field(default_factory=list)
    effects: list[EffectTrigger] = field(default_factory=list)
    path: list[Point] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        """All messages joined into one line."""
        return " ".join(self.messages)

    def emit(self, state: GameState, message: str) -> None:
        """Record a message on the result and on the HUD log."""
        self.messages.append(message)
        state.log(message)

    def extend(self, other: ActionResult) -> None:
        """Fold a nested result's messages and effects into this one."""
        self.messages.extend(other.messages)
        self.effects.extend(other.effects)


def rejected(state: GameState, action: str, message: str, **details: Any) -> ActionResult:
    """Build a failed result and log its reason."""
    result = ActionResult(action=action, success=False, details=details)
    result.emit(state, message)
    return result


__all__ = ["ActionResult", "rejected"]
