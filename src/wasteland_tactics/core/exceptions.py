"""Custom exception hierarchy for the Wasteland Tactics simulation core.

Every exception raised by this package inherits from WastelandError so that
a presentation layer can catch programmer errors at a single boundary while
keeping the domain-specific context.

Expected game-rule rejections (not enough AP, too far, too heavy, locked
doors) are *not* exceptions: they are reported through action results and
the HUD log. The classes below signal broken invariants.

Example:
    >>> from wasteland_tactics.core.exceptions import EntityNotFoundError
    >>> raise EntityNotFoundError("No such entity", entity_id="enemy-9")
"""

from __future__ import annotations

from typing import Any


class WastelandError(Exception):
    """Base exception for all Wasteland Tactics errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(WastelandError):
    """Raised when settings are missing, malformed or inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with the offending key.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(WastelandError):
    """Raised when a domain operation receives data it cannot accept."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Exceptions
# =============================================================================


class GameEngineError(WastelandError):
    """Base exception for all simulation errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when an operation is invoked in a state that forbids it.

    This indicates a caller bug (for example advancing the enemy turn
    while the player still owns the turn), not a game-rule rejection.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current state identifier.
            expected_states: List of valid states that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class EntityNotFoundError(GameEngineError):
    """Raised when an entity id does not resolve to a live entity."""

    def __init__(
        self,
        message: str,
        *,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class ItemNotFoundError(GameEngineError):
    """Raised when an item id is unknown to the catalog or an inventory."""

    def __init__(
        self,
        message: str,
        *,
        item_id: str | None = None,
        owner_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if item_id:
            combined_details["item_id"] = item_id
        if owner_id:
            combined_details["owner_id"] = owner_id
        super().__init__(message, details=combined_details)


class ObjectNotFoundError(GameEngineError):
    """Raised when a map object (door) id is unknown."""

    def __init__(
        self,
        message: str,
        *,
        object_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if object_id:
            combined_details["object_id"] = object_id
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when combat is resolved against an invalid combatant."""

    def __init__(
        self,
        message: str,
        *,
        combatant_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combatant context.

        Args:
            message: Human-readable error description.
            combatant_id: ID of the combatant involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if combatant_id:
            combined_details["combatant_id"] = combatant_id
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when a random roll is requested with an impossible range."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with the offending range.

        Args:
            message: Human-readable error description.
            expression: The range or expression that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class EffectDescriptorError(GameEngineError):
    """Raised when an item effect descriptor cannot be parsed at load time."""

    def __init__(
        self,
        message: str,
        *,
        descriptor: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if descriptor is not None:
            combined_details["descriptor"] = descriptor
        super().__init__(message, details=combined_details)


class SchedulerError(GameEngineError):
    """Raised when the timer queue is misused (negative delays, closed loop)."""


__all__ = [
    "WastelandError",
    "ConfigurationError",
    "ValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "EntityNotFoundError",
    "ItemNotFoundError",
    "ObjectNotFoundError",
    "CombatError",
    "DiceRollError",
    "EffectDescriptorError",
    "SchedulerError",
]
