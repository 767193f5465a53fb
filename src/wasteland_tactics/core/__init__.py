"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        WastelandError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.
        GameEngineError and its subclasses: Broken simulation invariants.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        scoped_context: Bind context inside a with block.
"""

from __future__ import annotations

from wasteland_tactics.core.config import (
    RulesSettings,
    Settings,
    TimingSettings,
    clear_settings_cache,
    get_settings,
)
from wasteland_tactics.core.exceptions import (
    CombatError,
    ConfigurationError,
    DiceRollError,
    EffectDescriptorError,
    EntityNotFoundError,
    GameEngineError,
    InvalidGameStateError,
    ItemNotFoundError,
    ObjectNotFoundError,
    SchedulerError,
    ValidationError,
    WastelandError,
)
from wasteland_tactics.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    scoped_context,
)


__all__ = [
    # Base exception
    "WastelandError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "EntityNotFoundError",
    "ItemNotFoundError",
    "ObjectNotFoundError",
    "CombatError",
    "DiceRollError",
    "EffectDescriptorError",
    "SchedulerError",
    # Configuration
    "Settings",
    "RulesSettings",
    "TimingSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "scoped_context",
]
