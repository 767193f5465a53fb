"""Configuration management for the Wasteland Tactics simulation core.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files and runtime overrides.
Every rule constant of the simulation (grid size, hit-chance baselines,
damage ranges, timings) lives here so that a deployment can rebalance
the game without touching engine code.

Example:
    >>> from wasteland_tactics.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.grid_size
    20

Environment Variables:
    WASTELAND_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    WASTELAND_JSON_LOGS: Emit JSON log lines instead of console output
    WASTELAND_RULES_GRID_SIZE: Width and height of the square map
    WASTELAND_RULES_RNG_SEED: Seed for reproducible dice rolls
    WASTELAND_TIMING_STEP_DELAY: Seconds per walked tile
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wasteland_tactics.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Game-rule constants for movement, combat, inventory and progression.

    Attributes:
        grid_size: Width and height of the square map in cells.
        tile_width: Isometric tile width in screen units.
        tile_height: Isometric tile height in screen units.
        base_hit_chance: Baseline hit percentage for player attacks.
        enemy_base_hit_chance: Baseline hit percentage for enemy attacks.
        min_hit_chance: Lower clamp of any hit chance.
        max_hit_chance: Upper clamp of any hit chance.
        unarmed_ap_cost: AP cost of an attack without an equipped weapon.
        unarmed_damage_min: Minimum unarmed damage.
        unarmed_damage_max: Maximum unarmed damage.
        enemy_damage_min: Minimum damage dealt by an enemy attack.
        enemy_damage_max: Maximum damage dealt by an enemy attack.
        melee_range: Manhattan distance within which attacks are allowed.
        default_detection_range: Detection radius for enemies without one.
        pickup_range: Euclidean distance within which items can be picked up.
        picklock_chance: Percentage chance that picking a lock succeeds.
        default_max_weight: Carry capacity of a freshly created inventory.
        skill_points_per_level: Points granted on every level-up.
        hp_per_point: Max HP granted per allocated point.
        ap_per_point: Max AP granted per allocated point.
        ac_per_point: Armor class granted per allocated point.
        require_all_points_spent: Refuse to confirm a partial allocation.
        max_log_entries: Length cap of the HUD log.
        rng_seed: Optional seed for reproducible dice rolls.
    """

    model_config = SettingsConfigDict(
        env_prefix="WASTELAND_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    grid_size: int = Field(default=20, ge=1, le=500, description="Map size in cells")
    tile_width: int = Field(default=64, gt=0, description="Isometric tile width")
    tile_height: int = Field(default=32, gt=0, description="Isometric tile height")

    base_hit_chance: int = Field(default=60, description="Player hit baseline")
    enemy_base_hit_chance: int = Field(default=50, description="Enemy hit baseline")
    min_hit_chance: int = Field(default=5, description="Lower hit-chance clamp")
    max_hit_chance: int = Field(default=95, description="Upper hit-chance clamp")

    unarmed_ap_cost: int = Field(default=4, ge=0, description="Unarmed attack AP cost")
    unarmed_damage_min: int = Field(default=1, ge=0)
    unarmed_damage_max: int = Field(default=3, ge=0)
    enemy_damage_min: int = Field(default=2, ge=0)
    enemy_damage_max: int = Field(default=7, ge=0)
    melee_range: int = Field(default=1, ge=1, description="Manhattan attack range")

    default_detection_range: int = Field(default=5, ge=0)
    pickup_range: float = Field(default=1.5, ge=0, description="Euclidean pickup radius")
    picklock_chance: int = Field(default=60, description="Lockpick success percentage")
    default_max_weight: float = Field(default=150.0, ge=0)

    skill_points_per_level: int = Field(default=3, ge=0)
    hp_per_point: int = Field(default=10, ge=0)
    ap_per_point: int = Field(default=1, ge=0)
    ac_per_point: int = Field(default=2, ge=0)
    require_all_points_spent: bool = Field(
        default=True,
        description="Refuse level-up confirmation while points remain",
    )

    max_log_entries: int = Field(default=50, ge=1)
    rng_seed: int | None = Field(default=None, description="Seed for dice rolls")

    @model_validator(mode="after")
    def validate_ranges(self) -> "RulesSettings":
        """Ensure every min/max pair and percentage is consistent.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If a range is inverted or a percentage is
                outside 0..100.
        """
        pairs = {
            "hit_chance": (self.min_hit_chance, self.max_hit_chance),
            "unarmed_damage": (self.unarmed_damage_min, self.unarmed_damage_max),
            "enemy_damage": (self.enemy_damage_min, self.enemy_damage_max),
        }
        for key, (low, high) in pairs.items():
            if low > high:
                raise ConfigurationError(
                    f"{key} minimum ({low}) must not exceed maximum ({high})",
                    config_key=key,
                )

        for key in ("min_hit_chance", "max_hit_chance", "picklock_chance"):
            value = getattr(self, key)
            if not 0 <= value <= 100:
                raise ConfigurationError(
                    f"{key} must be a percentage between 0 and 100, got {value}",
                    config_key=key,
                )
        return self


class TimingSettings(BaseSettings):
    """Durations of the deferred behaviours driven by the scheduler.

    Attributes:
        step_delay: Seconds between two walked tiles.
        enemy_think_delay: Seconds before the enemy turn resolves.
        effect_duration: Lifetime of a hit/miss visual effect.
        shake_decay_interval: Seconds between two screen-shake decrements.
        impact_shake: Shake intensity after a hit.
        miss_shake: Shake intensity after a miss.
    """

    model_config = SettingsConfigDict(
        env_prefix="WASTELAND_TIMING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    step_delay: float = Field(default=0.25, gt=0, description="Seconds per tile")
    enemy_think_delay: float = Field(default=1.0, ge=0)
    effect_duration: float = Field(default=0.5, gt=0)
    shake_decay_interval: float = Field(default=0.05, gt=0)
    impact_shake: int = Field(default=10, ge=0)
    miss_shake: int = Field(default=3, ge=0)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Force DEBUG level developer logging.
        log_level: Application logging level.
        json_logs: Emit JSON logs instead of console output.
        rules: Game-rule settings.
        timing: Scheduler timing settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="WASTELAND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Wasteland Tactics", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Force DEBUG level logging")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    rules: RulesSettings = Field(default_factory=RulesSettings)
    timing: TimingSettings = Field(default_factory=TimingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.

    Example:
        >>> settings = get_settings()
        >>> settings.rules.base_hit_chance
        60
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "TimingSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
