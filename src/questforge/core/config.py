"""Configuration management for the QuestForge engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and runtime
overrides.

Example:
    >>> from questforge.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.explore_cooldown_ms
    5000

Environment Variables:
    QUESTFORGE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    QUESTFORGE_GAME_TRAINING_ENEMY_ID: Enemy id that never retaliates
    QUESTFORGE_GAME_RNG_SEED: Seed for reproducible combat rolls
    QUESTFORGE_STORAGE_BACKEND: Repository backend ('memory' or 'sqlite')
    QUESTFORGE_STORAGE_DATABASE_PATH: Path to the SQLite database file
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from questforge.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Configuration for combat timing and exploration.

    Attributes:
        training_enemy_id: Id of the harmless training enemy.
        explore_cooldown_ms: Delay between two explorations of a character.
        explore_min_enemies: Smallest number of enemies an exploration reveals.
        explore_max_enemies: Largest number of enemies an exploration reveals.
        first_enemy_attack_delay_ms: Delay before the first idle auto-attack.
        enemy_attack_min_interval_ms: Lower bound between two auto-attacks.
        enemy_attack_max_interval_ms: Upper bound between two auto-attacks.
        rng_seed: Optional seed for reproducible rolls.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTFORGE_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    training_enemy_id: str = Field(
        default="training_dummy",
        min_length=1,
        description="Enemy that never retaliates",
    )
    explore_cooldown_ms: int = Field(
        default=5000,
        ge=0,
        description="Explore cooldown in milliseconds",
    )
    explore_min_enemies: int = Field(
        default=2,
        ge=1,
        description="Minimum discovered enemies",
    )
    explore_max_enemies: int = Field(
        default=7,
        ge=1,
        description="Maximum discovered enemies",
    )
    first_enemy_attack_delay_ms: int = Field(
        default=2500,
        ge=0,
        description="Delay before the first auto-attack",
    )
    enemy_attack_min_interval_ms: int = Field(
        default=2500,
        ge=1,
        description="Minimum delay between auto-attacks",
    )
    enemy_attack_max_interval_ms: int = Field(
        default=4000,
        ge=1,
        description="Maximum delay between auto-attacks",
    )
    rng_seed: int | None = Field(
        default=None,
        description="Seed for reproducible rolls",
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "GameSettings":
        """Ensure every min/max pair is ordered.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If a lower bound exceeds its upper bound.
        """
        if self.explore_min_enemies > self.explore_max_enemies:
            raise ConfigurationError(
                f"explore_min_enemies ({self.explore_min_enemies}) must not exceed "
                f"explore_max_enemies ({self.explore_max_enemies})",
                config_key="explore_min_enemies",
            )
        if self.enemy_attack_min_interval_ms > self.enemy_attack_max_interval_ms:
            raise ConfigurationError(
                f"enemy_attack_min_interval_ms ({self.enemy_attack_min_interval_ms}) "
                f"must not exceed enemy_attack_max_interval_ms "
                f"({self.enemy_attack_max_interval_ms})",
                config_key="enemy_attack_min_interval_ms",
            )
        return self


class StorageSettings(BaseSettings):
    """Configuration for the repository backend.

    Attributes:
        backend: Which repository implementation to build.
        database_path: Path to the SQLite database file.
        seed_world: Load the default world (locations, items, enemies, quests).
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTFORGE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["memory", "sqlite"] = Field(
        default="memory",
        description="Repository backend",
    )
    database_path: Path = Field(
        default=Path("data/questforge.db"),
        description="Path to SQLite database",
    )
    seed_world: bool = Field(
        default=True,
        description="Seed the default world on startup",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Render logs as JSON.
        game: Combat and exploration settings.
        storage: Repository settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="QuestForge",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    game: GameSettings = Field(default_factory=GameSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
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

    This is primarily useful for testing or when environment variables
    have changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
