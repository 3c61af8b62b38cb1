"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        QuestForgeError: Base exception for all application errors.
        NotFoundError, ValidationError, BusinessRuleViolation,
        ExploreCooldownError: Request-level errors with status codes.

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
        log_context: Bind context for one block.
"""

from __future__ import annotations

from questforge.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from questforge.core.exceptions import (
    BusinessRuleViolation,
    ConfigurationError,
    ExploreCooldownError,
    GameEngineError,
    NotFoundError,
    QuestForgeError,
    StorageError,
    ValidationError,
)
from questforge.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)


__all__ = [
    # Exceptions
    "QuestForgeError",
    "ConfigurationError",
    "StorageError",
    "ValidationError",
    "NotFoundError",
    "GameEngineError",
    "BusinessRuleViolation",
    "ExploreCooldownError",
    # Configuration
    "Settings",
    "GameSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
