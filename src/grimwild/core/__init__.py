"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        GrimwildError: Base exception for all engine errors.
        InvalidStatError: Signal for rolls against unknown stats.

    Configuration:
        Settings: Environment-bound settings.
        RulesConfig: Explicit stat configuration.
        get_settings: Get the settings singleton.

    Logging:
        configure_logging: Set up logging.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from grimwild.core.config import (
    GameSettings,
    RulesConfig,
    Settings,
    StatDefinition,
    clear_settings_cache,
    default_rules,
    get_settings,
)
from grimwild.core.exceptions import (
    CollaboratorError,
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    GrimwildError,
    InvalidStatError,
    RollResolutionError,
    ValidationError,
)
from grimwild.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "GrimwildError",
    "ConfigurationError",
    "ValidationError",
    "GameEngineError",
    "DiceRollError",
    "InvalidStatError",
    "RollResolutionError",
    "CollaboratorError",
    # Configuration
    "Settings",
    "GameSettings",
    "RulesConfig",
    "StatDefinition",
    "default_rules",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
