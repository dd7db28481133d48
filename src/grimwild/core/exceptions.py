"""Custom exception hierarchy for the Grimwild character engine.

All exceptions inherit from GrimwildError, enabling unified error handling
at the hosting application's boundary while preserving domain context.

Cancelling a roll and skipping a migration are normal outcomes and are
reported through result objects, not through this hierarchy.

Example:
    >>> from grimwild.core.exceptions import InvalidStatError
    >>> raise InvalidStatError("Unknown stat", stat="xyz")
"""

from __future__ import annotations

from typing import Any


class GrimwildError(Exception):
    """Base exception for all Grimwild engine errors.

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


class ConfigurationError(GrimwildError):
    """Raised when engine configuration is invalid.

    This includes duplicate stat keys in a rules config and settings that
    cannot be loaded from the environment.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(GrimwildError):
    """Raised when a value passed to an engine operation is out of range."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
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
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(GrimwildError):
    """Base exception for dice and roll resolution errors."""


class DiceRollError(GameEngineError):
    """Raised when a dice expression cannot be parsed or rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class InvalidStatError(GameEngineError):
    """Signals a roll requested for a stat the character does not have.

    The resolver reports this as a no-op outcome; it is only raised when a
    caller asks for it via ``RollResolution.raise_for_status()``.
    """

    def __init__(
        self,
        message: str,
        *,
        stat: str | None = None,
        known_stats: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid stat error.

        Args:
            message: Human-readable error description.
            stat: The stat key that was requested.
            known_stats: Stat keys the character actually has.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if stat is not None:
            combined_details["stat"] = stat
        if known_stats is not None:
            combined_details["known_stats"] = known_stats
        self.stat = stat
        super().__init__(message, details=combined_details)


class RollResolutionError(GameEngineError):
    """Raised when the resolver is driven through an illegal state change."""

    def __init__(
        self,
        message: str,
        *,
        state: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize resolution error with resolver state context.

        Args:
            message: Human-readable error description.
            state: The resolver state at the time of the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if state:
            combined_details["state"] = state
        super().__init__(message, details=combined_details)


class CollaboratorError(GrimwildError):
    """Raised when a persistence or message collaborator call fails."""

    def __init__(
        self,
        message: str,
        *,
        collaborator: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize collaborator error.

        Args:
            message: Human-readable error description.
            collaborator: Name of the failing collaborator ('store', 'messages').
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if collaborator:
            combined_details["collaborator"] = collaborator
        super().__init__(message, details=combined_details)


__all__ = [
    "GrimwildError",
    "ConfigurationError",
    "ValidationError",
    "GameEngineError",
    "DiceRollError",
    "InvalidStatError",
    "RollResolutionError",
    "CollaboratorError",
]
