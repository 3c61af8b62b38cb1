"""Custom exception hierarchy for the QuestForge engine.

All exceptions inherit from QuestForgeError, enabling unified error handling
at the application boundary while preserving domain-specific context. Each
class carries an HTTP-equivalent ``status_code`` so a transport layer can map
errors without inspecting messages.

Example:
    >>> from questforge.core.exceptions import NotFoundError
    >>> raise NotFoundError("Character not found", entity_type="character", entity_id="abc")
"""

from __future__ import annotations

from typing import Any, ClassVar


class QuestForgeError(Exception):
    """Base exception for all QuestForge errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    status_code: ClassVar[int] = 500

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

    def to_payload(self) -> dict[str, Any]:
        """Build the response body a transport layer should return.

        Returns:
            Dictionary with the human-readable message.
        """
        return {"message": self.message}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Storage Exceptions
# =============================================================================


class ConfigurationError(QuestForgeError):
    """Raised when application configuration is invalid."""

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


class StorageError(QuestForgeError):
    """Raised when the repository backend fails to read or write a record."""

    def __init__(
        self,
        message: str,
        *,
        collection: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if collection:
            combined_details["collection"] = collection
        super().__init__(message, details=combined_details)


# =============================================================================
# Request Exceptions
# =============================================================================


class ValidationError(QuestForgeError):
    """Raised when request data is malformed.

    This covers unknown combat actions, missing required fields, invalid
    equipment slots, and item/slot type mismatches.
    """

    status_code: ClassVar[int] = 400

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


class NotFoundError(QuestForgeError):
    """Raised when a referenced entity does not exist.

    Covers characters, enemies, items, locations, quests and combat sessions.
    """

    status_code: ClassVar[int] = 404

    def __init__(
        self,
        message: str,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with entity context.

        Args:
            message: Human-readable error description.
            entity_type: Kind of entity that was looked up.
            entity_id: Identifier that did not resolve.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity_type:
            combined_details["entity_type"] = entity_type
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)
        self.entity_type = entity_type
        self.entity_id = entity_id


# =============================================================================
# Game Engine Exceptions
# =============================================================================


class GameEngineError(QuestForgeError):
    """Base exception for all game engine errors."""

    status_code: ClassVar[int] = 400


class BusinessRuleViolation(GameEngineError):
    """Raised when a well-formed request breaks a game rule.

    Examples are insufficient gold, buying an item not sold at the current
    location, using a non-consumable item, or acting without inventory.
    """

    def __init__(
        self,
        message: str,
        *,
        rule: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize business rule violation with the rule name.

        Args:
            message: Human-readable error description.
            rule: Short machine-readable name of the violated rule.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if rule:
            combined_details["rule"] = rule
        super().__init__(message, details=combined_details)
        self.rule = rule


class ExploreCooldownError(BusinessRuleViolation):
    """Raised when a character explores again before the cooldown expires.

    This exception includes the epoch-ms timestamp at which exploring is
    allowed again.
    """

    status_code: ClassVar[int] = 429

    def __init__(
        self,
        message: str,
        *,
        retry_at: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        combined_details["retry_at"] = retry_at
        super().__init__(message, rule="explore_cooldown", details=combined_details)
        self.retry_at = retry_at

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, "retryAt": self.retry_at}


__all__ = [
    "QuestForgeError",
    "ConfigurationError",
    "StorageError",
    "ValidationError",
    "NotFoundError",
    "GameEngineError",
    "BusinessRuleViolation",
    "ExploreCooldownError",
]
