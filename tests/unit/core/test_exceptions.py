"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


class TestQuestForgeError:
    """Tests for the base QuestForgeError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = QuestForgeError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = QuestForgeError(
            "Test error",
            details={"key": "value", "count": 42},
        )
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        exc = QuestForgeError("Test", details={"x": 1})
        repr_str = repr(exc)
        assert "QuestForgeError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str

    def test_payload_is_message_only(self) -> None:
        """Test the transport payload hides details."""
        exc = QuestForgeError("Boom", details={"secret": 1})
        assert exc.to_payload() == {"message": "Boom"}
        assert exc.status_code == 500


class TestRequestExceptions:
    """Tests for request-level exceptions and their status codes."""

    def test_not_found_error(self) -> None:
        """Test NotFoundError carries entity context."""
        exc = NotFoundError("Enemy not found", entity_type="enemy", entity_id="dragon")
        assert exc.status_code == 404
        assert exc.entity_type == "enemy"
        assert exc.entity_id == "dragon"
        assert exc.details == {"entity_type": "enemy", "entity_id": "dragon"}

    def test_validation_error(self) -> None:
        """Test ValidationError with field info."""
        exc = ValidationError(
            "Invalid value",
            field_name="strength",
            invalid_value=-5,
        )
        assert exc.status_code == 400
        assert exc.details["field_name"] == "strength"
        assert exc.details["invalid_value"] == -5

    def test_business_rule_violation(self) -> None:
        """Test BusinessRuleViolation records the rule name."""
        exc = BusinessRuleViolation("Not enough gold", rule="insufficient_gold")
        assert exc.rule == "insufficient_gold"
        assert exc.status_code == 400
        assert isinstance(exc, GameEngineError)
        assert exc.to_payload() == {"message": "Not enough gold"}

    def test_explore_cooldown_error(self) -> None:
        """Test ExploreCooldownError exposes retryAt in its payload."""
        exc = ExploreCooldownError("Explore cooldown active", retry_at=12345)
        assert exc.status_code == 429
        assert exc.retry_at == 12345
        assert exc.rule == "explore_cooldown"
        assert exc.to_payload() == {"message": "Explore cooldown active", "retryAt": 12345}

    def test_cooldown_is_a_rule_violation(self) -> None:
        """Test cooldown errors can be handled as rule violations."""
        exc = ExploreCooldownError("wait", retry_at=1)
        assert isinstance(exc, BusinessRuleViolation)
        assert isinstance(exc, QuestForgeError)


class TestConfigurationExceptions:
    """Tests for configuration and storage exceptions."""

    def test_configuration_error(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError(
            "Bad range",
            config_key="explore_min_enemies",
        )
        assert exc.details["config_key"] == "explore_min_enemies"
        assert exc.status_code == 500

    def test_storage_error(self) -> None:
        """Test StorageError with collection."""
        exc = StorageError("Write failed", collection="characters")
        assert exc.details["collection"] == "characters"


class TestExceptionChaining:
    """Tests for exception chaining behavior."""

    def test_raise_from(self) -> None:
        """Test that exceptions can be properly chained."""
        original = ValueError("Original error")

        with pytest.raises(StorageError) as exc_info:
            try:
                raise original
            except ValueError as e:
                raise StorageError("Wrapped error") from e

        assert exc_info.value.__cause__ is original
