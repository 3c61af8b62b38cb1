"""Tests for structured logging setup."""

from __future__ import annotations

import json
from typing import Any

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog() -> Any:
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON rendering includes the app tag and event fields."""
        from questforge.core.logging import configure_logging, get_logger

        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("Combat started", enemy_id="goblin")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "Combat started"
        assert event["enemy_id"] == "goblin"
        assert event["app"] == "questforge"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test events below the configured level are dropped."""
        from questforge.core.logging import configure_logging, get_logger

        configure_logging(level="WARNING", json_format=True)
        logger = get_logger("test")
        logger.info("hidden")
        logger.warning("shown")

        output = capsys.readouterr().out
        assert "hidden" not in output
        assert "shown" in output

    def test_from_settings(
        self, mock_env_vars: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test settings drive the configured level."""
        from questforge.core.config import get_settings
        from questforge.core.logging import configure_from_settings, get_logger

        configure_from_settings(get_settings())
        get_logger("test").debug("Debug visible")

        assert "Debug visible" in capsys.readouterr().out

    def test_startup_event(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test configuring from settings logs the app version and mode."""
        from questforge.core.config import get_settings
        from questforge.core.logging import configure_from_settings

        monkeypatch.setenv("QUESTFORGE_LOG_JSON", "true")
        monkeypatch.setenv("QUESTFORGE_DEBUG", "true")

        configure_from_settings(get_settings())

        events = [
            json.loads(line)
            for line in capsys.readouterr().out.splitlines()
            if line.startswith("{")
        ]
        startup = next(event for event in events if event["event"] == "Logging configured")
        assert startup["version"] == "0.1.0"
        assert startup["production"] is False
        assert startup["app_name"] == "QuestForge"


class TestLogContext:
    """Tests for bound logging context."""

    def test_log_context_restores(self) -> None:
        """Test context is scoped to the block."""
        from questforge.core.logging import bind_context, log_context

        bind_context(request_id="r-1")
        with log_context(character_id="hero"):
            assert structlog.contextvars.get_contextvars() == {
                "request_id": "r-1",
                "character_id": "hero",
            }

        assert structlog.contextvars.get_contextvars() == {"request_id": "r-1"}

    def test_clear_context(self) -> None:
        """Test clearing drops every bound key."""
        from questforge.core.logging import bind_context, clear_context

        bind_context(request_id="r-1")
        clear_context()

        assert structlog.contextvars.get_contextvars() == {}

    def test_service_binds_character(
        self, service: Any, hero: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test service operations run with the character id bound."""
        seen: list[dict[str, Any]] = []
        original = service.repository.update_character

        def spy(character_id: str, updates: Any) -> Any:
            seen.append(structlog.contextvars.get_contextvars())
            return original(character_id, updates)

        monkeypatch.setattr(service.repository, "update_character", spy)
        service.move_character(hero.id, "forest")

        assert seen == [{"character_id": hero.id}]
        assert structlog.contextvars.get_contextvars() == {}
