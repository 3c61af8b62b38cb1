"""Structured logging for the QuestForge engine.

Engine modules log key/value events through structlog:

    >>> from questforge.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Combat started", character_id="abc", enemy_id="goblin")

Events carry an ``app`` field, an ISO timestamp and any context bound with
``bind_context`` or ``log_context``. ``configure_from_settings`` applies the
``QUESTFORGE_LOG_LEVEL`` / ``QUESTFORGE_LOG_JSON`` settings.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from questforge.core.config import Settings


APP_NAME = "questforge"
_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every event with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _level_number(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render events as JSON lines instead of console text.
        log_file: Optional file that also receives standard library records.
    """
    level_number = _level_number(level)

    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # sqlite3 and pydantic warnings go through the standard library
    logging.basicConfig(format=_STDLIB_FORMAT, level=level_number, stream=sys.stdout, force=True)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level_number)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from application settings.

    Args:
        settings: Settings to read. Defaults to ``get_settings()``.
    """
    if settings is None:
        from questforge.core.config import get_settings

        settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)
    get_logger(__name__).info(
        "Logging configured",
        app_name=settings.app_name,
        version=settings.app_version,
        production=settings.is_production,
        log_level=settings.log_level,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs to every later event on this context.

    Example:
        >>> bind_context(request_id="r-17")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context, typically at the end of a request."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**kwargs: Any) -> Generator[None, None, None]:
    """Bind context for the duration of a block, restoring the previous values."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "APP_NAME",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
