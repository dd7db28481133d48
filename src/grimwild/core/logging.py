"""Structured logging for the Grimwild character engine.

Logging is driven by :class:`~grimwild.core.config.Settings`: the level,
renderer and optional log file all come from ``GRIMWILD_*`` settings, and
every event is stamped with the application name and version. The engine
only ever calls :func:`get_logger`; the hosting application calls
:func:`configure_logging` once at startup.

Example:
    >>> from grimwild.core.logging import configure_logging, get_logger
    >>> configure_logging()  # reads GRIMWILD_LOG_LEVEL, GRIMWILD_JSON_LOGS, ...
    >>> get_logger(__name__).info("Spark spent", character_id="abc", spent=1)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from grimwild.core.config import Settings, get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def app_context(settings: Settings) -> Processor:
    """Build a processor that stamps events with the app name and version."""
    app = settings.app_name
    version = settings.app_version

    def add_app_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("app", app)
        event_dict.setdefault("version", version)
        return event_dict

    return add_app_context


def effective_level(settings: Settings) -> int:
    """Numeric level for ``settings``; debug mode always logs at DEBUG."""
    if settings.debug:
        return logging.DEBUG
    return logging.getLevelName(settings.log_level)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and stdlib logging from settings.

    Args:
        settings: Settings to apply; the cached environment settings when
            omitted.

    Raises:
        ConfigurationError: If settings have to be loaded and are invalid.
    """
    settings = settings or get_settings()
    level = effective_level(settings)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(settings),
    ]
    if settings.json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(format=STDLIB_FORMAT, level=level, handlers=handlers, force=True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    get_logger(__name__).debug(
        "Logging configured",
        level=logging.getLevelName(level),
        json_logs=settings.json_logs,
        log_file=settings.log_file,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger; unconfigured loggers use structlog's defaults."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context (e.g. ``character_id``) to every later event in this task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "app_context",
    "effective_level",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
