"""
Structured logging for the container trait layer.

Container operations are hot paths and never log. Logging is reserved for
rare, structurally interesting events: a backend registering its traits, a
buffer being resized through its allocator, an allocation being refused, a
container being torn down.

Architecture:
    ::

        configure_logging(level="DEBUG", json_format=False)
            │
            ▼
        structlog processor chain:
          1. filter_by_level (stdlib level)
          2. TimeStamper (iso)
          3. add_log_level / add_logger_name
          4. _add_service_metadata
          5. JSONRenderer  (or ConsoleRenderer for a tty), to stderr

        logger = get_logger(__name__)
        logger.debug("buffer_resized", container="HashMap", old=8, new=16)

Examples:
    >>> from ccc.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> get_logger(__name__).debug("allocation_failed", requested=64)

Tags:
    logging, structlog, observability, ccc
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "ccc"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _configure_structlog(json_format: bool, add_timestamp: bool = True) -> None:
    shared_processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(1, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "ccc",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    _configure_structlog(json_format, add_timestamp)

    # stdout stays free for command output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )


def configure_from_settings() -> None:
    """Configure logging from :class:`~ccc.core.settings.CccSettings`."""
    from ccc.core.settings import get_settings

    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_format == "json",
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger

    Until the application calls :func:`configure_logging`, events go through
    the standard library's own level and handlers, which drop debug events.
    """
    if not structlog.is_configured():
        _configure_structlog(json_format=True)
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
