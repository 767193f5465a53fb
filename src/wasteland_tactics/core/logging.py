"""Structured logging for the simulation core.

Two log channels exist. The HUD log is player-facing text kept on
``GameState.logs``; it is part of the game state. The developer log is
configured here with structlog and carries key/value context so that an
encounter can be reconstructed from JSON output.

The engine never configures logging itself. Hosts call
``configure_from_settings`` (or ``configure_logging``) once at start-up.

Example:
    >>> from wasteland_tactics.core.logging import configure_from_settings, get_logger
    >>> configure_from_settings()
    >>> get_logger(__name__).info("Combat started", generation=3)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from wasteland_tactics.core.config import Settings


APP_NAME = "wasteland_tactics"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit one JSON object per line instead of console output.
        log_file: Optional file that also receives standard library records.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(json_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        handlers=handlers,
        force=True,
    )


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``log_level`` and ``json_logs`` of the settings.

    ``debug`` overrides ``log_level`` with DEBUG.

    Args:
        settings: Settings to read; the singleton when omitted.
    """
    from wasteland_tactics.core.config import get_settings

    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level
    configure_logging(level=level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, typically named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs to every subsequent entry of this context.

    Example:
        >>> bind_context(session_id="vault-13")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop every bound context variable."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def scoped_context(**kwargs: Any) -> Iterator[None]:
    """Bind context for the duration of a ``with`` block only.

    Example:
        >>> with scoped_context(action="attack"):
        ...     get_logger().info("Resolving")
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "scoped_context",
]
