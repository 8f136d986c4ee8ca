"""Centralised logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog import stdlib
from structlog.contextvars import bind_contextvars, unbind_contextvars

from .config import LOG_LEVELS, settings

_LOGGING_CONFIGURED = False


def configure_logging(level: int | str | None = None) -> None:
    """Initialise structlog with a JSON renderer and contextvars support.

    Applications call this once at startup; importing the package never
    touches the host's logging setup.
    """

    global _LOGGING_CONFIGURED
    if level is None:
        level = settings.log_level
    if isinstance(level, str):
        name = level.strip().upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {level!r}")
        level = getattr(logging, name)
    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.filter_by_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=stdlib.BoundLogger,
        logger_factory=stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str | None = None):
    """Return a structlog logger; configuration is left to the application."""

    return structlog.get_logger(name)


@contextmanager
def request_context(**values: Any) -> Iterator[None]:
    """Bind context variables for the duration of a single API call."""

    if not values:
        yield
        return
    bind_contextvars(**values)
    try:
        yield
    finally:
        unbind_contextvars(*values.keys())


__all__ = ["configure_logging", "get_logger", "request_context"]
