"""Structured logging for brickORM using structlog.

brickORM never configures logging on import.  Applications that want the
library's events rendered call :func:`configure_logging` once at startup::

    from brickorm.logs import configure_logging

    configure_logging("DEBUG")

Every module obtains its logger through :func:`get_logger`, so events carry
the module name and can be filtered through the standard ``logging`` tree.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(level: str | None = None, *, json: bool = False) -> None:
    """Configure structlog and the stdlib root handler.

    Args:
        level: Log level name; defaults to the ``log_level`` setting.
        json: Render events as JSON instead of the console renderer.
    """
    if level is None:
        from brickorm.settings import get_settings

        level = get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", level=log_level)

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name``.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("statement_compiled", dialect="postgres", arg_count=2)
    """
    return structlog.get_logger(name)
