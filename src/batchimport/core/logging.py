"""Structured logging setup built on structlog.

Modules get a logger with ``get_logger(__name__)`` and log snake_case events
with key/value context::

    logger = get_logger(__name__)
    logger.info("batch_started", job_id=job.id, working_file=job.working_file)

``configure_logging`` is called once by the embedding application; without it
structlog's default console configuration applies.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", json_format: bool | None = None) -> None:
    """Configure structlog for the process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        json_format: True for JSON lines, False for console output,
            None to pick JSON when stdout is not a tty.
    """
    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info if json_format else structlog.dev.set_exc_info,
    ]
    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog bound logger."""
    return structlog.get_logger(name)


class LogContext:
    """Bind key/values to every log event emitted inside the ``with`` block."""

    def __init__(self, **kwargs: Any) -> None:
        self._context = kwargs

    def __enter__(self) -> LogContext:
        structlog.contextvars.bind_contextvars(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self._context.keys())
