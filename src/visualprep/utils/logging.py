"""Structured logging configuration using structlog.

Correlation fields are kept in structlog's context variables and merged
into every event by ``merge_contextvars``:

    run_id:  one CLI invocation, bound by ``bind_run_id``
    source:  the image an operation is working on
    segment: band index while slicing

``source`` and ``segment`` are scoped with ``operation_context`` and are
gone again once the operation returns.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, cast

import structlog
from structlog.types import Processor

from visualprep.config import settings


def bind_run_id(run_id: str) -> None:
    """Tag every following event in this context with ``run_id``."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


@contextmanager
def operation_context(
    source: str | Path | None = None,
    segment: int | None = None,
) -> Iterator[None]:
    """Bind ``source`` and/or ``segment`` for the duration of a block.

    Values bound by an enclosing block are restored on exit, so nesting a
    per-segment context inside a per-source one works as expected.

    Example:
        with operation_context(source=path):
            logger.info("Slicing image")  # carries source=...
        logger.info("Done")  # no source
    """
    fields: dict[str, Any] = {}
    if source is not None:
        fields["source"] = str(source)
    if segment is not None:
        fields["segment"] = segment
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def get_correlation_context() -> dict[str, Any]:
    """Return the correlation fields currently bound."""
    return structlog.contextvars.get_contextvars()


def clear_correlation_context() -> None:
    """Drop every bound correlation field."""
    structlog.contextvars.clear_contextvars()


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with the specified settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to match
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A bound structlog logger instance.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
