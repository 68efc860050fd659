# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

LearnFeed logs from two kinds of loggers: the feed service uses structlog
loggers, while the collector, the stores and the API modules use plain
``logging.getLogger(__name__)``. Both are rendered by one structlog
ProcessorFormatter on the root handler, so every line carries the same
fields, including the ``feed_run_id`` of the aggregation run it belongs to.

Lines are JSON in production and colored console output in development.

Example:
    >>> from src.utils.logging import setup_logging, get_logger, feed_run_context
    >>> from src.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> with feed_run_context(7):
    ...     logger.info("Feed run finished", records=20)
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from src.core.config.settings import Settings

SERVICE_NAME = "learnfeed"

# Name of the root handler installed by setup_logging.
HANDLER_NAME = "learnfeed"

# Framework loggers kept at WARNING. The SQLAlchemy engine logger is
# handled separately so database echo still works.
_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore", "asyncio")


def _service_info(environment: str) -> Processor:
    def add_service_info(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_info


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Sets up structlog on top of the standard library:
    - Development: Colored console output
    - Production: JSON output for log aggregation

    Args:
        settings: Application settings containing log_level, debug and the
            database echo flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _service_info(settings.environment),
    ]

    renderer: Processor
    if settings.is_development or settings.debug:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
        render_chain: list[Processor] = [renderer]
    else:
        renderer = structlog.processors.JSONRenderer()
        render_chain = [structlog.processors.format_exc_info, renderer]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared_processors, structlog.stdlib.ExtraAdder()],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render_chain],
        )
    )

    # Replace only our own handler so repeated setup does not duplicate lines.
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # INFO is the level SQLAlchemy logs statements at.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database.echo else logging.WARNING
    )

    logging.getLogger("src").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


@contextmanager
def feed_run_context(run_id: int) -> Iterator[None]:
    """Tag every log line emitted inside the block with a feed run id.

    Any previously bound run id is restored on exit, so nested or
    interleaved runs in one task keep their own ids.

    Args:
        run_id: Id of the aggregation run.
    """
    with structlog.contextvars.bound_contextvars(feed_run_id=run_id):
        yield
