"""Structured logging for the pipeline roles.

Each process calls ``setup_logging`` once with its role name. The role
and environment are bound as context variables so every event from a
producer, worker or aggregator process can be told apart once their
output is interleaved.
"""

import logging
import sys
from typing import Any

import structlog

from pipeline.config import Settings, get_settings

# Third-party loggers that are chatty below WARNING
QUIET_LOGGERS = ("redis",)


def _renderer(settings: Settings) -> Any:
    if settings.is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(role: str | None = None, settings: Settings | None = None) -> None:
    """
    Configure structlog for one pipeline process.

    Args:
        role: Process role bound into every event (producer, worker, aggregator)
        settings: Settings to read the level and environment from
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(settings),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    context: dict[str, Any] = {"env": settings.env, "queue_backend": settings.queue_backend}
    if role:
        context["role"] = role
    structlog.contextvars.bind_contextvars(**context)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
