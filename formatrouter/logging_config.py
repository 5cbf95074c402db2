"""Logging configuration for formatrouter."""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import Processor

from formatrouter.config import get_settings


def setup_logging(log_level: str | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        log_level: Overrides the configured level (the CLI passes DEBUG for -v)
    """
    settings = get_settings()
    level = log_level or settings.log_level

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def job_context(job_id: str | None) -> Iterator[None]:
    """Attach ``job_id`` to every log line emitted inside the block."""
    if not job_id:
        yield
        return
    with structlog.contextvars.bound_contextvars(job_id=job_id):
        yield


def log_error(
    logger: structlog.stdlib.BoundLogger,
    error: BaseException,
    operation: str,
    exc_info: Any = True,
    **kwargs: Any,
) -> None:
    """Log an error with standard context.

    Pass the exception as ``exc_info`` when logging outside the ``except``
    block that caught it.
    """
    context = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    context.update(kwargs)

    logger.error("operation_failed", **context, exc_info=exc_info)
