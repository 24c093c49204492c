"""
Structured logging utilities.

Configures stdlib logging and structlog from ``LoggingConfig`` and provides a
context manager for timing an operation with start, completion and failure
events.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

import structlog

from src.core.config.logging_config import LoggingConfig

logger = structlog.get_logger(__name__)


def configure_logging(logging_config: LoggingConfig) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        logging_config: Level, stdlib format and renderer selection.
    """
    level = getattr(logging, logging_config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=logging_config.format)

    renderer: Any = (
        structlog.processors.JSONRenderer() if logging_config.json else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def log_operation(operation: str, **context: Any) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        **context: Additional context to include in logs

    Example:
        async with log_operation("webhook_dispatch", event_type=event_key):
            await dispatcher.process(event_key, body, result)
    """
    start_time = time.time()
    log = logger.bind(operation=operation, **context)
    log.info("operation_started")

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        log.error("operation_failed", error=str(e), latency_ms=latency_ms, exc_info=True)
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        log.info("operation_completed", latency_ms=latency_ms)
