"""Structured logging configuration using structlog.

Why this exists:
- Provides consistent, structured logging across the package
- Enables easy filtering and analysis of logs
- Supports context injection for tracing operations

How to use:
    from kbcontext.observability.logging import get_logger

    logger = get_logger(__name__)
    logger.debug("context_assembled", entry_count=10, output_chars=4200)

The assembler's output string never depends on logging; callers that do not
configure logging simply get structlog's defaults.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from kbcontext.config.schema import LoggingConfig


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to log events."""
    event_dict["app"] = "kbcontext"
    return event_dict


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structured logging for the application.

    Logs go to stderr so that CLI output on stdout stays pipeable.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output logs as JSON; otherwise use console format
    """
    numeric_level = getattr(logging, level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def configure_from_config(config: LoggingConfig) -> None:
    """Configure logging from a LoggingConfig object.

    Args:
        config: Logging configuration
    """
    configure_logging(level=config.level.value, json_logs=config.json_logs)
