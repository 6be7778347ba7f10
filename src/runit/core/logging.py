"""
Structured logging for runit.

Every job-related log line is a structlog event with ``job`` and
``namespace`` bound, so a single job's lifecycle (created → active … →
finished/failed → removed) can be followed with one filter in a log
aggregator.

Configuration Flow:
    ::

        configure_logging(level="INFO", json_format=None, service="runit")
            ↓
        structlog processor chain:
          1. TimeStamper(iso)
          2. merge_contextvars
          3. add_log_level / add_logger_name
          4. add_service_metadata
          5. JSONRenderer (non-tty) or ConsoleRenderer (tty)

Examples:
    >>> from runit.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="runit")
    >>> logger = get_logger(__name__)
    >>> logger.info("job.created", job="etl-batch-1b2c", namespace="default")

Tags:
    logging, structlog, observability, json-logging, runit

Doc-Types:
    - API Reference
    - Observability Guide
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Store service name for metadata
_SERVICE_NAME = "runit"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "runit",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # structlog output, uvicorn and kubernetes all go through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
