"""Structured logging setup for nfl-ingest.

All modules log through ``structlog.get_logger(__name__)`` with keyword
context; this wires structlog onto stdlib logging so handlers, levels and
third-party loggers (httpx, sqlalchemy) share one output.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog + stdlib logging.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of the console renderer
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # httpx logs every request at INFO; we log our own fetches.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
