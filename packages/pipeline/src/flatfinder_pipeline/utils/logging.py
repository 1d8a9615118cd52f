"""
utils/logging.py — structlog setup shared by the CLI and the pipelines.

Everything is rendered to stderr, as JSON lines or as console output
(coloured on a terminal; see settings.log_format), so the JSON the CLI
prints on stdout can be piped straight into jq. The click group calls
configure_logging() before any command runs; library callers may skip it
and get structlog defaults.

Usage:
    from flatfinder_pipeline.utils.logging import configure_logging, get_logger

    configure_logging(log_level="DEBUG", log_format="console")

    log = get_logger(__name__, pipeline="dashboard")
    log.bind(sale_exercise="Feb2025").info("pipeline_start", units=912)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from flatfinder_shared.config import settings


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog for the process.

    Should be called once at startup. Idempotent.

    Args:
        log_level:  Override settings.log_level ("DEBUG", "INFO", …).
        log_format: Override settings.log_format ("json" | "console").
    """
    level = log_level or settings.log_level
    fmt = log_format or settings.log_format
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    # Logs go to stderr so CLI JSON output on stdout stays machine-readable
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """
    Return a lazy structlog logger with optional initial context values.

    Binding is deferred to the first log call, so module-level loggers pick
    up the configuration applied later by configure_logging().

    Args:
        name:             Logger name (conventionally the module __name__).
        **initial_values: Key-value pairs merged into every log record.
    """
    return structlog.get_logger(name, **initial_values)
