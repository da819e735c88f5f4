"""
Structured logging setup using structlog.

Modules log through the standard library (logging.getLogger(__name__) with
extra={...}); setup_logging routes those records through structlog so they
render as JSON or console output. Runners wrap each unit of work in
lane_context so every record emitted while it executes, including records
from user handlers, carries the queue name and lane key.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

import structlog
from opentelemetry import trace

from admission_queue.config import get_settings

# Loggers that are too chatty at the application log level
NOISY_LOGGERS = ("asyncio", "opentelemetry")


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add OpenTelemetry trace context to log records.

    Args:
        logger: The logger instance.
        method_name: The method name being called.
        event_dict: The event dictionary.

    Returns:
        The event dictionary with trace_id and span_id when a span is recording.
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    stream: TextIO | None = None,
    log_level: str | None = None,
    log_format: str | None = None,
) -> logging.Handler:
    """
    Configure structured logging for the application.

    Explicit arguments override the corresponding settings.

    Args:
        stream: Destination for rendered records. Defaults to stdout.
        log_level: Level name for the root logger.
        log_format: "json" or "console".

    Returns:
        The handler installed on the root logger.
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    # Lane context and trace ids are merged before the level and timestamp
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_trace_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format or settings.log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler


@contextmanager
def lane_context(queue: str, key: Any = None) -> Iterator[None]:
    """
    Tag every log record emitted inside the block with the queue and lane key.

    Context is stored in contextvars, so it stays local to the asyncio task
    executing the lane.

    Args:
        queue: Queue name.
        key: Lane key. Omitted for unkeyed work.
    """
    fields: dict[str, Any] = {"queue": queue}
    if key is not None:
        fields["key"] = str(key)
    with structlog.contextvars.bound_contextvars(**fields):
        yield
