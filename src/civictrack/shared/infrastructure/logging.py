"""
Structured Logging
==================

One JSON object per log line, so hosts can ship engine logs to whatever
aggregator they already run.

Each line carries:
- ``timestamp`` (UTC, ISO 8601), ``level``, ``logger`` and ``message``
- ``environment`` from the engine settings
- every key passed through ``extra``, e.g. ``issue_id`` or ``actor``
- ``correlation_id`` when the host bound one with ``get_context_logger``

Keys that look like credentials are masked before the line is written.

Usage:
    from civictrack.shared.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Issue submitted", extra={"issue_id": issue.id})
"""

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional, TextIO, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
RENAMED_FIELDS = {"levelname": "level", "name": "logger"}
SENSITIVE_KEY_PARTS = ("password", "token", "api_key", "secret")
REDACTED = "***REDACTED***"

SLOW_OPERATION_MS = 500.0

ContextLogger = Union[logging.Logger, logging.LoggerAdapter]


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping timestamp, environment and correlation id."""

    def __init__(self, *args: Any, environment: str = "unknown", **kwargs: Any):
        kwargs.setdefault("rename_fields", dict(RENAMED_FIELDS))
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault(
            "timestamp",
            datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
        )
        log_record["environment"] = getattr(record, "environment", self.environment)

        correlation_id = getattr(record, "correlation_id", None) or message_dict.get("correlation_id")
        if correlation_id:
            log_record["correlation_id"] = correlation_id

        for key in [k for k in log_record if _is_sensitive(k)]:
            if isinstance(log_record[key], str):
                log_record[key] = REDACTED


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in SENSITIVE_KEY_PARTS)


def setup_logging(
    level: str = "INFO",
    environment: str = "development",
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Send all records through a single JSON handler on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        level: Root log level name
        environment: Value of the ``environment`` field on every line
        stream: Output stream; defaults to stdout

    Returns:
        The installed handler
    """
    numeric_level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(CustomJsonFormatter(LOG_FORMAT, environment=environment))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)


def get_context_logger(
    name: str,
    correlation_id: Optional[str] = None,
    **context: Any
) -> ContextLogger:
    """
    Logger that adds fixed fields to every record it emits.

    Hosts use it to tie engine log lines to one request, e.g.
    ``get_context_logger(__name__, request_id, actor="City Staff")``.
    Without any context the plain module logger is returned.
    """
    if correlation_id:
        context["correlation_id"] = correlation_id
    logger = get_logger(name)
    if not context:
        return logger
    return logging.LoggerAdapter(logger, context)


@contextmanager
def log_latency(
    logger: ContextLogger,
    operation: str,
    slow_ms: float = SLOW_OPERATION_MS,
    **extra_context: Any
) -> Iterator[None]:
    """
    Time the enclosed block and log how long it took.

    Logged at DEBUG normally and at WARNING once ``slow_ms`` is exceeded,
    e.g. an aggregation over a very large collection.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        level = logging.WARNING if latency_ms > slow_ms else logging.DEBUG
        logger.log(
            level,
            "%s completed",
            operation,
            extra={"operation": operation, "latency_ms": latency_ms, **extra_context},
        )
