r"""Structured logging utilities for machine-readable log output.

This module provides utilities for structured logging with JSON formatting,
correlation IDs, and race branch names. This is useful for log aggregation
systems like ELK, Splunk, or CloudWatch Logs.

The structured logging system is opt-in and can be enabled by configuring
Python's logging system to use the provided formatter.

Example:
    Enable structured logging for reqctl:

    ```python
    import logging
    from reqctl.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("reqctl")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```

    Use correlation IDs to track related requests:

    ```python
    from reqctl.utils.structured_logging import set_correlation_id, clear_correlation_id

    set_correlation_id("request-123")
    try:
        response = await reqctl.request(req).with_race(0.2).send()
    finally:
        clear_correlation_id()
    ```

    Log lines emitted inside a race carry a ``branch`` field set to
    ``"primary"`` or ``"hedge"``.
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_branch_name",
    "get_correlation_id",
    "log_structured",
    "set_branch_name",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

# Context variable for correlation ID (thread-safe and task-safe)
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Context variable for the race branch of the current task
_branch_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "branch_name", default=None
)

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID.

    Returns:
        The current correlation ID, or None if not set.

    Example:
        ```pycon
        >>> from reqctl.utils.structured_logging import (
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("req-123")
        >>> get_correlation_id()
        'req-123'

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The correlation ID is stored in a context variable, so it is inherited
    by the race branch tasks started from the current task.

    Args:
        correlation_id: The correlation ID to set (e.g., request ID, trace ID).
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id.set(None)


def get_branch_name() -> str | None:
    """Get the race branch name of the current task.

    Returns:
        ``"primary"`` or ``"hedge"`` inside a race branch, otherwise None.
    """
    return _branch_name.get()


def set_branch_name(name: str | None) -> None:
    """Set the race branch name for the current context.

    Each asyncio task runs in its own copy of the context, so setting the
    name inside a branch task does not leak into the caller.

    Args:
        name: The branch name, or None to clear it.
    """
    _branch_name.set(name)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    This formatter outputs log records as JSON objects with consistent field
    names. It automatically includes the correlation ID and the race branch
    if set, and preserves any extra fields added to the log record.

    Standard fields in the JSON output:
        - timestamp: ISO 8601 timestamp
        - level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - logger: Logger name
        - message: Log message
        - correlation_id: Optional correlation/trace ID
        - branch: Optional race branch name
        - module: Module name where log originated
        - function: Function name where log originated
        - line: Line number where log originated

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from reqctl.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("test_logger")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("Test message", extra={"request_id": "123"})
        >>> output = stream.getvalue()
        >>> "Test message" in output
        True
        >>> "request_id" in output
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        branch = get_branch_name()
        if branch is not None:
            log_data["branch"] = branch

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Fields added via the 'extra' parameter in logging calls
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format timestamp as ISO 8601 with millisecond precision (UTC).

        Args:
            record: The log record.
            datefmt: Ignored, the output is always ISO 8601.

        Returns:
            ISO 8601 formatted timestamp.
        """
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured data.

    The extra fields are included in the JSON output when using
    StructuredFormatter.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Additional structured fields to include in the log.
    """
    logger.log(level, message, extra=extra)
