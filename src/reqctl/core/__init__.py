r"""Execution plan configuration and validation."""

from __future__ import annotations

__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_MAX_ATTEMPTS",
    "NO_RETRY",
    "ExecutionPlan",
    "RetryKind",
    "RetryPolicy",
    "validate_race_delay",
    "validate_retry_params",
    "validate_timeout",
]

from reqctl.core.config import (
    DEFAULT_INTERVAL,
    DEFAULT_MAX_ATTEMPTS,
    NO_RETRY,
    ExecutionPlan,
    RetryKind,
    RetryPolicy,
)
from reqctl.core.validation import (
    validate_race_delay,
    validate_retry_params,
    validate_timeout,
)
