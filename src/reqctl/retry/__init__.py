r"""Retry package implementing the sequential attempt loop.

Public API:
    - CallbackConfig: Configuration for callbacks
    - CallbackManager: Manager for callback invocations
    - Outcome: The (response, error) pair of one attempt
    - RetryChecker: Type of the predicates deciding whether to retry
    - RetryExecutor: Asynchronous retry executor
    - default_retry_checker: Retry only on errors
    - retry_on_status: Retry on errors and on given status codes
"""

from __future__ import annotations

__all__ = [
    "RETRY_STATUS_CODES",
    "CallbackConfig",
    "CallbackManager",
    "Outcome",
    "RetryChecker",
    "RetryExecutor",
    "default_retry_checker",
    "retry_on_status",
]

from reqctl.retry.checker import (
    RETRY_STATUS_CODES,
    RetryChecker,
    default_retry_checker,
    retry_on_status,
)
from reqctl.retry.config import CallbackConfig
from reqctl.retry.executor import RetryExecutor
from reqctl.retry.manager import CallbackManager
from reqctl.retry.outcome import Outcome
