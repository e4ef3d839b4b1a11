r"""Callback data structures for observability.

This module provides the information objects passed to lifecycle
callbacks, enabling users to hook into request execution for logging,
metrics, or alerting.

The callback system provides four lifecycle hooks:
- on_request: Called before each attempt
- on_retry: Called before each backoff wait
- on_success: Called when the retry checker accepts an outcome
- on_failure: Called when the final outcome is still rejected

When racing is enabled both branches report through the same callbacks;
the ``branch`` field tells them apart.

Example:
    ```pycon
    >>> import httpx
    >>> import reqctl
    >>> from reqctl.callbacks import RetryInfo
    >>> from reqctl.retry import CallbackConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"Attempt {info.attempt} in {info.wait_time}s")
    ...
    >>> ctrl = reqctl.request(
    ...     httpx.Request("GET", "https://api.example.com/data"),
    ...     callbacks=CallbackConfig(on_retry=log_retry),
    ... ).with_fixed_retry(0.1, 3)

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RequestInfo", "ResponseInfo", "RetryInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


@dataclass
class RequestInfo:
    """Information passed to on_request callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The current attempt number (1-indexed). First attempt is 1.
        max_attempts: Maximum number of retries configured.
        branch: The race branch making the attempt, or ``None`` when not
            racing.
    """

    url: str
    method: str
    attempt: int
    max_attempts: int
    branch: str | None = None


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The upcoming attempt number (1-indexed). First retry is
            attempt 2.
        max_attempts: Maximum number of retries configured.
        wait_time: The backoff wait in seconds before this retry.
        error: The error that triggered the retry (if any).
        status_code: The HTTP status code that triggered the retry (if any).
        branch: The race branch retrying, or ``None`` when not racing.
    """

    url: str
    method: str
    attempt: int
    max_attempts: int
    wait_time: float
    error: Exception | None
    status_code: int | None
    branch: str | None = None


@dataclass
class ResponseInfo:
    """Information passed to on_success callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number that was accepted (1-indexed).
        max_attempts: Maximum number of retries configured.
        response: The accepted HTTP response, or ``None`` when a custom
            checker accepted an error.
        total_time: Total time spent on all attempts including backoff (seconds).
        branch: The race branch, or ``None`` when not racing.
    """

    url: str
    method: str
    attempt: int
    max_attempts: int
    response: httpx.Response | None
    total_time: float
    branch: str | None = None


@dataclass
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The final attempt number (1-indexed).
        max_attempts: Maximum number of retries configured.
        error: The error of the final attempt (if any).
        status_code: The HTTP status code of the final attempt (if any).
        total_time: Total time spent on all attempts including backoff (seconds).
        branch: The race branch, or ``None`` when not racing.
    """

    url: str
    method: str
    attempt: int
    max_attempts: int
    error: Exception | None
    status_code: int | None
    total_time: float
    branch: str | None = None
