r"""reqctl - Retry, timeout, and racing for a single HTTP request.

This package controls how one outgoing HTTP request is executed. Built on
top of the httpx library, it composes three independent policies into a
single execution:

Key Features:
    - Retry on failure with fixed or exponential backoff
    - Pluggable retry checkers deciding which outcomes are failures
    - Per-attempt timeout layered inside the caller's own deadline
    - Delayed parallel racing: a second identical attempt sequence starts
      after a delay and the first to finish wins
    - Callback system for observability (logging, metrics, alerting)

Example:
    ```pycon
    >>> import asyncio
    >>> import httpx
    >>> import reqctl
    >>> async def main():
    ...     ctrl = (
    ...         reqctl.request(httpx.Request("GET", "https://httpbin.org/status/200"))
    ...         .with_exponential_retry(0.1, 3)
    ...         .with_timeout(0.5)
    ...         .with_race(0.2)
    ...     )
    ...     async with asyncio.timeout(5.0):
    ...         response = await ctrl.send()
    ...     return response.status_code
    ...
    >>> asyncio.run(main())  # doctest: +SKIP
    200

    ```
"""

from __future__ import annotations

__all__ = [
    "CallbackConfig",
    "ExecutionPlan",
    "Outcome",
    "RaceCoordinator",
    "RequestController",
    "RetryExecutor",
    "RetryKind",
    "RetryPolicy",
    "__version__",
    "default_retry_checker",
    "request",
    "retry_on_status",
]

from importlib.metadata import PackageNotFoundError, version

from reqctl.controller import RequestController, request
from reqctl.core.config import ExecutionPlan, RetryKind, RetryPolicy
from reqctl.race.coordinator import RaceCoordinator
from reqctl.retry import (
    CallbackConfig,
    Outcome,
    RetryExecutor,
    default_retry_checker,
    retry_on_status,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
