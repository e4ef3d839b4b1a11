r"""Fluent builder controlling how a single HTTP request is executed.

This module provides the RequestController class. A controller wraps a
request template and an immutable execution plan. Each configuration
method returns a new controller, so a partially configured controller
can be shared and extended along different branches without one branch's
settings leaking into another.
"""

from __future__ import annotations

__all__ = ["RequestController", "request"]

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

import httpx

from reqctl.core.config import ExecutionPlan, RetryKind, RetryPolicy
from reqctl.race.coordinator import RaceCoordinator
from reqctl.retry.checker import default_retry_checker
from reqctl.retry.executor import RetryExecutor
from reqctl.retry.manager import CallbackManager

if TYPE_CHECKING:
    from reqctl.retry.checker import RetryChecker
    from reqctl.retry.config import CallbackConfig
    from reqctl.retry.outcome import Outcome

logger: logging.Logger = logging.getLogger(__name__)


class RequestController:
    r"""Controller adding retry, timeout, and racing to one request.

    A new controller has no retry, no per-attempt timeout, and no race.
    Policies are added with the ``with_*`` methods, which compose freely.

    The caller's cancellation scope is the single source of external
    cancellation: wrap ``send`` in ``asyncio.timeout(...)`` to bound the
    whole execution, retries and race included.

    Args:
        request: The request template. Every attempt sends a copy of it.
        plan: Optional execution plan. Defaults to an empty plan.
        callbacks: Optional lifecycle callbacks.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> import reqctl
        >>> async def main():
        ...     # Every attempt is limited to 100ms. A failed attempt is retried
        ...     # every 50ms, up to 3 times. If the whole sequence takes more
        ...     # than 150ms, a parallel sequence with the same policies starts.
        ...     ctrl = (
        ...         reqctl.request(httpx.Request("GET", "https://httpbin.org/status/200"))
        ...         .with_timeout(0.1)
        ...         .with_fixed_retry(0.05, 3)
        ...         .with_race(0.15)
        ...     )
        ...     async with asyncio.timeout(1.0):
        ...         response = await ctrl.send()
        ...     return response.status_code
        ...
        >>> asyncio.run(main())  # doctest: +SKIP
        200

        ```
    """

    def __init__(
        self,
        request: httpx.Request,
        *,
        plan: ExecutionPlan | None = None,
        callbacks: CallbackConfig | None = None,
    ) -> None:
        self._request = request
        self._plan = plan if plan is not None else ExecutionPlan()
        self._callbacks = callbacks

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self._request.method!r}, "
            f"url={str(self._request.url)!r}, plan={self._plan})"
        )

    @property
    def plan(self) -> ExecutionPlan:
        return self._plan

    @property
    def request(self) -> httpx.Request:
        return self._request

    def with_fixed_retry(
        self, interval: float, max_attempts: int, checker: RetryChecker | None = None
    ) -> RequestController:
        """Retry rejected attempts after a constant delay.

        Args:
            interval: Seconds to wait before each retry. Must be >= 0.
            max_attempts: Maximum number of retries after the first attempt.
                Must be >= 0.
            checker: Optional predicate deciding whether an outcome must be
                retried. Defaults to retrying on errors only.

        Returns:
            A new controller with the fixed retry policy.

        Raises:
            ValueError: If interval or max_attempts are negative.
        """
        return self._with_retry(RetryKind.FIXED, interval, max_attempts, checker)

    def with_exponential_retry(
        self, interval: float, max_attempts: int, checker: RetryChecker | None = None
    ) -> RequestController:
        """Retry rejected attempts with a doubling delay.

        The wait before the i-th retry (0-indexed) is ``interval * 2**i``,
        without cap or jitter.

        Args:
            interval: Seconds to wait before the first retry. Must be >= 0.
            max_attempts: Maximum number of retries after the first attempt.
                Must be >= 0.
            checker: Optional predicate deciding whether an outcome must be
                retried. Defaults to retrying on errors only.

        Returns:
            A new controller with the exponential retry policy.

        Raises:
            ValueError: If interval or max_attempts are negative.
        """
        return self._with_retry(RetryKind.EXPONENTIAL, interval, max_attempts, checker)

    def with_timeout(self, timeout: float) -> RequestController:
        """Limit the duration of every single attempt.

        Exceeding the limit makes the attempt fail with ``TimeoutError``,
        which the retry checker sees like any other error.

        Args:
            timeout: Maximum seconds per attempt. Must be > 0.

        Returns:
            A new controller with the per-attempt timeout.

        Raises:
            ValueError: If timeout is <= 0.
        """
        return self._evolve(replace(self._plan, timeout=timeout))

    def with_race(self, delay: float) -> RequestController:
        """Start a second, identical attempt sequence after a delay.

        Whichever sequence finishes first supplies the result. If the first
        sequence finishes before ``delay``, the second one never sends.

        Args:
            delay: Seconds to wait before starting the second sequence.
                Must be >= 0.

        Returns:
            A new controller with racing enabled.

        Raises:
            ValueError: If delay is negative.
        """
        return self._evolve(replace(self._plan, race_delay=delay))

    async def send(self, client: httpx.AsyncClient | None = None) -> httpx.Response:
        """Execute the request according to the configured policies.

        Args:
            client: Optional transport used for every attempt. If None, an
                ``httpx.AsyncClient`` without transport timeouts is created
                and closed after use, so the only deadlines are the
                per-attempt timeout and the caller's own scope.

        Returns:
            The response of the final attempt.

        Raises:
            httpx.RequestError: If the final attempt failed in the transport.
            TimeoutError: If the final attempt exceeded the per-attempt
                timeout, or the caller's own deadline expired.
        """
        owns_client = client is None
        client = client or httpx.AsyncClient(timeout=None)
        try:
            outcome = await self._dispatch(client)
        finally:
            if owns_client:
                await client.aclose()
        return outcome.unwrap()

    async def _dispatch(self, client: httpx.AsyncClient) -> Outcome:
        callbacks = CallbackManager(self._callbacks)
        logger.debug(
            f"Executing {self._request.method} request to {self._request.url} with {self._plan}"
        )
        if self._plan.races:
            return await RaceCoordinator(self._plan, callbacks).execute(client, self._request)
        return await RetryExecutor(self._plan, callbacks).execute(client, self._request)

    def _with_retry(
        self,
        kind: RetryKind,
        interval: float,
        max_attempts: int,
        checker: RetryChecker | None,
    ) -> RequestController:
        policy = RetryPolicy(
            kind=kind,
            interval=interval,
            max_attempts=max_attempts,
            checker=checker if checker is not None else default_retry_checker,
        )
        return self._evolve(replace(self._plan, retry=policy))

    def _evolve(self, plan: ExecutionPlan) -> RequestController:
        return RequestController(self._request, plan=plan, callbacks=self._callbacks)


def request(
    request: httpx.Request, *, callbacks: CallbackConfig | None = None
) -> RequestController:
    """Create a controller for a request, with no retry, timeout, or race.

    Args:
        request: The request template.
        callbacks: Optional lifecycle callbacks.

    Returns:
        A new RequestController.

    Example:
        ```pycon
        >>> import httpx
        >>> import reqctl
        >>> ctrl = reqctl.request(httpx.Request("GET", "https://example.com"))
        >>> ctrl.with_exponential_retry(0.1, 3).plan.retry.kind
        <RetryKind.EXPONENTIAL: 'exponential'>
        >>> ctrl.plan.retry.kind  # Original unchanged
        <RetryKind.NONE: 'none'>

        ```
    """
    return RequestController(request, callbacks=callbacks)
