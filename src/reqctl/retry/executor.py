r"""Asynchronous retry executor for HTTP requests.

This module provides the RetryExecutor class that runs one logical
request: a first attempt, then retries according to the retry policy of
an execution plan until the retry checker accepts an outcome or the retry
budget is exhausted.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from reqctl.retry.manager import CallbackManager
from reqctl.retry.outcome import Outcome
from reqctl.utils.request import clone_request

if TYPE_CHECKING:
    from reqctl.core.config import ExecutionPlan

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes an HTTP request with the retry and timeout policies of a
    plan.

    Attempts are strictly sequential: attempt N+1 never starts before the
    outcome of attempt N is known. The executor has no concurrency of its
    own and runs entirely in the calling task.

    Each attempt:
    - sends a fresh copy of the request template through the client
    - is bounded by ``asyncio.timeout(plan.timeout)`` when a per-attempt
      timeout is configured. The deadline is nested inside the caller's
      own cancellation scope, so it can shorten but never extend it
    - captures transport errors (``httpx.RequestError``) and deadline
      errors (``TimeoutError``) into the returned ``Outcome``

    The outcome of the final attempt is always the one returned, whether
    the retry checker accepted it or not.

    Attributes:
        plan: Private copy of the execution plan.
        callbacks: Manager for invoking lifecycle callbacks.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from reqctl.core import ExecutionPlan, RetryKind, RetryPolicy
        >>> from reqctl.retry import RetryExecutor
        >>> async def main():
        ...     plan = ExecutionPlan(
        ...         retry=RetryPolicy(kind=RetryKind.FIXED, interval=0.1, max_attempts=3)
        ...     )
        ...     async with httpx.AsyncClient() as client:
        ...         outcome = await RetryExecutor(plan).execute(
        ...             client, httpx.Request("GET", "https://api.example.com/data")
        ...         )
        ...     return outcome.unwrap()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, plan: ExecutionPlan, callbacks: CallbackManager | None = None) -> None:
        self.plan = plan.clone()
        self.callbacks = callbacks if callbacks is not None else CallbackManager()

    async def execute(self, client: httpx.AsyncClient, request: httpx.Request) -> Outcome:
        """Execute the request with automatic retry logic.

        Args:
            client: The transport used to send each attempt. Anything with an
                ``async send(request)`` method returning ``httpx.Response``.
            request: The request template. A copy is sent on every attempt.

        Returns:
            The outcome of the last attempt made.
        """
        policy = self.plan.retry
        max_attempts = policy.max_attempts if policy.enabled else 0
        url, method = str(request.url), request.method
        await request.aread()
        start_time = time.time()

        attempt = 0
        outcome = await self._attempt(client, request, attempt, max_attempts)
        rejected = self._rejects(outcome)

        # attempt 0 is the initial try, 1..max_attempts are retries
        while rejected and attempt < max_attempts:
            wait_time = policy.delay(attempt)
            self.callbacks.on_retry(url, method, attempt, max_attempts, wait_time, outcome)
            if wait_time > 0:
                logger.debug(f"Waiting {wait_time:.3f}s before retrying {method} request to {url}")
                await asyncio.sleep(wait_time)

            attempt += 1
            outcome = await self._attempt(client, request, attempt, max_attempts)
            rejected = self._rejects(outcome)

        if rejected:
            self.callbacks.on_failure(url, method, attempt, max_attempts, outcome, start_time)
        else:
            if attempt > 0:
                logger.debug(f"{method} request to {url} succeeded on attempt {attempt + 1}")
            self.callbacks.on_success(url, method, attempt, max_attempts, outcome, start_time)
        return outcome

    async def send_once(self, client: httpx.AsyncClient, request: httpx.Request) -> Outcome:
        """Send a single attempt, bounded by the per-attempt timeout.

        Args:
            client: The transport used to send the attempt.
            request: The request template. Its body must already be read.

        Returns:
            The outcome of the attempt.
        """
        try:
            if self.plan.timeout is None:
                response = await client.send(clone_request(request))
            else:
                async with asyncio.timeout(self.plan.timeout):
                    response = await client.send(clone_request(request))
        except (httpx.RequestError, TimeoutError) as exc:
            return Outcome(error=exc)
        return Outcome(response=response)

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        attempt: int,
        max_attempts: int,
    ) -> Outcome:
        url, method = str(request.url), request.method
        self.callbacks.on_request(url, method, attempt, max_attempts)
        outcome = await self.send_once(client, request)
        if outcome.error is not None:
            logger.debug(
                f"{method} request to {url} raised {type(outcome.error).__name__} "
                f"on attempt {attempt + 1}/{max_attempts + 1}: {outcome.error}"
            )
        return outcome

    def _rejects(self, outcome: Outcome) -> bool:
        policy = self.plan.retry
        if not policy.enabled:
            return outcome.error is not None
        return policy.checker(outcome.response, outcome.error)
