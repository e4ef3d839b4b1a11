r"""Callback manager for orchestrating lifecycle events.

This module provides the CallbackManager class that handles invocation
of user-defined callbacks at various points of request execution.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import TYPE_CHECKING

from reqctl.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
from reqctl.retry.config import CallbackConfig
from reqctl.utils.structured_logging import get_branch_name

if TYPE_CHECKING:
    from reqctl.retry.outcome import Outcome


class CallbackManager:
    """Manages callback invocations during request execution.

    Every info object is tagged with the race branch of the calling task,
    if any.

    Attributes:
        callbacks: Configuration containing callback functions for lifecycle events.
    """

    def __init__(self, callbacks: CallbackConfig | None = None) -> None:
        self.callbacks = callbacks if callbacks is not None else CallbackConfig()

    def on_request(self, url: str, method: str, attempt: int, max_attempts: int) -> None:
        """Invoke on_request callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: Current attempt number (0-indexed).
            max_attempts: Maximum number of retries.
        """
        if self.callbacks.on_request:
            self.callbacks.on_request(
                RequestInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    branch=get_branch_name(),
                )
            )

    def on_retry(
        self,
        url: str,
        method: str,
        attempt: int,
        max_attempts: int,
        wait_time: float,
        outcome: Outcome,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            url: The URL being requested.
            method: The HTTP method.
            attempt: Number of the attempt that was rejected (0-indexed).
            max_attempts: Maximum number of retries.
            wait_time: Backoff wait before the next attempt.
            outcome: The rejected outcome.
        """
        if self.callbacks.on_retry:
            self.callbacks.on_retry(
                RetryInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 2,  # Next attempt number
                    max_attempts=max_attempts,
                    wait_time=wait_time,
                    error=outcome.error,
                    status_code=outcome.status_code,
                    branch=get_branch_name(),
                )
            )

    def on_success(
        self,
        url: str,
        method: str,
        attempt: int,
        max_attempts: int,
        outcome: Outcome,
        start_time: float,
    ) -> None:
        if self.callbacks.on_success:
            self.callbacks.on_success(
                ResponseInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    response=outcome.response,
                    total_time=time.time() - start_time,
                    branch=get_branch_name(),
                )
            )

    def on_failure(
        self,
        url: str,
        method: str,
        attempt: int,
        max_attempts: int,
        outcome: Outcome,
        start_time: float,
    ) -> None:
        if self.callbacks.on_failure:
            self.callbacks.on_failure(
                FailureInfo(
                    url=url,
                    method=method,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    error=outcome.error,
                    status_code=outcome.status_code,
                    total_time=time.time() - start_time,
                    branch=get_branch_name(),
                )
            )
