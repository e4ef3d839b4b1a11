r"""Execution plan dataclasses and defaults.

This module provides the immutable configuration objects consumed by the
retry executor and the race coordinator. Every change produces a new
object, so a plan can be shared freely between builders and concurrent
branches.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_MAX_ATTEMPTS",
    "NO_RETRY",
    "ExecutionPlan",
    "RetryKind",
    "RetryPolicy",
]

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from reqctl.backoff import ConstantBackoff, ExponentialBackoff
from reqctl.core.validation import (
    validate_race_delay,
    validate_retry_params,
    validate_timeout,
)
from reqctl.retry.checker import default_retry_checker

if TYPE_CHECKING:
    from reqctl.backoff import BaseBackoffStrategy
    from reqctl.retry.checker import RetryChecker


# Default number of retries after the first attempt
# Total attempts = max_attempts + 1 (initial attempt)
DEFAULT_MAX_ATTEMPTS = 3

# Default delay in seconds between attempts
DEFAULT_INTERVAL = 0.1


class RetryKind(Enum):
    """How an attempt is repeated after a rejected outcome."""

    NONE = "none"
    FIXED = "fixed"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class RetryPolicy:
    """Rule governing whether, how often, and with which delay an attempt
    is repeated.

    Args:
        kind: The retry kind. ``RetryKind.NONE`` disables retries.
        interval: Delay in seconds before each retry for ``FIXED``, or
            before the first retry for ``EXPONENTIAL``. Must be >= 0.
        max_attempts: Maximum number of retries after the first attempt.
            Must be >= 0.
        checker: Predicate called with ``(response, error)`` after each
            attempt. Returns ``True`` when the outcome must be retried.

    Example:
        ```pycon
        >>> from reqctl.core.config import RetryKind, RetryPolicy
        >>> policy = RetryPolicy(kind=RetryKind.EXPONENTIAL, interval=0.1, max_attempts=3)
        >>> [policy.delay(i) for i in range(3)]
        [0.1, 0.2, 0.4]

        ```
    """

    kind: RetryKind = RetryKind.NONE
    interval: float = DEFAULT_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    checker: RetryChecker = field(default=default_retry_checker, compare=False)

    def __post_init__(self) -> None:
        validate_retry_params(interval=self.interval, max_attempts=self.max_attempts)

    @property
    def enabled(self) -> bool:
        return self.kind is not RetryKind.NONE

    def backoff(self) -> BaseBackoffStrategy:
        """Return the backoff strategy matching the retry kind.

        Returns:
            A ``ConstantBackoff`` for ``FIXED`` and ``NONE``, and an
            ``ExponentialBackoff`` for ``EXPONENTIAL``.
        """
        if self.kind is RetryKind.EXPONENTIAL:
            return ExponentialBackoff(base_delay=self.interval)
        return ConstantBackoff(delay=self.interval)

    def delay(self, attempt: int) -> float:
        """Return the wait in seconds before the given retry (0-indexed)."""
        return self.backoff().calculate(attempt)


NO_RETRY = RetryPolicy(kind=RetryKind.NONE, interval=0.0, max_attempts=0)


@dataclass(frozen=True)
class ExecutionPlan:
    """Immutable description of how one logical request is executed.

    Args:
        retry: The retry policy. Defaults to no retry.
        timeout: Optional per-attempt timeout in seconds. Must be > 0.
        race_delay: Optional delay in seconds after which a second,
            identical attempt sequence is started in parallel. Must be >= 0.
            ``None`` disables racing.

    Example:
        ```pycon
        >>> from reqctl.core.config import ExecutionPlan
        >>> plan = ExecutionPlan()
        >>> plan.retry.enabled, plan.timeout, plan.race_delay
        (False, None, None)
        >>> raced = plan.merge(race_delay=0.1)
        >>> raced.race_delay
        0.1
        >>> plan.race_delay is None  # Original unchanged
        True

        ```
    """

    retry: RetryPolicy = NO_RETRY
    timeout: float | None = None
    race_delay: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None:
            validate_timeout(self.timeout)
        if self.race_delay is not None:
            validate_race_delay(self.race_delay)

    @property
    def races(self) -> bool:
        return self.race_delay is not None

    def merge(self, **overrides: Any) -> ExecutionPlan:
        """Create a new plan with the specified fields overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for fields to override.

        Returns:
            A new ExecutionPlan instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def clone(self) -> ExecutionPlan:
        """Return a private copy of the plan, retry policy included."""
        return replace(self, retry=replace(self.retry))
