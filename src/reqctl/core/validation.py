r"""Parameter validation utilities for execution plans.

This module provides validation functions for retry, timeout, and race
parameters to ensure they meet the required constraints before being
stored in an execution plan.
"""

from __future__ import annotations

__all__ = ["validate_race_delay", "validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float) -> None:
    """Validate the per-attempt timeout.

    Args:
        timeout: Maximum seconds a single attempt may take. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from reqctl.core.validation import validate_timeout
        >>> validate_timeout(0.5)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(interval: float, max_attempts: int) -> None:
    """Validate retry parameters.

    Args:
        interval: Delay in seconds before a retry (the base delay for
            exponential retry). Must be >= 0.
        max_attempts: Maximum number of retries after the first attempt.
            Must be >= 0. A value of 0 means only the initial attempt is made.

    Raises:
        ValueError: If interval or max_attempts are negative.

    Example:
        ```pycon
        >>> from reqctl.core.validation import validate_retry_params
        >>> validate_retry_params(interval=0.1, max_attempts=3)
        >>> validate_retry_params(interval=0.0, max_attempts=0)

        ```
    """
    if interval < 0:
        msg = f"interval must be >= 0, got {interval}"
        raise ValueError(msg)
    if max_attempts < 0:
        msg = f"max_attempts must be >= 0, got {max_attempts}"
        raise ValueError(msg)


def validate_race_delay(delay: float) -> None:
    """Validate the delay before the second racing attempt is fired.

    Args:
        delay: Seconds to wait before starting the hedge branch. Must be >= 0.
            A value of 0 starts both branches at once.

    Raises:
        ValueError: If delay is negative.
    """
    if delay < 0:
        msg = f"delay must be >= 0, got {delay}"
        raise ValueError(msg)
