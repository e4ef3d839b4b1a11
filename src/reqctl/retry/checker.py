r"""Retry checkers deciding whether an attempt outcome must be retried.

A retry checker is called with the raw ``(response, error)`` pair of an
attempt. Exactly one of the two is ``None``. It returns ``True`` when the
outcome is a failure that should be retried.
"""

from __future__ import annotations

__all__ = ["RETRY_STATUS_CODES", "RetryChecker", "default_retry_checker", "retry_on_status"]

from collections.abc import Callable
from typing import TypeAlias

import httpx

RetryChecker: TypeAlias = Callable[[httpx.Response | None, Exception | None], bool]

# HTTP status codes usually worth retrying
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


def default_retry_checker(
    response: httpx.Response | None,  # noqa: ARG001
    error: Exception | None,
) -> bool:
    """Retry only when the attempt raised an error.

    Any response counts as a success, whatever its status code, including
    5xx. Use ``retry_on_status`` or a custom checker to retry on status
    codes.

    Args:
        response: The response of the attempt, if any.
        error: The error raised by the attempt, if any.

    Returns:
        ``True`` if ``error`` is not ``None``.

    Example:
        ```pycon
        >>> import httpx
        >>> from reqctl.retry.checker import default_retry_checker
        >>> default_retry_checker(httpx.Response(503), None)
        False
        >>> default_retry_checker(None, httpx.ConnectError("refused"))
        True

        ```
    """
    return error is not None


def retry_on_status(*status_codes: int) -> RetryChecker:
    """Build a checker that retries on errors and on the given status
    codes.

    Args:
        *status_codes: Status codes that should trigger a retry. Defaults to
            ``RETRY_STATUS_CODES`` when none are given.

    Returns:
        A retry checker.

    Example:
        ```pycon
        >>> import httpx
        >>> from reqctl.retry.checker import retry_on_status
        >>> checker = retry_on_status(500, 503)
        >>> checker(httpx.Response(503), None)
        True
        >>> checker(httpx.Response(404), None)
        False

        ```
    """
    codes = frozenset(status_codes or RETRY_STATUS_CODES)

    def checker(response: httpx.Response | None, error: Exception | None) -> bool:
        if error is not None:
            return True
        return response is not None and response.status_code in codes

    return checker
