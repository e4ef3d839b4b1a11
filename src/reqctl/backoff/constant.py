r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from reqctl.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Constant/fixed backoff strategy.

    Returns the same delay for every retry, regardless of the retry number.
    This is the strategy behind a fixed retry policy.

    Args:
        delay: The fixed delay in seconds to use for all retries.

    Example:
        ```pycon
        >>> from reqctl.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=0.01)
        >>> backoff.calculate(0)
        0.01
        >>> backoff.calculate(10)
        0.01

        ```
    """

    def __init__(self, delay: float) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)

        self.delay = delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay
