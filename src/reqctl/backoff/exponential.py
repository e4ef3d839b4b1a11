r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from reqctl.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** attempt).

    The delay grows without bound and no jitter is added, so the wait
    before each retry is fully predictable.

    Args:
        base_delay: The delay in seconds before the first retry.

    Example:
        ```pycon
        >>> from reqctl.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> backoff.calculate(0)  # First retry
        0.5
        >>> backoff.calculate(1)  # Second retry
        1.0
        >>> backoff.calculate(3)  # Fourth retry
        4.0

        ```
    """

    def __init__(self, base_delay: float) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay})"

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The retry number (0-indexed).

        Returns:
            The calculated delay: base_delay * (2 ** attempt).
        """
        return self.base_delay * (2**attempt)
