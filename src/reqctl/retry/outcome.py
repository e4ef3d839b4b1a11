r"""The outcome of a single attempt."""

from __future__ import annotations

__all__ = ["Outcome"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class Outcome:
    """The ``(response, error)`` pair produced by one attempt.

    Exactly one of ``response`` and ``error`` is set.

    Attributes:
        response: The response returned by the transport, if any.
        error: The error raised by the attempt, if any.
    """

    response: httpx.Response | None = None
    error: Exception | None = None

    @property
    def status_code(self) -> int | None:
        return None if self.response is None else self.response.status_code

    def unwrap(self) -> httpx.Response:
        """Return the response, or raise the error of the attempt.

        Raises:
            Exception: The error captured by the attempt, unchanged.
        """
        if self.error is not None:
            raise self.error
        return self.response
