r"""Write-once result slot shared by racing branches."""

from __future__ import annotations

__all__ = ["WriteOnceSlot"]

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reqctl.retry.outcome import Outcome


class WriteOnceSlot:
    """Single-assignment slot backed by an ``asyncio.Future``.

    The first ``set`` stores the outcome and wakes every waiter; later
    calls are no-ops. ``set`` never suspends, so in a single event loop
    the check-and-store is atomic and a loser is never blocked by the
    winner.

    Must be created while an event loop is running.

    Example:
        ```pycon
        >>> import asyncio
        >>> from reqctl.race.gate import WriteOnceSlot
        >>> from reqctl.retry import Outcome
        >>> async def main():
        ...     slot = WriteOnceSlot()
        ...     first, second = Outcome(error=ValueError("a")), Outcome(error=ValueError("b"))
        ...     return slot.set(first), slot.set(second), (await slot.wait()) is first
        ...
        >>> asyncio.run(main())
        (True, False, True)

        ```
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()

    @property
    def filled(self) -> bool:
        return self._future.done()

    def set(self, outcome: Outcome) -> bool:
        """Store the outcome if the slot is still empty.

        Args:
            outcome: The outcome to store.

        Returns:
            ``True`` if this call filled the slot, ``False`` if it was
            already filled.
        """
        if self._future.done():
            return False
        self._future.set_result(outcome)
        return True

    async def wait(self) -> Outcome:
        """Wait until the slot is filled and return its outcome.

        Cancelling the waiter does not cancel the slot.
        """
        return await asyncio.shield(self._future)

    async def wait_filled(self, timeout: float) -> bool:
        """Wait at most ``timeout`` seconds for the slot to be filled.

        Args:
            timeout: Maximum seconds to wait.

        Returns:
            ``True`` if the slot is filled, ``False`` if the timeout elapsed
            first.
        """
        await asyncio.wait({self._future}, timeout=timeout)
        return self._future.done()
