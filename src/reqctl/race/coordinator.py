r"""Race coordinator running a delayed parallel attempt sequence.

This module provides the RaceCoordinator class. It runs two independent
retry executors over the same logical request, one immediately and one
after a delay, and keeps whichever finishes first.
"""

from __future__ import annotations

__all__ = ["HEDGE", "PRIMARY", "RaceCoordinator"]

import asyncio
import logging
from typing import TYPE_CHECKING

from reqctl.race.gate import WriteOnceSlot
from reqctl.retry.executor import RetryExecutor
from reqctl.retry.manager import CallbackManager
from reqctl.retry.outcome import Outcome
from reqctl.utils.structured_logging import log_structured, set_branch_name

if TYPE_CHECKING:
    import httpx

    from reqctl.core.config import ExecutionPlan

logger: logging.Logger = logging.getLogger(__name__)

PRIMARY = "primary"
HEDGE = "hedge"


class RaceCoordinator:
    """Runs a request twice concurrently and keeps the first result.

    The primary branch starts at once. The hedge branch waits for the
    race delay, or until the primary has already delivered a result, in
    which case it never sends anything. Each branch runs its own
    ``RetryExecutor`` over its own copy of the plan, so both apply the
    same per-attempt timeout and retry policy independently.

    The first branch to finish fills a write-once slot. The coordinator
    then cancels both branch tasks and waits for them, so the loser's
    pending backoff sleep or send is abandoned and no task outlives the
    race. The loser's outcome is never observable. When both branches
    fail, the first failure written wins; errors are not merged.

    Args:
        plan: The execution plan. ``plan.race_delay`` must be set.
        callbacks: Optional callback manager shared by both branches.

    Raises:
        ValueError: If the plan has no race delay.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from reqctl.core import ExecutionPlan
        >>> from reqctl.race import RaceCoordinator
        >>> async def main():
        ...     plan = ExecutionPlan(timeout=1.0, race_delay=0.2)
        ...     async with httpx.AsyncClient() as client:
        ...         outcome = await RaceCoordinator(plan).execute(
        ...             client, httpx.Request("GET", "https://api.example.com/data")
        ...         )
        ...     return outcome.unwrap()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, plan: ExecutionPlan, callbacks: CallbackManager | None = None) -> None:
        if plan.race_delay is None:
            msg = "RaceCoordinator requires a plan with a race delay"
            raise ValueError(msg)
        self.plan = plan.clone()
        self.callbacks = callbacks if callbacks is not None else CallbackManager()

    @property
    def delay(self) -> float:
        return self.plan.race_delay

    async def execute(self, client: httpx.AsyncClient, request: httpx.Request) -> Outcome:
        """Race two attempt sequences and return the first outcome.

        Args:
            client: The transport, shared by both branches.
            request: The request template.

        Returns:
            The outcome of the branch that finished first.
        """
        await request.aread()
        slot = WriteOnceSlot()
        logger.debug(
            f"Racing {request.method} request to {request.url} (hedge delay={self.delay:.3f}s)"
        )
        tasks = [
            asyncio.create_task(self._run_branch(PRIMARY, 0.0, slot, client, request)),
            asyncio.create_task(self._run_branch(HEDGE, self.delay, slot, client, request)),
        ]
        try:
            return await slot.wait()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run_branch(
        self,
        name: str,
        delay: float,
        slot: WriteOnceSlot,
        client: httpx.AsyncClient,
        request: httpx.Request,
    ) -> None:
        set_branch_name(name)
        if delay > 0 and await slot.wait_filled(delay):
            logger.debug(f"Race already won, {name} branch not started")
            return
        if slot.filled:
            return

        logger.debug(f"Starting {name} branch")
        try:
            outcome = await RetryExecutor(self.plan, self.callbacks).execute(client, request)
        except Exception as exc:  # noqa: BLE001
            # delivered to the caller through the slot
            outcome = Outcome(error=exc)
        if slot.set(outcome):
            log_structured(
                logger,
                logging.DEBUG,
                f"{name} branch won the race",
                winner=name,
                status_code=outcome.status_code,
                error=None if outcome.error is None else type(outcome.error).__name__,
            )
