r"""Unit tests for the race coordinator.

The tests use ``httpx.MockTransport`` with asynchronous handlers and
short real delays, so the relative timing of the two branches is the one
observed in production.
"""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import Mock

import httpx
import pytest

from reqctl.core import ExecutionPlan, RetryKind, RetryPolicy
from reqctl.race import HEDGE, PRIMARY, RaceCoordinator
from reqctl.retry import CallbackConfig, CallbackManager

TEST_URL = "https://api.example.com/data"


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_request() -> httpx.Request:
    return httpx.Request("GET", TEST_URL)


#####################################
#     Tests for RaceCoordinator     #
#####################################


def test_race_coordinator_requires_race_delay() -> None:
    with pytest.raises(ValueError, match=r"requires a plan with a race delay"):
        RaceCoordinator(ExecutionPlan())


def test_race_coordinator_creation() -> None:
    plan = ExecutionPlan(race_delay=0.25)
    coordinator = RaceCoordinator(plan)
    assert coordinator.delay == 0.25
    assert coordinator.plan == plan
    assert coordinator.plan is not plan
    assert isinstance(coordinator.callbacks, CallbackManager)


@pytest.mark.asyncio
async def test_race_coordinator_fast_primary_single_call() -> None:
    """Test that the hedge never sends when the primary finishes before
    the delay."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    async with make_client(handler) as client:
        outcome = await RaceCoordinator(ExecutionPlan(race_delay=0.05)).execute(
            client, make_request()
        )
        await asyncio.sleep(0.1)

    assert outcome.response.status_code == 200
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_race_coordinator_slow_primary_hedge_wins() -> None:
    loop = asyncio.get_running_loop()
    started = []

    async def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        started.append(loop.time())
        if len(started) == 1:
            await asyncio.sleep(0.5)
            return httpx.Response(500)
        return httpx.Response(200)

    start = loop.time()
    async with make_client(handler) as client:
        outcome = await RaceCoordinator(ExecutionPlan(race_delay=0.05)).execute(
            client, make_request()
        )
    elapsed = loop.time() - start

    assert outcome.response.status_code == 200
    assert len(started) == 2
    assert started[1] - start >= 0.04
    assert elapsed < 0.4


@pytest.mark.asyncio
async def test_race_coordinator_logs_winner_fields(caplog: pytest.LogCaptureFixture) -> None:
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            await asyncio.sleep(0.5)
        return httpx.Response(201)

    caplog.set_level(logging.DEBUG, logger="reqctl.race.coordinator")
    async with make_client(handler) as client:
        await RaceCoordinator(ExecutionPlan(race_delay=0.02)).execute(client, make_request())

    (record,) = [r for r in caplog.records if r.getMessage().endswith("won the race")]
    assert record.getMessage() == "hedge branch won the race"
    assert record.winner == HEDGE
    assert record.status_code == 201
    assert record.error is None


@pytest.mark.asyncio
async def test_race_coordinator_cancels_loser_send() -> None:
    calls = []
    cancelled = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) > 1:
            return httpx.Response(200)
        try:
            await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise
        return httpx.Response(500)

    async with make_client(handler) as client:
        outcome = await RaceCoordinator(ExecutionPlan(race_delay=0.02)).execute(
            client, make_request()
        )

    assert outcome.response.status_code == 200
    assert cancelled == [True]


@pytest.mark.asyncio
async def test_race_coordinator_both_fail_first_error_wins() -> None:
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            await asyncio.sleep(0.05)
            raise httpx.ConnectError("primary failed", request=request)
        await asyncio.sleep(0.5)
        raise httpx.ConnectError("hedge failed", request=request)

    async with make_client(handler) as client:
        outcome = await RaceCoordinator(ExecutionPlan(race_delay=0.01)).execute(
            client, make_request()
        )

    assert isinstance(outcome.error, httpx.ConnectError)
    assert str(outcome.error) == "primary failed"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_race_coordinator_zero_delay_starts_both() -> None:
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        await asyncio.sleep(0.02)
        return httpx.Response(200)

    async with make_client(handler) as client:
        outcome = await RaceCoordinator(ExecutionPlan(race_delay=0.0)).execute(
            client, make_request()
        )

    assert outcome.response.status_code == 200
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_race_coordinator_callbacks_carry_branch_names() -> None:
    on_request = Mock()

    async def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        await asyncio.sleep(0.02)
        return httpx.Response(200)

    callbacks = CallbackManager(CallbackConfig(on_request=on_request))
    async with make_client(handler) as client:
        await RaceCoordinator(ExecutionPlan(race_delay=0.0), callbacks).execute(
            client, make_request()
        )

    assert {c[0][0].branch for c in on_request.call_args_list} == {PRIMARY, HEDGE}


@pytest.mark.asyncio
async def test_race_coordinator_outer_deadline() -> None:
    """Test that the caller's deadline stops both branches."""

    async def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        await asyncio.sleep(1.0)
        return httpx.Response(200)

    plan = ExecutionPlan(
        retry=RetryPolicy(kind=RetryKind.FIXED, interval=0.01, max_attempts=5),
        race_delay=0.01,
    )
    async with make_client(handler) as client:
        with pytest.raises(TimeoutError):
            async with asyncio.timeout(0.1):
                await RaceCoordinator(plan).execute(client, make_request())

    assert asyncio.all_tasks() == {asyncio.current_task()}


@pytest.mark.asyncio
async def test_race_coordinator_no_task_left_after_win() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200)

    async with make_client(handler) as client:
        await RaceCoordinator(ExecutionPlan(race_delay=1.0)).execute(client, make_request())

    assert asyncio.all_tasks() == {asyncio.current_task()}


@pytest.mark.asyncio
async def test_race_coordinator_delivers_checker_error() -> None:
    """Test that an error raised inside a branch becomes the outcome."""

    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200)

    plan = ExecutionPlan(
        retry=RetryPolicy(
            kind=RetryKind.FIXED, checker=Mock(side_effect=ValueError("bad checker"))
        ),
        race_delay=0.05,
    )
    async with make_client(handler) as client:
        outcome = await RaceCoordinator(plan).execute(client, make_request())

    assert isinstance(outcome.error, ValueError)


@pytest.mark.asyncio
async def test_race_coordinator_abandons_loser_backoff() -> None:
    """Test that the loser does not retry once the race is won."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("Connection refused", request=request)
        return httpx.Response(200)

    plan = ExecutionPlan(
        retry=RetryPolicy(kind=RetryKind.FIXED, interval=1.0, max_attempts=3),
        race_delay=0.02,
    )
    loop = asyncio.get_running_loop()
    start = loop.time()
    async with make_client(handler) as client:
        outcome = await RaceCoordinator(plan).execute(client, make_request())
        elapsed = loop.time() - start
        await asyncio.sleep(0.05)

    assert outcome.response.status_code == 200
    assert elapsed < 0.5
    assert len(calls) == 2
