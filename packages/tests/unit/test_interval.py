"""Unit tests for chronomock._interval — lazy async tick iterator.

Test Techniques Used:
    - Specification-based Testing: running timestamp per firing
    - State Transition Testing: lazy → live → closed / aborted
    - Error Guessing: pre-aborted signals, idempotent teardown,
      unconsumed values in the one-slot mailbox
"""

from __future__ import annotations

import asyncio

import pytest

from chronomock import (
    AbortController,
    AbortError,
    AbortSignal,
    BindingTable,
    IntervalIterator,
    MockTimers,
)


@pytest.fixture
def timers(mock_timers: MockTimers) -> MockTimers:
    mock_timers.enable(apis=["interval"])
    return mock_timers


class TestLaziness:
    """Nothing is scheduled before the first pull."""

    async def test_no_timer_before_first_pull(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """Creating the iterator queues nothing."""
        ticks = binding_table.interval(100)

        assert isinstance(ticks, IntervalIterator)
        assert ticks.timer_id is None
        assert timers.pending == 0

    async def test_first_pull_schedules_timer(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """The first __anext__ starts the repeating timer."""
        ticks = binding_table.interval(100)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)

        assert timers.pending == 1
        pull.cancel()
        await ticks.aclose()


class TestValues:
    """Each firing yields start_time advanced by interval."""

    async def test_yields_running_timestamps(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """Values are start + n * interval."""
        ticks = binding_table.interval(100, 1000)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)

        timers.tick(100)
        assert await pull == 1100

        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)
        timers.tick(100)
        assert await pull == 1200

        await ticks.aclose()

    async def test_default_start_is_creation_time(
        self, mock_timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """Without start_time the current virtual time is used."""
        mock_timers.enable(apis=["interval"], now=500)
        ticks = binding_table.interval(50)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)

        mock_timers.tick(50)

        assert await pull == 550
        await ticks.aclose()

    async def test_async_for_consumer(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """A consumer task collects values as time advances."""
        collected: list[float] = []

        async def consume() -> None:
            async for stamp in binding_table.interval(10, 0):
                collected.append(stamp)
                if len(collected) == 3:
                    break

        task = asyncio.create_task(consume())
        for _ in range(3):
            await asyncio.sleep(0)
            timers.tick(10)
        await task

        assert collected == [10, 20, 30]

    async def test_unconsumed_value_is_replaced(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """The mailbox keeps only the latest unpulled value."""
        ticks = binding_table.interval(10, 0)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)
        timers.tick(10)
        assert await pull == 10

        timers.tick(10)
        timers.tick(10)

        assert await anext(ticks) == 30
        await ticks.aclose()


class TestTeardown:
    """aclose(): idempotent cleanup.

    Technique: State Transition Testing.
    """

    async def test_aclose_cancels_timer(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """Closing removes the repeating timer."""
        ticks = binding_table.interval(10)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)
        timers.tick(10)
        await pull

        await ticks.aclose()
        await ticks.aclose()

        assert ticks.closed
        assert timers.pending == 0
        with pytest.raises(StopAsyncIteration):
            await anext(ticks)

    async def test_aclose_wakes_pending_pull(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """A consumer waiting on a value sees the end of iteration."""
        ticks = binding_table.interval(10)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)

        await ticks.aclose()

        with pytest.raises(StopAsyncIteration):
            await pull

    async def test_break_out_of_loop_then_close(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """Early termination followed by aclose leaves nothing queued."""
        ticks = binding_table.interval(10)

        async def first() -> float:
            async for stamp in ticks:
                return stamp
            return -1

        task = asyncio.create_task(first())
        await asyncio.sleep(0)
        timers.tick(10)
        assert await task == 10

        await ticks.aclose()
        assert timers.pending == 0

    async def test_close_before_start(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """Closing an unstarted iterator schedules nothing."""
        ticks = binding_table.interval(10)
        await ticks.aclose()

        with pytest.raises(StopAsyncIteration):
            await anext(ticks)
        assert timers.pending == 0


class TestConcurrentPulls:
    """Only one pull may wait at a time.

    Technique: Error Guessing.
    """

    async def test_second_pending_pull_is_rejected(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """An overlapping pull fails and the first still gets its value."""
        ticks = binding_table.interval(10)
        first = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)

        with pytest.raises(RuntimeError, match="already running"):
            await anext(ticks)

        timers.tick(10)
        assert await first == 10
        await ticks.aclose()


class TestAbort:
    """Abort signal handling.

    Technique: Error Guessing.
    """

    async def test_pre_aborted_signal_fails_first_pull(
        self, timers: MockTimers, binding_table: BindingTable
    ) -> None:
        """The first pull raises and nothing is scheduled."""
        ticks = binding_table.interval(10, signal=AbortSignal.abort("early"))

        with pytest.raises(AbortError) as excinfo:
            await anext(ticks)
        assert excinfo.value.cause == "early"
        assert timers.pending == 0

        with pytest.raises(StopAsyncIteration):
            await anext(ticks)

    async def test_abort_while_waiting(
        self,
        timers: MockTimers,
        binding_table: BindingTable,
        abort_controller: AbortController,
    ) -> None:
        """A pending pull fails with AbortError and the timer is gone."""
        ticks = binding_table.interval(10, signal=abort_controller.signal)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)

        abort_controller.abort("stop")

        assert timers.pending == 0
        with pytest.raises(AbortError) as excinfo:
            await pull
        assert excinfo.value.cause == "stop"
        assert ticks.closed

    async def test_abort_between_pulls(
        self,
        timers: MockTimers,
        binding_table: BindingTable,
        abort_controller: AbortController,
    ) -> None:
        """The next pull after an abort fails; later values never appear."""
        ticks = binding_table.interval(10, 0, signal=abort_controller.signal)
        pull = asyncio.ensure_future(anext(ticks))
        await asyncio.sleep(0)
        timers.tick(10)
        assert await pull == 10

        abort_controller.abort()
        timers.tick(10)

        with pytest.raises(AbortError):
            await anext(ticks)
        with pytest.raises(StopAsyncIteration):
            await anext(ticks)
        assert abort_controller.signal._listeners == []
