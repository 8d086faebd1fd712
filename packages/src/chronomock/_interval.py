"""Lazy async iterator of interval ticks.

:class:`IntervalIterator` is the mocked counterpart of an async
``every(interval)`` loop.  Each firing of the underlying repeating timer
advances a running timestamp by ``interval`` and hands it to the
consumer through a one-slot mailbox:

- a consumer already awaiting ``__anext__`` is woken directly;
- otherwise the value is parked, and a later firing replaces a value
  the consumer has not pulled yet.

Aborting the signal cancels the timer right away and parks a sticky
"aborted" sentinel; the next pull tears the iterator down and raises
:class:`~chronomock._errors.AbortError`.

Usage::

    async for stamp in timers.switchboard.interval(100):
        ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Self

from chronomock._errors import AbortError, InvalidArgumentError
from chronomock._scheduler import TimerScheduler
from chronomock._signal import AbortSignal
from chronomock._validators import validate_abort_signal

logger = logging.getLogger(__name__)

_EMPTY = object()
_ABORTED = object()
_CLOSED = object()


class IntervalIterator:
    """Async iterator yielding ``start_time + n * interval`` per firing.

    Nothing is scheduled until the first pull.  The iterator is not
    restartable: once closed or aborted every pull raises
    :class:`StopAsyncIteration`.

    Args:
        scheduler: Session scheduler that owns the repeating timer.
        interval: Virtual milliseconds between firings.
        start_time: Initial timestamp; advanced by *interval* on every
            firing.  Defaults to the current virtual time.
        signal: Optional abort signal.
    """

    def __init__(
        self,
        scheduler: TimerScheduler,
        interval: float,
        start_time: float | None = None,
        *,
        signal: AbortSignal | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._interval = interval
        self._time = scheduler.clock.now() if start_time is None else start_time
        self._signal = signal
        self._timer_id: int | None = None
        self._slot: object = _EMPTY
        self._waiter: asyncio.Future[object] | None = None
        self._started = False
        self._closed = False

    @property
    def timer_id(self) -> int | None:
        """Id of the underlying repeating timer, once started."""
        return self._timer_id

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> float:
        if self._closed:
            raise StopAsyncIteration
        if self._waiter is not None:
            raise RuntimeError("anext(): interval iterator is already running")
        if not self._started:
            self._start()

        if self._slot is not _EMPTY:
            value, self._slot = self._slot, _EMPTY
        else:
            self._waiter = asyncio.get_running_loop().create_future()
            try:
                value = await self._waiter
            finally:
                self._waiter = None

        if value is _ABORTED:
            await self.aclose()
            raise AbortError(cause=self._signal.reason)  # type: ignore[union-attr]
        if value is _CLOSED:
            raise StopAsyncIteration
        return value  # type: ignore[return-value]

    async def aclose(self) -> None:
        """Cancel the timer and detach the abort listener.  Idempotent."""
        self._teardown()
        self._deliver(_CLOSED)

    # -- internals ------------------------------------------------------

    def _start(self) -> None:
        self._started = True
        if self._signal is not None:
            try:
                validate_abort_signal(self._signal, "signal")
                self._signal.throw_if_aborted()
            except (InvalidArgumentError, AbortError):
                self._closed = True
                raise
            self._signal.add_listener(self._on_abort)
        self._timer_id = self._scheduler.create_timer(
            True, self._on_fire, self._interval
        )

    def _on_fire(self) -> None:
        self._time += self._interval
        self._deliver(self._time)

    def _on_abort(self, reason: object) -> None:
        logger.debug("Interval on timer %s aborted", self._timer_id)
        if self._timer_id is not None:
            self._scheduler.cancel_timer(self._timer_id)
        self._deliver(_ABORTED)

    def _deliver(self, value: object) -> None:
        waiter = self._waiter
        if waiter is not None and not waiter.done():
            waiter.set_result(value)
            self._waiter = None
        elif self._slot is not _ABORTED:
            self._slot = value

    def _teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._signal is not None:
            self._signal.remove_listener(self._on_abort)
        if self._timer_id is not None:
            self._scheduler.cancel_timer(self._timer_id)
