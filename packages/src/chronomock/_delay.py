"""Awaitable one-shot delay on top of the timer scheduler.

:func:`schedule_sleep` is the mocked counterpart of ``asyncio.sleep``
with a result value and an optional abort signal.  The future is
created eagerly, so the underlying timer is queued as soon as the call
returns and a subsequent ``tick()`` can resolve it before anything is
awaited.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from chronomock._errors import AbortError, InvalidArgumentError
from chronomock._scheduler import TimerScheduler
from chronomock._signal import AbortSignal
from chronomock._validators import validate_abort_signal

logger = logging.getLogger(__name__)


def schedule_sleep(
    scheduler: TimerScheduler,
    delay: float,
    result: Any = None,
    *,
    signal: AbortSignal | None = None,
) -> asyncio.Future[Any]:
    """Return a future resolved when *delay* ms of virtual time elapse.

    Must be called with a running event loop.

    Args:
        scheduler: Session scheduler that owns the timer.
        delay: Virtual milliseconds until resolution.
        result: Value to resolve with.  When ``None`` the future
            resolves with the timer id instead.
        signal: Optional abort signal.  An already-aborted signal fails
            the future immediately and queues no timer; a later abort
            cancels the timer and fails the future with
            :class:`AbortError`.

    Returns:
        An :class:`asyncio.Future`.  Cancelling it also cancels the
        timer.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    if signal is not None:
        try:
            validate_abort_signal(signal, "signal")
        except InvalidArgumentError as exc:
            future.set_exception(exc)
            return future
        if signal.aborted:
            future.set_exception(AbortError(cause=signal.reason))
            return future

    def on_abort(reason: object) -> None:
        scheduler.cancel_timer(timer_id)
        if not future.done():
            logger.debug("Sleep on timer %d aborted", timer_id)
            future.set_exception(AbortError(cause=reason))

    def on_fire() -> None:
        if signal is not None:
            signal.remove_listener(on_abort)
        if not future.done():
            future.set_result(timer_id if result is None else result)

    def on_done(fut: asyncio.Future[Any]) -> None:
        if fut.cancelled():
            scheduler.cancel_timer(timer_id)
            if signal is not None:
                signal.remove_listener(on_abort)

    timer_id = scheduler.create_timer(False, on_fire, delay)
    if signal is not None:
        signal.add_listener(on_abort)
    future.add_done_callback(on_done)
    return future
