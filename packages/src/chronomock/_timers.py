"""Public virtual-timer engine.

:class:`MockTimers` is the entry point test code talks to.  It moves
between two states:

- **disabled** — initial state and the state after :meth:`reset`.
  Only :meth:`enable` and :meth:`reset` are allowed.
- **enabled** — a session exists: a :class:`VirtualClock`, a
  :class:`TimerScheduler`, and the set of facilities whose mocked
  bindings were handed to the switchboard.

A new session is built on every ``enable()`` and thrown away on
``reset()``, so nothing leaks between sessions.  Bound functions kept
from an old session keep pointing at that session's discarded
scheduler and cannot reach the new one.

Usage::

    with MockTimers() as timers:
        timers.enable(apis=["timeout"], now=1000)
        fired = []
        timers.switchboard.set_timeout(fired.append, 50, "done")
        timers.tick(50)
        assert fired == ["done"]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from types import TracebackType
from typing import Any, Self

from chronomock._clock import INITIAL_EPOCH, VirtualClock
from chronomock._date import build_mock_date
from chronomock._delay import schedule_sleep
from chronomock._errors import InvalidArgumentError, InvalidStateError
from chronomock._facilities import Facility
from chronomock._interval import IntervalIterator
from chronomock._scheduler import TimerScheduler
from chronomock._settings import MockTimersSettings
from chronomock._signal import AbortSignal
from chronomock._switchboard import BindingTable, Switchboard
from chronomock._validators import validate_sequence, validate_time

logger = logging.getLogger(__name__)


@dataclass
class _Session:
    clock: VirtualClock
    scheduler: TimerScheduler
    apis: tuple[Facility, ...] = field(default=())


class MockTimers:
    """Deterministic replacement for timeout, interval and date facilities.

    Args:
        switchboard: Receives the mocked bindings on ``enable()`` and
            restores the originals on ``reset()``.  Defaults to a fresh
            :class:`BindingTable`.
        settings: Defaults for ``enable()`` arguments.  Loaded from the
            environment when omitted.
    """

    def __init__(
        self,
        switchboard: Switchboard | None = None,
        *,
        settings: MockTimersSettings | None = None,
    ) -> None:
        self.switchboard: Any = switchboard if switchboard is not None else BindingTable()
        self._settings = settings if settings is not None else MockTimersSettings()
        self._session: _Session | None = None

    # -- state ----------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._session is not None

    @property
    def active_apis(self) -> tuple[Facility, ...]:
        """Facilities substituted by the current session."""
        return self._session.apis if self._session is not None else ()

    @property
    def now(self) -> float:
        """Current virtual time in milliseconds."""
        return self._require_session().clock.now()

    @property
    def pending(self) -> int:
        """Number of timers still queued."""
        return len(self._require_session().scheduler)

    # -- lifecycle ------------------------------------------------------

    def enable(
        self,
        apis: Iterable[Facility | str] | None = None,
        now: float | datetime | None = None,
    ) -> None:
        """Start a session and install the mocked facilities.

        Args:
            apis: Facilities to substitute.  Defaults to
                ``settings.apis`` (all three out of the box).
            now: Starting virtual time, either milliseconds or a
                ``datetime`` whose epoch milliseconds are used.
                Defaults to ``settings.now``.

        Raises:
            InvalidStateError: If already enabled.
            InvalidArgumentError: If *apis* is not a list/tuple/set,
                names an unsupported facility, or *now* is negative,
                NaN or not a number.
        """
        if self._session is not None:
            raise InvalidStateError("MockTimers is already enabled!")

        if apis is None:
            apis = self._settings.apis
        if now is None:
            now = self._settings.now

        validate_sequence(apis, "apis")
        facilities = tuple(_parse_facility(api) for api in apis)

        start = int(now.timestamp() * 1000) if isinstance(now, datetime) else now
        validate_time(start, "now")

        clock = VirtualClock(start)
        session = _Session(clock=clock, scheduler=TimerScheduler(clock), apis=facilities)
        installed: list[Facility] = []
        try:
            for facility in facilities:
                installed.append(facility)
                self.switchboard.install(facility, _bindings_for(facility, session))
        except BaseException:
            for facility in reversed(installed):
                self.switchboard.uninstall(facility)
            raise
        self._session = session
        logger.info(
            "MockTimers enabled at %s for %s",
            start,
            ", ".join(facilities) or "no facilities",
        )

    def reset(self) -> None:
        """Restore real bindings and discard the session.

        Pending timers are dropped without firing.  A no-op when
        already disabled.
        """
        session = self._session
        if session is None:
            return
        for facility in session.apis:
            self.switchboard.uninstall(facility)
        dropped = len(session.scheduler)
        session.scheduler.clear()
        session.clock.set(INITIAL_EPOCH)
        self._session = None
        logger.info("MockTimers reset (%d pending timer(s) discarded)", dropped)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.reset()

    # -- advancing time -------------------------------------------------

    def tick(self, ms: float = 1) -> None:
        """Advance virtual time by *ms* and fire due timers.

        Due one-shot timers fire in ``(run_at, id)`` order.  The first
        due repeating timer fires, is re-scheduled, and ends the call;
        other due timers wait for the next ``tick()``.

        Raises:
            InvalidStateError: If disabled.
            InvalidArgumentError: If *ms* is negative or not a number.
        """
        session = self._require_session()
        validate_time(ms, "time")
        session.clock.advance(ms)
        session.scheduler.fire_due()

    def set_time(self, time: float = INITIAL_EPOCH) -> None:
        """Jump to *time*.

        Moving backwards fires nothing.  Moving forwards behaves like
        ``tick(time - now)``.

        Raises:
            InvalidStateError: If disabled.
            InvalidArgumentError: If *time* is negative or not a number.
        """
        session = self._require_session()
        validate_time(time, "time")
        current = session.clock.now()
        if time < current:
            session.clock.set(time)
            return
        self.tick(abs(time - current))

    def run_all(self) -> None:
        """Tick to the instant of the farthest queued timer.

        A no-op when nothing is queued.  Because ``tick()`` stops after
        a repeating timer fires, a single call may leave due timers
        behind when repeating timers are queued.

        Raises:
            InvalidStateError: If disabled.
        """
        session = self._require_session()
        farthest = session.scheduler.queue.peek_bottom()
        if farthest is None:
            return
        self.tick(max(farthest.run_at - session.clock.now(), 0))

    # -- internals ------------------------------------------------------

    def _require_session(self) -> _Session:
        if self._session is None:
            raise InvalidStateError(
                "You should enable MockTimers first by calling the .enable function"
            )
        return self._session


def _parse_facility(api: object) -> Facility:
    try:
        return Facility(api)
    except ValueError:
        raise InvalidArgumentError(
            "apis", api, f"option {api} is not supported"
        ) from None


def _bindings_for(facility: Facility, session: _Session) -> dict[str, Any]:
    scheduler = session.scheduler

    if facility is Facility.TIMEOUT:

        def set_timeout(callback: Callable[..., Any], delay: float = 0, *args: Any) -> int:
            return scheduler.create_timer(False, callback, delay, *args)

        def sleep(
            delay: float = 0,
            result: Any = None,
            *,
            signal: AbortSignal | None = None,
        ) -> Any:
            return schedule_sleep(scheduler, delay, result, signal=signal)

        return {
            "set_timeout": set_timeout,
            "clear_timeout": scheduler.cancel_timer,
            "sleep": sleep,
        }

    if facility is Facility.INTERVAL:

        def set_interval(callback: Callable[..., Any], delay: float = 0, *args: Any) -> int:
            return scheduler.create_timer(True, callback, delay, *args)

        def interval(
            delay: float = 0,
            start_time: float | None = None,
            *,
            signal: AbortSignal | None = None,
        ) -> IntervalIterator:
            return IntervalIterator(scheduler, delay, start_time, signal=signal)

        return {
            "set_interval": set_interval,
            "clear_interval": scheduler.cancel_timer,
            "interval": interval,
        }

    return {"datetime": build_mock_date(session.clock)}
