"""Timer creation, cancellation and firing for one session.

:class:`TimerScheduler` owns the :class:`~chronomock._queue.TimerQueue`
and the id counter.  It has no notion of enabled/disabled state; the
public :class:`~chronomock._timers.MockTimers` guards every entry point
and creates a fresh scheduler for each session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from chronomock._clock import VirtualClock
from chronomock._queue import TimerEntry, TimerQueue

logger = logging.getLogger(__name__)


class TimerScheduler:
    """Schedules callbacks against a :class:`VirtualClock`.

    Ids start at 1 and are never reused within the scheduler's lifetime.
    A live-entry index maps ids to queued entries so cancellation by id
    resolves to a heap position in O(1).

    Args:
        clock: The session clock that ``run_at`` values are relative to.
    """

    def __init__(self, clock: VirtualClock) -> None:
        self.clock = clock
        self.queue = TimerQueue()
        self._next_id = 1
        self._live: dict[int, TimerEntry] = {}

    def __len__(self) -> int:
        return len(self.queue)

    def create_timer(
        self,
        repeating: bool,
        callback: Callable[..., Any],
        delay: float,
        *args: Any,
    ) -> int:
        """Queue *callback* to run *delay* ms from now.

        Returns:
            The new timer id.
        """
        timer_id = self._next_id
        self._next_id += 1
        entry = TimerEntry(
            id=timer_id,
            callback=callback,
            run_at=self.clock.now() + delay,
            interval=delay if repeating else None,
            args=args,
        )
        self.queue.insert(entry)
        self._live[timer_id] = entry
        logger.debug(
            "Created %s timer %d due at %s",
            "repeating" if repeating else "one-shot",
            timer_id,
            entry.run_at,
        )
        return timer_id

    def cancel_timer(self, timer_id: object) -> None:
        """Drop the timer with *timer_id*.

        Ids that are unknown, already fired or already cancelled are
        ignored, as is anything that is not an int (``None`` included).
        """
        if not isinstance(timer_id, int):
            return
        entry = self._live.pop(timer_id, None)
        if entry is None:
            return
        self.queue.remove(entry)
        logger.debug("Cancelled timer %d", entry.id)

    def is_pending(self, timer_id: int) -> bool:
        return timer_id in self._live

    def fire_due(self) -> None:
        """Fire entries due at or before the clock's current time.

        One-shot entries fire in ``(run_at, id)`` order until none is
        due.  The first repeating entry reached fires, is re-scheduled
        one interval later, and ends the pass; anything else still due
        stays queued for the next call.

        Each entry is taken off the queue before its callback runs.  A
        repeating entry cancelled by its own callback is not put back.
        Exceptions from callbacks propagate to the caller.
        """
        now = self.clock.now()
        entry = self.queue.peek()
        while entry is not None and entry.run_at <= now:
            self.queue.shift()
            if not entry.repeating:
                del self._live[entry.id]
            logger.debug("Firing timer %d (due at %s)", entry.id, entry.run_at)
            entry.callback(*entry.args)

            if entry.repeating:
                if self._live.get(entry.id) is entry:
                    entry.run_at += entry.interval  # type: ignore[operator]
                    self.queue.insert(entry)
                # TODO: revisit stopping after one repeating firing; it
                # leaves other due entries queued until the next tick.
                return

            entry = self.queue.peek()

    def clear(self) -> None:
        """Discard every pending entry without firing it."""
        self.queue.clear()
        self._live.clear()
