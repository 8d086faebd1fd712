"""Clock port and the virtual clock behind every mocked facility.

Provides ClockPort (Protocol) and VirtualClock, a manually advanced
counter of milliseconds.  Nothing in this module reads the wall clock:
virtual time moves only when :meth:`VirtualClock.advance` or
:meth:`VirtualClock.set` is called.

See Also:
    :class:`~chronomock._timers.MockTimers` for the public API that
    advances the clock and fires due timers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

INITIAL_EPOCH = 0


@runtime_checkable
class ClockPort(Protocol):
    """Source of "now" for the mocked facilities.

    Consumers such as :class:`~chronomock._date.MockDate` depend on
    this protocol rather than on :class:`VirtualClock` directly, so
    any object with a matching ``now()`` can drive them.
    """

    def now(self) -> float:
        """Return the current time in milliseconds since the epoch."""
        ...


@dataclass
class VirtualClock:
    """Deterministic clock measured in milliseconds.

    Satisfies :class:`ClockPort` via structural subtyping.

    Attributes:
        _time: The current virtual instant.

    Example::

        clock = VirtualClock(1000)
        clock.advance(500)
        assert clock.now() == 1500
    """

    _time: float = INITIAL_EPOCH

    def now(self) -> float:
        """Return the current virtual time."""
        return self._time

    def advance(self, ms: float) -> float:
        """Move time forward by *ms* and return the new time."""
        self._time += ms
        return self._time

    def set(self, time: float) -> None:
        """Jump to *time*, forwards or backwards."""
        self._time = time
