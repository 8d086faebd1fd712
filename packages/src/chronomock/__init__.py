"""chronomock.

Deterministic, manually advanced virtual timers for testing
time-dependent Python code.
"""

from importlib.metadata import PackageNotFoundError, version

from chronomock._clock import ClockPort, VirtualClock
from chronomock._date import MockDate, build_mock_date
from chronomock._errors import (
    AbortError,
    InvalidArgumentError,
    InvalidStateError,
    MockTimersError,
)
from chronomock._facilities import FACILITY_SLOTS, SUPPORTED_FACILITIES, Facility
from chronomock._interval import IntervalIterator
from chronomock._queue import TimerEntry, TimerQueue
from chronomock._scheduler import TimerScheduler
from chronomock._settings import MockTimersSettings
from chronomock._signal import AbortController, AbortSignal
from chronomock._switchboard import AttributeSwitchboard, BindingTable, Switchboard
from chronomock._timers import MockTimers

try:
    __version__ = version("chronomock")
except PackageNotFoundError:
    # Last resort fallback for source checkouts without metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Engine
    "MockTimers",
    "MockTimersSettings",
    # Facilities
    "FACILITY_SLOTS",
    "Facility",
    "SUPPORTED_FACILITIES",
    # Clock
    "ClockPort",
    "VirtualClock",
    # Scheduling
    "TimerEntry",
    "TimerQueue",
    "TimerScheduler",
    # Adapters
    "IntervalIterator",
    "MockDate",
    "build_mock_date",
    # Cancellation
    "AbortController",
    "AbortSignal",
    # Switchboards
    "AttributeSwitchboard",
    "BindingTable",
    "Switchboard",
    # Errors
    "AbortError",
    "InvalidArgumentError",
    "InvalidStateError",
    "MockTimersError",
]
