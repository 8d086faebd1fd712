"""Names of the mockable facilities and the slots each one binds."""

from __future__ import annotations

from enum import StrEnum


class Facility(StrEnum):
    """A timer primitive that :class:`~chronomock._timers.MockTimers`
    can substitute."""

    TIMEOUT = "timeout"
    INTERVAL = "interval"
    DATE = "date"


SUPPORTED_FACILITIES: tuple[Facility, ...] = tuple(Facility)

FACILITY_SLOTS: dict[Facility, tuple[str, ...]] = {
    Facility.TIMEOUT: ("set_timeout", "clear_timeout", "sleep"),
    Facility.INTERVAL: ("set_interval", "clear_interval", "interval"),
    Facility.DATE: ("datetime",),
}
