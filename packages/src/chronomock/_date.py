"""Mocked ``datetime`` factory driven by virtual time.

:class:`MockDate` stands in for :class:`datetime.datetime` wherever
code under test reads "now".  Only the now-reading paths are
virtualised:

- ``mock_date()`` / ``mock_date.construct()`` with no arguments returns
  an aware UTC ``datetime`` for the current virtual instant.
- ``mock_date(2024, 1, 31, ...)`` forwards verbatim to the native
  constructor, so explicit calendar construction is real calendar math.
- ``mock_date.now()`` returns the current virtual time in milliseconds;
  ``today()`` and ``utcnow()`` return naive local and UTC ``datetime``
  values for the same instant.
- ``mock_date.to_display_string()`` renders the current virtual instant.

Every other attribute (``fromisoformat``, ``strptime``,
``fromtimestamp``, ``min``, ``max``, …) is looked up on the native
class, so code that never reads "now" behaves exactly as before.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from chronomock._clock import ClockPort

_DISPLAY_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z"


class MockDate:
    """Capability object replacing a native ``datetime`` class.

    Args:
        clock: Source of the current virtual time in milliseconds.
        native: The class being replaced.  Defaults to
            :class:`datetime.datetime`.
    """

    is_mock = True

    def __init__(self, clock: ClockPort, native: type[datetime] = datetime) -> None:
        self._clock = clock
        self._native = native

    @property
    def native(self) -> type[datetime]:
        return self._native

    def now(self) -> float:
        """Return the current virtual time in milliseconds."""
        return self._clock.now()

    def construct(self, *components: Any, **kwargs: Any) -> datetime:
        """Build a ``datetime``.

        Without arguments the result represents the current virtual
        instant (aware, UTC).  With arguments they are passed to the
        native constructor unchanged.
        """
        if not components and not kwargs:
            return self._native.fromtimestamp(self._clock.now() / 1000, tz=UTC)
        return self._native(*components, **kwargs)

    __call__ = construct

    def today(self) -> datetime:
        """Naive local ``datetime`` for the current virtual instant."""
        return self._native.fromtimestamp(self._clock.now() / 1000)

    def utcnow(self) -> datetime:
        """Naive UTC ``datetime`` for the current virtual instant."""
        return self._native.fromtimestamp(self._clock.now() / 1000, tz=UTC).replace(
            tzinfo=None
        )

    def to_display_string(self) -> str:
        """Render the current virtual instant, e.g.
        ``"Thu Jan 01 1970 00:00:00 GMT+0000"``."""
        return self.construct().strftime(_DISPLAY_FORMAT)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on MockDate itself.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._native, name)

    def __repr__(self) -> str:
        return repr(self._native)


def build_mock_date(clock: ClockPort, native: type[datetime] = datetime) -> MockDate:
    """Return a :class:`MockDate` reading time from *clock*."""
    return MockDate(clock, native)
