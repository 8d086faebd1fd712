"""Public test-support utilities for chronomock.

Provided symbols:

- :func:`make_settings` — factory for ``MockTimersSettings`` without
  ``.env`` files or environment variables.

Fixtures (``mock_timers``, ``binding_table``, ``abort_controller``)
are registered by :mod:`chronomock.testing._plugin` through the
``pytest11`` entry point.
"""

from chronomock.testing._settings import make_settings

__all__ = [
    "make_settings",
]
