"""Exception hierarchy for the virtual timer engine.

Every failure the engine reports is a subclass of
:class:`MockTimersError`, so consumer test suites can catch the whole
family with a single ``except`` clause.

Error kinds:

- :class:`InvalidStateError` — a time-advancing operation was called
  while the engine is disabled, or ``enable()`` was called twice.
- :class:`InvalidArgumentError` — negative or non-numeric time values,
  malformed facility lists, wrong cancellation-signal type.  Also a
  :class:`ValueError` so generic argument handling keeps working.
- :class:`AbortError` — a cancellation signal fired before or during
  a pending sleep or interval iteration.

Errors are always raised to the caller.  The engine never logs and
swallows them, and nothing is retried.
"""

from __future__ import annotations


class MockTimersError(Exception):
    """Base class for all chronomock errors."""


class InvalidStateError(MockTimersError):
    """Operation not allowed in the engine's current state."""


class InvalidArgumentError(MockTimersError, ValueError):
    """An argument failed validation.

    Args:
        name: Name of the offending argument.
        value: The rejected value.
        reason: Human-readable explanation.
    """

    def __init__(self, name: str, value: object, reason: str) -> None:
        super().__init__(f"The argument '{name}' {reason}. Received {value!r}")
        self.name = name
        self.value = value


class AbortError(MockTimersError):
    """The operation was aborted through an :class:`AbortSignal`.

    The signal's reason is kept in :attr:`cause`.  When the reason is
    itself an exception it is also chained as ``__cause__`` so
    tracebacks show where the abort came from.

    Args:
        message: Error message.
        cause: The abort reason carried by the signal.
    """

    def __init__(
        self,
        message: str = "The operation was aborted",
        *,
        cause: object = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause
