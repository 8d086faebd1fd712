"""Cooperative cancellation signals.

An :class:`AbortController` owns an :class:`AbortSignal`; the signal is
handed to a pending operation (``sleep`` or ``interval``) and the
controller aborts it later.  Listeners run synchronously inside
:meth:`AbortController.abort`, so a cancelled timer is off the queue
before ``abort()`` returns.

Usage::

    controller = AbortController()
    future = timers.switchboard.sleep(100, signal=controller.signal)
    controller.abort("no longer needed")
    # awaiting ``future`` now raises AbortError(cause="no longer needed")
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from chronomock._errors import AbortError

logger = logging.getLogger(__name__)

AbortListener = Callable[[object], None]


class AbortSignal:
    """Read-only view of an abort state with one-shot listeners.

    Listeners receive the abort reason and are dropped after they run,
    so each one fires at most once.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._reason: object = None
        self._listeners: list[AbortListener] = []

    @classmethod
    def abort(cls, reason: object = None) -> AbortSignal:
        """Return a signal that is already aborted."""
        signal = cls()
        signal._trigger(reason)
        return signal

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> object:
        return self._reason

    def add_listener(self, listener: AbortListener) -> None:
        """Register *listener*; ignored when the signal already fired."""
        if self._aborted:
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        """Unregister *listener*; unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def throw_if_aborted(self) -> None:
        """Raise :class:`AbortError` if the signal has fired."""
        if self._aborted:
            raise AbortError(cause=self._reason)

    def _trigger(self, reason: object) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = (
            reason
            if reason is not None
            else AbortError("This operation was aborted")
        )
        listeners, self._listeners = self._listeners, []
        logger.debug("Abort signal fired with %d listener(s)", len(listeners))
        # Every listener runs; the first failure is re-raised afterwards.
        first_error: Exception | None = None
        for listener in listeners:
            try:
                listener(self._reason)
            except Exception as exc:
                logger.debug("Abort listener %r raised %r", listener, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self._aborted})"


class AbortController:
    """Owner of an :class:`AbortSignal`."""

    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: object = None) -> None:
        """Fire the signal.  Later calls are no-ops.

        Args:
            reason: Carried as the ``cause`` of the resulting
                :class:`AbortError`.  Defaults to an ``AbortError``.
        """
        self._signal._trigger(reason)
