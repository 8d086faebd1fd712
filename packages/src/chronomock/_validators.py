"""Argument validation helpers.

Each helper raises :class:`~chronomock._errors.InvalidArgumentError`
and returns nothing on success, so callers can validate everything up
front before touching any state.
"""

from __future__ import annotations

import math
from numbers import Real

from chronomock._errors import InvalidArgumentError
from chronomock._signal import AbortSignal


def validate_number(value: object, name: str) -> None:
    """Require a real number that is not ``bool`` and not NaN."""
    # bool is a subclass of int; True is not a time value.
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgumentError(name, value, "must be of type number")
    if math.isnan(value):
        raise InvalidArgumentError(name, value, "must be a number, not NaN")


def validate_time(value: object, name: str) -> None:
    """Require a non-negative number."""
    validate_number(value, name)
    if value < 0:  # type: ignore[operator]
        raise InvalidArgumentError(name, value, "must be a positive integer")


def validate_sequence(value: object, name: str) -> None:
    """Require a list, tuple, set or frozenset (a bare string is rejected)."""
    if not isinstance(value, list | tuple | set | frozenset):
        raise InvalidArgumentError(name, value, "must be an instance of Array")


def validate_abort_signal(value: object, name: str) -> None:
    """Require an :class:`~chronomock._signal.AbortSignal`."""
    if not isinstance(value, AbortSignal):
        raise InvalidArgumentError(name, value, "must be an instance of AbortSignal")
