"""Installation switchboards: where mocked bindings are swapped in.

The engine never touches ambient globals.  On ``enable()`` it hands a
table of named bindings per facility to a :class:`Switchboard`; on
``reset()`` it asks the switchboard to put back whatever was there
before.

Two implementations ship:

- :class:`BindingTable` — a plain function table.  Code under test
  receives the table (or looks slots up on it) instead of importing
  ``asyncio.sleep`` / ``datetime`` directly.  This is the default.
- :class:`AttributeSwitchboard` — patches attributes on a target
  object such as the module under test, much like
  ``unittest.mock.patch.object``.

See Also:
    :data:`~chronomock._facilities.FACILITY_SLOTS` for slot names.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from chronomock._facilities import Facility

logger = logging.getLogger(__name__)

_MISSING = object()


@runtime_checkable
class Switchboard(Protocol):
    """Collaborator that binds and unbinds mocked facilities."""

    def install(self, facility: Facility, bindings: Mapping[str, Any]) -> None:
        """Swap in *bindings* for *facility*, remembering the originals."""
        ...

    def uninstall(self, facility: Facility) -> None:
        """Restore the originals saved by the matching :meth:`install`."""
        ...


class BindingTable:
    """Dict-backed switchboard.

    Slots are readable by item and by attribute::

        table = BindingTable({"sleep": asyncio.sleep})
        timers = MockTimers(table)
        timers.enable(apis=["timeout"])
        table.sleep       # the mocked sleep
        timers.reset()
        table["sleep"]    # asyncio.sleep again

    Args:
        originals: Initial slot values, typically the real
            implementations.
    """

    def __init__(self, originals: Mapping[str, Any] | None = None) -> None:
        self._slots: dict[str, Any] = dict(originals or {})
        self._saved: dict[Facility, dict[str, Any]] = {}

    def install(self, facility: Facility, bindings: Mapping[str, Any]) -> None:
        saved = self._saved.setdefault(facility, {})
        for name, binding in bindings.items():
            saved.setdefault(name, self._slots.get(name, _MISSING))
            self._slots[name] = binding
        logger.debug("Installed %s slots: %s", facility, ", ".join(bindings))

    def uninstall(self, facility: Facility) -> None:
        for name, original in self._saved.pop(facility, {}).items():
            if original is _MISSING:
                self._slots.pop(name, None)
            else:
                self._slots[name] = original
        logger.debug("Uninstalled %s slots", facility)

    def __getitem__(self, name: str) -> Any:
        return self._slots[name]

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._slots[name]
        except KeyError:
            raise AttributeError(f"No binding named {name!r}") from None

    def get(self, name: str, default: Any = None) -> Any:
        return self._slots.get(name, default)

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of the current slot table."""
        return dict(self._slots)


class AttributeSwitchboard:
    """Switchboard that patches attributes on *target*.

    Args:
        target: Object whose attributes are replaced (a module, a
            class, a namespace).
        names: Optional map from slot name to attribute name.  When
            given, only the listed slots are patched; when ``None``
            every slot is patched under its own name.

    Example::

        import myapp.poller as poller

        board = AttributeSwitchboard(poller, {"sleep": "sleep"})
        with MockTimers(board) as timers:
            timers.enable(apis=["timeout"])
            ...  # poller.sleep is now virtual
    """

    def __init__(self, target: object, names: Mapping[str, str] | None = None) -> None:
        self._target = target
        self._names = dict(names) if names is not None else None
        self._saved: dict[Facility, list[tuple[str, Any]]] = {}

    def install(self, facility: Facility, bindings: Mapping[str, Any]) -> None:
        saved = self._saved.setdefault(facility, [])
        for slot, binding in bindings.items():
            if self._names is not None and slot not in self._names:
                continue
            attr = self._names[slot] if self._names is not None else slot
            original = getattr(self._target, attr, _MISSING)
            setattr(self._target, attr, binding)
            saved.append((attr, original))
        logger.debug("Patched %d attribute(s) for %s", len(saved), facility)

    def uninstall(self, facility: Facility) -> None:
        for attr, original in reversed(self._saved.pop(facility, [])):
            if original is _MISSING:
                delattr(self._target, attr)
            else:
                setattr(self._target, attr, original)
