"""Index-tracking priority queue of timer entries.

:class:`TimerQueue` is an array-backed binary min-heap ordered by
``(run_at, id)``.  Unlike :mod:`heapq`, every entry carries its current
heap index in :attr:`TimerEntry.position`, updated on each swap, so an
arbitrary entry can be removed in O(log n) without lazy-deletion
tombstones.

The id is the tie-break: two entries due at the same instant fire in
creation order.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False, slots=True)
class TimerEntry:
    """One scheduled callback.

    Attributes:
        id: Session-unique, monotonically increasing timer id.
        callback: Invoked with ``*args`` when the entry is due.
        run_at: Virtual instant (ms) at which the entry is due.
        interval: Repeat period for repeating entries, ``None`` for
            one-shot entries.
        args: Positional arguments forwarded to *callback*.
        position: Current heap index, ``None`` while not queued.
    """

    id: int
    callback: Callable[..., Any]
    run_at: float
    interval: float | None = None
    args: tuple[Any, ...] = ()
    position: int | None = field(default=None, repr=False)

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    @property
    def sort_key(self) -> tuple[float, int]:
        return (self.run_at, self.id)


class TimerQueue:
    """Min-heap of :class:`TimerEntry` with O(log n) removal by position."""

    def __init__(self) -> None:
        self._heap: list[TimerEntry] = []

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, TimerEntry) or entry.position is None:
            return False
        pos = entry.position
        return pos < len(self._heap) and self._heap[pos] is entry

    # -- public operations ----------------------------------------------

    def insert(self, entry: TimerEntry) -> None:
        self._heap.append(entry)
        entry.position = len(self._heap) - 1
        self._sift_up(entry.position)

    def peek(self) -> TimerEntry | None:
        """Return the entry due first, without removing it."""
        return self._heap[0] if self._heap else None

    def peek_bottom(self) -> TimerEntry | None:
        """Return the entry due last, without removing it.

        The maximum of a binary heap is always a leaf, so only the
        second half of the array is scanned.
        """
        if not self._heap:
            return None
        first_leaf = len(self._heap) // 2
        return max(self._heap[first_leaf:], key=lambda e: e.sort_key)

    def shift(self) -> TimerEntry | None:
        """Remove and return the entry due first."""
        if not self._heap:
            return None
        return self.remove_at(0)

    def remove_at(self, position: int) -> TimerEntry | None:
        """Remove the entry at heap *position*.

        Out-of-range positions are ignored and return ``None``.
        """
        if position < 0 or position >= len(self._heap):
            return None
        removed = self._heap[position]
        last = self._heap.pop()
        if last is not removed:
            self._heap[position] = last
            last.position = position
            self._sift_down(position)
            self._sift_up(last.position)
        removed.position = None
        return removed

    def remove(self, entry: TimerEntry) -> bool:
        """Remove *entry* if it is still queued.

        Returns:
            ``True`` if the entry was removed, ``False`` if it was not
            in the queue (already fired, cancelled, or foreign).
        """
        if entry not in self:
            return False
        self.remove_at(entry.position)  # type: ignore[arg-type]
        return True

    def clear(self) -> None:
        for entry in self._heap:
            entry.position = None
        self._heap.clear()

    # -- heap maintenance -----------------------------------------------

    def _less(self, i: int, j: int) -> bool:
        return self._heap[i].sort_key < self._heap[j].sort_key

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        heap[i].position = i
        heap[j].position = j

    def _sift_up(self, pos: int) -> None:
        while pos > 0:
            parent = (pos - 1) // 2
            if not self._less(pos, parent):
                break
            self._swap(pos, parent)
            pos = parent

    def _sift_down(self, pos: int) -> None:
        size = len(self._heap)
        while True:
            left = 2 * pos + 1
            if left >= size:
                break
            child = left
            right = left + 1
            if right < size and self._less(right, left):
                child = right
            if not self._less(child, pos):
                break
            self._swap(pos, child)
            pos = child
