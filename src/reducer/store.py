"""Ordered event store with stable tie-breaking."""

import bisect
from typing import Iterator, List, Optional, Tuple

from .exceptions import InvariantViolationError
from .models import Event


class EventStore:
    """
    Events ordered by timestamp, ties broken by insertion order.

    Each event gets a sequence number when it is inserted and the store is
    kept sorted by (timestamp, sequence). All positions are plain list
    indexes, so callers scanning the store must use the index returned by
    mutating methods rather than holding on to old positions.
    """

    def __init__(self):
        self._events: List[Event] = []
        self._keys: List[Tuple[int, int]] = []
        self._next_seq = 0

    def _new_key(self, event: Event) -> Tuple[int, int]:
        key = (event.timestamp, self._next_seq)
        self._next_seq += 1
        return key

    def insert(self, event: Event) -> int:
        """
        Insert an event at its ordered position.

        Returns:
            Index of the inserted event
        """
        key = self._new_key(event)
        index = bisect.bisect_right(self._keys, key)
        self._keys.insert(index, key)
        self._events.insert(index, event)
        return index

    def last(self) -> Optional[Event]:
        """The most recently ordered event, or None if empty."""
        return self._events[-1] if self._events else None

    def pop_last(self) -> Event:
        if not self._events:
            raise InvariantViolationError("pop from an empty event store")
        self._keys.pop()
        return self._events.pop()

    def remove(self, index: int) -> Event:
        """Remove and return the event at index."""
        self._check_index(index)
        del self._keys[index]
        return self._events.pop(index)

    def replace_span(self, start: int, stop: int, event: Event) -> int:
        """
        Replace events[start:stop] with a single event.

        The new event takes over the sequence number of events[start] so it
        sorts exactly where the span used to be.

        Returns:
            Index of the new event (always start)

        Raises:
            InvariantViolationError: If the span is empty or out of range, or
                the event's timestamp would break the ordering
        """
        if not 0 <= start < stop <= len(self._events):
            raise InvariantViolationError(
                f"invalid span [{start}, {stop}) for store of {len(self._events)}"
            )

        key = (event.timestamp, self._keys[start][1])
        if start > 0 and key < self._keys[start - 1]:
            raise InvariantViolationError("replacement sorts before its predecessor")
        if stop < len(self._keys) and key > self._keys[stop]:
            raise InvariantViolationError("replacement sorts after its successor")

        self._keys[start:stop] = [key]
        self._events[start:stop] = [event]
        return start

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._events):
            raise InvariantViolationError(
                f"index {index} out of range for store of {len(self._events)}"
            )

    def events(self) -> List[Event]:
        """Snapshot of the stored events in order."""
        return list(self._events)

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))
