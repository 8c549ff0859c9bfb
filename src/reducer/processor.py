"""Reduction pipeline tying the file and folder passes together."""

import logging
from typing import Iterable, List, Optional

from .config import ReducerConfig
from .exceptions import ReducerFinishedError
from .file_reducer import ingest
from .folder_reducer import simplify
from .hash_index import HashIndex
from .models import Event
from .store import EventStore


logger = logging.getLogger(__name__)


class EventReducer:
    """
    Turns a batch of primitive events into a short semantic history.

    Primitive events are fed in timestamp order with ingest(); finish() runs
    the folder pass once and freezes the result.
    """

    def __init__(self, config: Optional[ReducerConfig] = None):
        """
        Initialize the reducer.

        Args:
            config: Reducer configuration
        """
        self.config = config or ReducerConfig()
        self.store = EventStore()
        self.index = HashIndex()
        self._ingested = 0
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def ingest(self, event: Event) -> Event:
        """
        Feed one primitive event to the file-level pass.

        Returns:
            The event that was stored for it (possibly a fused one)

        Raises:
            ReducerFinishedError: If finish() already ran
        """
        if self._finished:
            raise ReducerFinishedError("cannot ingest after the folder pass")

        stored = ingest(
            self.store,
            self.index,
            event,
            detect_copies=self.config.detect_copies,
            strict_index=self.config.strict_index,
            sep=self.config.separator,
        )
        self._ingested += 1
        return stored

    def ingest_all(self, events: Iterable[Event]) -> int:
        """
        Feed every event of an iterable.

        Returns:
            Number of events ingested
        """
        count = 0
        for event in events:
            self.ingest(event)
            count += 1
        return count

    def finish(self) -> EventStore:
        """
        Run the folder pass and return the final store.

        Calling finish() again returns the same store without another pass.
        """
        if not self._finished:
            after_files = len(self.store)
            simplify(
                self.store,
                collapse_deletes=self.config.collapse_folder_deletes,
                detect_moves=self.config.detect_folder_moves,
                sep=self.config.separator,
            )
            self._finished = True
            logger.info(
                f"Reduced {self._ingested} primitive events to {len(self.store)} "
                f"({after_files} after the file pass)"
            )
        return self.store

    def events(self) -> List[Event]:
        """Events currently in the store, in order."""
        return self.store.events()


def reduce_events(
    events: Iterable[Event],
    config: Optional[ReducerConfig] = None,
) -> List[Event]:
    """
    Run the full reduction over a batch of primitive events.

    Args:
        events: Primitive CreateEvent/DeleteEvent objects in timestamp order
        config: Reducer configuration

    Returns:
        The reduced events in order
    """
    reducer = EventReducer(config)
    reducer.ingest_all(events)
    return reducer.finish().events()
