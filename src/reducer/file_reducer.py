"""File-level reduction of primitive events as they arrive."""

import logging
from typing import Optional

from .exceptions import InvariantViolationError
from .hash_index import HashIndex
from .models import (
    CopyEvent,
    CreateEvent,
    DeleteEvent,
    Event,
    ModifyEvent,
    MoveEvent,
    ObjectKind,
)
from .paths import SEP
from .store import EventStore


logger = logging.getLogger(__name__)


def fuse_modify(prev: Optional[Event], event: Event) -> Optional[ModifyEvent]:
    """
    Reduce a file DEL followed by an ADD at the same path to a MODIFY.

    Returns:
        The fused event, or None if the pair does not qualify
    """
    if not isinstance(event, CreateEvent) or not isinstance(prev, DeleteEvent):
        return None
    if not prev.is_file or prev.path != event.path:
        return None

    return ModifyEvent(
        timestamp=event.timestamp,
        kind=ObjectKind.FILE,
        path=event.path,
        old_hash=prev.hash,
        new_hash=event.hash,
    )


def fuse_move(prev: Optional[Event], event: Event) -> Optional[MoveEvent]:
    """
    Reduce a file DEL followed by an ADD with the same hash to a MOVE.

    Returns:
        The fused event, or None if the pair does not qualify
    """
    if not isinstance(event, CreateEvent) or not isinstance(prev, DeleteEvent):
        return None
    if not prev.is_file or prev.hash != event.hash:
        return None

    return MoveEvent(
        timestamp=event.timestamp,
        kind=ObjectKind.FILE,
        old_path=prev.path,
        new_path=event.path,
    )


def detect_copy(index: HashIndex, event: Event) -> Optional[CopyEvent]:
    """
    Replace an ADD by a COPY if a live file already holds the same content.

    The source is the earliest-inserted live path for the hash.

    Returns:
        The copy event, or None if no live file has the hash
    """
    if not isinstance(event, CreateEvent):
        return None

    src_path = index.first(event.hash)
    if src_path is None:
        return None

    return CopyEvent(
        timestamp=event.timestamp,
        kind=ObjectKind.FILE,
        src_path=src_path,
        dest_path=event.path,
    )


def update_index(index: HashIndex, event: Event, strict: bool = False, sep: str = SEP) -> None:
    """
    Apply a raw file event to the hash index.

    Args:
        index: The hash index to update
        event: The raw CreateEvent or DeleteEvent, never a fused event
        strict: Raise when a delete has no live index entry
        sep: Separator used to render paths in log messages

    Raises:
        MissingIndexEntryError: If strict and a deleted file is not indexed
    """
    if isinstance(event, CreateEvent):
        index.add(event.hash, event.path)
    elif isinstance(event, DeleteEvent):
        if not index.remove(event.hash, event.path, strict=strict):
            logger.warning(f"Delete of unindexed file {event.path.render(sep)} ({event.hash})")


def ingest(
    store: EventStore,
    index: HashIndex,
    event: Event,
    detect_copies: bool = True,
    strict_index: bool = False,
    sep: str = SEP,
) -> Event:
    """
    Add one raw primitive event to the store, fusing it when possible.

    Folder events are stored as is and left to the folder pass. A file ADD
    is first tried against the last stored event (MODIFY, then MOVE), then
    against the hash index (COPY). Whatever happens, the index is updated
    from the raw event. A file DEL updates the index before it is stored,
    so a strict index failure leaves the store untouched.

    Args:
        store: Event store being built
        index: Hash index of live files
        event: Raw CreateEvent or DeleteEvent, in timestamp order
        detect_copies: Whether unfused ADDs are checked against the index
        strict_index: Raise when a deleted file has no live index entry
        sep: Separator used to render paths in log messages

    Returns:
        The event that ended up in the store

    Raises:
        InvariantViolationError: If event is not a primitive event
        MissingIndexEntryError: If strict_index and a deleted file is not indexed
    """
    if not isinstance(event, (CreateEvent, DeleteEvent)):
        raise InvariantViolationError(
            f"only primitive events can be ingested, got {event.event_type.value}"
        )

    if event.kind is ObjectKind.FOLDER:
        store.insert(event)
        return event

    if isinstance(event, DeleteEvent):
        update_index(index, event, strict=strict_index, sep=sep)
        store.insert(event)
        return event

    prev = store.last()
    stored = fuse_modify(prev, event) or fuse_move(prev, event)
    if stored is not None:
        logger.debug(
            f"Fused {prev.path.render(sep)} + {event.path.render(sep)} "
            f"into {stored.event_type.value}"
        )
        store.pop_last()
    elif detect_copies:
        stored = detect_copy(index, event)
        if stored is not None:
            logger.debug(
                f"Copy of {stored.src_path.render(sep)} detected at {event.path.render(sep)}"
            )

    if stored is None:
        stored = event
    store.insert(stored)

    update_index(index, event, sep=sep)
    return stored
