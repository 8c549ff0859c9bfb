"""Folder-level reduction over a finished event store."""

import logging
from typing import Optional, Tuple

from .models import (
    CreateEvent,
    DeleteEvent,
    MoveEvent,
    ObjectKind,
    Subtree,
)
from .paths import SEP
from .store import EventStore


logger = logging.getLogger(__name__)


def collapse(store: EventStore, index: int, sep: str = SEP) -> bool:
    """
    Fold the delete before a folder delete into it when it is a direct child.

    The child's own hash is recorded under its name in the folder's subtree,
    and every entry of the child's subtree is carried over with the child's
    name as prefix. The child delete is then removed from the store, so the
    folder delete moves to index - 1.

    Args:
        store: Event store being simplified
        index: Position of the candidate folder delete
        sep: Separator used in subtree keys

    Returns:
        True if a child delete was absorbed
    """
    if index <= 0 or index >= len(store):
        return False

    prev = store[index - 1]
    cur = store[index]
    if not isinstance(prev, DeleteEvent) or not isinstance(cur, DeleteEvent):
        return False
    if cur.kind is not ObjectKind.FOLDER:
        return False
    if not cur.path.is_parent_of(prev.path):
        return False

    name = prev.path.name
    cur.subtree[name] = prev.hash
    for sub_path, content_hash in prev.subtree.items():
        cur.subtree[name + sep + sub_path] = content_hash

    logger.debug(f"Collapsed delete of {prev.path.render(sep)} into {cur.path.render(sep)}")
    store.remove(index - 1)
    return True


def find_create_run(store: EventStore, start: int, sep: str = SEP) -> Tuple[int, Subtree]:
    """
    Find the run of ADDs below the folder created at start.

    The run begins with the ADD at start and extends while the following
    events are ADDs of proper descendants of that first path.

    Returns:
        (end, subtree) where end is one past the last ADD of the run and
        subtree maps each descendant's path relative to the first ADD to its
        hash. end == start when store[start] is not an ADD.
    """
    if start >= len(store) or not isinstance(store[start], CreateEvent):
        return start, {}

    base = store[start].path
    subtree: Subtree = {}
    end = start + 1
    while end < len(store):
        event = store[end]
        if not isinstance(event, CreateEvent) or not event.path.is_descendant_of(base):
            break
        subtree[event.path.relative_to(base, sep)] = event.hash
        end += 1

    return end, subtree


def match_move(store: EventStore, del_index: int, sep: str = SEP) -> Optional[int]:
    """
    Turn a folder delete and a matching run of ADDs into a folder MOVE.

    The ADD right after the delete names the new folder. If the subtree of
    the ADD run below it equals the subtree captured by the delete, the
    delete and the whole run are replaced by one MoveEvent.

    Args:
        store: Event store being simplified
        del_index: Position of the folder delete
        sep: Separator used in subtree keys

    Returns:
        Index of the inserted MoveEvent, or None if there was no match
    """
    deleted = store[del_index]
    if not isinstance(deleted, DeleteEvent) or deleted.kind is not ObjectKind.FOLDER:
        return None

    start = del_index + 1
    if start >= len(store):
        return None
    created = store[start]
    if not isinstance(created, CreateEvent) or created.kind is not ObjectKind.FOLDER:
        return None

    end, subtree = find_create_run(store, start, sep)
    if subtree != deleted.subtree:
        logger.debug(
            f"Subtree of {created.path.render(sep)} ({len(subtree)} entries) does not match "
            f"deleted {deleted.path.render(sep)} ({len(deleted.subtree)} entries)"
        )
        return None

    move = MoveEvent(
        timestamp=created.timestamp,
        kind=ObjectKind.FOLDER,
        old_path=deleted.path,
        new_path=created.path,
    )
    logger.debug(f"Folder {deleted.path.render(sep)} moved to {created.path.render(sep)}")
    return store.replace_span(del_index, end, move)


def simplify(
    store: EventStore,
    collapse_deletes: bool = True,
    detect_moves: bool = True,
    sep: str = SEP,
) -> EventStore:
    """
    Run the folder pass over the whole store, in place.

    Each position is first collapsed until no child delete precedes it,
    then a folder move is attempted once. Scanning continues after the
    inserted MOVE, or after the delete when nothing matched.

    Args:
        store: Event store produced by the file-level pass
        collapse_deletes: Whether nested deletes are collapsed
        detect_moves: Whether folder moves are matched
        sep: Separator used in subtree keys

    Returns:
        The same store, simplified
    """
    index = 0
    while index < len(store):
        if collapse_deletes:
            while collapse(store, index, sep):
                index -= 1

        if detect_moves:
            moved = match_move(store, index, sep)
            if moved is not None:
                index = moved
        index += 1

    return store
