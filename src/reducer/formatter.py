"""Human-readable and machine-readable rendering of reduced events."""

import json
from typing import Iterable, List, Optional

from .exceptions import InvariantViolationError
from .models import (
    CopyEvent,
    CreateEvent,
    DeleteEvent,
    Event,
    ModifyEvent,
    MoveEvent,
    Operation,
)
from .paths import SEP, EventPath


def _folder(path: EventPath, sep: str) -> str:
    return path.parent.render(sep) if path.has_parent else ""


def describe(event: Event, sep: str = SEP) -> Optional[str]:
    """
    Describe an event in one plain-English sentence.

    Returns:
        The sentence, or None for a move that neither moved nor renamed
    """
    kind = event.kind.value

    if isinstance(event, CreateEvent):
        sentence = f'Created the {kind} "{event.path.name}" in the folder "{_folder(event.path, sep)}"'
        if event.is_file:
            sentence += f' with the hash value "{event.hash}"'
        return sentence + "."

    if isinstance(event, DeleteEvent):
        return f'Deleted the {kind} "{event.path.name}" in the folder "{_folder(event.path, sep)}".'

    if isinstance(event, ModifyEvent):
        return (
            f'Modified the {kind} "{event.path.name}" in the folder "{_folder(event.path, sep)}". '
            f'The new hash value is "{event.new_hash}".'
        )

    if isinstance(event, MoveEvent):
        old_name = event.old_path.name
        old_folder = _folder(event.old_path, sep)
        new_folder = _folder(event.new_path, sep)
        new_name = event.new_path.name

        if event.is_rename() and event.is_move():
            return (
                f'Moved the {kind} "{old_name}" in the folder "{old_folder}" to the folder '
                f'"{new_folder}" with the name "{new_name}".'
            )
        if event.is_rename():
            return f'Renamed the {kind} "{old_name}" in the folder "{old_folder}" to "{new_name}".'
        if event.is_move():
            return (
                f'Moved the {kind} "{old_name}" in the folder "{old_folder}" to the folder '
                f'"{new_folder}".'
            )
        # Removed and re-added at the same spot with the same content.
        return None

    if isinstance(event, CopyEvent):
        return (
            f'Copied the {kind} "{event.src_path.name}" from the folder '
            f'"{_folder(event.src_path, sep)}" to the folder "{_folder(event.dest_path, sep)}" '
            f'with the name "{event.dest_path.name}".'
        )

    raise InvariantViolationError(f"unknown event variant: {type(event).__name__}")


def format_history(events: Iterable[Event], sep: str = SEP) -> List[str]:
    """Describe every event, skipping no-op moves."""
    lines = []
    for event in events:
        sentence = describe(event, sep)
        if sentence is not None:
            lines.append(sentence)
    return lines


def to_json(events: Iterable[Event], indent: Optional[int] = 2, sep: str = SEP) -> str:
    """Serialize events as a JSON list of their dictionaries, paths rendered with sep."""
    return json.dumps([event.to_dict(sep) for event in events], indent=indent)


def format_trace(events: Iterable[Event], sep: str = SEP) -> List[str]:
    """
    Render primitive events back into trace records, count header first.

    Raises:
        InvariantViolationError: If an event is not a primitive ADD or DEL
    """
    records = []
    for event in events:
        if isinstance(event, CreateEvent):
            operation = Operation.ADD
        elif isinstance(event, DeleteEvent):
            operation = Operation.DEL
        else:
            raise InvariantViolationError(
                f"{event.event_type.value} events have no trace record"
            )
        records.append(
            f"{operation.value} {event.timestamp} {event.path.render(sep)} {event.hash}"
        )
    return [str(len(records))] + records
