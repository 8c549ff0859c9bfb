"""Data models for the event reducer package."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Dict, Optional, Type
import hashlib

from .exceptions import MalformedEventError, UnknownOperationError
from .paths import SEP, EventPath


NULL_HASH = "-"

# Relative sub-path ("b/c.t") -> content hash, NULL_HASH for folders.
Subtree = Dict[str, str]


class Operation(Enum):
    """Keywords of primitive event records."""
    ADD = "ADD"
    DEL = "DEL"


class ObjectKind(Enum):
    """Kind of filesystem object an event refers to."""
    FILE = "file"
    FOLDER = "folder"


class EventType(Enum):
    """Types of semantic events."""
    CREATE = "create"
    DELETE = "delete"
    MODIFY = "modify"
    MOVE = "move"
    COPY = "copy"


@dataclass
class Event:
    """
    Base of every event kept in the event store.

    Attributes:
        timestamp: Position of the event in the input history
        kind: Whether the event is about a file or a folder
    """
    timestamp: int
    kind: ObjectKind

    event_type: ClassVar[EventType]

    @property
    def is_file(self) -> bool:
        return self.kind is ObjectKind.FILE

    @property
    def is_folder(self) -> bool:
        return self.kind is ObjectKind.FOLDER

    def _payload(self, sep: str) -> dict:
        return {}

    def to_dict(self, sep: str = SEP) -> dict:
        """
        Convert to dictionary for serialization.

        Args:
            sep: Separator used to render paths
        """
        data = {
            "event_type": self.event_type.value,
            "kind": self.kind.value,
            "timestamp": self.timestamp,
        }
        data.update(self._payload(sep))
        return data

    @classmethod
    def from_dict(cls, data: dict, sep: str = SEP) -> "Event":
        """Create the matching event variant from a dictionary."""
        event_cls = _EVENT_CLASSES[EventType(data["event_type"])]
        return event_cls._from_payload(
            timestamp=data["timestamp"],
            kind=ObjectKind(data["kind"]),
            data=data,
            sep=sep,
        )

    @classmethod
    def _from_payload(cls, timestamp: int, kind: ObjectKind, data: dict, sep: str) -> "Event":
        raise NotImplementedError


@dataclass
class CreateEvent(Event):
    """A file or folder appeared at path."""
    path: EventPath
    hash: str = NULL_HASH

    event_type: ClassVar[EventType] = EventType.CREATE

    def _payload(self, sep: str) -> dict:
        return {"path": self.path.render(sep), "hash": self.hash}

    @classmethod
    def _from_payload(cls, timestamp, kind, data, sep):
        return cls(
            timestamp=timestamp,
            kind=kind,
            path=EventPath.parse(data["path"], sep),
            hash=data.get("hash", NULL_HASH),
        )


@dataclass
class DeleteEvent(Event):
    """
    A file or folder disappeared from path.

    Attributes:
        path: Path of the deleted object
        hash: Content hash of a deleted file, NULL_HASH for folders
        subtree: Descendants captured by collapsing nested deletes
    """
    path: EventPath
    hash: str = NULL_HASH
    subtree: Subtree = field(default_factory=dict)

    event_type: ClassVar[EventType] = EventType.DELETE

    def _payload(self, sep: str) -> dict:
        return {
            "path": self.path.render(sep),
            "hash": self.hash,
            "subtree": dict(sorted(self.subtree.items())),
        }

    @classmethod
    def _from_payload(cls, timestamp, kind, data, sep):
        return cls(
            timestamp=timestamp,
            kind=kind,
            path=EventPath.parse(data["path"], sep),
            hash=data.get("hash", NULL_HASH),
            subtree=dict(data.get("subtree") or {}),
        )


@dataclass
class ModifyEvent(Event):
    """A file kept its path but its content hash changed (or was rewritten)."""
    path: EventPath
    old_hash: str
    new_hash: str

    event_type: ClassVar[EventType] = EventType.MODIFY

    def _payload(self, sep: str) -> dict:
        return {
            "path": self.path.render(sep),
            "old_hash": self.old_hash,
            "new_hash": self.new_hash,
        }

    @classmethod
    def _from_payload(cls, timestamp, kind, data, sep):
        return cls(
            timestamp=timestamp,
            kind=kind,
            path=EventPath.parse(data["path"], sep),
            old_hash=data["old_hash"],
            new_hash=data["new_hash"],
        )


@dataclass
class MoveEvent(Event):
    """A file or folder moved and/or was renamed."""
    old_path: EventPath
    new_path: EventPath

    event_type: ClassVar[EventType] = EventType.MOVE

    def is_rename(self) -> bool:
        return self.old_path.name != self.new_path.name

    def is_move(self) -> bool:
        return _parent_or_none(self.old_path) != _parent_or_none(self.new_path)

    def _payload(self, sep: str) -> dict:
        return {
            "old_path": self.old_path.render(sep),
            "new_path": self.new_path.render(sep),
            "is_rename": self.is_rename(),
            "is_move": self.is_move(),
        }

    @classmethod
    def _from_payload(cls, timestamp, kind, data, sep):
        return cls(
            timestamp=timestamp,
            kind=kind,
            old_path=EventPath.parse(data["old_path"], sep),
            new_path=EventPath.parse(data["new_path"], sep),
        )


@dataclass
class CopyEvent(Event):
    """A new file has the same content as a file that is still live."""
    src_path: EventPath
    dest_path: EventPath

    event_type: ClassVar[EventType] = EventType.COPY

    def _payload(self, sep: str) -> dict:
        return {"src_path": self.src_path.render(sep), "dest_path": self.dest_path.render(sep)}

    @classmethod
    def _from_payload(cls, timestamp, kind, data, sep):
        return cls(
            timestamp=timestamp,
            kind=kind,
            src_path=EventPath.parse(data["src_path"], sep),
            dest_path=EventPath.parse(data["dest_path"], sep),
        )


_EVENT_CLASSES: Dict[EventType, Type[Event]] = {
    EventType.CREATE: CreateEvent,
    EventType.DELETE: DeleteEvent,
    EventType.MODIFY: ModifyEvent,
    EventType.MOVE: MoveEvent,
    EventType.COPY: CopyEvent,
}


def _parent_or_none(path: EventPath) -> Optional[EventPath]:
    return path.parent if path.has_parent else None


def kind_for_hash(content_hash: str, null_hash: str = NULL_HASH) -> ObjectKind:
    """Folders are the objects whose hash is the sentinel."""
    return ObjectKind.FOLDER if content_hash == null_hash else ObjectKind.FILE


def primitive_event(
    operation: str,
    timestamp: int,
    path: EventPath,
    content_hash: str,
    null_hash: str = NULL_HASH,
) -> Event:
    """
    Build the raw Create or Delete event for one input record.

    Args:
        operation: "ADD" or "DEL"
        timestamp: Record timestamp
        path: Affected path
        content_hash: File hash, or null_hash for a folder
        null_hash: Sentinel marking folders

    Returns:
        A CreateEvent or DeleteEvent

    Raises:
        UnknownOperationError: If operation is not ADD or DEL
    """
    try:
        op = Operation(operation)
    except ValueError:
        raise UnknownOperationError(f"unknown operation: {operation!r}") from None

    if not content_hash:
        raise MalformedEventError(f"missing hash for {path}")

    kind = kind_for_hash(content_hash, null_hash)
    if op is Operation.ADD:
        return CreateEvent(timestamp=timestamp, kind=kind, path=path, hash=content_hash)
    return DeleteEvent(timestamp=timestamp, kind=kind, path=path, hash=content_hash)


def compute_file_hash(path: Path, algorithm: str = "sha256") -> Optional[str]:
    """
    Compute hash of file contents.

    Args:
        path: Path to the file
        algorithm: Hash algorithm to use (default: sha256)

    Returns:
        Hex digest of the hash, or None if file cannot be read
    """
    if not path.exists() or path.is_dir():
        return None

    try:
        hasher = hashlib.new(algorithm)
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                hasher.update(chunk)
        return hasher.hexdigest()
    except (IOError, OSError, PermissionError):
        return None

