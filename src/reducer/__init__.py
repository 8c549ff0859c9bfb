"""
File Event Reducer Package

Turns a timestamp-ordered batch of primitive filesystem events (object
created, object deleted) into a short history of semantic operations.

Features:
- File events: MODIFY and MOVE/RENAME by fusing adjacent DEL+ADD pairs
- COPY detection through a content hash index of live files
- Folder deletes collapsed with a snapshot of their subtree
- Folder MOVE/RENAME detection by subtree equality
- Plain-English and JSON rendering of the history
- Trace recording from a live directory
"""

from .models import (
    NULL_HASH,
    Operation,
    ObjectKind,
    EventType,
    Event,
    CreateEvent,
    DeleteEvent,
    ModifyEvent,
    MoveEvent,
    CopyEvent,
    primitive_event,
    compute_file_hash,
)

from .paths import EventPath

from .config import ReducerConfig

from .exceptions import (
    ReducerError,
    MalformedEventError,
    EmptyPathError,
    UnknownOperationError,
    OutOfOrderEventError,
    InvariantViolationError,
    RootPathError,
    MissingIndexEntryError,
    ReducerFinishedError,
)

from .hash_index import HashIndex
from .store import EventStore
from .file_reducer import ingest
from .folder_reducer import collapse, match_move, simplify
from .processor import EventReducer, reduce_events
from .reader import parse_record, read_events, read_trace
from .formatter import describe, format_history, format_trace, to_json
from .recorder import EventRecorder, TraceBuilder


__all__ = [
    # Models
    "NULL_HASH",
    "Operation",
    "ObjectKind",
    "EventType",
    "Event",
    "CreateEvent",
    "DeleteEvent",
    "ModifyEvent",
    "MoveEvent",
    "CopyEvent",
    "primitive_event",
    "compute_file_hash",
    "EventPath",
    # Config
    "ReducerConfig",
    # Exceptions
    "ReducerError",
    "MalformedEventError",
    "EmptyPathError",
    "UnknownOperationError",
    "OutOfOrderEventError",
    "InvariantViolationError",
    "RootPathError",
    "MissingIndexEntryError",
    "ReducerFinishedError",
    # Components
    "HashIndex",
    "EventStore",
    "ingest",
    "collapse",
    "match_move",
    "simplify",
    "EventReducer",
    "reduce_events",
    # I/O
    "parse_record",
    "read_events",
    "read_trace",
    "describe",
    "format_history",
    "format_trace",
    "to_json",
    "EventRecorder",
    "TraceBuilder",
]

__version__ = "0.1.0"
