"""Reading primitive event traces.

A trace is a text file with one record per line:

    ADD 1 /test -
    ADD 2 /test/1.txt f2fa762f
    DEL 3 /test/1.txt f2fa762f

Fields are the operation (ADD or DEL), an optional integer timestamp, the
path and the content hash, "-" marking a folder. When the timestamp is left
out the record's position in the trace is used. The first line may hold
just the number of records that follow. Blank lines and lines starting with
"#" are ignored.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from .config import ReducerConfig
from .exceptions import MalformedEventError, OutOfOrderEventError
from .models import Event, primitive_event
from .paths import EventPath


logger = logging.getLogger(__name__)


def parse_record(line: str, position: int, config: Optional[ReducerConfig] = None) -> Event:
    """
    Parse one trace record.

    Args:
        line: Record text
        position: 1-based record number, used when the timestamp is omitted
        config: Reducer configuration (separator and folder hash)

    Returns:
        The raw CreateEvent or DeleteEvent

    Raises:
        MalformedEventError: If the record cannot be parsed
    """
    config = config or ReducerConfig()
    fields = line.split()

    if len(fields) == 4:
        operation, raw_timestamp, raw_path, content_hash = fields
        try:
            timestamp = int(raw_timestamp)
        except ValueError:
            raise MalformedEventError(
                f"record {position}: invalid timestamp {raw_timestamp!r}"
            ) from None
    elif len(fields) == 3:
        operation, raw_path, content_hash = fields
        timestamp = position
    else:
        raise MalformedEventError(
            f"record {position}: expected 3 or 4 fields, got {len(fields)}: {line.strip()!r}"
        )

    try:
        path = EventPath.parse(raw_path, config.separator)
        return primitive_event(operation, timestamp, path, content_hash, config.null_hash)
    except MalformedEventError as e:
        raise type(e)(f"record {position}: {e}") from None


def read_events(lines: Iterable[str], config: Optional[ReducerConfig] = None) -> List[Event]:
    """
    Parse a whole trace.

    The trace is validated completely before anything is returned, so a
    malformed record never yields a partial batch.

    Args:
        lines: Trace lines
        config: Reducer configuration

    Returns:
        Primitive events in trace order

    Raises:
        MalformedEventError: If a record is malformed, timestamps go
            backwards, or the count header does not match
    """
    config = config or ReducerConfig()
    expected: Optional[int] = None
    events: List[Event] = []
    seen_content = False

    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if not seen_content:
            seen_content = True
            if stripped.isdecimal():
                expected = int(stripped)
                continue

        event = parse_record(stripped, len(events) + 1, config)
        if events and event.timestamp < events[-1].timestamp:
            raise OutOfOrderEventError(
                f"record {len(events) + 1}: timestamp {event.timestamp} is before "
                f"{events[-1].timestamp}"
            )
        events.append(event)

    if expected is not None and expected != len(events):
        raise MalformedEventError(
            f"trace announces {expected} records but contains {len(events)}"
        )

    logger.debug(f"Read {len(events)} primitive events")
    return events


def read_trace(source: Union[Path, str, TextIO], config: Optional[ReducerConfig] = None) -> List[Event]:
    """
    Read a trace from a file path or an open text stream.
    """
    if isinstance(source, (str, Path)):
        with open(source, "r", encoding="utf-8") as f:
            return read_events(f, config)
    return read_events(source, config)
