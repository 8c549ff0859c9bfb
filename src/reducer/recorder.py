"""Recording primitive event traces from a live directory using watchdog."""

import logging
import os
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEventHandler,
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
)

from .config import ReducerConfig
from .models import CreateEvent, DeleteEvent, Event, compute_file_hash, kind_for_hash
from .paths import EventPath


logger = logging.getLogger(__name__)


class TraceBuilder:
    """
    Turns filesystem observations under one root into primitive events.

    Deleted files can no longer be hashed, so the builder remembers the hash
    of every file it has seen and uses it for the DEL record.
    """

    def __init__(self, root: Path, config: Optional[ReducerConfig] = None):
        """
        Initialize the builder.

        Args:
            root: Directory the recorded paths are relative to
            config: Reducer configuration
        """
        self.root = root.resolve()
        self.config = config or ReducerConfig()
        self._known: Dict[Path, str] = {}
        self._events: List[Event] = []
        self._last_timestamp = 0
        self._lock = threading.Lock()

    def snapshot(self) -> int:
        """
        Remember the hash of everything currently under the root.

        Returns:
            Number of objects remembered
        """
        with self._lock:
            self._known.clear()
            for path in self._walk(self.root):
                content_hash = self._hash(path, path.is_dir())
                if content_hash is not None:
                    self._known[path] = content_hash
            return len(self._known)

    def _walk(self, top: Path) -> List[Path]:
        found = []
        for dirpath, dirnames, filenames in os.walk(top):
            dirnames.sort()
            base = Path(dirpath)
            for name in dirnames:
                path = base / name
                if not self.config.should_ignore(path):
                    found.append(path)
            for name in sorted(filenames):
                path = base / name
                if not self.config.should_ignore(path):
                    found.append(path)
            dirnames[:] = [d for d in dirnames if not self.config.should_ignore(base / d)]
        return found

    def _hash(self, path: Path, is_directory: bool) -> Optional[str]:
        if is_directory:
            return self.config.null_hash
        return compute_file_hash(path, self.config.hash_algorithm)

    def _event_path(self, path: Path) -> EventPath:
        relative = path.relative_to(self.root)
        return EventPath((self.config.separator,) + relative.parts)

    def _timestamp(self) -> int:
        self._last_timestamp = max(int(time.time() * 1000), self._last_timestamp)
        return self._last_timestamp

    def _record_add(self, path: Path, content_hash: str) -> None:
        self._known[path] = content_hash
        self._events.append(CreateEvent(
            timestamp=self._timestamp(),
            kind=kind_for_hash(content_hash, self.config.null_hash),
            path=self._event_path(path),
            hash=content_hash,
        ))

    def _record_del(self, path: Path) -> None:
        content_hash = self._known.pop(path)
        self._events.append(DeleteEvent(
            timestamp=self._timestamp(),
            kind=kind_for_hash(content_hash, self.config.null_hash),
            path=self._event_path(path),
            hash=content_hash,
        ))

    def created(self, path: Path, is_directory: bool) -> None:
        """Record an ADD for path, and for any content that came along with a folder."""
        with self._lock:
            self._created(path, is_directory)

    def _created(self, path: Path, is_directory: bool) -> None:
        if path in self._known:
            return
        content_hash = self._hash(path, is_directory)
        if content_hash is None:
            logger.debug(f"Created file vanished before hashing: {path}")
            return
        self._record_add(path, content_hash)

        if is_directory:
            for child in self._walk(path):
                if child not in self._known:
                    child_hash = self._hash(child, child.is_dir())
                    if child_hash is not None:
                        self._record_add(child, child_hash)

    def deleted(self, path: Path, is_directory: bool) -> None:
        """Record DELs for remembered descendants, deepest first, then for path."""
        with self._lock:
            self._deleted(path)

    def _deleted(self, path: Path) -> None:
        descendants = [p for p in self._known if p != path and path in p.parents]
        descendants.sort(key=lambda p: (-len(p.parts), str(p)))
        for descendant in descendants:
            self._record_del(descendant)

        if path in self._known:
            self._record_del(path)
        else:
            logger.debug(f"Deleted path was never seen: {path}")

    def modified(self, path: Path, is_directory: bool) -> None:
        """Record a DEL/ADD pair when a file's content hash changed."""
        if is_directory:
            return
        with self._lock:
            new_hash = self._hash(path, False)
            if new_hash is None:
                return
            old_hash = self._known.get(path)
            if old_hash == new_hash:
                return
            if old_hash is not None:
                self._record_del(path)
            self._record_add(path, new_hash)

    def moved(self, src_path: Path, dest_path: Path, is_directory: bool) -> None:
        """Record a move as the deletion of the source and creation of the destination."""
        with self._lock:
            self._deleted(src_path)
            if self._is_inside_root(dest_path):
                self._created(dest_path, is_directory)

    def _is_inside_root(self, path: Path) -> bool:
        return path == self.root or self.root in path.parents

    def events(self) -> List[Event]:
        """Copy of the recorded primitive events, in order."""
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


class RecorderEventHandler(FileSystemEventHandler):
    """Handler that feeds watchdog events into a TraceBuilder."""

    def __init__(self, builder: TraceBuilder, config: ReducerConfig):
        super().__init__()
        self.builder = builder
        self.config = config

    def _should_ignore(self, path: Path) -> bool:
        """Check if the path should be ignored."""
        return path == self.builder.root or self.config.should_ignore(path)

    def on_created(self, event):
        path = Path(os.fsdecode(event.src_path))
        if not self._should_ignore(path):
            self.builder.created(path, isinstance(event, DirCreatedEvent))

    def on_deleted(self, event):
        path = Path(os.fsdecode(event.src_path))
        if not self._should_ignore(path):
            self.builder.deleted(path, isinstance(event, DirDeletedEvent))

    def on_modified(self, event):
        path = Path(os.fsdecode(event.src_path))
        if not self._should_ignore(path):
            self.builder.modified(path, isinstance(event, DirModifiedEvent))

    def on_moved(self, event):
        src_path = Path(os.fsdecode(event.src_path))
        dest_path = Path(os.fsdecode(event.dest_path))
        is_dir = isinstance(event, DirMovedEvent)
        ignore_src = self._should_ignore(src_path)
        ignore_dest = self._should_ignore(dest_path)

        if ignore_src and not ignore_dest:
            self.builder.created(dest_path, is_dir)
        elif ignore_dest and not ignore_src:
            self.builder.deleted(src_path, is_dir)
        elif not ignore_src:
            self.builder.moved(src_path, dest_path, is_dir)


class EventRecorder:
    """
    Records a primitive event trace for one directory.

    Wraps a watchdog observer around a TraceBuilder; the recorded events are
    a finished batch for the reducer once stop() returns.
    """

    def __init__(self, root: Path, config: Optional[ReducerConfig] = None):
        """
        Initialize the recorder.

        Args:
            root: Directory to record
            config: Reducer configuration
        """
        self.config = config or ReducerConfig()
        self.builder = TraceBuilder(root, self.config)
        self._observer: Optional[Observer] = None
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self.builder.root

    def start(self) -> bool:
        """
        Snapshot the root and start watching it.

        Returns:
            True if recording started, False if already recording
        """
        with self._lock:
            if self._observer is not None:
                return False

            known = self.builder.snapshot()
            logger.info(f"Recording {self.root} ({known} existing objects)")

            observer = Observer()
            observer.schedule(
                RecorderEventHandler(self.builder, self.config),
                str(self.root),
                recursive=self.config.recursive,
            )
            observer.start()
            self._observer = observer
            return True

    def stop(self) -> bool:
        """
        Stop watching.

        Returns:
            True if recording stopped, False if it was not running
        """
        with self._lock:
            if self._observer is None:
                return False

            observer = self._observer
            self._observer = None
            observer.stop()
            observer.join(timeout=5.0)
            logger.info(f"Stopped recording {self.root} ({len(self.builder)} events)")
            return True

    def is_recording(self) -> bool:
        with self._lock:
            return self._observer is not None

    def events(self) -> List[Event]:
        return self.builder.events()

    def __enter__(self) -> "EventRecorder":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
