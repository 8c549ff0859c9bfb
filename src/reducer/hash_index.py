"""Content hash index used for copy detection."""

from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import MissingIndexEntryError
from .paths import EventPath


class HashIndex:
    """
    Multi-valued mapping from content hash to the paths currently holding it.

    Paths under a hash are kept in insertion order, so the first live path
    for a hash is always the one that has held it the longest.
    """

    def __init__(self):
        self._paths: Dict[str, Dict[EventPath, None]] = {}
        self._hash_by_path: Dict[EventPath, str] = {}

    def add(self, content_hash: str, path: EventPath) -> None:
        """
        Record that path now holds content_hash.

        A path holds one hash at a time, so any previous entry for path is
        dropped first.
        """
        previous = self._hash_by_path.get(path)
        if previous is not None:
            self._discard(previous, path)

        self._paths.setdefault(content_hash, {})[path] = None
        self._hash_by_path[path] = content_hash

    def remove(self, content_hash: str, path: EventPath, strict: bool = False) -> bool:
        """
        Forget that path holds content_hash.

        Args:
            content_hash: Hash carried by the delete
            path: Path that was deleted
            strict: Raise instead of returning False when the pair is unknown

        Returns:
            True if the pair was removed, False if it was not present

        Raises:
            MissingIndexEntryError: If strict and the pair is not present
        """
        if self._hash_by_path.get(path) != content_hash:
            if strict:
                raise MissingIndexEntryError(
                    f"no live entry for {path} with hash {content_hash}"
                )
            return False

        self._discard(content_hash, path)
        return True

    def _discard(self, content_hash: str, path: EventPath) -> None:
        paths = self._paths[content_hash]
        del paths[path]
        if not paths:
            del self._paths[content_hash]
        del self._hash_by_path[path]

    def first(self, content_hash: str) -> Optional[EventPath]:
        """Return the earliest-inserted live path for a hash, or None."""
        paths = self._paths.get(content_hash)
        if not paths:
            return None
        return next(iter(paths))

    def paths_for(self, content_hash: str) -> List[EventPath]:
        return list(self._paths.get(content_hash, ()))

    def hash_of(self, path: EventPath) -> Optional[str]:
        return self._hash_by_path.get(path)

    def __contains__(self, content_hash: str) -> bool:
        return content_hash in self._paths

    def __len__(self) -> int:
        """Number of (hash, path) pairs."""
        return len(self._hash_by_path)

    def __iter__(self) -> Iterator[Tuple[str, EventPath]]:
        for content_hash, paths in self._paths.items():
            for path in paths:
                yield content_hash, path
