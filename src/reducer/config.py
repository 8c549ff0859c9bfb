"""Configuration for the event reducer package."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ReducerConfig:
    """
    Configuration options for the event reducer.

    Attributes:
        separator: Path separator; a path equal to it is the root
        null_hash: Hash value that marks an event as a folder event
        strict_index: Fail when a file is deleted without a live index entry
        detect_copies: Turn ADDs of already-live content into COPY events
        detect_folder_moves: Match folder deletes against runs of ADDs
        collapse_folder_deletes: Fold nested deletes into their folder delete
        hash_algorithm: Algorithm for content hashing when recording
        ignore_patterns: Glob patterns for files the recorder ignores
        recursive: Whether the recorder watches directories recursively
    """
    separator: str = "/"
    null_hash: str = "-"
    strict_index: bool = False
    detect_copies: bool = True
    detect_folder_moves: bool = True
    collapse_folder_deletes: bool = True
    hash_algorithm: str = "sha256"
    ignore_patterns: List[str] = field(default_factory=lambda: [
        "*.tmp",
        "*.swp",
        "*.swo",
        "*~",
        ".git/*",
        ".git",
        "__pycache__/*",
        "__pycache__",
        "*.pyc",
        ".DS_Store",
        "Thumbs.db",
    ])
    recursive: bool = True

    def __post_init__(self):
        if len(self.separator) != 1:
            raise ValueError(f"separator must be a single character: {self.separator!r}")
        if not self.null_hash or self.separator in self.null_hash:
            raise ValueError(f"invalid null hash: {self.null_hash!r}")

    @classmethod
    def from_env(cls, prefix: str = "REDUCER_") -> "ReducerConfig":
        """
        Build a config from environment variables.

        Recognized variables (with the default prefix): REDUCER_SEPARATOR,
        REDUCER_NULL_HASH, REDUCER_STRICT_INDEX, REDUCER_DETECT_COPIES,
        REDUCER_DETECT_FOLDER_MOVES, REDUCER_COLLAPSE_FOLDER_DELETES,
        REDUCER_HASH_ALGORITHM and REDUCER_IGNORE_PATTERNS (comma-separated).
        """
        defaults = cls()
        patterns: Optional[str] = os.environ.get(f"{prefix}IGNORE_PATTERNS")
        return cls(
            separator=os.environ.get(f"{prefix}SEPARATOR", defaults.separator),
            null_hash=os.environ.get(f"{prefix}NULL_HASH", defaults.null_hash),
            strict_index=_env_flag(f"{prefix}STRICT_INDEX", defaults.strict_index),
            detect_copies=_env_flag(f"{prefix}DETECT_COPIES", defaults.detect_copies),
            detect_folder_moves=_env_flag(
                f"{prefix}DETECT_FOLDER_MOVES", defaults.detect_folder_moves
            ),
            collapse_folder_deletes=_env_flag(
                f"{prefix}COLLAPSE_FOLDER_DELETES", defaults.collapse_folder_deletes
            ),
            hash_algorithm=os.environ.get(f"{prefix}HASH_ALGORITHM", defaults.hash_algorithm),
            ignore_patterns=(
                [p.strip() for p in patterns.split(",") if p.strip()]
                if patterns is not None
                else defaults.ignore_patterns
            ),
        )

    def should_ignore(self, path: Path) -> bool:
        """
        Check if a path should be ignored based on ignore patterns.

        Args:
            path: Path to check

        Returns:
            True if the path should be ignored
        """
        import fnmatch

        path_str = str(path)
        name = path.name

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(name, pattern):
                return True
            if fnmatch.fnmatch(path_str, f"*/{pattern}"):
                return True
            if fnmatch.fnmatch(path_str, pattern):
                return True

        return False
