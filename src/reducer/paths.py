"""Segment-based paths used by reducer events."""

from dataclasses import dataclass
from typing import Tuple

from .exceptions import EmptyPathError, InvariantViolationError, RootPathError


SEP = "/"


@dataclass(frozen=True)
class EventPath:
    """
    An ordered, non-empty sequence of path segments.

    Absolute paths start with the separator itself as a sentinel segment,
    so "/a/b" is ("/", "a", "b") and the root is ("/",). Equality and
    hashing are segment-wise.

    Attributes:
        segments: The path segments, root sentinel first for absolute paths
    """
    segments: Tuple[str, ...]

    def __post_init__(self):
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))
        if not self.segments:
            raise EmptyPathError("path must have at least one segment")

    @classmethod
    def parse(cls, raw: str, sep: str = SEP) -> "EventPath":
        """
        Build a path from its text form.

        Args:
            raw: Path text such as "/a/b.t" or "b/c.t"
            sep: Separator character

        Returns:
            The parsed path

        Raises:
            EmptyPathError: If raw has no segments
        """
        if not raw:
            raise EmptyPathError("path must not be empty")

        segments = []
        if raw.startswith(sep):
            segments.append(sep)
        segments.extend(part for part in raw.split(sep) if part)

        if not segments:
            raise EmptyPathError(f"path has no segments: {raw!r}")
        return cls(tuple(segments))

    @property
    def name(self) -> str:
        """Last segment."""
        return self.segments[-1]

    @property
    def has_parent(self) -> bool:
        return len(self.segments) > 1

    @property
    def parent(self) -> "EventPath":
        """All segments but the last."""
        if not self.has_parent:
            raise RootPathError(f"path has no parent: {self}")
        return EventPath(self.segments[:-1])

    def is_parent_of(self, other: "EventPath") -> bool:
        """True if other sits directly inside this path."""
        return (
            len(other.segments) == len(self.segments) + 1
            and other.segments[:-1] == self.segments
        )

    def is_descendant_of(self, other: "EventPath") -> bool:
        """True if this path is strictly below other."""
        return (
            len(self.segments) > len(other.segments)
            and self.segments[:len(other.segments)] == other.segments
        )

    def relative_to(self, base: "EventPath", sep: str = SEP) -> str:
        """
        Render the part of this path below base, e.g. "b/c.t".

        Raises:
            InvariantViolationError: If this path is not below base
        """
        if not self.is_descendant_of(base):
            raise InvariantViolationError(f"{self} is not below {base}")
        return sep.join(self.segments[len(base.segments):])

    def render(self, sep: str = SEP) -> str:
        """Text form; the root sentinel is not followed by another separator."""
        head = self.segments[0]
        rest = self.segments[1:]
        if head == sep:
            return sep + sep.join(rest)
        return sep.join(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.render()
