"""Custom exceptions for the event reducer package."""


class ReducerError(Exception):
    """Base exception for all reducer errors."""
    pass


class MalformedEventError(ReducerError):
    """A primitive event record cannot be parsed or is out of order."""
    pass


class EmptyPathError(MalformedEventError):
    """A primitive event carries an empty path."""
    pass


class UnknownOperationError(MalformedEventError):
    """A primitive event uses an operation keyword other than ADD or DEL."""
    pass


class OutOfOrderEventError(MalformedEventError):
    """A primitive event has a timestamp lower than the one before it."""
    pass


class InvariantViolationError(ReducerError):
    """A structural contract of the reducer was broken."""
    pass


class RootPathError(InvariantViolationError):
    """Parent requested for a path that has nothing above it."""
    pass


class MissingIndexEntryError(InvariantViolationError):
    """A file was deleted without a live entry in the hash index."""
    pass


class ReducerFinishedError(InvariantViolationError):
    """Events were ingested after the folder pass already ran."""
    pass
