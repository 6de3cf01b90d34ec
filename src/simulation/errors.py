from __future__ import annotations


class InvalidArgument(ValueError):
    """A call request was rejected before it reached the queue."""


class InvalidFloor(InvalidArgument):
    pass


class IllegalDirection(InvalidArgument):
    pass


class InternalInconsistency(RuntimeError):
    """A completion fired against a car that is no longer in the expected state."""
