from __future__ import annotations


class PlannerError(Exception):
    """Base class for errors surfaced to callers of the planner core."""


class MalformedInputError(PlannerError, ValueError):
    """Raised when caller-supplied data is missing or cannot be parsed."""


class NotFoundError(PlannerError, LookupError):
    """Raised when a calendar entity does not exist."""


class StorageConflictError(PlannerError):
    """Raised when a write would violate a store constraint."""


class NothingToUndoError(PlannerError):
    """Raised when neither undo tier has anything left to revert."""


__all__ = [
    "MalformedInputError",
    "NothingToUndoError",
    "NotFoundError",
    "PlannerError",
    "StorageConflictError",
]
