"""Entry collection package."""

from income_tracker.entries.collection import EntryCollection, NotAuthenticatedError

__all__ = ["EntryCollection", "NotAuthenticatedError"]
