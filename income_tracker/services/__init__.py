"""Services package."""

from income_tracker.services.storage import (
    AuditStorageInterface,
    EntryStoreInterface,
    InMemoryAuditStorage,
    InMemoryEntryStore,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "EntryStoreInterface",
    "InMemoryAuditStorage",
    "InMemoryEntryStore",
    "NotFoundError",
    "StorageError",
]
