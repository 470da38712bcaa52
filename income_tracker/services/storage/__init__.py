"""
Storage Services Package

Provides the abstract entry store and audit storage interfaces, plus
in-memory implementations. Hosted backends implement the same interfaces.
"""

from income_tracker.services.storage.interface import (
    AuditStorageInterface,
    EntryStoreInterface,
    NotFoundError,
    StorageError,
)
from income_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryEntryStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "EntryStoreInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryEntryStore",
]
