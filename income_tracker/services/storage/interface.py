"""
Abstract Storage Interface

DESIGN DECISION: The entry store is an external, hosted collaborator.
We define the operations we need from it as an abstract interface so that:
1. The hosted backend can be swapped without touching business logic
2. In-memory storage can be used for tests and local runs
3. Every call is scoped by the ownership key of the signed-in user

The interface is intentionally small: list, insert, update, delete.
Every call may fail; failures surface as StorageError.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from income_tracker.models.audit import AuditEvent
from income_tracker.models.entry import EntryDraft, EntryUpdate, WorkEntry


class EntryStoreInterface(ABC):
    """
    Abstract interface for work entry storage.

    Any store implementation must implement these methods. Entries of one
    owner are never visible to another.
    """

    @abstractmethod
    async def list_entries(self, owner_id: str) -> list[WorkEntry]:
        """
        List all entries belonging to an owner.

        Args:
            owner_id: Ownership key of the authenticated user

        Returns:
            Entries ordered by date, newest first

        Raises:
            StorageError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def insert_entry(self, owner_id: str, draft: EntryDraft) -> WorkEntry:
        """
        Store a new entry.

        The store assigns id, created_at and updated_at.

        Args:
            owner_id: Ownership key of the authenticated user
            draft: The validated entry fields

        Returns:
            The stored entry

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def update_entry(
        self,
        owner_id: str,
        entry_id: str,
        changes: EntryUpdate,
    ) -> WorkEntry:
        """
        Replace some fields of an existing entry.

        updated_at is refreshed on every call.

        Args:
            owner_id: Ownership key of the authenticated user
            entry_id: The entry's identifier
            changes: Fields to replace

        Returns:
            The updated entry

        Raises:
            NotFoundError: If the owner has no entry with this id
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def delete_entry(self, owner_id: str, entry_id: str) -> None:
        """
        Delete an entry.

        Raises:
            NotFoundError: If the owner has no entry with this id
            StorageError: If the delete fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one import).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
        owner_id: Optional[str] = None,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return
            owner_id: Only events of this owner, if given

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
