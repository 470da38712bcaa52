"""
In-Memory Storage Implementation

Process-local implementations of the storage interfaces. Used for tests,
local runs and as the default when no hosted store is configured.

Entries are kept per owner; nothing is shared between owners.
"""

from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID, uuid4

from income_tracker.models.audit import AuditEvent
from income_tracker.models.entry import EntryDraft, EntryUpdate, WorkEntry
from income_tracker.services.storage.interface import (
    AuditStorageInterface,
    EntryStoreInterface,
    NotFoundError,
    StorageError,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryEntryStore(EntryStoreInterface):
    """
    Dictionary-backed entry store.

    Timestamps come from `clock`; updated_at never moves backwards even if
    the clock does.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utcnow
        self._entries: dict[str, dict[str, WorkEntry]] = {}

    def _owned(self, owner_id: str) -> dict[str, WorkEntry]:
        if not owner_id:
            raise StorageError("Ownership key is required")
        return self._entries.setdefault(owner_id, {})

    async def list_entries(self, owner_id: str) -> list[WorkEntry]:
        entries = list(self._owned(owner_id).values())
        # Newest first
        entries.sort(key=lambda e: (e.date, e.created_at), reverse=True)
        return entries

    async def insert_entry(self, owner_id: str, draft: EntryDraft) -> WorkEntry:
        owned = self._owned(owner_id)
        now = self._clock()
        entry = WorkEntry(
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        owned[entry.id] = entry
        return entry

    async def update_entry(
        self,
        owner_id: str,
        entry_id: str,
        changes: EntryUpdate,
    ) -> WorkEntry:
        owned = self._owned(owner_id)
        current = owned.get(entry_id)
        if current is None:
            raise NotFoundError(f"Entry not found: {entry_id}")

        updated_at = max(self._clock(), current.updated_at)
        # Revalidate the merged fields rather than trusting model_copy
        updated = WorkEntry(
            **{
                **current.model_dump(),
                **changes.changes(),
                "updated_at": updated_at,
            }
        )
        owned[entry_id] = updated
        return updated

    async def delete_entry(self, owner_id: str, entry_id: str) -> None:
        owned = self._owned(owner_id)
        if entry_id not in owned:
            raise NotFoundError(f"Entry not found: {entry_id}")
        del owned[entry_id]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        matching = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(matching, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
        owner_id: Optional[str] = None,
    ) -> list[AuditEvent]:
        events = self._events
        if owner_id is not None:
            events = [e for e in events if e.owner_id == owner_id]
        return list(reversed(events))[:limit]
