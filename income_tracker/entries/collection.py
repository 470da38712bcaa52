"""
Entry Collection

The in-memory set of the signed-in user's entries.

DESIGN DECISION: The collection is an immutable tuple snapshot that is
replaced, never mutated in place. Filtering, aggregation and export work on
whatever snapshot they were handed; mutations go to the entry store first
and only the store's answer is folded into the next snapshot.
"""

from typing import Iterable, Iterator, Optional

from income_tracker.models.entry import EntryDraft, EntryUpdate, WorkEntry
from income_tracker.services.storage import EntryStoreInterface


class NotAuthenticatedError(Exception):
    """No signed-in user, so there is no ownership key to scope by."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class EntryCollection:
    """
    Owned, replaceable snapshot of one user's entries.

    Store failures from add / update / delete propagate to the caller and
    leave the snapshot unchanged.
    """

    def __init__(
        self,
        store: EntryStoreInterface,
        owner_id: Optional[str] = None,
    ):
        self._store = store
        self._owner_id = owner_id
        self._entries: tuple[WorkEntry, ...] = ()

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    @property
    def is_authenticated(self) -> bool:
        return bool(self._owner_id)

    def require_owner(self) -> str:
        if not self._owner_id:
            raise NotAuthenticatedError()
        return self._owner_id

    def snapshot(self) -> tuple[WorkEntry, ...]:
        """Current entries, newest first."""
        return self._entries

    def replace(self, entries: Iterable[WorkEntry]) -> None:
        self._entries = tuple(entries)

    def get(self, entry_id: str) -> Optional[WorkEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WorkEntry]:
        return iter(self._entries)

    async def refresh(self) -> tuple[WorkEntry, ...]:
        """Reload the whole snapshot from the store."""
        owner_id = self.require_owner()
        entries = await self._store.list_entries(owner_id)
        self.replace(entries)
        return self._entries

    async def add(self, draft: EntryDraft) -> WorkEntry:
        """Insert a new entry and put it at the front of the snapshot."""
        owner_id = self.require_owner()
        entry = await self._store.insert_entry(owner_id, draft)
        self._entries = (entry,) + self._entries
        return entry

    async def update(self, entry_id: str, changes: EntryUpdate) -> WorkEntry:
        """Apply a partial update and swap the stored result into the snapshot."""
        owner_id = self.require_owner()
        updated = await self._store.update_entry(owner_id, entry_id, changes)
        self._entries = tuple(
            updated if entry.id == entry_id else entry
            for entry in self._entries
        )
        return updated

    async def delete(self, entry_id: str) -> None:
        owner_id = self.require_owner()
        await self._store.delete_entry(owner_id, entry_id)
        self._entries = tuple(e for e in self._entries if e.id != entry_id)
