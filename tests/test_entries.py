"""Tests for the entry collection and the in-memory store."""

import asyncio
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from income_tracker.entries import EntryCollection, NotAuthenticatedError
from income_tracker.models.entry import EntryDraft, EntryUpdate, PaymentStatus
from income_tracker.services.storage import InMemoryEntryStore, NotFoundError, StorageError


T0 = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def make_draft(date="2024-01-15", description="Logo design", amount="500") -> EntryDraft:
    return EntryDraft(
        date=date,
        category="freelance",
        description=description,
        amount=Decimal(amount),
        currency="USD",
    )


class TestInMemoryEntryStore:
    """Tests for the dictionary-backed store."""

    def test_insert_assigns_id_and_timestamps(self):
        """Test store-assigned fields on insert."""
        store = InMemoryEntryStore(clock=lambda: T0)
        entry = asyncio.run(store.insert_entry("user-1", make_draft()))
        assert entry.id
        assert entry.created_at == T0
        assert entry.updated_at == T0

    def test_owners_are_isolated(self):
        """Test one owner never sees another owner's entries."""
        store = InMemoryEntryStore()
        asyncio.run(store.insert_entry("user-1", make_draft()))
        assert asyncio.run(store.list_entries("user-2")) == []
        assert len(asyncio.run(store.list_entries("user-1"))) == 1

    def test_empty_owner_is_refused(self):
        """Test that an ownership key is required."""
        store = InMemoryEntryStore()
        with pytest.raises(StorageError):
            asyncio.run(store.insert_entry("", make_draft()))

    def test_list_is_newest_first(self):
        """Test ordering by date, descending."""
        store = InMemoryEntryStore()

        async def fill():
            await store.insert_entry("user-1", make_draft(date="2024-01-01"))
            await store.insert_entry("user-1", make_draft(date="2024-03-01"))
            await store.insert_entry("user-1", make_draft(date="2024-02-01"))
            return await store.list_entries("user-1")

        entries = asyncio.run(fill())
        assert [e.date for e in entries] == ["2024-03-01", "2024-02-01", "2024-01-01"]

    def test_update_keeps_id_and_advances_updated_at(self):
        """Test partial update semantics."""
        times = iter([T0, T0 + timedelta(minutes=5)])
        store = InMemoryEntryStore(clock=lambda: next(times))

        async def run():
            entry = await store.insert_entry("user-1", make_draft())
            return entry, await store.update_entry(
                "user-1", entry.id, EntryUpdate(payment_status=PaymentStatus.PAID)
            )

        original, updated = asyncio.run(run())
        assert updated.id == original.id
        assert updated.payment_status == PaymentStatus.PAID
        assert updated.description == original.description
        assert updated.created_at == T0
        assert updated.updated_at == T0 + timedelta(minutes=5)

    def test_updated_at_never_moves_backwards(self):
        """Test a clock going backwards does not rewind updated_at."""
        times = iter([T0, T0 - timedelta(hours=1)])
        store = InMemoryEntryStore(clock=lambda: next(times))

        async def run():
            entry = await store.insert_entry("user-1", make_draft())
            return await store.update_entry("user-1", entry.id, EntryUpdate(amount=1))

        assert asyncio.run(run()).updated_at == T0

    def test_update_rejects_invalid_values(self):
        """Test merged fields are revalidated."""
        store = InMemoryEntryStore()

        async def run():
            entry = await store.insert_entry("user-1", make_draft())
            update = EntryUpdate.model_construct(date="15/01/2024")
            return await store.update_entry("user-1", entry.id, update)

        with pytest.raises(ValueError):
            asyncio.run(run())

    def test_missing_entry(self):
        """Test update and delete of unknown ids."""
        store = InMemoryEntryStore()
        with pytest.raises(NotFoundError):
            asyncio.run(store.update_entry("user-1", "nope", EntryUpdate(amount=1)))
        with pytest.raises(NotFoundError):
            asyncio.run(store.delete_entry("user-1", "nope"))


class TestEntryCollection:
    """Tests for the owned snapshot."""

    def test_add_prepends(self):
        """Test new entries appear at the front of the snapshot."""
        collection = EntryCollection(InMemoryEntryStore(), owner_id="user-1")

        async def run():
            await collection.add(make_draft(description="first"))
            await collection.add(make_draft(description="second"))

        asyncio.run(run())
        assert [e.description for e in collection] == ["second", "first"]

    def test_update_swaps_entry(self):
        """Test the stored result replaces the old entry."""
        collection = EntryCollection(InMemoryEntryStore(), owner_id="user-1")

        async def run():
            entry = await collection.add(make_draft())
            await collection.update(entry.id, EntryUpdate(description="Renamed"))
            return entry.id

        entry_id = asyncio.run(run())
        assert collection.get(entry_id).description == "Renamed"
        assert len(collection) == 1

    def test_delete_removes_entry(self):
        """Test deletion from store and snapshot."""
        collection = EntryCollection(InMemoryEntryStore(), owner_id="user-1")

        async def run():
            entry = await collection.add(make_draft())
            await collection.delete(entry.id)

        asyncio.run(run())
        assert collection.snapshot() == ()

    def test_failed_delete_leaves_snapshot(self):
        """Test store errors propagate and change nothing."""
        collection = EntryCollection(InMemoryEntryStore(), owner_id="user-1")
        asyncio.run(collection.add(make_draft()))
        with pytest.raises(NotFoundError):
            asyncio.run(collection.delete("nope"))
        assert len(collection) == 1

    def test_refresh_replaces_snapshot(self):
        """Test reloading from the store."""
        store = InMemoryEntryStore()
        asyncio.run(store.insert_entry("user-1", make_draft()))
        collection = EntryCollection(store, owner_id="user-1")
        assert len(collection) == 0
        asyncio.run(collection.refresh())
        assert len(collection) == 1

    def test_snapshot_is_immutable(self):
        """Test the snapshot is a tuple that later writes do not touch."""
        collection = EntryCollection(InMemoryEntryStore(), owner_id="user-1")
        before = collection.snapshot()
        asyncio.run(collection.add(make_draft()))
        assert before == ()
        assert isinstance(collection.snapshot(), tuple)

    def test_requires_owner(self):
        """Test store calls without a signed-in user."""
        collection = EntryCollection(InMemoryEntryStore())
        assert not collection.is_authenticated
        with pytest.raises(NotAuthenticatedError, match="User not authenticated"):
            asyncio.run(collection.add(make_draft()))
        with pytest.raises(NotAuthenticatedError):
            asyncio.run(collection.refresh())
