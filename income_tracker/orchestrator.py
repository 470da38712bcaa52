"""
Main Orchestrator for the Income Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Entry management (add / update / delete / refresh)
2. File import (parse → validate → commit → summarize)
3. Reports (filter → statistics / breakdowns → export)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is read or written without a signed-in owner
- The snapshot only changes after the store has accepted a write
- Every mutation, import and export is audited
"""

from datetime import date
from typing import Callable, Optional, Union
from uuid import UUID

from income_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from income_tracker.config import get_settings
from income_tracker.currency import CurrencyNormalizer, get_normalizer
from income_tracker.entries import EntryCollection
from income_tracker.exporting import ExportPipeline, UnsupportedExportFormatError
from income_tracker.importing import ImportPipeline
from income_tracker.models.entry import (
    CategoryBreakdown,
    DailyIncomePoint,
    EntryDraft,
    EntryUpdate,
    FilteredSummary,
    PeriodComparison,
    ReportFilter,
    Statistics,
    WorkEntry,
)
from income_tracker.models.transfer import (
    ExportPayload,
    FileFormat,
    ImportIssueKind,
    ImportSummary,
)
from income_tracker.reports import (
    apply_filter,
    category_breakdown,
    compare_periods,
    compute_statistics,
    daily_income_series,
    summarize_entries,
)
from income_tracker.services.storage import (
    AuditStorageInterface,
    EntryStoreInterface,
    InMemoryEntryStore,
    StorageError,
)


class EntryFlow:
    """
    Orchestrates direct entry edits.

    Store failures are audited and then re-raised so the caller can show
    them; the snapshot is left as it was.
    """

    def __init__(
        self,
        collection: EntryCollection,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._collection = collection
        self._audit_logger = audit_logger

    @property
    def collection(self) -> EntryCollection:
        return self._collection

    async def _store_failed(
        self,
        operation: str,
        error: StorageError,
        entry_id: Optional[str],
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_store_failure(
                operation=operation,
                error_message=str(error),
                owner_id=self._collection.owner_id,
                entry_id=entry_id,
                correlation_id=correlation_id,
            )

    async def refresh(self, correlation_id: Optional[UUID] = None) -> tuple[WorkEntry, ...]:
        """Reload the owner's entries from the store."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            entries = await self._collection.refresh()
        except StorageError as e:
            await self._store_failed("list", e, None, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_entries_refreshed(
                owner_id=self._collection.owner_id,
                entry_count=len(entries),
                correlation_id=correlation_id,
            )
        return entries

    async def add(
        self,
        draft: EntryDraft,
        correlation_id: Optional[UUID] = None,
    ) -> WorkEntry:
        """
        Save a new entry.

        Returns:
            The stored entry (with id and timestamps)

        Raises:
            NotAuthenticatedError: If there is no signed-in user
            StorageError: If the store refused the write
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            entry = await self._collection.add(draft)
        except StorageError as e:
            await self._store_failed("insert", e, None, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_entry_created(
                entry_id=entry.id,
                owner_id=self._collection.owner_id,
                amount=str(entry.amount),
                currency=entry.currency,
                correlation_id=correlation_id,
            )
        return entry

    async def update(
        self,
        entry_id: str,
        changes: EntryUpdate,
        correlation_id: Optional[UUID] = None,
    ) -> WorkEntry:
        """Apply a partial update to one entry."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            entry = await self._collection.update(entry_id, changes)
        except StorageError as e:
            await self._store_failed("update", e, entry_id, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_entry_updated(
                entry_id=entry_id,
                owner_id=self._collection.owner_id,
                fields=sorted(changes.changes()),
                correlation_id=correlation_id,
            )
        return entry

    async def delete(
        self,
        entry_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        correlation_id = correlation_id or create_correlation_id()
        try:
            await self._collection.delete(entry_id)
        except StorageError as e:
            await self._store_failed("delete", e, entry_id, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_entry_deleted(
                entry_id=entry_id,
                owner_id=self._collection.owner_id,
                correlation_id=correlation_id,
            )


class ImportFlow:
    """
    Orchestrates a file import.

    All events of one import share a correlation ID, so the audit trail
    for a file can be pulled back with get_events_by_correlation_id().
    """

    def __init__(
        self,
        collection: EntryCollection,
        pipeline: Optional[ImportPipeline] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._collection = collection
        self._pipeline = pipeline or ImportPipeline(collection)
        self._audit_logger = audit_logger

    async def import_file(
        self,
        filename: str,
        content: Union[bytes, str],
        correlation_id: Optional[UUID] = None,
    ) -> ImportSummary:
        """
        Import one file into the owner's collection.

        Returns:
            ImportSummary (never raises for bad file contents)

        Raises:
            NotAuthenticatedError: If there is no signed-in user
            Exception: Anything unexpected from the pipeline, after auditing it
        """
        correlation_id = correlation_id or create_correlation_id()
        owner_id = self._collection.require_owner()

        if self._audit_logger:
            size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
            await self._audit_logger.log_import_started(
                filename=filename,
                size_bytes=size,
                owner_id=owner_id,
                correlation_id=correlation_id,
            )

        try:
            summary = await self._pipeline.run(filename, content)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": "import", "filename": filename, "owner_id": owner_id},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_summary(summary, owner_id, correlation_id)

        return summary

    async def _audit_summary(
        self,
        summary: ImportSummary,
        owner_id: str,
        correlation_id: UUID,
    ) -> None:
        for issue in summary.issues:
            if issue.kind == ImportIssueKind.FATAL:
                await self._audit_logger.log_import_rejected(
                    filename=summary.filename,
                    reason=issue.message,
                    owner_id=owner_id,
                    correlation_id=correlation_id,
                )
            elif issue.kind == ImportIssueKind.COMMIT:
                await self._audit_logger.log_record_commit_failed(
                    filename=summary.filename,
                    position=issue.position,
                    message=issue.message,
                    owner_id=owner_id,
                    correlation_id=correlation_id,
                )
            else:
                await self._audit_logger.log_record_rejected(
                    filename=summary.filename,
                    position=issue.position,
                    message=issue.message,
                    owner_id=owner_id,
                    correlation_id=correlation_id,
                )

        await self._audit_logger.log_import_completed(
            filename=summary.filename,
            success_count=summary.success_count,
            error_count=len(summary.issues),
            owner_id=owner_id,
            correlation_id=correlation_id,
        )


class ReportFlow:
    """
    Orchestrates the reports view.

    The dashboard statistics always cover the whole collection; everything
    else (table, comparisons, breakdowns, export) follows the current filter.
    """

    def __init__(
        self,
        collection: EntryCollection,
        exporter: Optional[ExportPipeline] = None,
        normalizer: Optional[CurrencyNormalizer] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._collection = collection
        self._normalizer = normalizer or get_normalizer()
        self._exporter = exporter or ExportPipeline(self._normalizer)
        self._audit_logger = audit_logger
        self._today = today or date.today
        self._filter = ReportFilter()

    @property
    def report_filter(self) -> ReportFilter:
        return self._filter

    def set_filter(self, report_filter: Optional[ReportFilter] = None) -> None:
        self._filter = report_filter or ReportFilter()

    def clear_filter(self) -> None:
        self._filter = ReportFilter()

    def filtered_entries(self) -> list[WorkEntry]:
        return apply_filter(self._collection.snapshot(), self._filter)

    def statistics(self) -> Statistics:
        return compute_statistics(
            self._collection.snapshot(),
            today=self._today(),
            normalizer=self._normalizer,
        )

    def period_comparison(self) -> tuple[PeriodComparison, PeriodComparison]:
        return compare_periods(
            self.filtered_entries(),
            today=self._today(),
            normalizer=self._normalizer,
        )

    def filtered_summary(self) -> FilteredSummary:
        return summarize_entries(self.filtered_entries(), normalizer=self._normalizer)

    def category_breakdown(self) -> list[CategoryBreakdown]:
        return category_breakdown(self.filtered_entries(), normalizer=self._normalizer)

    def daily_series(self, days: Optional[int] = None) -> list[DailyIncomePoint]:
        return daily_income_series(
            self.filtered_entries(),
            today=self._today(),
            days=days if days is not None else get_settings().app.daily_series_days,
            normalizer=self._normalizer,
        )

    async def export(
        self,
        file_format: Union[FileFormat, str] = FileFormat.CSV,
        correlation_id: Optional[UUID] = None,
    ) -> ExportPayload:
        """
        Export the currently filtered entries.

        Raises:
            UnsupportedExportFormatError: If the format is not csv or json
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            payload = self._exporter.export(self.filtered_entries(), file_format)
        except UnsupportedExportFormatError:
            raise
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": "export", "owner_id": self._collection.owner_id},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_export_generated(
                filename=payload.filename,
                file_format=payload.file_format.value,
                entry_count=payload.entry_count,
                owner_id=self._collection.owner_id,
                correlation_id=correlation_id,
            )
        return payload


def create_app_components(
    owner_id: Optional[str],
    entry_store: Optional[EntryStoreInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> tuple[EntryFlow, ImportFlow, ReportFlow]:
    """
    Factory function to create all application components.

    Args:
        owner_id: Signed-in user's id (None when signed out)
        entry_store: Entry persistence; defaults to an in-memory store
        audit_storage: Audit persistence; None means local logging only

    Returns:
        (entry_flow, import_flow, report_flow), all sharing one collection
    """
    configure_logging()

    collection = EntryCollection(entry_store or InMemoryEntryStore(), owner_id)
    audit_logger = AuditLogger(audit_storage)

    entry_flow = EntryFlow(collection, audit_logger=audit_logger)
    import_flow = ImportFlow(collection, audit_logger=audit_logger)
    report_flow = ReportFlow(collection, audit_logger=audit_logger)

    return entry_flow, import_flow, report_flow
