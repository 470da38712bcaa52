"""
Audit Logger

DESIGN DECISION: Every mutation of the entry set, every import and every
export is logged. The audit logger:
- Always writes a structured local log line (structlog)
- Persists to audit storage when one is configured
- Never raises into the caller if persisting fails
- Supports correlation IDs to trace related events (e.g., one import)
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from income_tracker.config import LoggingSettings, get_settings
from income_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from income_tracker.services.storage import AuditStorageInterface


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    debug_mode: Optional[bool] = None,
) -> None:
    """
    Configure structlog on top of the standard library logging backend.

    AppSettings.debug_mode (or an explicit debug_mode) forces the DEBUG level.
    Safe to call more than once; the last call wins.
    """
    settings = settings or get_settings().logging
    if debug_mode is None:
        debug_mode = get_settings().app.debug_mode
    level = "DEBUG" if debug_mode else settings.level
    logging.basicConfig(format="%(message)s", level=level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.render_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), if configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_entry_created(
        self,
        entry_id: str,
        owner_id: str,
        amount: str,
        currency: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log entry creation."""
        await self.log(AuditEventBuilder.entry_created(
            entry_id=entry_id,
            owner_id=owner_id,
            amount=amount,
            currency=currency,
            correlation_id=correlation_id,
        ))

    async def log_entry_updated(
        self,
        entry_id: str,
        owner_id: str,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log entry update."""
        await self.log(AuditEventBuilder.entry_updated(
            entry_id=entry_id,
            owner_id=owner_id,
            fields=fields,
            correlation_id=correlation_id,
        ))

    async def log_entry_deleted(
        self,
        entry_id: str,
        owner_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log entry deletion."""
        await self.log(AuditEventBuilder.entry_deleted(
            entry_id=entry_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_entries_refreshed(
        self,
        owner_id: str,
        entry_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entries_refreshed(
            owner_id=owner_id,
            entry_count=entry_count,
            correlation_id=correlation_id,
        ))

    async def log_store_failure(
        self,
        operation: str,
        error_message: str,
        owner_id: Optional[str] = None,
        entry_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed entry store call."""
        await self.log(AuditEventBuilder.store_operation_failed(
            operation=operation,
            error_message=error_message,
            owner_id=owner_id,
            entry_id=entry_id,
            correlation_id=correlation_id,
        ))

    async def log_import_started(
        self,
        filename: str,
        size_bytes: int,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.import_started(
            filename=filename,
            size_bytes=size_bytes,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_import_rejected(
        self,
        filename: str,
        reason: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a whole-file import refusal."""
        await self.log(AuditEventBuilder.import_rejected(
            filename=filename,
            reason=reason,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_record_rejected(
        self,
        filename: str,
        position: Optional[int],
        message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.record_rejected(
            filename=filename,
            position=position,
            message=message,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_record_commit_failed(
        self,
        filename: str,
        position: Optional[int],
        message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.record_commit_failed(
            filename=filename,
            position=position,
            message=message,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_import_completed(
        self,
        filename: str,
        success_count: int,
        error_count: int,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log the end of an import."""
        await self.log(AuditEventBuilder.import_completed(
            filename=filename,
            success_count=success_count,
            error_count=error_count,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_export_generated(
        self,
        filename: str,
        file_format: str,
        entry_count: int,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an export."""
        await self.log(AuditEventBuilder.export_generated(
            filename=filename,
            file_format=file_format,
            entry_count=entry_count,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a file import).
    """
    return uuid4()
