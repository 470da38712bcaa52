"""
Audit Models for Income Tracker

Every mutation of the entry set, and every import or export, is logged.
This provides:
1. Traceability of how an entry came to exist
2. Debugging information when an import misbehaves
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Entry lifecycle
    ENTRY_CREATED = "entry_created"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_DELETED = "entry_deleted"
    ENTRIES_REFRESHED = "entries_refreshed"
    STORE_OPERATION_FAILED = "store_operation_failed"

    # Import
    IMPORT_STARTED = "import_started"
    IMPORT_REJECTED = "import_rejected"
    RECORD_REJECTED = "record_rejected"
    RECORD_COMMIT_FAILED = "record_commit_failed"
    IMPORT_COMPLETED = "import_completed"

    # Export
    EXPORT_GENERATED = "export_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'entry', 'import', 'export')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    owner_id: Optional[str] = Field(
        default=None,
        description="Ownership key of the user the event belongs to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one import)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "owner_id": self.owner_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_created(entry_id, owner_id, correlation_id)
        event = AuditEventBuilder.import_completed(filename, 3, 1, correlation_id)
    """

    @staticmethod
    def entry_created(
        entry_id: str,
        owner_id: str,
        amount: str,
        currency: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            entity_type="entry",
            entity_id=entry_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Entry created: {amount} {currency}",
            details={"amount": amount, "currency": currency},
            is_user_action=True,
        )

    @staticmethod
    def entry_updated(
        entry_id: str,
        owner_id: str,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_UPDATED,
            entity_type="entry",
            entity_id=entry_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Entry updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(
        entry_id: str,
        owner_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type="entry",
            entity_id=entry_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description="Entry deleted",
            is_user_action=True,
        )

    @staticmethod
    def entries_refreshed(
        owner_id: str,
        entry_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRIES_REFRESHED,
            severity=AuditSeverity.DEBUG,
            entity_type="collection",
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Loaded {entry_count} entries from the store",
            details={"entry_count": entry_count},
        )

    @staticmethod
    def store_operation_failed(
        operation: str,
        error_message: str,
        owner_id: Optional[str] = None,
        entry_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_OPERATION_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="entry",
            entity_id=entry_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Entry store {operation} failed",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def import_started(
        filename: str,
        size_bytes: int,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entity_type="import",
            entity_id=filename,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Import started: {filename}",
            details={"filename": filename, "size_bytes": size_bytes},
            is_user_action=True,
        )

    @staticmethod
    def import_rejected(
        filename: str,
        reason: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            entity_id=filename,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Import refused: {filename}",
            error_message=reason,
        )

    @staticmethod
    def record_rejected(
        filename: str,
        position: Optional[int],
        message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            entity_id=filename,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Import record {position} rejected",
            details={"position": position},
            error_message=message,
        )

    @staticmethod
    def record_commit_failed(
        filename: str,
        position: Optional[int],
        message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_COMMIT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="import",
            entity_id=filename,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Import record {position} could not be saved",
            details={"position": position},
            error_message=message,
        )

    @staticmethod
    def import_completed(
        filename: str,
        success_count: int,
        error_count: int,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            severity=AuditSeverity.WARNING if error_count else AuditSeverity.INFO,
            entity_type="import",
            entity_id=filename,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Import finished: {success_count} imported, {error_count} errors",
            details={"success_count": success_count, "error_count": error_count},
        )

    @staticmethod
    def export_generated(
        filename: str,
        file_format: str,
        entry_count: int,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            entity_id=filename,
            owner_id=owner_id,
            correlation_id=correlation_id,
            description=f"Exported {entry_count} entries as {file_format}",
            details={"format": file_format, "entry_count": entry_count},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="system",
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
