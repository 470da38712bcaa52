"""
Data Models Package

This package contains all Pydantic models used in the Income Tracker core.
All data flowing through the system must conform to these schemas.
"""

from income_tracker.models.entry import (
    Category,
    CategoryBreakdown,
    Currency,
    DailyIncomePoint,
    EntryDraft,
    FilteredSummary,
    EntryUpdate,
    PaymentStatus,
    PeriodComparison,
    ReportFilter,
    Statistics,
    WorkEntry,
)
from income_tracker.models.transfer import (
    CandidateField,
    CandidateRecord,
    ExportPayload,
    FileFormat,
    ImportIssue,
    ImportIssueKind,
    ImportPhase,
    ImportSummary,
    RecordRejection,
    RejectionReason,
)
from income_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entry models
    "Category",
    "CategoryBreakdown",
    "Currency",
    "DailyIncomePoint",
    "EntryDraft",
    "FilteredSummary",
    "EntryUpdate",
    "PaymentStatus",
    "PeriodComparison",
    "ReportFilter",
    "Statistics",
    "WorkEntry",
    # Import / export models
    "CandidateField",
    "CandidateRecord",
    "ExportPayload",
    "FileFormat",
    "ImportIssue",
    "ImportIssueKind",
    "ImportPhase",
    "ImportSummary",
    "RecordRejection",
    "RejectionReason",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
