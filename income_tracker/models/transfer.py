"""
Import / Export Models

CandidateRecord is the loosely-typed output of parsing an import file.
It is NOT trusted data: the record validator is the only place a candidate
becomes an EntryDraft. Everything else in this module describes the outcome
of an import or the payload of an export.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from income_tracker.models.entry import WorkEntry


# =============================================================================
# ENUMS
# =============================================================================

class FileFormat(str, Enum):
    """File formats understood by the import and export pipelines."""
    CSV = "csv"
    JSON = "json"


class CandidateField(str, Enum):
    """
    Fields a candidate record may carry.

    Values are the camelCase JSON keys of the import format.
    """
    DATE = "date"
    CATEGORY = "category"
    DESCRIPTION = "description"
    AMOUNT = "amount"
    CURRENCY = "currency"
    PAYMENT_STATUS = "paymentStatus"


class RejectionReason(str, Enum):
    """Why the validator refused a candidate."""
    MISSING_REQUIRED_FIELDS = "missing required fields"
    INVALID_DATE_FORMAT = "invalid date format"
    INVALID_AMOUNT = "invalid amount"


class ImportPhase(str, Enum):
    """Import pipeline states, in order."""
    PARSING = "parsing"
    VALIDATING = "validating"
    COMMITTING = "committing"
    DONE = "done"


class ImportIssueKind(str, Enum):
    FATAL = "fatal"            # Whole file refused, nothing attempted
    PARSE = "parse"            # One CSV row could not be converted
    VALIDATION = "validation"  # One candidate rejected by the validator
    COMMIT = "commit"          # The entry store refused one record


# =============================================================================
# IMPORT MODELS
# =============================================================================

class CandidateRecord(BaseModel):
    """
    One parsed, unvalidated record.

    position is the 1-based index of the record in the batch. For CSV,
    line is the physical line number in the file.
    """

    position: int = Field(..., ge=1)
    line: Optional[int] = Field(default=None, ge=1)
    source: FileFormat
    fields: dict[CandidateField, Any] = Field(default_factory=dict)

    def get(self, field: CandidateField) -> Any:
        return self.fields.get(field)


class RecordRejection(BaseModel):
    """A candidate the validator refused."""

    position: int = Field(..., ge=1)
    line: Optional[int] = None
    reason: RejectionReason


class ImportIssue(BaseModel):
    """
    A single import error.

    Row-level issues carry the record position (and line for CSV);
    fatal issues carry neither.
    """

    kind: ImportIssueKind
    message: str
    position: Optional[int] = None
    line: Optional[int] = None

    def render(self) -> str:
        """Human-readable single-line form."""
        if self.position is None:
            return self.message
        prefix = f"Entry {self.position}"
        if self.line is not None:
            prefix += f" (line {self.line})"
        return f"{prefix}: {self.message}"


class ImportSummary(BaseModel):
    """Outcome of importing one file."""

    filename: str
    file_format: Optional[FileFormat] = None
    phase: ImportPhase = Field(
        default=ImportPhase.DONE,
        description="Phase the pipeline stopped in; PARSING when the file was refused"
    )
    success_count: int = Field(default=0, ge=0)
    issues: list[ImportIssue] = Field(default_factory=list)
    entries: list[WorkEntry] = Field(
        default_factory=list,
        description="Entries committed to the store, in commit order"
    )

    @computed_field
    @property
    def errors(self) -> list[str]:
        return [issue.render() for issue in self.issues]

    @property
    def was_rejected(self) -> bool:
        """True if the whole file was refused."""
        return any(issue.kind == ImportIssueKind.FATAL for issue in self.issues)


# =============================================================================
# EXPORT MODELS
# =============================================================================

class ExportPayload(BaseModel):
    """Serialized entries, ready to be handed to a "save as" collaborator."""

    filename: str
    content_type: str
    file_format: FileFormat
    content: bytes
    entry_count: int = Field(ge=0)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")
