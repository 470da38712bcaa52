"""
Import Pipeline

Runs one file through PARSING -> VALIDATING -> COMMITTING -> DONE.

- A parse-fatal problem (unsupported extension, undecodable or oversized
  file, malformed JSON, CSV without data rows) ends the import in PARSING
  with a single error and nothing attempted.
- Row-level problems (unparseable CSV row, rejected record, store refusal)
  are collected and the batch continues.
- Records are committed one at a time, each awaited before the next, so
  there is never more than one outstanding write. Failed commits are
  reported, not retried.

Every row-level error is numbered by the record's 1-based position in the
batch; CSV errors also name the physical line.
"""

from typing import Optional, Union

import structlog

from income_tracker.config import ImportSettings, get_settings
from income_tracker.entries import EntryCollection
from income_tracker.importing.parsers import ParseOutcome, detect_format, parse_file
from income_tracker.models.transfer import (
    ImportIssue,
    ImportIssueKind,
    ImportPhase,
    ImportSummary,
)
from income_tracker.services.storage import StorageError
from income_tracker.validation import RecordValidator


logger = structlog.get_logger(__name__)


class ImportPipeline:
    """
    Imports CSV / JSON files into an entry collection.

    The pipeline never raises for bad input; everything wrong with the file
    ends up in ImportSummary.issues. It only raises NotAuthenticatedError
    when the collection has no owner.
    """

    def __init__(
        self,
        collection: EntryCollection,
        validator: Optional[RecordValidator] = None,
        settings: Optional[ImportSettings] = None,
    ):
        self._collection = collection
        self._validator = validator or RecordValidator()
        self._settings = settings or get_settings().importing

    def _too_large(self, content: Union[bytes, str]) -> bool:
        size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
        return size > self._settings.max_size_bytes

    def _parse(self, filename: str, content: Union[bytes, str]) -> ParseOutcome:
        if self._too_large(content):
            return ParseOutcome.fatal(
                f"File is larger than the {self._settings.max_size_mb} MB import limit",
                detect_format(filename),
            )
        return parse_file(
            filename,
            content,
            supported_formats=self._settings.supported_formats_list,
        )

    async def run(self, filename: str, content: Union[bytes, str]) -> ImportSummary:
        """
        Import one file.

        Args:
            filename: Original file name; its extension selects the parser
            content: Raw file bytes (or decoded text)

        Returns:
            ImportSummary with success count, issues and committed entries

        Raises:
            NotAuthenticatedError: If there is no signed-in user
        """
        self._collection.require_owner()
        log = logger.bind(filename=filename)

        # PARSING
        log.debug("import_phase", phase=ImportPhase.PARSING.value)
        outcome = self._parse(filename, content)
        if outcome.is_fatal:
            log.info("import_refused", errors=[i.message for i in outcome.issues])
            return ImportSummary(
                filename=filename,
                file_format=outcome.file_format,
                phase=ImportPhase.PARSING,
                issues=outcome.issues,
            )
        issues = list(outcome.issues)

        # VALIDATING
        log.debug(
            "import_phase",
            phase=ImportPhase.VALIDATING.value,
            candidates=len(outcome.candidates),
        )
        accepted, rejections = self._validator.validate_batch(outcome.candidates)
        for rejection in rejections:
            issues.append(ImportIssue(
                kind=ImportIssueKind.VALIDATION,
                message=rejection.reason.value,
                position=rejection.position,
                line=rejection.line,
            ))

        # COMMITTING
        log.debug("import_phase", phase=ImportPhase.COMMITTING.value, records=len(accepted))
        committed = []
        for candidate, draft in accepted:
            try:
                entry = await self._collection.add(draft)
            except StorageError as e:
                log.warning("import_commit_failed", position=candidate.position, error=str(e))
                issues.append(ImportIssue(
                    kind=ImportIssueKind.COMMIT,
                    message=f"failed to save: {e}",
                    position=candidate.position,
                    line=candidate.line,
                ))
                continue
            committed.append(entry)

        # DONE
        issues.sort(key=lambda issue: issue.position or 0)
        log.info("import_done", success_count=len(committed), error_count=len(issues))
        return ImportSummary(
            filename=filename,
            file_format=outcome.file_format,
            phase=ImportPhase.DONE,
            success_count=len(committed),
            issues=issues,
            entries=committed,
        )
