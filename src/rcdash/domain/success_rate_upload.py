"""Success-rate upload domain service."""

import dataclasses
import logging
from typing import Any, Optional

from rcdash.database.base import Database
from rcdash.domain.classification import ClassificationResolver
from rcdash.domain.columns import SUCCESS_RATE_COLUMNS
from rcdash.domain.errors import (
    RowValidationError,
    UploadError,
    UploadFailedError,
    application_not_found,
)
from rcdash.domain.normalizer import normalize_success_rate_rows
from rcdash.domain.policy import STRICT_SUCCESS_RATE_POLICY, RowPolicy
from rcdash.domain.upload import (
    NO_VALID_ROWS,
    UploadReport,
    load_table,
    require_application,
    require_file,
)

logger = logging.getLogger(__name__)


class SuccessRateUploadService:
    """Service for uploading success-rate reports.

    Uploads are all-or-nothing. Every row is normalized and validated before
    the database is touched; if any row fails, the upload is rejected with
    the full list of failing rows. Otherwise all rows are classified and
    inserted in one transaction, which is rolled back if any write fails.
    """

    def __init__(self, db: Database, policy: RowPolicy = STRICT_SUCCESS_RATE_POLICY):
        """Initialize success-rate upload service.

        Args:
            db: Database instance
            policy: Default row policy; strict rejects the upload on any bad row
        """
        self.db = db
        self.policy = policy
        self.resolver = ClassificationResolver(db)

    def upload(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        application_id: Any,
        policy: Optional[RowPolicy] = None,
        empty_row_limit: Optional[int] = None,
    ) -> UploadReport:
        """Validate, classify and store every row of a success-rate report.

        Args:
            filename: Original file name (.xlsx, .xls or .csv)
            content: Raw file bytes
            application_id: Application the report belongs to
            policy: Row policy overriding the service default
            empty_row_limit: Consecutive empty rows before a workbook scan stops

        Returns:
            UploadReport with classification counts

        Raises:
            UploadError: Structural problem with the file or application
            RowValidationError: One or more rows failed validation (nothing saved)
            UploadFailedError: If the database write failed (nothing saved)
        """
        policy = policy or self.policy
        require_file(filename, content)
        application = require_application(self.db, application_id)
        table, binding = load_table(filename, content, SUCCESS_RATE_COLUMNS, empty_row_limit)

        # Phase 1: validate every row before any write
        batch = normalize_success_rate_rows(table.rows, binding, policy)
        if batch.has_errors:
            logger.warning(
                "Success-rate upload for %s rejected: %d of %d rows invalid (first: row %d, %s)",
                application.name,
                len(batch.errors),
                batch.examined,
                batch.errors[0].row_number,
                batch.errors[0].reason,
            )
            raise RowValidationError(batch.errors, total_processed=batch.examined)
        if not batch.rows:
            raise UploadError("No valid data found in file", code=NO_VALID_ROWS)

        # Phase 2: classify and insert in one transaction
        classified = 0
        unmapped_keys: set[tuple[str, str]] = set()
        try:
            with self.db.transaction():
                rows = []
                for row in batch.rows:
                    if not self.db.application_exists(application.id):
                        raise UploadError(application_not_found(application.id))
                    error_class = self.resolver.resolve(application.id, row)
                    if error_class is not None:
                        classified += 1
                    elif row.response_code:
                        unmapped_keys.add((row.transaction_type, row.response_code))
                    rows.append(dataclasses.replace(row, error_class=error_class))
                self.db.insert_success_rate_facts(application.id, rows)
        except Exception as e:
            logger.exception(
                "Success-rate upload for application %d rolled back", application.id
            )
            raise UploadFailedError(f"Upload failed: {e}") from e

        report = UploadReport(
            entries_processed=len(batch.rows),
            application_id=application.id,
            application_name=application.name,
            classified=classified,
            unclassified=len(batch.rows) - classified,
            unmapped_codes=len(unmapped_keys),
            skipped_rows=batch.skipped,
        )
        logger.info(
            "Success-rate upload for %s (%s policy): %d rows, %d classified, "
            "%d unmapped codes, %d skipped",
            application.name,
            policy.name,
            report.entries_processed,
            report.classified,
            report.unmapped_codes,
            report.skipped_rows,
        )
        return report
