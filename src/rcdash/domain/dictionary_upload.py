"""Dictionary upload domain service."""

import logging
from typing import Any, Optional

from rcdash.database.base import Database
from rcdash.domain.columns import DICTIONARY_COLUMNS
from rcdash.domain.errors import UploadError, UploadFailedError
from rcdash.domain.normalizer import normalize_dictionary_rows
from rcdash.domain.policy import DICTIONARY_POLICY, RowPolicy
from rcdash.domain.upload import (
    NO_VALID_ROWS,
    UploadReport,
    load_table,
    require_application,
    require_file,
)

logger = logging.getLogger(__name__)


class DictionaryUploadService:
    """Service for uploading response code dictionaries."""

    def __init__(self, db: Database, policy: RowPolicy = DICTIONARY_POLICY):
        """Initialize dictionary upload service.

        Args:
            db: Database instance
            policy: Row policy deciding which rows are kept
        """
        self.db = db
        self.policy = policy

    def upload(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        application_id: Any,
        empty_row_limit: Optional[int] = None,
    ) -> UploadReport:
        """Upsert every dictionary row of a file for one application.

        Re-uploading the same file leaves the dictionary unchanged: rows are
        matched on (application, transaction type, response code), the error
        class is overwritten and the description only when the file has one.

        Args:
            filename: Original file name (.xlsx, .xls or .csv)
            content: Raw file bytes
            application_id: Application the dictionary belongs to
            empty_row_limit: Consecutive empty rows before a workbook scan stops

        Returns:
            UploadReport with the number of entries written

        Raises:
            UploadError: Structural problem, or no row with a recognized S/N flag
            UploadFailedError: If the database write failed (nothing was saved)
        """
        require_file(filename, content)
        application = require_application(self.db, application_id)
        table, binding = load_table(filename, content, DICTIONARY_COLUMNS, empty_row_limit)

        batch = normalize_dictionary_rows(table.rows, binding, self.policy)
        if not batch.rows:
            raise UploadError("No valid data found in file", code=NO_VALID_ROWS)

        try:
            with self.db.transaction():
                for row in batch.rows:
                    self.db.upsert_dictionary_entry(
                        application.id,
                        row.transaction_type,
                        row.response_code,
                        row.error_class,
                        description=row.description,
                    )
        except Exception as e:
            logger.exception("Dictionary upload for application %d rolled back", application.id)
            raise UploadFailedError(f"Upload failed: {e}") from e

        logger.info(
            "Dictionary upload for %s: %d entries written, %d rows skipped",
            application.name,
            len(batch.rows),
            batch.skipped,
        )
        return UploadReport(
            entries_processed=len(batch.rows),
            application_id=application.id,
            application_name=application.name,
            skipped_rows=batch.skipped,
        )
