"""Classification of success-rate rows against the response code dictionary."""

import logging
from typing import Optional

from rcdash.database.base import Database
from rcdash.domain.entities import SuccessRateRow
from rcdash.domain.policy import classify_without_code

logger = logging.getLogger(__name__)


class ClassificationResolver:
    """Resolve the error class of a row from the dictionary.

    Lookup order, first match wins:

    1. exact ``(application, transaction type, response code)`` entry
    2. any entry for ``(application, response code)``, preferring one with no
       transaction type, then the lowest id
    3. no entry: the code is recorded as unmapped and the row stays
       unclassified

    A row without a response code is ``Sukses`` when its status is a success
    alias and unclassified otherwise. A ``"00"`` filled in by the success
    default counts as no code once the dictionary lookups miss, so it is never
    recorded as unmapped.
    """

    def __init__(self, db: Database):
        """Initialize classification resolver.

        Args:
            db: Database instance
        """
        self.db = db

    def resolve(self, application_id: int, row: SuccessRateRow) -> Optional[str]:
        """Return the error class for a row, recording unmapped codes.

        Args:
            application_id: Application the row belongs to
            row: Normalized success-rate row

        Returns:
            S, N, Sukses, or None if the row cannot be classified yet
        """
        response_code = (row.response_code or "").strip()
        if not response_code:
            error_class = classify_without_code(row.status)
            logger.debug("Row %d has no response code, class %s", row.row_number, error_class)
            return error_class

        entry = self.db.find_dictionary_entry(application_id, row.transaction_type, response_code)
        if entry is None:
            entry = self.db.find_dictionary_entry_by_code(application_id, response_code)
        if entry is not None:
            logger.debug(
                "Row %d code %s matched dictionary entry %d (%s)",
                row.row_number,
                response_code,
                entry.id,
                entry.error_class,
            )
            return entry.error_class

        if row.response_code_defaulted:
            return classify_without_code(row.status)

        self.db.upsert_unmapped_code(
            application_id,
            row.transaction_type,
            response_code,
            description=row.description,
            status=row.status,
        )
        logger.debug(
            "Row %d code %s/%s is unmapped", row.row_number, row.transaction_type, response_code
        )
        return None
