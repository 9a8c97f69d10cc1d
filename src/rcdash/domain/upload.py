"""Structural checks and the report shared by both upload kinds."""

import os
from dataclasses import asdict, dataclass
from typing import Any, Optional

from rcdash.database.base import Database
from rcdash.domain.columns import ColumnBinding, ColumnSpec, bind_columns
from rcdash.domain.entities import Application
from rcdash.domain.errors import UploadError, application_not_found
from rcdash.tabular import DEFAULT_EMPTY_ROW_LIMIT, Table, TabularError, read_table

NO_FILE_UPLOADED = "NoFileUploaded"
INVALID_APPLICATION_ID = "InvalidApplicationId"
NO_VALID_ROWS = "NoValidRows"


def empty_row_limit_from_env() -> int:
    """Read RCDASH_EMPTY_ROW_LIMIT, defaulting to 10."""
    value = os.environ.get("RCDASH_EMPTY_ROW_LIMIT")
    if not value:
        return DEFAULT_EMPTY_ROW_LIMIT
    try:
        return int(value)
    except ValueError:
        raise UploadError(f"RCDASH_EMPTY_ROW_LIMIT must be an integer, got '{value}'")


@dataclass(frozen=True)
class UploadReport:
    """Outcome of a committed upload."""

    entries_processed: int
    application_id: int
    application_name: str
    classified: int = 0
    unclassified: int = 0
    unmapped_codes: int = 0
    skipped_rows: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def require_file(filename: Optional[str], content: Optional[bytes]) -> None:
    """Reject a missing upload."""
    if not filename or content is None:
        raise UploadError("No file uploaded", code=NO_FILE_UPLOADED)


def require_application(db: Database, application_id: Any) -> Application:
    """Return the application for an upload, or raise InvalidApplicationId.

    Accepts an int or a string of digits, as submitted by a form field.
    """
    if isinstance(application_id, str) and application_id.strip().isdigit():
        application_id = int(application_id)
    if isinstance(application_id, bool) or not isinstance(application_id, int):
        raise UploadError(
            f"Invalid application id '{application_id}'", code=INVALID_APPLICATION_ID
        )
    application = db.get_application(application_id)
    if application is None:
        raise UploadError(application_not_found(application_id), code=INVALID_APPLICATION_ID)
    return application


def load_table(
    filename: str,
    content: bytes,
    spec: ColumnSpec,
    empty_row_limit: Optional[int] = None,
) -> tuple[Table, ColumnBinding]:
    """Parse an uploaded file and bind its header row.

    Raises:
        UploadError: For unreadable files, unsupported types, empty files,
            missing worksheets and header mismatches
    """
    if empty_row_limit is None:
        empty_row_limit = empty_row_limit_from_env()
    try:
        table = read_table(filename, content, empty_row_limit=empty_row_limit)
    except TabularError as e:
        raise UploadError(str(e), code=e.code) from e
    return table, bind_columns(table.headers, spec)
