"""Rendering of results and errors into the ``{success, message, data}`` envelope."""

from typing import Any, Optional

from rcdash.domain.errors import DomainError, UploadError, RowValidationError
from rcdash.domain.upload import UploadReport


def success_response(message: str, data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Build a success envelope."""
    response: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        response["data"] = data
    return response


def error_response(error: Exception) -> dict[str, Any]:
    """Build a failure envelope from an exception.

    Upload and row validation errors carry their structured detail in
    ``data`` together with the error code.
    """
    response: dict[str, Any] = {"success": False, "message": str(error)}
    if isinstance(error, (UploadError, RowValidationError)):
        data = error.to_data() or {}
        response["data"] = {"code": error.code, **data}
    elif isinstance(error, DomainError) and getattr(error, "code", None):
        response["data"] = {"code": error.code}
    return response


def upload_response(report: UploadReport) -> dict[str, Any]:
    """Build the success envelope for a committed upload."""
    message = (
        f"Successfully uploaded {report.entries_processed} "
        f"entr{'ies' if report.entries_processed != 1 else 'y'} for {report.application_name}"
    )
    return success_response(
        message,
        {
            "entriesProcessed": report.entries_processed,
            "applicationId": report.application_id,
            "applicationName": report.application_name,
            "classified": report.classified,
            "unclassified": report.unclassified,
            "unmappedCodes": report.unmapped_codes,
            "skippedRowCount": report.skipped_rows,
        },
    )


def to_response(result: Any) -> dict[str, Any]:
    """Render an upload report or an exception as a response envelope."""
    if isinstance(result, Exception):
        return error_response(result)
    if isinstance(result, UploadReport):
        return upload_response(result)
    raise TypeError(f"Cannot render {type(result).__name__} as a response")
