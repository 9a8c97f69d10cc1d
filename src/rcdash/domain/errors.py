"""Shared domain error messages and error types."""

from dataclasses import dataclass
from typing import Any, Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class UploadError(ValidationError):
    """Structural upload error, raised before any row is processed.

    ``code`` is a stable identifier for the failure kind (e.g. ``EmptyFile``).
    """

    code = "UploadError"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code

    def to_data(self) -> dict[str, Any] | None:
        """Structured detail for the response envelope."""
        return None


class InvalidColumnCountError(UploadError):
    """Header count falls outside the accepted range."""

    code = "InvalidColumnCount"

    def __init__(self, actual: int, required: Sequence[str], optional: Sequence[str]):
        self.actual = actual
        self.required = list(required)
        self.optional = list(optional)
        self.expected_min = len(self.required)
        self.expected_max = len(self.required) + len(self.optional)
        message = (
            f"Invalid column count. Expected {self.expected_min}-{self.expected_max} columns "
            f"({self.expected_min} required + {len(self.optional)} optional), got {actual}. "
            f"Required columns: {', '.join(self.required)}"
        )
        if self.optional:
            message += f". Optional: {', '.join(self.optional)}"
        super().__init__(message)

    def to_data(self) -> dict[str, Any]:
        return {
            "expectedMin": self.expected_min,
            "expectedMax": self.expected_max,
            "actual": self.actual,
            "requiredColumns": self.required,
            "optionalColumns": self.optional,
        }


class MissingColumnsError(UploadError):
    """Required columns absent from the header row."""

    code = "MissingColumns"

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")

    def to_data(self) -> dict[str, Any]:
        return {"missingColumns": self.missing}


@dataclass(frozen=True)
class RowError:
    """Hard error for a single source row."""

    row_number: int
    code: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"rowNumber": self.row_number, "code": self.code, "reason": self.reason}


class RowValidationError(ValidationError):
    """One or more rows failed hard validation; nothing was written."""

    code = "RowValidation"

    def __init__(self, row_errors: Sequence[RowError], total_processed: int):
        self.row_errors = list(row_errors)
        self.total_processed = total_processed
        super().__init__(
            f"Upload rejected: {len(self.row_errors)} "
            f"row{'s' if len(self.row_errors) != 1 else ''} failed validation. "
            "No data was saved."
        )

    def to_data(self) -> dict[str, Any]:
        return {
            "skippedRows": [
                {"rowNumber": err.row_number, "reason": err.reason} for err in self.row_errors
            ],
            "totalSkipped": len(self.row_errors),
            "totalProcessed": self.total_processed,
        }


class UploadFailedError(DomainError):
    """Database failure while committing an upload; the transaction rolled back."""

    code = "UploadFailed"


def application_not_found(application_id: int) -> str:
    """Return message for missing application."""
    return f"Application {application_id} not found"


def dictionary_entry_not_found(entry_id: int) -> str:
    """Return message for missing dictionary entry."""
    return f"Dictionary entry {entry_id} not found"


def unmapped_code_not_found(unmapped_id: int) -> str:
    """Return message for missing unmapped response code."""
    return f"Unmapped response code {unmapped_id} not found"


def fact_not_found(fact_id: int) -> str:
    """Return message for missing success-rate record."""
    return f"Success rate record {fact_id} not found"


def invalid_error_class(value: object) -> str:
    """Return message for an error class outside S, N, Sukses."""
    return f"Invalid error class '{value}'. Must be S, N, or Sukses"


def duplicate_application_name(name: str) -> str:
    """Return message for duplicate application name."""
    return f"Application with name '{name}' already exists"
