"""Domain model entities for rcdash.

These are pure data classes representing business concepts, independent of
database schema. The persisted entities mirror the four tables; the row
classes carry normalized upload rows before they are written.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

ERROR_CLASS_SOFT = "S"
ERROR_CLASS_HARD = "N"
ERROR_CLASS_SUCCESS = "Sukses"

ERROR_CLASSES = (ERROR_CLASS_SOFT, ERROR_CLASS_HARD, ERROR_CLASS_SUCCESS)


@dataclass(frozen=True)
class Application:
    """Application whose transactions are measured."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class DictionaryEntry:
    """Response code classification for one application."""

    id: int
    application_id: int
    transaction_type: str
    response_code: str
    description: Optional[str]
    error_class: str


@dataclass(frozen=True)
class SuccessRateFact:
    """One aggregate bucket from an uploaded success-rate report."""

    id: int
    application_id: int
    date: date
    month: str
    year: int
    transaction_type: str
    response_code: Optional[str]
    description: Optional[str]
    total_count: Optional[int]
    total_amount: Optional[Decimal]
    total_fee: Optional[Decimal]
    status: Optional[str]
    error_class: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UnmappedCode:
    """Response code seen in a report with no dictionary entry."""

    id: int
    application_id: int
    transaction_type: str
    response_code: str
    description: Optional[str]
    status: Optional[str]
    error_class: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class DictionaryRow:
    """Normalized row of a dictionary upload."""

    row_number: int
    transaction_type: str
    response_code: str
    description: Optional[str]
    error_class: str


@dataclass(frozen=True)
class SuccessRateRow:
    """Normalized row of a success-rate upload.

    ``response_code_defaulted`` is True when the response code was filled in
    by the success default rather than read from the file.
    """

    row_number: int
    date: date
    month: str
    year: int
    transaction_type: str
    response_code: Optional[str]
    description: Optional[str]
    total_count: Optional[int]
    total_amount: Optional[Decimal]
    total_fee: Optional[Decimal]
    status: Optional[str]
    response_code_defaulted: bool = False
    error_class: Optional[str] = None
