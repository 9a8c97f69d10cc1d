"""Date parsing utilities."""

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser
from openpyxl.utils.datetime import from_excel

from rcdash.tabular.cells import CellValue, DateCell, NumberCell

DAY_FIRST_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
ISO_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

# Differ in day, month and year, so a date missing any part parses differently
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _calendar_date(year: int, month: int, day: int, date_str: str) -> date:
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_date(date_str: str) -> date:
    """Parse a report date string into a date object.

    Tries, in order:
    - "DD/MM/YYYY" (e.g. "31/01/2024")
    - "YYYY-MM-DD" (e.g. "2024-01-31")
    - any other complete date understood by dateutil, day first

    A string matching one of the two fixed formats must be a real calendar
    date in that format. Partial dates such as "2024" or "1/2024" are
    rejected instead of being completed from today's date.

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed into a calendar date
    """
    date_str = date_str.strip()
    if not date_str:
        raise ValueError("Empty date string")

    match = DAY_FIRST_PATTERN.match(date_str)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return _calendar_date(year, month, day, date_str)

    match = ISO_PATTERN.match(date_str)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _calendar_date(year, month, day, date_str)

    try:
        first, second = (
            date_parser.parse(date_str, dayfirst=True, default=default).date()
            for default in _FILL_DEFAULTS
        )
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
    if first != second:
        raise ValueError(f"Could not parse date '{date_str}': day, month and year are required")
    return first


def parse_serial_date(serial: float) -> date:
    """Convert a spreadsheet date serial (1900 epoch) to a date.

    Raises:
        ValueError: If the serial is not a positive day number
    """
    if serial <= 0:
        raise ValueError(f"Invalid date serial {serial}")
    try:
        converted = from_excel(serial)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Invalid date serial {serial}: {e}")
    if not isinstance(converted, datetime):
        raise ValueError(f"Invalid date serial {serial}")
    return converted.date()


def resolve_report_date(cell: CellValue) -> Optional[date]:
    """Resolve the date column of a success-rate row.

    Native spreadsheet dates are used as is, numeric cells are read as date
    serials, and text goes through :func:`parse_date`.

    Returns:
        The resolved date, or None if the cell is blank

    Raises:
        ValueError: If a non-blank cell is not a valid calendar date
    """
    if cell.is_blank():
        return None
    if isinstance(cell, DateCell):
        value = cell.value
        return value.date() if isinstance(value, datetime) else value
    if isinstance(cell, NumberCell):
        return parse_serial_date(cell.value)
    return parse_date(cell.as_text())


def format_date_parts(value: date) -> tuple[str, str, int]:
    """Return canonical ``YYYY-MM-DD``, month without leading zero, and year."""
    return value.isoformat(), str(value.month), value.year
