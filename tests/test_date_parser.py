"""Tests for report date parsing."""

import pytest
from datetime import date, datetime

from rcdash.tabular import BLANK, DateCell, NumberCell, TextCell
from rcdash.utils.date_parser import (
    format_date_parts,
    parse_date,
    parse_serial_date,
    resolve_report_date,
)


def test_parse_day_first_date():
    """Test parsing DD/MM/YYYY."""
    assert parse_date("31/01/2024") == date(2024, 1, 31)


def test_parse_iso_date():
    """Test parsing YYYY-MM-DD."""
    assert parse_date("2024-01-31") == date(2024, 1, 31)


def test_parse_ambiguous_date_is_day_first():
    """Test that 02/03/2024 is the 2nd of March."""
    assert parse_date("02/03/2024") == date(2024, 3, 2)


def test_parse_generic_date():
    """Test the generic fallback."""
    assert parse_date("31 Jan 2024") == date(2024, 1, 31)


@pytest.mark.parametrize("value", ["31/02/2024", "not a date", "2024-02-30"])
def test_parse_invalid_date(value):
    """Test that impossible or unreadable dates raise ValueError."""
    with pytest.raises(ValueError):
        parse_date(value)


@pytest.mark.parametrize("value", ["2024", "15", "1/2024", "Jan", "Jan 2024"])
def test_parse_partial_date_is_rejected(value):
    """Test that a date missing its day, month or year is not completed from today."""
    with pytest.raises(ValueError):
        parse_date(value)


def test_parse_month_first_date_is_rejected():
    """Test that 02/13/2024 is not read as 13 February."""
    with pytest.raises(ValueError) as excinfo:
        parse_date("02/13/2024")

    assert "02/13/2024" in str(excinfo.value)


def test_resolve_partial_text_date_is_rejected():
    """Test that partial text dates in report cells raise."""
    with pytest.raises(ValueError):
        resolve_report_date(TextCell("1/2024"))


def test_parse_serial_date():
    """Test converting a spreadsheet serial."""
    assert parse_serial_date(45322) == date(2024, 1, 31)


def test_parse_serial_date_rejects_non_positive():
    """Test that zero and negative serials are invalid."""
    with pytest.raises(ValueError):
        parse_serial_date(0)
    with pytest.raises(ValueError):
        parse_serial_date(-5)


def test_date_format_equivalence():
    """Text, serial and native cells for the same day resolve identically."""
    cells = [
        TextCell("31/01/2024"),
        TextCell("2024-01-31"),
        DateCell(datetime(2024, 1, 31, 0, 0)),
        DateCell(date(2024, 1, 31)),
        NumberCell(45322),
    ]

    for cell in cells:
        resolved = resolve_report_date(cell)
        assert format_date_parts(resolved) == ("2024-01-31", "1", 2024)


def test_resolve_blank_cell():
    """Test that a blank cell has no date."""
    assert resolve_report_date(BLANK) is None
    assert resolve_report_date(TextCell("   ")) is None


def test_format_date_parts_month_without_leading_zero():
    """Test month formatting."""
    assert format_date_parts(date(2024, 11, 5)) == ("2024-11-05", "11", 2024)
    assert format_date_parts(date(2024, 3, 5))[1] == "3"
