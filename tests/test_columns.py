"""Tests for binding header rows to expected columns."""

import pytest

from rcdash.domain.columns import DICTIONARY_COLUMNS, SUCCESS_RATE_COLUMNS, bind_columns
from rcdash.domain.errors import InvalidColumnCountError, MissingColumnsError
from rcdash.tabular import TableRow, TextCell


def test_bind_required_columns_any_order_and_case():
    """Exactly the required columns bind in any order and case."""
    binding = bind_columns(["s/n", " RC ", "JENIS TRANSAKSI"], DICTIONARY_COLUMNS)

    assert binding.indexes == {"success_flag": 0, "response_code": 1, "transaction_type": 2}
    assert not binding.has("description")


def test_bind_optional_column():
    """The optional description column is bound when present."""
    binding = bind_columns(["Jenis Transaksi", "RC", "S/N", "RC Description"], DICTIONARY_COLUMNS)

    assert binding.indexes["description"] == 3


def test_one_column_short_is_invalid_count():
    """One column fewer than required fails the count check."""
    with pytest.raises(InvalidColumnCountError) as excinfo:
        bind_columns(["Jenis Transaksi", "RC"], DICTIONARY_COLUMNS)

    error = excinfo.value
    assert error.code == "InvalidColumnCount"
    assert "Expected 3-4 columns" in str(error)
    assert error.to_data()["actual"] == 2
    assert error.to_data()["requiredColumns"] == ["Jenis Transaksi", "RC", "S/N"]
    assert error.to_data()["optionalColumns"] == ["RC Description"]


def test_too_many_columns_is_invalid_count():
    """More than required plus optional columns fails the count check."""
    headers = [column.header for column in SUCCESS_RATE_COLUMNS.required] + ["RC Description", "Extra"]

    with pytest.raises(InvalidColumnCountError) as excinfo:
        bind_columns(headers, SUCCESS_RATE_COLUMNS)

    assert "Expected 7-8 columns" in str(excinfo.value)


def test_misspelled_column_is_missing():
    """A misspelled required column is named as missing."""
    with pytest.raises(MissingColumnsError) as excinfo:
        bind_columns(["Jenis Transaksi", "Response Code", "S/N"], DICTIONARY_COLUMNS)

    assert excinfo.value.missing == ["RC"]
    assert str(excinfo.value) == "Missing required columns: RC"


def test_count_checked_before_names():
    """A short header reports the count even when names are also wrong."""
    with pytest.raises(InvalidColumnCountError):
        bind_columns(["foo", "bar"], DICTIONARY_COLUMNS)


def test_binding_cell_for_short_row():
    """Cells beyond the end of a short row read as blank."""
    binding = bind_columns(["Jenis Transaksi", "RC", "S/N", "RC Description"], DICTIONARY_COLUMNS)
    row = TableRow(number=1, cells=(TextCell("TRANSFER"), TextCell(" 05 ")))

    assert binding.text(row, "response_code") == "05"
    assert binding.cell(row, "success_flag").is_blank()
    assert binding.text(row, "description") == ""
