"""Tests for row policies and row normalization."""

import pytest
from datetime import date
from decimal import Decimal

from rcdash.domain.columns import DICTIONARY_COLUMNS, SUCCESS_RATE_COLUMNS, bind_columns
from rcdash.domain.normalizer import (
    normalize_dictionary_row,
    normalize_dictionary_rows,
    normalize_success_rate_row,
    normalize_success_rate_rows,
)
from rcdash.domain.policy import (
    INVALID_DATE,
    LENIENT_SUCCESS_RATE_POLICY,
    MISSING_REQUIRED_FIELD,
    REJECT,
    SKIP,
    STRICT_SUCCESS_RATE_POLICY,
    error_class_for_flag,
    get_policy,
    is_success_status,
)
from rcdash.tabular import DateCell, NumberCell, TableRow, TextCell

from conftest import DICTIONARY_HEADER, SUCCESS_RATE_HEADER

SUCCESS_RATE_BINDING = bind_columns(SUCCESS_RATE_HEADER, SUCCESS_RATE_COLUMNS)
DICTIONARY_BINDING = bind_columns(DICTIONARY_HEADER, DICTIONARY_COLUMNS)


def make_row(number, *values):
    cells = tuple(value if not isinstance(value, str) else TextCell(value) for value in values)
    return TableRow(number=number, cells=cells)


def success_rate_row(number=1, date_value="31/01/2024", transaction_type="TRANSFER", code="05",
                     count="10", amount="1,000", fee="25", status="Gagal", description=""):
    return make_row(number, date_value, transaction_type, code, count, amount, fee, status, description)


def test_success_status_aliases():
    """Success aliases are case-insensitive."""
    for status in ("Sukses", "SUKSES", "success", " Success "):
        assert is_success_status(status)
    assert not is_success_status("Gagal")
    assert not is_success_status(None)


def test_dictionary_flags():
    """S/N flags map to error classes."""
    assert error_class_for_flag("S") == "S"
    assert error_class_for_flag("n") == "N"
    assert error_class_for_flag("berhasil") == "Sukses"
    assert error_class_for_flag("SUCCESS") == "Sukses"
    assert error_class_for_flag("X") is None
    assert error_class_for_flag("") is None


def test_get_policy():
    """Policies are looked up by name."""
    assert get_policy("strict") is STRICT_SUCCESS_RATE_POLICY
    assert get_policy("lenient") is LENIENT_SUCCESS_RATE_POLICY
    assert not LENIENT_SUCCESS_RATE_POLICY.strict
    with pytest.raises(ValueError):
        get_policy("loose")


def test_normalize_success_rate_row():
    """A complete row is normalized with parsed values."""
    verdict, row = normalize_success_rate_row(
        success_rate_row(number=3, description="Do not honor"), SUCCESS_RATE_BINDING
    )

    assert verdict.accepted
    assert row.row_number == 3
    assert row.date == date(2024, 1, 31)
    assert row.month == "1"
    assert row.year == 2024
    assert row.transaction_type == "TRANSFER"
    assert row.response_code == "05"
    assert row.total_count == 10
    assert row.total_amount == Decimal("1000")
    assert row.total_fee == Decimal("25")
    assert row.status == "Gagal"
    assert row.description == "Do not honor"
    assert not row.response_code_defaulted
    assert row.error_class is None


def test_normalize_spreadsheet_cells():
    """Native dates and numeric codes from workbooks are normalized."""
    verdict, row = normalize_success_rate_row(
        make_row(1, DateCell(date(2024, 1, 31)), "QR", NumberCell(5), NumberCell(3),
                 NumberCell(1500.5), NumberCell(0), "Gagal"),
        SUCCESS_RATE_BINDING,
    )

    assert verdict.accepted
    assert row.date == date(2024, 1, 31)
    assert row.response_code == "5"
    assert row.total_amount == Decimal("1500.5")
    assert row.description is None


def test_non_numeric_aggregates_become_none():
    """Non-numeric count, amount and fee are stored as null."""
    _, row = normalize_success_rate_row(
        success_rate_row(count="n/a", amount="-", fee=""), SUCCESS_RATE_BINDING
    )

    assert row.total_count is None
    assert row.total_amount is None
    assert row.total_fee is None


def test_success_defaults_fill_blank_code_and_description():
    """A success row without code or description gets the defaults."""
    verdict, row = normalize_success_rate_row(
        success_rate_row(code="", status="SUKSES"), SUCCESS_RATE_BINDING
    )

    assert verdict.accepted
    assert row.response_code == "00"
    assert row.description == "Success"
    assert row.response_code_defaulted
    assert row.status == "SUKSES"


def test_success_row_keeps_its_own_code():
    """A success row with a code is not marked as defaulted."""
    _, row = normalize_success_rate_row(
        success_rate_row(code="00", status="Success", description="Approved"), SUCCESS_RATE_BINDING
    )

    assert row.response_code == "00"
    assert row.description == "Approved"
    assert not row.response_code_defaulted


def test_failed_row_without_code_keeps_null_code():
    """A failed row may have no response code."""
    verdict, row = normalize_success_rate_row(success_rate_row(code=""), SUCCESS_RATE_BINDING)

    assert verdict.accepted
    assert row.response_code is None
    assert row.description is None


def test_blank_row_is_skipped():
    """Rows with neither date nor transaction type are skipped silently."""
    verdict, row = normalize_success_rate_row(
        success_rate_row(date_value="", transaction_type="", code="05"), SUCCESS_RATE_BINDING
    )

    assert verdict.action == SKIP
    assert verdict.error is None
    assert row is None


def test_invalid_date_is_rejected():
    """An unparseable date is a hard error naming the value."""
    verdict, row = normalize_success_rate_row(
        success_rate_row(number=5, date_value="31/02/2024"), SUCCESS_RATE_BINDING
    )

    assert verdict.action == REJECT
    assert row is None
    assert verdict.error.row_number == 5
    assert verdict.error.code == INVALID_DATE
    assert "31/02/2024" in verdict.error.reason


def test_missing_date_is_rejected():
    """A row with a type but no date is a hard error."""
    verdict, _ = normalize_success_rate_row(success_rate_row(date_value=""), SUCCESS_RATE_BINDING)

    assert verdict.error.code == MISSING_REQUIRED_FIELD
    assert verdict.error.reason == "Missing required field: Tanggal Transaksi"


def test_missing_transaction_type_is_rejected():
    """A row with a date but no transaction type is a hard error."""
    verdict, _ = normalize_success_rate_row(
        success_rate_row(transaction_type=" "), SUCCESS_RATE_BINDING
    )

    assert verdict.error.reason == "Missing required field: Jenis Transaksi"


def test_lenient_policy_skips_bad_rows():
    """The lenient policy skips rows the strict policy rejects."""
    verdict, row = normalize_success_rate_row(
        success_rate_row(date_value="garbage"), SUCCESS_RATE_BINDING, LENIENT_SUCCESS_RATE_POLICY
    )

    assert verdict.action == SKIP
    assert verdict.rule == "invalid date"
    assert verdict.error is None
    assert row is None


def test_normalize_success_rate_rows_collects_every_error():
    """All failing rows are reported, not just the first."""
    rows = [success_rate_row(number=n) for n in range(1, 11)]
    rows[4] = success_rate_row(number=5, date_value="99/99/2024")
    rows[7] = success_rate_row(number=8, transaction_type="")
    rows.append(success_rate_row(number=11, date_value="", transaction_type=""))

    batch = normalize_success_rate_rows(rows, SUCCESS_RATE_BINDING)

    assert batch.has_errors
    assert [error.row_number for error in batch.errors] == [5, 8]
    assert len(batch.rows) == 8
    assert batch.skipped == 1
    assert batch.examined == 11


def test_normalize_dictionary_row():
    """Dictionary rows keep blank type and code when the flag is valid."""
    verdict, row = normalize_dictionary_row(make_row(2, "", " 05 ", "s", ""), DICTIONARY_BINDING)

    assert verdict.accepted
    assert row.transaction_type == ""
    assert row.response_code == "05"
    assert row.error_class == "S"
    assert row.description is None


def test_normalize_dictionary_rows_skips_unknown_flags(dictionary_rows):
    """Rows with an unrecognized S/N value are skipped, not rejected."""
    rows = [make_row(n, *values) for n, values in enumerate(dictionary_rows[1:], start=1)]

    batch = normalize_dictionary_rows(rows, DICTIONARY_BINDING)

    assert not batch.has_errors
    assert batch.skipped == 1
    assert [row.error_class for row in batch.rows] == ["N", "S", "S", "Sukses"]
