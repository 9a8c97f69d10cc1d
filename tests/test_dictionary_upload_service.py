"""Domain tests for dictionary upload service."""

import pytest

from rcdash.domain.errors import (
    InvalidColumnCountError,
    MissingColumnsError,
    UploadError,
    UploadFailedError,
)


def entry_keys(db, application_id):
    return {
        (entry.transaction_type, entry.response_code): (entry.error_class, entry.description)
        for entry in db.list_dictionary_entries(application_id=application_id)
    }


def test_upload_dictionary_csv(dictionary_upload_service, temp_db, sample_application, make_csv, dictionary_rows):
    """Rows with a known S/N flag become dictionary entries."""
    report = dictionary_upload_service.upload(
        "dictionary.csv", make_csv(dictionary_rows), sample_application.id
    )

    assert report.entries_processed == 4
    assert report.skipped_rows == 1
    assert report.application_name == "Bale"
    assert entry_keys(temp_db, sample_application.id) == {
        ("TRANSFER", "05"): ("N", "Do not honor"),
        ("", "05"): ("S", "Generic decline"),
        ("PAYMENT", "68"): ("S", "Timeout"),
        ("PAYMENT", "00"): ("Sukses", "Approved"),
    }


def test_upload_dictionary_xlsx(dictionary_upload_service, temp_db, sample_application, make_xlsx):
    """Workbooks are accepted and numeric codes are read as text."""
    content = make_xlsx([["RC", "S/N", "Jenis Transaksi"], [5, "N", "TRANSFER"], [68, "S", None]])

    report = dictionary_upload_service.upload("dictionary.xlsx", content, sample_application.id)

    assert report.entries_processed == 2
    assert entry_keys(temp_db, sample_application.id) == {
        ("TRANSFER", "5"): ("N", None),
        ("", "68"): ("S", None),
    }


def test_upload_dictionary_is_idempotent(
    dictionary_upload_service, temp_db, sample_application, make_csv, dictionary_rows
):
    """Uploading the same file twice leaves one entry per key."""
    content = make_csv(dictionary_rows)
    dictionary_upload_service.upload("dictionary.csv", content, sample_application.id)
    first = entry_keys(temp_db, sample_application.id)

    dictionary_upload_service.upload("dictionary.csv", content, sample_application.id)

    assert entry_keys(temp_db, sample_application.id) == first
    assert len(temp_db.list_dictionary_entries()) == 4


def test_reupload_updates_class_and_keeps_description(
    dictionary_upload_service, temp_db, sample_application, make_csv
):
    """A second upload overwrites the class; a blank description keeps the old one."""
    dictionary_upload_service.upload(
        "dictionary.csv",
        make_csv([["Jenis Transaksi", "RC", "S/N", "RC Description"], ["TRANSFER", "05", "N", "Do not honor"]]),
        sample_application.id,
    )
    dictionary_upload_service.upload(
        "dictionary.csv",
        make_csv([["Jenis Transaksi", "RC", "S/N", "RC Description"], ["TRANSFER", "05", "S", ""]]),
        sample_application.id,
    )

    assert entry_keys(temp_db, sample_application.id) == {("TRANSFER", "05"): ("S", "Do not honor")}


def test_upload_dictionary_missing_column(dictionary_upload_service, sample_application, make_csv):
    """A misspelled header is reported before any row is read."""
    content = make_csv([["Jenis Transaksi", "Kode", "S/N"], ["TRANSFER", "05", "N"]])

    with pytest.raises(MissingColumnsError) as excinfo:
        dictionary_upload_service.upload("dictionary.csv", content, sample_application.id)

    assert excinfo.value.missing == ["RC"]


def test_upload_dictionary_wrong_column_count(dictionary_upload_service, sample_application, make_csv):
    """Too many columns are rejected."""
    content = make_csv([["Jenis Transaksi", "RC", "S/N", "RC Description", "Notes"]])

    with pytest.raises(InvalidColumnCountError):
        dictionary_upload_service.upload("dictionary.csv", content, sample_application.id)


def test_upload_dictionary_no_valid_rows(dictionary_upload_service, temp_db, sample_application, make_csv):
    """A file where every flag is unknown is rejected."""
    content = make_csv([["Jenis Transaksi", "RC", "S/N"], ["TRANSFER", "05", "?"]])

    with pytest.raises(UploadError) as excinfo:
        dictionary_upload_service.upload("dictionary.csv", content, sample_application.id)

    assert excinfo.value.code == "NoValidRows"
    assert temp_db.list_dictionary_entries() == []


@pytest.mark.parametrize(
    "filename, content, code",
    [
        (None, b"x", "NoFileUploaded"),
        ("dictionary.csv", None, "NoFileUploaded"),
        ("dictionary.txt", b"x", "UnsupportedFileType"),
        ("dictionary.csv", b"", "EmptyFile"),
    ],
)
def test_upload_dictionary_structural_errors(dictionary_upload_service, sample_application, filename, content, code):
    """Structural problems carry a stable error code."""
    with pytest.raises(UploadError) as excinfo:
        dictionary_upload_service.upload(filename, content, sample_application.id)

    assert excinfo.value.code == code


@pytest.mark.parametrize("application_id", [999, "999", "abc", "", None, True, 1.0])
def test_upload_dictionary_invalid_application(dictionary_upload_service, make_csv, dictionary_rows, application_id):
    """Unknown or malformed application ids are rejected."""
    with pytest.raises(UploadError) as excinfo:
        dictionary_upload_service.upload("dictionary.csv", make_csv(dictionary_rows), application_id)

    assert excinfo.value.code == "InvalidApplicationId"


def test_upload_dictionary_numeric_string_application(
    dictionary_upload_service, temp_db, sample_application, make_csv, dictionary_rows
):
    """An application id submitted as a string of digits is accepted."""
    report = dictionary_upload_service.upload(
        "dictionary.csv", make_csv(dictionary_rows), f" {sample_application.id} "
    )

    assert report.application_id == sample_application.id
    assert len(temp_db.list_dictionary_entries(application_id=sample_application.id)) == 4


def test_upload_dictionary_rolls_back_on_failure(
    dictionary_upload_service, temp_db, sample_application, make_csv, dictionary_rows, monkeypatch
):
    """A write failure part way through saves nothing."""
    original = temp_db.upsert_dictionary_entry
    calls = []

    def failing_upsert(*args, **kwargs):
        calls.append(args)
        if len(calls) == 3:
            raise RuntimeError("disk full")
        return original(*args, **kwargs)

    monkeypatch.setattr(temp_db, "upsert_dictionary_entry", failing_upsert)

    with pytest.raises(UploadFailedError) as excinfo:
        dictionary_upload_service.upload("dictionary.csv", make_csv(dictionary_rows), sample_application.id)

    assert "disk full" in str(excinfo.value)
    assert temp_db.list_dictionary_entries() == []
