"""Shared pytest fixtures for rcdash tests."""

import csv
import io
import os
import tempfile

import pytest
from openpyxl import Workbook

from rcdash.database.factories import create_memory_database, create_sqlite_database
from rcdash.domain.application import ApplicationService
from rcdash.domain.dictionary_upload import DictionaryUploadService
from rcdash.domain.reconciliation import ReconciliationService
from rcdash.domain.success_rate_upload import SuccessRateUploadService

DICTIONARY_HEADER = ["Jenis Transaksi", "RC", "S/N", "RC Description"]

SUCCESS_RATE_HEADER = [
    "Tanggal Transaksi",
    "Jenis Transaksi",
    "RC",
    "total transaksi",
    "Total Nominal",
    "Total Biaya Admin",
    "Status Transaksi",
    "RC Description",
]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    db.engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an in-memory database for testing."""
    db = create_memory_database()
    db.connect()
    yield db
    db.disconnect()


@pytest.fixture
def application_service(temp_db):
    """Create an ApplicationService with a temporary database."""
    return ApplicationService(temp_db)


@pytest.fixture
def dictionary_upload_service(temp_db):
    """Create a DictionaryUploadService with a temporary database."""
    return DictionaryUploadService(temp_db)


@pytest.fixture
def success_rate_upload_service(temp_db):
    """Create a SuccessRateUploadService with a temporary database."""
    return SuccessRateUploadService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def sample_application(application_service):
    """Create a sample application for testing."""
    application_id = application_service.create_application("Bale")
    return application_service.get_application(application_id)


@pytest.fixture
def make_csv():
    """Return a function rendering rows (header first) as CSV bytes."""

    def _make_csv(rows, delimiter=","):
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\r\n")
        writer.writerows(rows)
        return buffer.getvalue().encode("utf-8")

    return _make_csv


@pytest.fixture
def make_xlsx():
    """Return a function rendering rows (header first) as .xlsx bytes."""

    def _make_xlsx(rows):
        workbook = Workbook()
        worksheet = workbook.active
        for row in rows:
            worksheet.append(list(row))
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _make_xlsx


@pytest.fixture
def dictionary_rows():
    """Dictionary file rows for the sample application."""
    return [
        DICTIONARY_HEADER,
        ["TRANSFER", "05", "N", "Do not honor"],
        ["", "05", "S", "Generic decline"],
        ["PAYMENT", "68", "s", "Timeout"],
        ["PAYMENT", "00", "Sukses", "Approved"],
        ["PAYMENT", "12", "maybe", "Unknown flag"],
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
