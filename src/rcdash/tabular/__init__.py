"""Tabular file readers for uploaded reports."""

from pathlib import PurePath
from typing import Optional

from rcdash.tabular.cells import (
    BLANK,
    CellValue,
    DateCell,
    NumberCell,
    Table,
    TableRow,
    TextCell,
)
from rcdash.tabular.csv_reader import read_csv
from rcdash.tabular.errors import (
    EmptyFileError,
    NoWorksheetError,
    TabularError,
    UnsupportedFileTypeError,
)
from rcdash.tabular.workbook import DEFAULT_EMPTY_ROW_LIMIT, read_xls, read_xlsx

CSV_EXTENSIONS = frozenset({".csv"})
XLSX_EXTENSIONS = frozenset({".xlsx", ".xlsm"})
XLS_EXTENSIONS = frozenset({".xls"})
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | XLSX_EXTENSIONS | XLS_EXTENSIONS


def file_extension(filename: str) -> str:
    """Return the lower-cased extension of a file name, including the dot."""
    return PurePath(filename).suffix.lower()


def read_table(
    filename: str,
    content: bytes,
    empty_row_limit: Optional[int] = DEFAULT_EMPTY_ROW_LIMIT,
) -> Table:
    """Read an uploaded file into a header row and data rows.

    The reader is chosen from the file extension.

    Args:
        filename: Original file name (used only for its extension)
        content: Raw file bytes
        empty_row_limit: Consecutive empty spreadsheet rows after which
            scanning stops; None or 0 scans the whole sheet

    Returns:
        Table with trimmed headers and data rows

    Raises:
        UnsupportedFileTypeError: If the extension is not supported
        EmptyFileError: If the file has no rows
        NoWorksheetError: If a workbook has no worksheets
    """
    extension = file_extension(filename)
    if extension in CSV_EXTENSIONS:
        return read_csv(content)
    if extension in XLSX_EXTENSIONS:
        return read_xlsx(content, empty_row_limit=empty_row_limit)
    if extension in XLS_EXTENSIONS:
        return read_xls(content, empty_row_limit=empty_row_limit)
    raise UnsupportedFileTypeError(
        f"Unsupported file type '{extension or filename}'. "
        f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
    )


__all__ = [
    "BLANK",
    "CellValue",
    "DateCell",
    "NumberCell",
    "Table",
    "TableRow",
    "TextCell",
    "EmptyFileError",
    "NoWorksheetError",
    "TabularError",
    "UnsupportedFileTypeError",
    "DEFAULT_EMPTY_ROW_LIMIT",
    "SUPPORTED_EXTENSIONS",
    "file_extension",
    "read_table",
]
