"""Spreadsheet readers for .xlsx (openpyxl) and .xls (xlrd) workbooks.

Only the first worksheet is read. Scanning stops once ``empty_row_limit``
consecutive empty rows have been seen, so a sheet whose declared range runs
far past the data does not have to be walked to the end.
"""

import io
import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional

import xlrd
from openpyxl import load_workbook

from rcdash.tabular.cells import (
    BLANK,
    CellValue,
    DateCell,
    NumberCell,
    Table,
    TableRow,
    TextCell,
    header_names,
)
from rcdash.tabular.errors import EmptyFileError, NoWorksheetError, TabularError

logger = logging.getLogger(__name__)

DEFAULT_EMPTY_ROW_LIMIT = 10


def to_cell(value: Any) -> CellValue:
    """Convert a Python value read by openpyxl into a cell variant."""
    if value is None:
        return BLANK
    if isinstance(value, (datetime, date)):
        return DateCell(value)
    if isinstance(value, bool):
        return TextCell("TRUE" if value else "FALSE")
    if isinstance(value, (int, float)):
        return NumberCell(value)
    return TextCell(str(value))


def _collect_rows(
    raw_rows: Iterable[tuple[CellValue, ...]], empty_row_limit: Optional[int]
) -> Table:
    header: Optional[list[str]] = None
    rows: list[TableRow] = []
    consecutive_empty = 0

    for number, cells in enumerate(raw_rows):
        row = TableRow(number=number, cells=cells)
        if row.is_blank():
            if header is not None:
                consecutive_empty += 1
                if empty_row_limit and consecutive_empty >= empty_row_limit:
                    logger.debug(
                        "Stopped scanning at row %d after %d empty rows", number, consecutive_empty
                    )
                    break
            continue
        consecutive_empty = 0
        if header is None:
            header = header_names(list(cells))
        else:
            rows.append(row)

    if header is None:
        raise EmptyFileError("Excel file is empty")
    return Table(headers=header, rows=rows)


def read_xlsx(content: bytes, empty_row_limit: Optional[int] = DEFAULT_EMPTY_ROW_LIMIT) -> Table:
    """Read the first worksheet of an .xlsx workbook.

    Raises:
        NoWorksheetError: If the workbook has no worksheets
        EmptyFileError: If the first worksheet has no rows
        TabularError: If the content is not a readable workbook
    """
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise TabularError(f"Could not read Excel file: {e}") from e

    try:
        if not workbook.worksheets:
            raise NoWorksheetError("Excel file contains no worksheets")
        worksheet = workbook.worksheets[0]
        raw_rows = (
            tuple(to_cell(value) for value in values)
            for values in worksheet.iter_rows(values_only=True)
        )
        return _collect_rows(raw_rows, empty_row_limit)
    finally:
        workbook.close()


def _xls_cell(cell: xlrd.sheet.Cell, datemode: int) -> CellValue:
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return DateCell(xlrd.xldate_as_datetime(cell.value, datemode))
        except (ValueError, OverflowError):
            return NumberCell(cell.value)
    if cell.ctype == xlrd.XL_CELL_NUMBER:
        return NumberCell(cell.value)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return TextCell("TRUE" if cell.value else "FALSE")
    if cell.ctype == xlrd.XL_CELL_TEXT:
        return TextCell(cell.value)
    return BLANK


def read_xls(content: bytes, empty_row_limit: Optional[int] = DEFAULT_EMPTY_ROW_LIMIT) -> Table:
    """Read the first worksheet of a legacy .xls workbook.

    Raises:
        NoWorksheetError: If the workbook has no worksheets
        EmptyFileError: If the first worksheet has no rows
        TabularError: If the content is not a readable workbook
    """
    try:
        book = xlrd.open_workbook(file_contents=content, on_demand=True)
    except Exception as e:
        raise TabularError(f"Could not read Excel file: {e}") from e

    try:
        if book.nsheets == 0:
            raise NoWorksheetError("Excel file contains no worksheets")
        sheet = book.sheet_by_index(0)
        raw_rows = (
            tuple(_xls_cell(cell, book.datemode) for cell in sheet.row(index))
            for index in range(sheet.nrows)
        )
        return _collect_rows(raw_rows, empty_row_limit)
    finally:
        book.release_resources()
