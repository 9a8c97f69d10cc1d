"""CSV reader."""

import csv
import io
import logging

from rcdash.tabular.cells import Table, TableRow, TextCell, header_names
from rcdash.tabular.errors import EmptyFileError

logger = logging.getLogger(__name__)

DELIMITERS = ",;\t"


def decode_text(content: bytes) -> str:
    """Decode uploaded CSV bytes, tolerating a UTF-8 BOM and legacy encodings."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("CSV is not valid UTF-8, decoding as cp1252")
        return content.decode("cp1252", errors="replace")


def _sniff_delimiter(text: str) -> str:
    sample = text[:4096]
    try:
        return csv.Sniffer().sniff(sample, delimiters=DELIMITERS).delimiter
    except csv.Error:
        return ","


def split_rows(text: str) -> list[list[str]]:
    """Split CSV text into rows of raw field strings.

    Quoted fields may contain delimiters, doubled quotes and line breaks;
    rows may end in ``\\r\\n``, ``\\r`` or ``\\n``.
    """
    delimiter = _sniff_delimiter(text)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    return [row for row in reader]


def read_csv(content: bytes) -> Table:
    """Read CSV bytes into a table of text cells.

    Raises:
        EmptyFileError: If the file has no non-blank rows
    """
    rows = [
        TableRow(number=index, cells=tuple(TextCell(value) for value in raw))
        for index, raw in enumerate(split_rows(decode_text(content)))
    ]
    rows = [row for row in rows if not row.is_blank()]
    if not rows:
        raise EmptyFileError("CSV file is empty")

    header, data = rows[0], rows[1:]
    return Table(headers=header_names(list(header.cells)), rows=data)
