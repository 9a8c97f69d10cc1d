"""Cell values and tables produced by the readers.

Readers translate library-specific cell objects into one of three variants so
that normalization never looks at openpyxl or xlrd types.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Union


@dataclass(frozen=True)
class DateCell:
    """Native spreadsheet date."""

    value: date

    def as_text(self) -> str:
        if isinstance(self.value, datetime):
            return self.value.date().isoformat()
        return self.value.isoformat()

    def is_blank(self) -> bool:
        return False


@dataclass(frozen=True)
class NumberCell:
    """Numeric spreadsheet cell (may be a date serial)."""

    value: float

    def as_text(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)

    def is_blank(self) -> bool:
        return False


@dataclass(frozen=True)
class TextCell:
    """Text cell; the empty string stands for a blank cell."""

    value: str = ""

    def as_text(self) -> str:
        return self.value.strip()

    def is_blank(self) -> bool:
        return not self.value.strip()


CellValue = Union[DateCell, NumberCell, TextCell]

BLANK = TextCell("")


@dataclass(frozen=True)
class TableRow:
    """Data row with its position in the source; the header is row 0."""

    number: int
    cells: tuple[CellValue, ...]

    def is_blank(self) -> bool:
        return all(cell.is_blank() for cell in self.cells)


@dataclass
class Table:
    """Header row plus data rows of the first sheet."""

    headers: list[str]
    rows: list[TableRow] = field(default_factory=list)


def header_names(cells: list[CellValue]) -> list[str]:
    """Trim header cells and drop trailing blanks."""
    headers = [cell.as_text() for cell in cells]
    while headers and not headers[-1]:
        headers.pop()
    return headers
