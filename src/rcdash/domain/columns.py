"""Binding of uploaded header rows to the expected columns."""

from dataclasses import dataclass
from typing import Sequence

from rcdash.domain.errors import InvalidColumnCountError, MissingColumnsError
from rcdash.tabular.cells import BLANK, CellValue, TableRow


@dataclass(frozen=True)
class Column:
    """Expected column: internal field name and the header operators type."""

    field: str
    header: str


@dataclass(frozen=True)
class ColumnSpec:
    """Required and optional columns for one kind of upload."""

    required: tuple[Column, ...]
    optional: tuple[Column, ...] = ()

    @property
    def min_columns(self) -> int:
        return len(self.required)

    @property
    def max_columns(self) -> int:
        return len(self.required) + len(self.optional)


@dataclass(frozen=True)
class ColumnBinding:
    """Field name to column index map for a bound header row."""

    indexes: dict[str, int]

    def has(self, field: str) -> bool:
        return field in self.indexes

    def cell(self, row: TableRow, field: str) -> CellValue:
        """Return the row's cell for a field, or a blank cell if absent."""
        index = self.indexes.get(field)
        if index is None or index >= len(row.cells):
            return BLANK
        return row.cells[index]

    def text(self, row: TableRow, field: str) -> str:
        """Return the trimmed display text of a field's cell."""
        return self.cell(row, field).as_text()


DICTIONARY_COLUMNS = ColumnSpec(
    required=(
        Column("transaction_type", "Jenis Transaksi"),
        Column("response_code", "RC"),
        Column("success_flag", "S/N"),
    ),
    optional=(Column("description", "RC Description"),),
)

SUCCESS_RATE_COLUMNS = ColumnSpec(
    required=(
        Column("date", "Tanggal Transaksi"),
        Column("transaction_type", "Jenis Transaksi"),
        Column("response_code", "RC"),
        Column("total_count", "total transaksi"),
        Column("total_amount", "Total Nominal"),
        Column("total_fee", "Total Biaya Admin"),
        Column("status", "Status Transaksi"),
    ),
    optional=(Column("description", "RC Description"),),
)


def bind_columns(headers: Sequence[str], spec: ColumnSpec) -> ColumnBinding:
    """Match a header row against a column spec.

    Headers are compared case-insensitively after trimming, in any order.
    Optional columns are bound only when present.

    Args:
        headers: Header row of the uploaded file
        spec: Expected columns

    Returns:
        ColumnBinding for the header row

    Raises:
        InvalidColumnCountError: If the header count is outside
            [len(required), len(required) + len(optional)]
        MissingColumnsError: If any required column is absent
    """
    if not spec.min_columns <= len(headers) <= spec.max_columns:
        raise InvalidColumnCountError(
            actual=len(headers),
            required=[column.header for column in spec.required],
            optional=[column.header for column in spec.optional],
        )

    positions: dict[str, int] = {}
    for index, header in enumerate(headers):
        positions.setdefault(header.strip().lower(), index)

    missing = [column.header for column in spec.required if column.header.lower() not in positions]
    if missing:
        raise MissingColumnsError(missing)

    indexes = {column.field: positions[column.header.lower()] for column in spec.required}
    for column in spec.optional:
        index = positions.get(column.header.lower())
        if index is not None:
            indexes[column.field] = index
    return ColumnBinding(indexes=indexes)
