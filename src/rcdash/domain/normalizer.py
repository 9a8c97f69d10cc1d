"""Conversion of bound table rows into normalized upload rows."""

import logging
from dataclasses import dataclass, field
from typing import Generic, Iterable, Optional, TypeVar

from rcdash.domain.columns import ColumnBinding
from rcdash.domain.entities import DictionaryRow, SuccessRateRow
from rcdash.domain.errors import RowError
from rcdash.domain.policy import (
    DICTIONARY_POLICY,
    STRICT_SUCCESS_RATE_POLICY,
    RowDraft,
    RowPolicy,
    Verdict,
    error_class_for_flag,
)
from rcdash.tabular.cells import TableRow
from rcdash.utils.amount_parser import parse_count, parse_decimal
from rcdash.utils.date_parser import format_date_parts, resolve_report_date

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


@dataclass
class NormalizedBatch(Generic[RowT]):
    """Rows that passed a policy, plus the hard errors and skip count."""

    rows: list[RowT] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    skipped: int = 0
    examined: int = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def _none_if_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_dictionary_row(
    row: TableRow, binding: ColumnBinding, policy: RowPolicy = DICTIONARY_POLICY
) -> tuple[Verdict, Optional[DictionaryRow]]:
    """Normalize one dictionary row.

    Transaction type and response code are kept even when blank; the row is
    skipped when the S/N flag is not recognized.
    """
    flag = binding.text(row, "success_flag")
    draft = RowDraft(
        row_number=row.number,
        values={
            "transaction_type": binding.text(row, "transaction_type"),
            "response_code": binding.text(row, "response_code"),
            "description": binding.text(row, "description"),
            "success_flag": flag,
            "error_class": error_class_for_flag(flag),
        },
    )
    verdict = policy.apply(draft)
    if not verdict.accepted:
        return verdict, None

    return verdict, DictionaryRow(
        row_number=row.number,
        transaction_type=draft.values["transaction_type"],
        response_code=draft.values["response_code"],
        description=_none_if_blank(draft.values["description"]),
        error_class=draft.values["error_class"],
    )


def normalize_success_rate_row(
    row: TableRow, binding: ColumnBinding, policy: RowPolicy = STRICT_SUCCESS_RATE_POLICY
) -> tuple[Verdict, Optional[SuccessRateRow]]:
    """Normalize one success-rate row.

    The status is stored as typed; it is only interpreted to apply the
    success defaults. Aggregate columns that are not numeric become None.
    """
    date_cell = binding.cell(row, "date")
    values = {
        "raw_date": date_cell.as_text(),
        "date": None,
        "month": None,
        "year": None,
        "transaction_type": binding.text(row, "transaction_type"),
        "response_code": binding.text(row, "response_code"),
        "description": binding.text(row, "description"),
        "status": binding.text(row, "status"),
    }
    draft = RowDraft(row_number=row.number, values=values)

    try:
        resolved = resolve_report_date(date_cell)
    except ValueError as e:
        draft.date_error = str(e)
    else:
        if resolved is not None:
            values["date"] = resolved
            _, values["month"], values["year"] = format_date_parts(resolved)

    code_in_file = bool(values["response_code"])
    verdict = policy.apply(draft)
    if not verdict.accepted:
        return verdict, None

    response_code = _none_if_blank(values["response_code"])
    return verdict, SuccessRateRow(
        row_number=row.number,
        date=values["date"],
        month=values["month"],
        year=values["year"],
        transaction_type=values["transaction_type"],
        response_code=response_code,
        description=_none_if_blank(values["description"]),
        total_count=parse_count(binding.cell(row, "total_count")),
        total_amount=parse_decimal(binding.cell(row, "total_amount")),
        total_fee=parse_decimal(binding.cell(row, "total_fee")),
        status=_none_if_blank(values["status"]),
        response_code_defaulted=response_code is not None and not code_in_file,
    )


def _normalize_rows(rows: Iterable[TableRow], normalize) -> NormalizedBatch:
    batch: NormalizedBatch = NormalizedBatch()
    for row in rows:
        batch.examined += 1
        verdict, normalized = normalize(row)
        if verdict.error is not None:
            batch.errors.append(verdict.error)
        elif normalized is None:
            batch.skipped += 1
            logger.debug("Row %d skipped by rule '%s'", row.number, verdict.rule)
        else:
            batch.rows.append(normalized)
    return batch


def normalize_dictionary_rows(
    rows: Iterable[TableRow], binding: ColumnBinding, policy: RowPolicy = DICTIONARY_POLICY
) -> NormalizedBatch[DictionaryRow]:
    """Normalize every dictionary row, collecting skips."""
    return _normalize_rows(rows, lambda row: normalize_dictionary_row(row, binding, policy))


def normalize_success_rate_rows(
    rows: Iterable[TableRow],
    binding: ColumnBinding,
    policy: RowPolicy = STRICT_SUCCESS_RATE_POLICY,
) -> NormalizedBatch[SuccessRateRow]:
    """Normalize every success-rate row, collecting hard errors and skips."""
    return _normalize_rows(rows, lambda row: normalize_success_rate_row(row, binding, policy))
