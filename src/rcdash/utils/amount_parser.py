"""Amount parsing utilities.

Aggregate columns are parsed leniently: a blank or non-numeric cell yields
None instead of failing the row.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from rcdash.tabular.cells import CellValue, NumberCell


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "Rp 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"(?i)rp\.?|[$€£¥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_decimal(cell: CellValue) -> Optional[Decimal]:
    """Parse a money cell, returning None for blank or non-numeric content."""
    if cell.is_blank():
        return None
    if isinstance(cell, NumberCell):
        return Decimal(str(cell.value))
    try:
        return parse_amount(cell.as_text())
    except ValueError:
        return None


def parse_count(cell: CellValue) -> Optional[int]:
    """Parse a transaction count cell, truncating fractions.

    Returns None for blank or non-numeric content.
    """
    amount = parse_decimal(cell)
    if amount is None:
        return None
    return int(amount)
