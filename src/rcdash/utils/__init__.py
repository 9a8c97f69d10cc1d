"""Utility functions for rcdash."""

from rcdash.utils.date_parser import parse_date, resolve_report_date
from rcdash.utils.amount_parser import parse_amount, parse_count, parse_decimal

__all__ = ["parse_date", "resolve_report_date", "parse_amount", "parse_count", "parse_decimal"]
