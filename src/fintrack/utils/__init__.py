"""Utility functions for fintrack."""

from fintrack.utils.date_parser import parse_date, parse_timestamp
from fintrack.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "parse_timestamp", "parse_amount", "coerce_amount"]
