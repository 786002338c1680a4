"""Utility functions for budgetledger."""

from budgetledger.utils.date_parser import parse_date
from budgetledger.utils.amount_parser import parse_amount
from budgetledger.utils.text import normalize_description

__all__ = ["parse_date", "parse_amount", "normalize_description"]
