"""Validation of normalized records handed over by file parsers."""

from typing import Any, Mapping, Optional

from budgetledger.domain.duplicates import compute_import_hash
from budgetledger.domain.entities import RawRecord
from budgetledger.domain.errors import ValidationError
from budgetledger.utils.amount_parser import parse_amount
from budgetledger.utils.date_parser import parse_date


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_raw_record(
    data: Mapping[str, Any],
    row: int,
    decimal_separator: str = ".",
    dayfirst: bool = False,
    invert_amounts: bool = False,
) -> RawRecord:
    """Build a RawRecord from one normalized input mapping.

    Expected keys are ``date``, ``amount`` and ``description``, with optional
    ``hash``, ``value_date`` and ``reference``. When no hash is supplied it is
    computed from the parsed values.

    Args:
        data: Normalized record
        row: 1-based position of the record in its file
        decimal_separator: Decimal separator used by string amounts
        dayfirst: Read ambiguous numeric dates as day/month
        invert_amounts: Flip the sign of every amount (banks exporting debits as positive)

    Raises:
        ValidationError: If the date or amount is missing or malformed
    """
    raw_date = data.get("date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        raise ValidationError(f"Row {row}: Missing date")

    raw_amount = data.get("amount")
    if raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
        raise ValidationError(f"Row {row}: Missing amount")

    try:
        txn_date = parse_date(raw_date, dayfirst=dayfirst)
    except ValueError as e:
        raise ValidationError(f"Row {row}: {e}") from e

    try:
        amount = parse_amount(raw_amount, decimal_separator=decimal_separator)
    except ValueError as e:
        raise ValidationError(f"Row {row}: {e}") from e
    if invert_amounts:
        amount = -amount

    value_date = None
    if _text(data.get("value_date")):
        try:
            value_date = parse_date(data["value_date"], dayfirst=dayfirst)
        except ValueError as e:
            raise ValidationError(f"Row {row}: {e}") from e

    description = _text(data.get("description")) or ""
    raw_hash = _text(data.get("hash")) or compute_import_hash(txn_date, description, amount)

    return RawRecord(
        row=row,
        date=txn_date,
        amount=amount,
        description=description,
        hash=raw_hash,
        value_date=value_date,
        reference=_text(data.get("reference")),
    )
