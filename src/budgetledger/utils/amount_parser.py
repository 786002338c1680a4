"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")


def parse_amount(value: str | int | float | Decimal, decimal_separator: str = ".") -> Decimal:
    """Parse an amount into a Decimal rounded to cents.

    Handles various formats:
    - "123.45", "-123.45", "+123.45"
    - "$123.45", "-$123.45", "123,45 €"
    - "1,234.56" (or "1.234,56" with ``decimal_separator=","``)
    - "(123.45)" (negative in parentheses)

    Numbers are accepted as-is; floats go through ``str`` so 0.1 stays 0.10.

    Args:
        value: Amount string or number
        decimal_separator: "." or ","

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        amount = _parse_amount_string(value, decimal_separator)

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _parse_amount_string(amount_str: str, decimal_separator: str) -> Decimal:
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = re.sub(r"\s", "", str(amount_str))

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"[$€£¥]", "", text)

    if decimal_separator == ",":
        text = text.replace(".", "").replace(",", ".")
    else:
        text = text.replace(",", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None
    return -amount if is_negative else amount
