"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
from typing import Any
import re

_CURRENCY_SYMBOLS_RE = re.compile(r"[$€£¥]")


def is_blank(value: Any) -> bool:
    """Return True for empty cells (None or whitespace-only strings)."""
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value: Any) -> Decimal:
    """Parse an amount cell into a signed Decimal.

    Handles various formats:
    - "123.45", "$123.45", "1,234.56"
    - "-123.45", "-$123.45", "$-123.45"
    - "(123.45)" (negative in parentheses)
    - "123.45-" (trailing minus)
    - numeric cells (int, float, Decimal)

    Args:
        value: Raw cell value

    Returns:
        Signed Decimal amount

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the short repr, avoiding binary float noise
        amount = Decimal(str(value))
    else:
        if is_blank(value):
            raise ValueError("Empty amount string")
        amount = _parse_amount_text(str(value))

    if not amount.is_finite():
        raise ValueError(f"Amount {value!r} is not a finite number")
    return amount


def _parse_amount_text(amount_str: str) -> Decimal:
    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]
    elif amount_str.endswith("-"):
        is_negative = True
        amount_str = amount_str[:-1]

    amount_str = _CURRENCY_SYMBOLS_RE.sub("", amount_str)
    amount_str = amount_str.replace(",", "").replace(" ", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_optional_amount(value: Any) -> Decimal:
    """Parse an amount cell, treating blank cells as zero.

    Debit/credit exports leave the unused side empty, so an empty cell is
    not an error there.
    """
    if is_blank(value):
        return Decimal("0")
    return parse_amount(value)
