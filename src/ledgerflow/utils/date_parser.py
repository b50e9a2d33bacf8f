"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Day zero of spreadsheet serial dates (accounts for the 1900 leap-year bug)
SPREADSHEET_EPOCH = date(1899, 12, 30)
MAX_SPREADSHEET_SERIAL = 2958465  # 9999-12-31

# Two-digit years above this pivot belong to the 1900s
TWO_DIGIT_YEAR_PIVOT = 70

MIN_DATE_LENGTH = 5
MIN_YEAR = 1900
MAX_YEAR = 2100

_SERIAL_RE = re.compile(r"^\d{5}(\.\d+)?$")
_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_MDY_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2}|\d{4})$")
_TIME_SUFFIX_RE = re.compile(r"[\sT]")

# Missing components must not be filled from today's date
_NO_DEFAULT = datetime(1, 1, 1)


def serial_to_date(serial: int | float | Decimal) -> date:
    """Convert a spreadsheet serial day number into a date.

    Raises:
        ValueError: If the serial is outside the supported range
    """
    try:
        days = int(serial)
    except (OverflowError, ValueError):
        raise ValueError(f"Spreadsheet serial {serial} is not a finite number")
    if days < 1 or days > MAX_SPREADSHEET_SERIAL:
        raise ValueError(f"Spreadsheet serial {serial} out of range")
    return SPREADSHEET_EPOCH + timedelta(days=days)


def expand_two_digit_year(year: int) -> int:
    """Infer the century for a two-digit year."""
    if year >= 100:
        return year
    return 1900 + year if year > TWO_DIGIT_YEAR_PIVOT else 2000 + year


def parse_statement_date(value: Any) -> date:
    """Parse a date cell from a bank or card export.

    Accepts, in order:
    - spreadsheet serial numbers (numeric cells, or five-digit strings)
    - ISO dates ("2024-03-15"), with or without a time suffix
    - month-first slash/dash dates ("03/15/24", "3-15-2024")
    - anything else ``dateutil`` understands ("Mar 15, 2024")

    Args:
        value: Raw cell value (str, int, float, Decimal, date or datetime)

    Returns:
        Date object

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Could not parse date {value!r}")
    if isinstance(value, (int, float, Decimal)):
        return serial_to_date(value)

    text = str(value).strip().strip("\"'").strip()
    if len(text) < MIN_DATE_LENGTH:
        raise ValueError(f"Date '{text}' is too short")

    if _SERIAL_RE.match(text):
        try:
            return serial_to_date(Decimal(text))
        except InvalidOperation as e:
            raise ValueError(f"Could not parse date '{text}': {e}")

    head = _TIME_SUFFIX_RE.split(text, maxsplit=1)[0]

    match = _ISO_RE.match(head)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return date(year, month, day)

    match = _MDY_RE.match(head)
    if match:
        month, day, year = (int(part) for part in match.groups())
        return date(expand_two_digit_year(year), month, day)

    try:
        parsed = date_parser.parse(text, default=_NO_DEFAULT)
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{text}': {e}")
    if not MIN_YEAR < parsed.year < MAX_YEAR:
        raise ValueError(f"Date '{text}' has an implausible year {parsed.year}")
    return parsed.date()


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date filter.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative forms: "today", "yesterday", "last month", "this month",
    "last year", "this year", "last week", "this week".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this week": today - timedelta(days=today.weekday()),
        "last week": today - timedelta(days=today.weekday() + 7),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: this-month, this-year, last-month or last-year

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)
    elif period == "this-year":
        return (today.replace(month=1, day=1), today)
    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)
    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)
    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: "
            "this-month, this-year, last-month, last-year"
        )
