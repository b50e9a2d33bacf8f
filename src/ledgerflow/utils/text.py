"""Text normalization utilities for transaction descriptions."""

import re
from typing import Iterable, Optional

UNSPECIFIED_DESCRIPTION = "Unspecified"

# Boilerplate issuers put in front of the merchant name
ISSUER_PREFIXES = (
    "Pos Debit",
    "Debit Purchase",
    "Recurring Payment",
    "Preauthorized Debit",
    "Checkcard",
    "Visa Purchase",
    "ACH Withdrawal",
    "ACH Deposit",
    "Paper Payment to",
    "Withdrawal from",
    "Deposit from",
)

# Everything from one of these markers to the end of the line is a reference
REFERENCE_MARKERS = (
    "PAYMENTS ID NBR:",
    "ID NBR:",
    "EDI PYMNTS",
    "ACH ITEMS",
)

_WHITESPACE_RE = re.compile(r"\s+")
_WRAPPING_QUOTES_RE = re.compile(r"^[\"']+|[\"']+$")
_TRAILING_PUNCTUATION_RE = re.compile(r"[,.]+$")
_PREFIX_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in ISSUER_PREFIXES) + r")(?:\s*-\s*|\s+)",
    re.IGNORECASE,
)
_MARKER_RE = re.compile(
    r"(?:" + "|".join(re.escape(m) for m in REFERENCE_MARKERS) + r").*$",
    re.IGNORECASE,
)
_REFERENCE_NUMBER_RE = re.compile(r" \d{5,}.*$")
_TITLE_WORD_RE = re.compile(r"\w\S*")


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace, trim and lowercase.

    'WORD   A' and 'word a' normalize to the same token.
    """
    return _WHITESPACE_RE.sub(" ", text or "").strip().lower()


def clean_description(text: Optional[str]) -> str:
    """Strip issuer noise from a raw statement description.

    Examples:
        "POS DEBIT - WHOLE FOODS #123"       -> "WHOLE FOODS #123"
        "ACME CORP PAYMENTS ID NBR: 99812"  -> "ACME CORP"
        '"Coffee Shop."'                    -> "Coffee Shop"
    """
    cleaned = _WHITESPACE_RE.sub(" ", (text or "").strip())
    cleaned = _WRAPPING_QUOTES_RE.sub("", cleaned)
    cleaned = _TRAILING_PUNCTUATION_RE.sub("", cleaned.strip())
    cleaned = _PREFIX_RE.sub("", cleaned)
    cleaned = _MARKER_RE.sub("", cleaned)
    cleaned = _REFERENCE_NUMBER_RE.sub("", cleaned)
    cleaned = _TRAILING_PUNCTUATION_RE.sub("", cleaned.strip())
    return cleaned.strip()


def to_title_case(text: str) -> str:
    """Capitalize the first character of each word and lowercase the rest."""
    return _TITLE_WORD_RE.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def contains_any(text: Optional[str], keywords: Iterable[str]) -> bool:
    """Case-insensitive keyword membership test."""
    haystack = normalize_text(text)
    return any(normalize_text(keyword) in haystack for keyword in keywords)
