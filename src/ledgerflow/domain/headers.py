"""Header detection for bank and card exports.

Maps whatever column names an export uses onto the canonical fields the
normalizer understands.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

# Canonical field -> synonym tiers, in the order fields claim headers.
# Fields earlier in the list win a header that matches several fields
# ("Transaction Date" is a date, not a description; "Debit/Credit" is a
# type indicator, not a debit column). Within a field, earlier tiers are
# preferred: a merchant or payee column beats a generic description.
HEADER_SYNONYMS: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("date", (("date", "dt", "posted", "posting date", "trans date"),)),
    ("type_indicator", (("type", "dr/cr", "cr/dr", "debit/credit", "credit/debit"),)),
    ("debit", (("debit", "withdrawal", "withdrawals", "money out", "paid out"),)),
    ("credit", (("credit", "deposit", "deposits", "money in", "paid in"),)),
    ("amount", (("amount", "amt", "value"),)),
    ("balance", (("balance", "running bal"),)),
    ("status", (("status", "state"),)),
    ("memo", (("memo", "note", "notes", "reference", "ref"),)),
    (
        "description",
        (
            ("name", "merchant", "payee"),
            ("description", "desc", "details", "narrative", "particulars", "transaction"),
        ),
    ),
)


@dataclass(frozen=True)
class ColumnMap:
    """Header name chosen for each canonical field, or None when absent."""

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None
    balance: Optional[str] = None
    status: Optional[str] = None
    memo: Optional[str] = None
    type_indicator: Optional[str] = None

    @property
    def has_debit_credit(self) -> bool:
        return self.debit is not None and self.credit is not None

    @property
    def is_usable(self) -> bool:
        """True when rows can yield a date and an amount."""
        return self.date is not None and (self.has_debit_credit or self.amount is not None)


def _find_header(
    candidates: Sequence[tuple[str, str]], tiers: Sequence[Sequence[str]]
) -> Optional[str]:
    for synonyms in tiers:
        for original, lowered in candidates:
            if lowered in synonyms:
                return original
    for synonyms in tiers:
        for original, lowered in candidates:
            if any(synonym in lowered for synonym in synonyms):
                return original
    return None


def detect_columns(headers: Sequence[str]) -> ColumnMap:
    """Resolve canonical fields from a header row.

    Headers are compared lower-cased and trimmed. A header equal to a
    synonym beats one that merely contains it; after that the earlier
    synonym tier wins, then the leftmost header. Each header is claimed by
    at most one field.
    """
    remaining = [(h, (h or "").strip().lower()) for h in headers]
    resolved: dict[str, str] = {}
    for field_name, tiers in HEADER_SYNONYMS:
        header = _find_header(remaining, tiers)
        if header is None:
            continue
        resolved[field_name] = header
        remaining = [pair for pair in remaining if pair[0] != header]
    return ColumnMap(**resolved)
