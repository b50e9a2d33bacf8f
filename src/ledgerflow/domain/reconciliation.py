"""Statement reconciliation matcher.

Advisory comparison between a freshly parsed statement and a ledger view.
Matching is greedy and order-dependent: each statement entry claims the
first unclaimed ledger entry within tolerance, in the view's order.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from ledgerflow.domain.entities import Transaction
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

DATE_TOLERANCE_DAYS = 2
AMOUNT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class MatchedPair:
    statement: Transaction
    ledger: Transaction


@dataclass(frozen=True)
class ReconciliationResult:
    matched: list[MatchedPair] = field(default_factory=list)
    missing_in_app: list[Transaction] = field(default_factory=list)
    missing_in_statement: list[Transaction] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.missing_in_app and not self.missing_in_statement


def is_match(
    statement_txn: Transaction,
    ledger_txn: Transaction,
    date_tolerance_days: int = DATE_TOLERANCE_DAYS,
    amount_tolerance: Decimal = AMOUNT_TOLERANCE,
) -> bool:
    """Dates within the day tolerance and magnitudes closer than a cent."""
    day_gap = abs((statement_txn.date - ledger_txn.date).days)
    amount_gap = abs(statement_txn.amount - ledger_txn.amount)
    return day_gap <= date_tolerance_days and amount_gap < amount_tolerance


def reconcile(
    statement: Sequence[Transaction],
    ledger_view: Sequence[Transaction],
    date_tolerance_days: int = DATE_TOLERANCE_DAYS,
    amount_tolerance: Decimal = AMOUNT_TOLERANCE,
) -> ReconciliationResult:
    """Partition a statement and a ledger view into matched and missing entries.

    Args:
        statement: Parsed statement entries, in statement order
        ledger_view: Ledger entries the user is looking at (any subset)
        date_tolerance_days: Maximum absolute date difference for a match
        amount_tolerance: Magnitudes must differ by strictly less than this

    Returns:
        ReconciliationResult; neither input is modified
    """
    claimed: set[int] = set()
    matched: list[MatchedPair] = []
    missing_in_app: list[Transaction] = []

    for stmt_txn in statement:
        for pos, ledger_txn in enumerate(ledger_view):
            if pos in claimed:
                continue
            if is_match(stmt_txn, ledger_txn, date_tolerance_days, amount_tolerance):
                claimed.add(pos)
                matched.append(MatchedPair(statement=stmt_txn, ledger=ledger_txn))
                break
        else:
            missing_in_app.append(stmt_txn)

    missing_in_statement = [txn for pos, txn in enumerate(ledger_view) if pos not in claimed]
    logger.info(
        "Reconciled %d statement entries: %d matched, %d missing in app, %d missing in statement",
        len(statement),
        len(matched),
        len(missing_in_app),
        len(missing_in_statement),
    )
    return ReconciliationResult(
        matched=matched,
        missing_in_app=missing_in_app,
        missing_in_statement=missing_in_statement,
    )
