"""Statement normalizer.

Turns parsed statement rows into canonical transactions. Every per-row
failure is a silent skip; only a batch with no surviving rows is an error.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ledgerflow.domain.entities import (
    AccountCategory,
    BalanceEffect,
    CashFlowEffect,
    Direction,
    LiabilityEffect,
    Transaction,
    TransactionType,
)
from ledgerflow.domain.errors import NoUsableRowsError
from ledgerflow.domain.headers import ColumnMap, detect_columns
from ledgerflow.utils.amount_parser import is_blank, parse_amount, parse_optional_amount
from ledgerflow.utils.date_parser import parse_statement_date
from ledgerflow.utils.text import (
    UNSPECIFIED_DESCRIPTION,
    clean_description,
    contains_any,
    to_title_case,
)
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

PAYMENT_KEYWORDS = ("payment", "thank you", "autopay")
INTERNAL_TRANSFER_KEYWORDS = ("transfer", "allocate")

CREDIT_INDICATORS = ("credit", "cr")
DEBIT_INDICATORS = ("debit", "dr")

DEFAULT_CURRENCY = "USD"

# (is liability account, direction) -> (cash flow, liability)
SEMANTIC_EFFECTS: dict[tuple[bool, Direction], tuple[CashFlowEffect, LiabilityEffect]] = {
    (True, Direction.DEBIT): (CashFlowEffect.NONE, LiabilityEffect.INCREASE),
    (True, Direction.CREDIT): (CashFlowEffect.OUTFLOW, LiabilityEffect.DECREASE),
    (False, Direction.DEBIT): (CashFlowEffect.OUTFLOW, LiabilityEffect.NONE),
    (False, Direction.CREDIT): (CashFlowEffect.INFLOW, LiabilityEffect.NONE),
}


@dataclass(frozen=True)
class StatementSource:
    """Where a batch of rows came from and which account it belongs to."""

    account_id: int
    account_category: AccountCategory
    source_label: str
    currency: str = DEFAULT_CURRENCY
    user_id: Optional[str] = None


def derive_effects(
    category: AccountCategory, direction: Direction
) -> tuple[CashFlowEffect, LiabilityEffect]:
    """Look up cash-flow and liability effects for an account kind and direction."""
    return SEMANTIC_EFFECTS[(category.is_liability, direction)]


def default_type_id(
    transaction_types: Sequence[TransactionType], direction: Direction
) -> Optional[int]:
    """Pick the income type for credits and the expense type for debits.

    Falls back to the first available type, or None when there are none.
    """
    if not transaction_types:
        return None
    wanted = BalanceEffect.INCOME if direction is Direction.CREDIT else BalanceEffect.EXPENSE
    for txn_type in transaction_types:
        if txn_type.balance_effect is wanted:
            return txn_type.id
    return transaction_types[0].id


def _cell(row: Mapping[str, Any], header: Optional[str]) -> Any:
    if header is None:
        return None
    return row.get(header)


def _text_cell(row: Mapping[str, Any], header: Optional[str]) -> Optional[str]:
    value = _cell(row, header)
    if is_blank(value):
        return None
    return str(value).strip()


def _direction_from_indicator(indicator: Optional[str]) -> Optional[Direction]:
    if not indicator:
        return None
    lowered = indicator.strip().lower()
    if lowered in CREDIT_INDICATORS or "credit" in lowered:
        return Direction.CREDIT
    if lowered in DEBIT_INDICATORS or "debit" in lowered:
        return Direction.DEBIT
    return None


def resolve_amount(
    row: Mapping[str, Any], columns: ColumnMap
) -> tuple[Decimal, Direction]:
    """Extract magnitude and direction from a row.

    With separate debit/credit columns, whichever side is non-zero decides
    (credit is checked first). With one signed amount column a negative value
    (including "(12.34)") is a debit, unless a type indicator column says
    otherwise.

    Raises:
        ValueError: If the amount cells cannot be parsed
    """
    if columns.has_debit_credit:
        credit = abs(parse_optional_amount(_cell(row, columns.credit)))
        debit = abs(parse_optional_amount(_cell(row, columns.debit)))
        if credit != 0:
            return credit, Direction.CREDIT
        return debit, Direction.DEBIT

    if columns.amount is None:
        raise ValueError("No amount column")
    value = parse_amount(_cell(row, columns.amount))
    direction = _direction_from_indicator(_text_cell(row, columns.type_indicator))
    if direction is None:
        direction = Direction.DEBIT if value < 0 else Direction.CREDIT
    return abs(value), direction


def normalize_row(
    row: Mapping[str, Any],
    columns: ColumnMap,
    source: StatementSource,
    transaction_types: Sequence[TransactionType],
) -> Transaction:
    """Build one canonical transaction from a parsed row.

    Raises:
        ValueError: If the row has no usable date or a zero amount
    """
    txn_date = parse_statement_date(_cell(row, columns.date))
    amount, direction = resolve_amount(row, columns)
    if amount == 0:
        raise ValueError("Zero amount")

    raw_description = _text_cell(row, columns.description) or ""
    cleaned = clean_description(raw_description) or UNSPECIFIED_DESCRIPTION
    cash_flow, liability = derive_effects(source.account_category, direction)

    balance = None
    balance_cell = _cell(row, columns.balance)
    if not is_blank(balance_cell):
        try:
            balance = parse_amount(balance_cell)
        except ValueError:
            logger.debug("Ignoring unparseable balance %r", balance_cell)

    return Transaction(
        date=txn_date,
        amount=amount,
        direction=direction,
        description=to_title_case(cleaned),
        original_description=raw_description,
        account_id=source.account_id,
        type_id=default_type_id(transaction_types, direction),
        cash_flow=cash_flow,
        liability=liability,
        is_payment=contains_any(cleaned, PAYMENT_KEYWORDS),
        is_internal_transfer=contains_any(cleaned, INTERNAL_TRANSFER_KEYWORDS),
        memo=_text_cell(row, columns.memo),
        balance=balance,
        currency=source.currency,
        user_id=source.user_id,
        status=_text_cell(row, columns.status),
        source_label=source.source_label,
        original_row=dict(row),
    )


def normalize_rows(
    headers: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    source: StatementSource,
    transaction_types: Sequence[TransactionType],
) -> list[Transaction]:
    """Normalize a batch of parsed rows.

    Args:
        headers: Header row as it appears in the export
        rows: Rows keyed by header name
        source: Account and label the rows belong to
        transaction_types: Available types for the default type choice

    Returns:
        One canonical transaction per surviving row, in input order

    Raises:
        NoUsableRowsError: If no row survives
    """
    columns = detect_columns(headers)
    logger.debug("Resolved columns for '%s': %s", source.source_label, columns)

    transactions = []
    if columns.is_usable:
        for row_num, row in enumerate(rows, start=1):
            try:
                transactions.append(normalize_row(row, columns, source, transaction_types))
            except ValueError as e:
                logger.debug("Dropping row %d of '%s': %s", row_num, source.source_label, e)
    else:
        logger.debug("No date/amount columns found in headers %s", list(headers))

    if not transactions:
        raise NoUsableRowsError(source.source_label, len(rows))
    return transactions
