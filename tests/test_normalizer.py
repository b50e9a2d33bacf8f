"""Tests for the statement normalizer."""

import pytest
from datetime import date
from decimal import Decimal

from ledgerflow.domain.entities import (
    AccountCategory,
    CashFlowEffect,
    Direction,
    LiabilityEffect,
)
from ledgerflow.domain.errors import NoUsableRowsError
from ledgerflow.domain.normalizer import (
    StatementSource,
    default_type_id,
    derive_effects,
    normalize_rows,
)
from ledgerflow.domain.signatures import transaction_id

CHECKING = StatementSource(
    account_id=1,
    account_category=AccountCategory.CHECKING,
    source_label="checking.csv",
    user_id="default",
)
CARD = StatementSource(
    account_id=2,
    account_category=AccountCategory.CREDIT_CARD,
    source_label="card.csv",
    user_id="default",
)

DEBIT_CREDIT_HEADERS = ["Date", "Description", "Debit", "Credit"]


def test_checking_debit_row(transaction_types):
    """A POS debit on a checking account is a cleaned cash outflow."""
    rows = [{"Date": "03/15/24", "Description": "POS DEBIT - WHOLE FOODS #123", "Debit": "45.99", "Credit": ""}]

    [txn] = normalize_rows(DEBIT_CREDIT_HEADERS, rows, CHECKING, transaction_types)

    assert txn.date == date(2024, 3, 15)
    assert txn.amount == Decimal("45.99")
    assert txn.direction is Direction.DEBIT
    assert txn.cash_flow is CashFlowEffect.OUTFLOW
    assert txn.liability is LiabilityEffect.NONE
    assert txn.description == "Whole Foods #123"
    assert txn.original_description == "POS DEBIT - WHOLE FOODS #123"
    assert txn.type_id == 2
    assert txn.account_id == 1
    assert txn.source_label == "checking.csv"
    assert txn.original_row == rows[0]
    assert txn.id is None


def test_credit_card_payment_row(transaction_types):
    """A credit on a card account pays the card down."""
    rows = [{"Date": "2024-03-05", "Description": "PAYMENT THANK YOU", "Debit": "", "Credit": "200.00"}]

    [txn] = normalize_rows(DEBIT_CREDIT_HEADERS, rows, CARD, transaction_types)

    assert txn.direction is Direction.CREDIT
    assert txn.amount == Decimal("200.00")
    assert txn.liability is LiabilityEffect.DECREASE
    assert txn.cash_flow is CashFlowEffect.OUTFLOW
    assert txn.is_payment
    assert txn.type_id == 1


def test_signed_amount_column(transaction_types):
    headers = ["Date", "Merchant", "Amount"]
    rows = [
        {"Date": "2024-03-02", "Merchant": "AMAZON MKTP US", "Amount": "(64.20)"},
        {"Date": "2024-03-03", "Merchant": "REFUND", "Amount": "12.00"},
    ]

    charge, refund = normalize_rows(headers, rows, CARD, transaction_types)

    assert charge.direction is Direction.DEBIT
    assert charge.amount == Decimal("64.20")
    assert charge.liability is LiabilityEffect.INCREASE
    assert charge.cash_flow is CashFlowEffect.NONE
    assert refund.direction is Direction.CREDIT


def test_debit_credit_indicator_column_sets_direction(transaction_types):
    headers = ["Date", "Description", "Amount", "Debit/Credit"]
    rows = [
        {"Date": "2024-03-02", "Description": "COFFEE", "Amount": "4.50", "Debit/Credit": "Debit"},
        {"Date": "2024-03-03", "Description": "REFUND", "Amount": "4.50", "Debit/Credit": "Credit"},
    ]

    coffee, refund = normalize_rows(headers, rows, CHECKING, transaction_types)

    assert coffee.direction is Direction.DEBIT
    assert coffee.cash_flow is CashFlowEffect.OUTFLOW
    assert coffee.type_id == 2
    assert refund.direction is Direction.CREDIT
    assert refund.type_id == 1


def test_type_indicator_overrides_sign(transaction_types):
    headers = ["Date", "Description", "Amount", "Type"]
    rows = [{"Date": "2024-03-02", "Description": "INTEREST", "Amount": "1.25", "Type": "DR"}]

    [txn] = normalize_rows(headers, rows, CHECKING, transaction_types)

    assert txn.direction is Direction.DEBIT
    assert txn.amount == Decimal("1.25")


def test_memo_balance_and_status_are_carried(transaction_types):
    headers = ["Date", "Description", "Amount", "Balance", "Status", "Memo"]
    rows = [
        {
            "Date": "2024-03-02",
            "Description": "ONLINE TRANSFER TO SAVINGS",
            "Amount": "-500",
            "Balance": "$1,000.00",
            "Status": "Posted",
            "Memo": "monthly",
        }
    ]

    [txn] = normalize_rows(headers, rows, CHECKING, transaction_types)

    assert txn.balance == Decimal("1000.00")
    assert txn.status == "Posted"
    assert txn.memo == "monthly"
    assert txn.is_internal_transfer
    assert not txn.is_payment
    assert txn.type_id == 2


def test_bad_rows_are_dropped(transaction_types):
    """Unparseable dates and zero amounts drop the row, not the batch."""
    rows = [
        {"Date": "not a date", "Description": "BROKEN", "Debit": "10.00", "Credit": ""},
        {"Date": "03/19/24", "Description": "ZERO", "Debit": "0.00", "Credit": ""},
        {"Date": "03/19/24", "Description": "BAD AMOUNT", "Debit": "abc", "Credit": ""},
        {"Date": "03/20/24", "Description": "COFFEE", "Debit": "3.50", "Credit": ""},
    ]

    transactions = normalize_rows(DEBIT_CREDIT_HEADERS, rows, CHECKING, transaction_types)

    assert [t.description for t in transactions] == ["Coffee"]


def test_empty_description_falls_back(transaction_types):
    rows = [{"Date": "03/20/24", "Description": "", "Debit": "3.50", "Credit": ""}]
    [txn] = normalize_rows(DEBIT_CREDIT_HEADERS, rows, CHECKING, transaction_types)
    assert txn.description == "Unspecified"


def test_no_surviving_rows_raises(transaction_types):
    rows = [{"Date": "garbage", "Description": "X", "Debit": "1.00", "Credit": ""}]
    with pytest.raises(NoUsableRowsError) as exc_info:
        normalize_rows(DEBIT_CREDIT_HEADERS, rows, CHECKING, transaction_types)
    assert exc_info.value.row_count == 1
    assert exc_info.value.source_label == "checking.csv"


def test_unusable_headers_raise(transaction_types):
    with pytest.raises(NoUsableRowsError):
        normalize_rows(["Foo", "Bar"], [{"Foo": "1", "Bar": "2"}], CHECKING, transaction_types)


def test_normalization_is_deterministic(transaction_types):
    rows = [
        {"Date": "03/15/24", "Description": "POS DEBIT - WHOLE FOODS #123", "Debit": "45.99", "Credit": ""},
        {"Date": "03/16/24", "Description": "PAYROLL", "Debit": "", "Credit": "2500.00"},
    ]

    first = normalize_rows(DEBIT_CREDIT_HEADERS, rows, CHECKING, transaction_types)
    second = normalize_rows(DEBIT_CREDIT_HEADERS, rows, CHECKING, transaction_types)

    assert first == second
    assert [transaction_id(t) for t in first] == [transaction_id(t) for t in second]


def test_derive_effects_table():
    assert derive_effects(AccountCategory.SAVINGS, Direction.CREDIT) == (
        CashFlowEffect.INFLOW,
        LiabilityEffect.NONE,
    )
    assert derive_effects(AccountCategory.LOAN, Direction.DEBIT) == (
        CashFlowEffect.NONE,
        LiabilityEffect.INCREASE,
    )


def test_default_type_id_fallbacks(transaction_types):
    assert default_type_id([], Direction.DEBIT) is None
    transfer_only = [transaction_types[2]]
    assert default_type_id(transfer_only, Direction.CREDIT) == 3
