"""Shared pytest fixtures for ledgerflow tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from ledgerflow.database.factories import create_sqlite_database
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.entities import (
    AccountCategory,
    BalanceEffect,
    Direction,
    Transaction,
    TransactionType,
)
from ledgerflow.domain.import_service import ImportService
from ledgerflow.domain.lookups import CategoryService, PayeeService, TransactionTypeService
from ledgerflow.domain.reconcile_service import ReconciliationService
from ledgerflow.domain.rule_service import RuleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def type_service(temp_db):
    return TransactionTypeService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def payee_service(temp_db):
    return PayeeService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    return RuleService(temp_db)


@pytest.fixture
def import_service(temp_db):
    return ImportService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    return ReconciliationService(temp_db)


@pytest.fixture
def default_types(type_service):
    """Seed Income/Expense/Transfer and return them in creation order."""
    type_service.init_defaults()
    return type_service.list_types()


@pytest.fixture
def checking_account(account_service, default_types):
    """A checking account with the default transaction types in place."""
    account_id = account_service.create_account("Everyday Checking", AccountCategory.CHECKING)
    return account_service.get_account(account_id)


@pytest.fixture
def card_account(account_service, default_types):
    account_id = account_service.create_account("Rewards Visa", AccountCategory.CREDIT_CARD)
    return account_service.get_account(account_id)


@pytest.fixture
def transaction_types():
    """In-memory transaction types for pure pipeline tests."""
    return [
        TransactionType(id=1, name="Income", balance_effect=BalanceEffect.INCOME),
        TransactionType(id=2, name="Expense", balance_effect=BalanceEffect.EXPENSE),
        TransactionType(id=3, name="Transfer", balance_effect=BalanceEffect.TRANSFER),
    ]


@pytest.fixture
def make_transaction():
    """Factory for canonical transactions with sensible defaults."""

    def _make(**overrides) -> Transaction:
        values = {
            "date": date(2024, 3, 15),
            "amount": Decimal("45.99"),
            "direction": Direction.DEBIT,
            "description": "Whole Foods #123",
            "original_description": "POS DEBIT - WHOLE FOODS #123",
            "account_id": 1,
            "type_id": 2,
            "user_id": "default",
        }
        values.update(overrides)
        return Transaction(**values)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
