"""Abstract database interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence
from datetime import date

# domain/__init__.py imports the services, which import this module
if TYPE_CHECKING:
    from ledgerflow.domain.entities import (
        Account,
        AccountCategory,
        BalanceEffect,
        Category,
        Payee,
        Rule,
        Transaction,
        TransactionType,
    )


class Database(ABC):
    """Abstract database interface for ledgerflow.

    The pipeline itself never talks to a database; this interface is how
    the surrounding application loads snapshots and persists merge results.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, category: AccountCategory, currency: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Lookup tables
    @abstractmethod
    def create_transaction_type(self, name: str, balance_effect: BalanceEffect) -> int:
        """Create a transaction type. Returns type ID."""
        pass

    @abstractmethod
    def list_transaction_types(self) -> list[TransactionType]:
        """List transaction types in creation order."""
        pass

    @abstractmethod
    def create_category(self, name: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List categories by name."""
        pass

    @abstractmethod
    def create_payee(self, name: str) -> int:
        """Create a payee. Returns payee ID."""
        pass

    @abstractmethod
    def list_payees(self) -> list[Payee]:
        """List payees by name."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(self, rule: Rule) -> int:
        """Store a rule after all existing ones. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self) -> list[Rule]:
        """List rules in evaluation order."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule and its conditions."""
        pass

    @abstractmethod
    def move_rule(self, rule_id: int, position: int) -> None:
        """Move a rule to a 1-based position in the evaluation order."""
        pass

    # Transaction operations
    @abstractmethod
    def add_transactions(self, transactions: Sequence[Transaction]) -> int:
        """Insert merged transactions in one commit. Returns count inserted."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List ledger transactions, newest first, with optional filters."""
        pass
