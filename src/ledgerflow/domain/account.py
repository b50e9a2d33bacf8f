"""Account domain service."""

from typing import Optional
from ledgerflow.database.base import Database
from ledgerflow.domain.entities import Account as AccountEntity, AccountCategory
from ledgerflow.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_name_exists,
    account_not_found,
)
from ledgerflow.domain.normalizer import DEFAULT_CURRENCY


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, name: str, category: AccountCategory | str, currency: str = DEFAULT_CURRENCY
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            category: Account category (checking, savings, cash, credit_card, loan)
            currency: ISO currency code

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the category is unknown
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        try:
            category = AccountCategory(category)
        except ValueError:
            choices = ", ".join(c.value for c in AccountCategory)
            raise ValidationError(f"Unknown account category '{category}'. Choose one of: {choices}")

        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(account_name_exists(name))

        return self.db.create_account(name=name, category=category, currency=currency.upper())

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising NotFoundError if it does not exist."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        return self.db.get_account_by_name(name)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()

    def account_names(self) -> dict[int, str]:
        """Account id to name lookup, as used by account-name rule conditions."""
        return {account.id: account.name for account in self.db.list_accounts()}
