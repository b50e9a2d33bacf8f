"""Services for the lookup tables: transaction types, categories and payees."""

from ledgerflow.database.base import Database
from ledgerflow.domain.entities import BalanceEffect, Category, Payee, TransactionType
from ledgerflow.domain.errors import ConflictError, ValidationError

# Seeded by ``ledgerflow type init``. Order matters: the normalizer's default
# type choice looks for the first income and the first expense type.
DEFAULT_TRANSACTION_TYPES = (
    ("Income", BalanceEffect.INCOME),
    ("Expense", BalanceEffect.EXPENSE),
    ("Transfer", BalanceEffect.TRANSFER),
)


def _clean_name(kind: str, name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError(f"{kind} name cannot be empty")
    return name


class TransactionTypeService:
    """Service for managing transaction types."""

    def __init__(self, db: Database):
        self.db = db

    def create_type(self, name: str, balance_effect: BalanceEffect | str) -> int:
        """Create a transaction type.

        Raises:
            ValidationError: If the name is empty or the balance effect unknown
            ConflictError: If a type with that name exists
        """
        name = _clean_name("Transaction type", name)
        try:
            balance_effect = BalanceEffect(balance_effect)
        except ValueError:
            raise ValidationError(f"Unknown balance effect '{balance_effect}'")
        if any(t.name.lower() == name.lower() for t in self.db.list_transaction_types()):
            raise ConflictError(f"Transaction type '{name}' already exists")
        return self.db.create_transaction_type(name, balance_effect)

    def init_defaults(self) -> list[str]:
        """Create the default types that are not already present.

        Returns:
            Names of the types that were created
        """
        existing = {t.name.lower() for t in self.db.list_transaction_types()}
        created = []
        for name, effect in DEFAULT_TRANSACTION_TYPES:
            if name.lower() not in existing:
                self.db.create_transaction_type(name, effect)
                created.append(name)
        return created

    def list_types(self) -> list[TransactionType]:
        return self.db.list_transaction_types()


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        self.db = db

    def create_category(self, name: str) -> int:
        """Create a category.

        Raises:
            ConflictError: If a category with that name exists
        """
        name = _clean_name("Category", name)
        if any(c.name.lower() == name.lower() for c in self.db.list_categories()):
            raise ConflictError(f"Category '{name}' already exists")
        return self.db.create_category(name)

    def list_categories(self) -> list[Category]:
        return self.db.list_categories()


class PayeeService:
    """Service for managing payees."""

    def __init__(self, db: Database):
        self.db = db

    def create_payee(self, name: str) -> int:
        """Create a payee.

        Raises:
            ConflictError: If a payee with that name exists
        """
        name = _clean_name("Payee", name)
        if any(p.name.lower() == name.lower() for p in self.db.list_payees()):
            raise ConflictError(f"Payee '{name}' already exists")
        return self.db.create_payee(name)

    def list_payees(self) -> list[Payee]:
        return self.db.list_payees()
