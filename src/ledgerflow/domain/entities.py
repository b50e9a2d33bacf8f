"""Domain model entities for ledgerflow.

These are pure data classes representing business concepts, independent of
database schema. Pipeline stages never mutate them; they derive updated
copies with ``dataclasses.replace``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union


class Direction(str, Enum):
    """Polarity of a transaction as seen by the statement issuer."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "Direction":
        return Direction.CREDIT if self is Direction.DEBIT else Direction.DEBIT


class AccountCategory(str, Enum):
    """Kind of account a statement belongs to."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    LOAN = "loan"

    @property
    def is_liability(self) -> bool:
        return self in (AccountCategory.CREDIT_CARD, AccountCategory.LOAN)


class CashFlowEffect(str, Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"
    NONE = "none"


class LiabilityEffect(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    NONE = "none"


class BalanceEffect(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class ConflictType(str, Enum):
    """Why a staged transaction might not need importing."""

    NONE = "none"
    BATCH = "batch"
    DATABASE = "database"
    REVERSAL = "reversal"


class Connector(str, Enum):
    """Logic joining a condition to the next one in the same rule."""

    AND = "AND"
    OR = "OR"


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


class RuleField(str, Enum):
    """Transaction fields a rule condition may reference."""

    DESCRIPTION = "description"
    ORIGINAL_DESCRIPTION = "original_description"
    MEMO = "memo"
    AMOUNT = "amount"
    BALANCE = "balance"
    DATE = "date"
    DIRECTION = "direction"
    ACCOUNT_ID = "account_id"
    CATEGORY_ID = "category_id"
    PAYEE_ID = "payee_id"
    TYPE_ID = "type_id"
    SOURCE_LABEL = "source_label"
    STATUS = "status"

    @property
    def kind(self) -> FieldKind:
        if self in (RuleField.AMOUNT, RuleField.BALANCE):
            return FieldKind.NUMBER
        if self is RuleField.DATE:
            return FieldKind.DATE
        return FieldKind.TEXT


class Operator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    REGEX_MATCH = "regex_match"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_OR_EQUAL = "greater_or_equal"
    LESS_OR_EQUAL = "less_or_equal"
    EXISTS = "exists"


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    name: str
    category: AccountCategory
    currency: str
    created_at: datetime


@dataclass(frozen=True)
class TransactionType:
    """Transaction type with the balance effect it represents."""

    id: int
    name: str
    balance_effect: BalanceEffect


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str


@dataclass(frozen=True)
class Payee:
    """Payee domain entity."""

    id: int
    name: str


@dataclass(frozen=True)
class Transaction:
    """Canonical transaction.

    Used both for staged records (``id`` is None) and for ledger records
    (``id`` is the strict-signature ID assigned by merge). ``amount`` is the
    magnitude and is never negative; ``direction`` carries the sign.
    """

    date: date
    amount: Decimal
    direction: Direction
    description: str
    original_description: str
    account_id: int
    type_id: Optional[int] = None
    category_id: Optional[int] = None
    payee_id: Optional[int] = None
    cash_flow: CashFlowEffect = CashFlowEffect.NONE
    liability: LiabilityEffect = LiabilityEffect.NONE
    is_payment: bool = False
    is_internal_transfer: bool = False
    memo: Optional[str] = None
    balance: Optional[Decimal] = None
    currency: str = "USD"
    user_id: Optional[str] = None
    status: Optional[str] = None
    source_label: Optional[str] = None
    original_row: Mapping[str, Any] = field(default_factory=dict, compare=False)
    applied_rule_id: Optional[Union[int, str]] = None
    skip_import: bool = False
    id: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with debits negative, for display."""
        return -self.amount if self.direction is Direction.DEBIT else self.amount


@dataclass(frozen=True)
class TextValue:
    value: str


@dataclass(frozen=True)
class NumberValue:
    value: Decimal


@dataclass(frozen=True)
class DateValue:
    value: date


ConditionValue = Union[TextValue, NumberValue, DateValue]


@dataclass(frozen=True)
class Condition:
    """One test in a rule's condition chain.

    ``next_logic`` joins this condition to the *next* one; it is ignored on
    the last condition. ``field`` and ``operator`` keep the raw string when
    a stored rule names something unknown; such conditions never match.
    """

    id: Optional[int]
    field: Union[RuleField, str]
    operator: Union[Operator, str]
    value: ConditionValue
    next_logic: Connector = Connector.AND


@dataclass(frozen=True)
class Rule:
    """Classification rule. Actions left as None are not applied.

    ``id`` is the stored rule ID, or whatever ID an external definition
    carried (rule definitions from other tools often use string IDs).
    """

    id: Optional[Union[int, str]]
    name: str
    conditions: tuple[Condition, ...] = ()
    scope: Optional[str] = None
    set_category_id: Optional[int] = None
    set_payee_id: Optional[int] = None
    set_type_id: Optional[int] = None
    set_description: Optional[str] = None
    skip_import: bool = False

    @property
    def has_actions(self) -> bool:
        return (
            self.set_category_id is not None
            or self.set_payee_id is not None
            or self.set_type_id is not None
            or bool(self.set_description)
            or self.skip_import
        )


@dataclass(frozen=True)
class DuplicatePair:
    """A rejected new record and the ledger record it collided with."""

    new: Transaction
    existing: Transaction
