"""SQLAlchemy models for the ledgerflow database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    category = Column(String, nullable=False)
    currency = Column(String, nullable=False, default="USD")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    transactions = relationship("Transaction", back_populates="account")


class TransactionType(Base):
    """Transaction type model."""

    __tablename__ = "transaction_types"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    balance_effect = Column(String, nullable=False)


class Category(Base):
    """Category lookup model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)


class Payee(Base):
    """Payee lookup model."""

    __tablename__ = "payees"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)


class Rule(Base):
    """Classification rule model. ``position`` is the evaluation order."""

    __tablename__ = "rules"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    scope = Column(String, nullable=True)
    position = Column(Integer, nullable=False)
    set_category_id = Column(Integer, nullable=True)
    set_payee_id = Column(Integer, nullable=True)
    set_type_id = Column(Integer, nullable=True)
    set_description = Column(String, nullable=True)
    skip_import = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    conditions = relationship(
        "RuleCondition",
        back_populates="rule",
        cascade="all, delete-orphan",
        order_by="RuleCondition.position",
    )


class RuleCondition(Base):
    """One condition in a rule's chain.

    Field and operator are stored as given so unknown names survive a
    round trip; ``value_kind`` records how ``value`` was tagged.
    """

    __tablename__ = "rule_conditions"

    id = Column(Integer, primary_key=True)
    rule_id = Column(Integer, ForeignKey("rules.id"), nullable=False)
    position = Column(Integer, nullable=False)
    field = Column(String, nullable=False)
    operator = Column(String, nullable=False)
    value = Column(String, nullable=False, default="")
    value_kind = Column(String, nullable=False, default="text")
    next_logic = Column(String, nullable=False, default="AND")

    rule = relationship("Rule", back_populates="conditions")


class Transaction(Base):
    """Ledger transaction model. The primary key is the signature ID."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    user_id = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    direction = Column(String, nullable=False)
    description = Column(String, nullable=False)
    original_description = Column(String, nullable=False, default="")
    type_id = Column(Integer, ForeignKey("transaction_types.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    payee_id = Column(Integer, ForeignKey("payees.id"), nullable=True)
    cash_flow = Column(String, nullable=False, default="none")
    liability = Column(String, nullable=False, default="none")
    is_payment = Column(Boolean, default=False, nullable=False)
    is_internal_transfer = Column(Boolean, default=False, nullable=False)
    memo = Column(String, nullable=True)
    balance = Column(Numeric(12, 2), nullable=True)
    currency = Column(String, nullable=False, default="USD")
    status = Column(String, nullable=True)
    source_label = Column(String, nullable=True)
    original_row = Column(JSON, nullable=True)
    applied_rule_id = Column(Integer, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    account = relationship("Account", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
