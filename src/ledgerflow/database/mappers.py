"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic from both the pipeline and the
schema.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping

from ledgerflow.domain import entities as domain
from ledgerflow.domain.conditions import parse_field, parse_operator, value_to_text
from ledgerflow.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Payee as ORMPayee,
    Rule as ORMRule,
    RuleCondition as ORMRuleCondition,
    Transaction as ORMTransaction,
    TransactionType as ORMTransactionType,
)

_JSON_SCALARS = (str, int, float, bool, type(None))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        category=domain.AccountCategory(orm_account.category),
        currency=orm_account.currency,
        created_at=orm_account.created_at,
    )


def transaction_type_to_domain(orm_type: ORMTransactionType) -> domain.TransactionType:
    """Convert SQLAlchemy TransactionType model to domain entity."""
    return domain.TransactionType(
        id=orm_type.id,
        name=orm_type.name,
        balance_effect=domain.BalanceEffect(orm_type.balance_effect),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    return domain.Category(id=orm_category.id, name=orm_category.name)


def payee_to_domain(orm_payee: ORMPayee) -> domain.Payee:
    return domain.Payee(id=orm_payee.id, name=orm_payee.name)


def _condition_value_from_orm(orm_condition: ORMRuleCondition) -> domain.ConditionValue:
    if orm_condition.value_kind == domain.FieldKind.NUMBER.value:
        return domain.NumberValue(Decimal(orm_condition.value))
    if orm_condition.value_kind == domain.FieldKind.DATE.value:
        return domain.DateValue(date.fromisoformat(orm_condition.value))
    return domain.TextValue(orm_condition.value)


def _value_kind(value: domain.ConditionValue) -> str:
    if isinstance(value, domain.NumberValue):
        return domain.FieldKind.NUMBER.value
    if isinstance(value, domain.DateValue):
        return domain.FieldKind.DATE.value
    return domain.FieldKind.TEXT.value


def condition_to_domain(orm_condition: ORMRuleCondition) -> domain.Condition:
    """Convert a stored condition, keeping unknown field/operator names."""
    return domain.Condition(
        id=orm_condition.id,
        field=parse_field(orm_condition.field),
        operator=parse_operator(orm_condition.operator),
        value=_condition_value_from_orm(orm_condition),
        next_logic=domain.Connector(orm_condition.next_logic),
    )


def condition_to_orm(condition: domain.Condition, position: int) -> ORMRuleCondition:
    """Build an ORM condition from a domain condition."""
    return ORMRuleCondition(
        position=position,
        field=getattr(condition.field, "value", condition.field),
        operator=getattr(condition.operator, "value", condition.operator),
        value=value_to_text(condition.value),
        value_kind=_value_kind(condition.value),
        next_logic=condition.next_logic.value,
    )


def rule_to_domain(orm_rule: ORMRule) -> domain.Rule:
    """Convert SQLAlchemy Rule model (with conditions) to domain Rule."""
    return domain.Rule(
        id=orm_rule.id,
        name=orm_rule.name,
        conditions=tuple(condition_to_domain(c) for c in orm_rule.conditions),
        scope=orm_rule.scope,
        set_category_id=orm_rule.set_category_id,
        set_payee_id=orm_rule.set_payee_id,
        set_type_id=orm_rule.set_type_id,
        set_description=orm_rule.set_description,
        skip_import=orm_rule.skip_import,
    )


def _json_safe(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        str(key): value if isinstance(value, _JSON_SCALARS) else str(value)
        for key, value in row.items()
    }


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        direction=domain.Direction(orm_transaction.direction),
        description=orm_transaction.description,
        original_description=orm_transaction.original_description,
        account_id=orm_transaction.account_id,
        type_id=orm_transaction.type_id,
        category_id=orm_transaction.category_id,
        payee_id=orm_transaction.payee_id,
        cash_flow=domain.CashFlowEffect(orm_transaction.cash_flow),
        liability=domain.LiabilityEffect(orm_transaction.liability),
        is_payment=orm_transaction.is_payment,
        is_internal_transfer=orm_transaction.is_internal_transfer,
        memo=orm_transaction.memo,
        balance=orm_transaction.balance,
        currency=orm_transaction.currency,
        user_id=orm_transaction.user_id,
        status=orm_transaction.status,
        source_label=orm_transaction.source_label,
        original_row=orm_transaction.original_row or {},
        applied_rule_id=orm_transaction.applied_rule_id,
    )


def transaction_to_orm(txn: domain.Transaction) -> ORMTransaction:
    """Build an ORM row from a merged domain transaction (``id`` must be set)."""
    if txn.id is None:
        raise ValueError("Only merged transactions with an ID can be persisted")
    return ORMTransaction(
        id=txn.id,
        account_id=txn.account_id,
        user_id=txn.user_id,
        date=txn.date,
        amount=txn.amount,
        direction=txn.direction.value,
        description=txn.description,
        original_description=txn.original_description,
        type_id=txn.type_id,
        category_id=txn.category_id,
        payee_id=txn.payee_id,
        cash_flow=txn.cash_flow.value,
        liability=txn.liability.value,
        is_payment=txn.is_payment,
        is_internal_transfer=txn.is_internal_transfer,
        memo=txn.memo,
        balance=txn.balance,
        currency=txn.currency,
        status=txn.status,
        source_label=txn.source_label,
        original_row=_json_safe(txn.original_row),
        applied_rule_id=txn.applied_rule_id,
    )
