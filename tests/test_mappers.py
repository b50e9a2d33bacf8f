"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerflow.database.models import (
    Account as ORMAccount,
    Rule as ORMRule,
    RuleCondition as ORMRuleCondition,
    Transaction as ORMTransaction,
    TransactionType as ORMTransactionType,
)
from ledgerflow.database.mappers import (
    account_to_domain,
    condition_to_domain,
    condition_to_orm,
    rule_to_domain,
    transaction_to_domain,
    transaction_to_orm,
    transaction_type_to_domain,
)
from ledgerflow.domain.entities import (
    Account,
    AccountCategory,
    BalanceEffect,
    Condition,
    Connector,
    DateValue,
    Direction,
    NumberValue,
    Operator,
    RuleField,
    TextValue,
    Transaction,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        orm_account = ORMAccount(
            id=1,
            name="Everyday Checking",
            category="checking",
            currency="USD",
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.id == 1
        assert domain_account.name == "Everyday Checking"
        assert domain_account.category is AccountCategory.CHECKING
        assert domain_account.created_at == orm_account.created_at

    def test_transaction_type_to_domain(self):
        orm_type = ORMTransactionType(id=2, name="Expense", balance_effect="expense")
        domain_type = transaction_type_to_domain(orm_type)

        assert domain_type.name == "Expense"
        assert domain_type.balance_effect is BalanceEffect.EXPENSE


class TestConditionMapper:
    """Tests for rule condition mappers."""

    def test_number_condition_round_trip(self):
        condition = Condition(
            id=None,
            field=RuleField.AMOUNT,
            operator=Operator.LESS_THAN,
            value=NumberValue(Decimal("20.00")),
            next_logic=Connector.OR,
        )
        orm_condition = condition_to_orm(condition, 3)

        assert orm_condition.position == 3
        assert orm_condition.field == "amount"
        assert orm_condition.operator == "less_than"
        assert orm_condition.value == "20.00"
        assert orm_condition.value_kind == "number"
        assert orm_condition.next_logic == "OR"

        orm_condition.id = 7
        restored = condition_to_domain(orm_condition)
        assert restored == Condition(
            id=7,
            field=RuleField.AMOUNT,
            operator=Operator.LESS_THAN,
            value=NumberValue(Decimal("20.00")),
            next_logic=Connector.OR,
        )

    def test_date_condition_value(self):
        orm_condition = ORMRuleCondition(
            id=1,
            position=0,
            field="date",
            operator="greater_than",
            value="2024-01-31",
            value_kind="date",
            next_logic="AND",
        )
        condition = condition_to_domain(orm_condition)

        assert condition.value == DateValue(date(2024, 1, 31))

    def test_unknown_field_and_operator_kept_as_text(self):
        orm_condition = ORMRuleCondition(
            id=1,
            position=0,
            field="merchantCode",
            operator="soundsLike",
            value="abc",
            value_kind="text",
            next_logic="AND",
        )
        condition = condition_to_domain(orm_condition)

        assert condition.field == "merchantCode"
        assert condition.operator == "soundsLike"
        assert condition.value == TextValue("abc")

    def test_rule_to_domain_keeps_condition_order(self):
        orm_rule = ORMRule(
            id=4,
            name="Coffee",
            scope="Rewards Visa",
            position=1,
            set_category_id=2,
            skip_import=False,
            conditions=[
                ORMRuleCondition(
                    id=10, position=0, field="description", operator="contains",
                    value="starbucks", value_kind="text", next_logic="OR",
                ),
                ORMRuleCondition(
                    id=11, position=1, field="description", operator="contains",
                    value="peets", value_kind="text", next_logic="AND",
                ),
            ],
        )
        rule = rule_to_domain(orm_rule)

        assert rule.id == 4
        assert rule.scope == "Rewards Visa"
        assert rule.set_category_id == 2
        assert [c.value.value for c in rule.conditions] == ["starbucks", "peets"]
        assert rule.conditions[0].next_logic is Connector.OR


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def _transaction(self, **overrides):
        values = dict(
            id="abc123",
            date=date(2024, 3, 15),
            amount=Decimal("12.50"),
            direction=Direction.DEBIT,
            description="Starbucks",
            original_description="STARBUCKS #1234",
            account_id=1,
            original_row={"Date": "03/15/2024", "Amount": Decimal("-12.50")},
        )
        values.update(overrides)
        return Transaction(**values)

    def test_transaction_to_orm_requires_id(self):
        with pytest.raises(ValueError, match="ID"):
            transaction_to_orm(self._transaction(id=None))

    def test_transaction_to_orm_makes_original_row_json_safe(self):
        orm_transaction = transaction_to_orm(self._transaction())

        assert orm_transaction.id == "abc123"
        assert orm_transaction.direction == "debit"
        assert orm_transaction.original_row == {"Date": "03/15/2024", "Amount": "-12.50"}

    def test_transaction_to_domain(self):
        orm_transaction = transaction_to_orm(self._transaction())
        orm_transaction.cash_flow = "outflow"
        orm_transaction.liability = "none"
        orm_transaction.is_payment = False
        orm_transaction.is_internal_transfer = False
        orm_transaction.currency = "USD"

        domain_transaction = transaction_to_domain(orm_transaction)

        assert domain_transaction.id == "abc123"
        assert domain_transaction.direction is Direction.DEBIT
        assert domain_transaction.amount == Decimal("12.50")
        assert domain_transaction.original_description == "STARBUCKS #1234"
