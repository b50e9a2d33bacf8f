"""Rule condition values and single-condition evaluation.

Evaluation never raises: unknown fields, unknown operators and operators
applied to the wrong kind of value all evaluate to False.
"""

import re
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from ledgerflow.domain.entities import (
    Condition,
    ConditionValue,
    DateValue,
    FieldKind,
    NumberValue,
    Operator,
    RuleField,
    TextValue,
    Transaction,
)
from ledgerflow.utils.amount_parser import is_blank, parse_amount
from ledgerflow.utils.date_parser import parse_statement_date
from ledgerflow.utils.text import normalize_text
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

AMOUNT_TOLERANCE = Decimal("0.01")

_ALTERNATIVES_RE = re.compile(r"\s*\|\|\s*")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")

TEXT_OPERATORS = frozenset(
    {
        Operator.EQUALS,
        Operator.NOT_EQUALS,
        Operator.CONTAINS,
        Operator.DOES_NOT_CONTAIN,
        Operator.STARTS_WITH,
        Operator.ENDS_WITH,
        Operator.REGEX_MATCH,
    }
)
ORDERED_OPERATORS = frozenset(
    {
        Operator.EQUALS,
        Operator.NOT_EQUALS,
        Operator.GREATER_THAN,
        Operator.LESS_THAN,
        Operator.GREATER_OR_EQUAL,
        Operator.LESS_OR_EQUAL,
    }
)

_ID_FIELDS = {
    RuleField.CATEGORY_ID: "category_id",
    RuleField.PAYEE_ID: "payee_id",
    RuleField.TYPE_ID: "type_id",
}


def to_snake_case(name: str) -> str:
    """Turn 'lessThan' or 'accountId' into 'less_than' / 'account_id'."""
    return _CAMEL_BOUNDARY_RE.sub("_", name.strip()).lower()


def parse_field(name: str) -> Union[RuleField, str]:
    """Resolve a field name, keeping unknown names as plain strings."""
    try:
        return RuleField(to_snake_case(name))
    except ValueError:
        return name


def parse_operator(name: str) -> Union[Operator, str]:
    """Resolve an operator name, keeping unknown names as plain strings."""
    try:
        return Operator(to_snake_case(name))
    except ValueError:
        return name


def coerce_condition_value(field: Union[RuleField, str], raw: Any) -> ConditionValue:
    """Tag a raw condition value with the kind the field expects.

    Values that do not fit the field's kind stay text, which makes numeric
    and date operators on them evaluate False.
    """
    if isinstance(raw, (TextValue, NumberValue, DateValue)):
        return raw
    if isinstance(field, RuleField) and not is_blank(raw):
        if field.kind is FieldKind.NUMBER:
            try:
                return NumberValue(parse_amount(raw))
            except ValueError:
                pass
        elif field.kind is FieldKind.DATE:
            try:
                return DateValue(parse_statement_date(raw))
            except ValueError:
                pass
    return TextValue("" if raw is None else str(raw))


def value_to_text(value: ConditionValue) -> str:
    """Render a condition value for storage and display."""
    if isinstance(value, DateValue):
        return value.value.isoformat()
    return str(value.value)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Optional[re.Pattern]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning("Invalid regex in rule condition %r: %s", pattern, e)
        return None


def _check_text(operator: Operator, actual: str, expected: str) -> bool:
    if operator is Operator.REGEX_MATCH:
        compiled = _compile(expected.strip())
        return compiled is not None and compiled.search(actual) is not None

    norm_actual = normalize_text(actual)
    norm_expected = normalize_text(expected)
    if not norm_expected:
        return False

    if operator is Operator.CONTAINS:
        return norm_expected in norm_actual
    if operator is Operator.DOES_NOT_CONTAIN:
        return norm_expected not in norm_actual
    if operator is Operator.EQUALS:
        return norm_actual == norm_expected
    if operator is Operator.NOT_EQUALS:
        return norm_actual != norm_expected
    if operator is Operator.STARTS_WITH:
        return norm_actual.startswith(norm_expected)
    if operator is Operator.ENDS_WITH:
        return norm_actual.endswith(norm_expected)
    return False


def _check_text_alternatives(operator: Operator, actual: str, expected: str) -> bool:
    tokens = [t for t in _ALTERNATIVES_RE.split(expected) if t]
    if len(tokens) <= 1:
        return _check_text(operator, actual, expected)
    # Negative operators must hold for every alternative
    if operator in (Operator.DOES_NOT_CONTAIN, Operator.NOT_EQUALS):
        return all(_check_text(operator, actual, token) for token in tokens)
    return any(_check_text(operator, actual, token) for token in tokens)


def _check_ordered(operator: Operator, actual: Union[Decimal, date], expected: Union[Decimal, date]) -> bool:
    if operator is Operator.EQUALS:
        if isinstance(actual, Decimal):
            return abs(actual - expected) < AMOUNT_TOLERANCE
        return actual == expected
    if operator is Operator.NOT_EQUALS:
        if isinstance(actual, Decimal):
            return abs(actual - expected) >= AMOUNT_TOLERANCE
        return actual != expected
    if operator is Operator.GREATER_THAN:
        return actual > expected
    if operator is Operator.LESS_THAN:
        return actual < expected
    if operator is Operator.GREATER_OR_EQUAL:
        return actual >= expected
    if operator is Operator.LESS_OR_EQUAL:
        return actual <= expected
    return False


def field_value(txn: Transaction, field: RuleField) -> Any:
    """Read the raw value a rule field refers to."""
    if field is RuleField.DIRECTION:
        return txn.direction.value
    return getattr(txn, field.value)


def _text_of(value: Any) -> str:
    return "" if value is None else str(value)


def evaluate_condition(
    txn: Transaction,
    condition: Condition,
    account_names: Optional[Mapping[int, str]] = None,
) -> bool:
    """Evaluate one condition against a transaction.

    Args:
        txn: Transaction under test
        condition: Condition to evaluate
        account_names: Optional account id -> name lookup, used when an
            account condition uses a text operator other than equality

    Returns:
        True if the condition holds
    """
    field, operator, value = condition.field, condition.operator, condition.value
    if not isinstance(field, RuleField) or not isinstance(operator, Operator):
        return False

    actual = field_value(txn, field)

    if operator is Operator.EXISTS:
        return not is_blank(actual)

    if field.kind is FieldKind.NUMBER:
        if not isinstance(value, NumberValue) or actual is None:
            return False
        if operator not in ORDERED_OPERATORS:
            return False
        return _check_ordered(operator, actual, value.value)

    if field.kind is FieldKind.DATE:
        if not isinstance(value, DateValue) or operator not in ORDERED_OPERATORS:
            return False
        return _check_ordered(operator, actual, value.value)

    if not isinstance(value, TextValue) or operator not in TEXT_OPERATORS:
        return False

    if field is RuleField.ACCOUNT_ID:
        if operator is Operator.EQUALS:
            return _text_of(actual) == value.value.strip()
        if operator is Operator.NOT_EQUALS:
            return _text_of(actual) != value.value.strip()
        name = (account_names or {}).get(actual, "")
        return _check_text_alternatives(operator, name, value.value)

    if field in _ID_FIELDS:
        if operator is Operator.EQUALS:
            return _text_of(actual) == value.value.strip()
        if operator is Operator.NOT_EQUALS:
            return _text_of(actual) != value.value.strip()
        return False

    return _check_text_alternatives(operator, _text_of(actual), value.value)
