"""Classification rule engine.

Rules are evaluated in stored order and the first rule whose condition
chain holds is the only one applied to a transaction.
"""

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ledgerflow.domain.conditions import (
    coerce_condition_value,
    evaluate_condition,
    parse_field,
    parse_operator,
)
from ledgerflow.domain.entities import Condition, Connector, Rule, Transaction
from ledgerflow.domain.errors import ValidationError, invalid_rule
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

GLOBAL_SCOPE = "global"


def evaluate_chain(
    txn: Transaction,
    conditions: Sequence[Condition],
    account_names: Optional[Mapping[int, str]] = None,
) -> bool:
    """Evaluate a condition chain strictly left to right.

    Each condition's ``next_logic`` joins the running result to the next
    condition, with no precedence between AND and OR: ``A OR B AND C`` is
    ``(A OR B) AND C``. An empty chain holds.
    """
    if not conditions:
        return True

    result = evaluate_condition(txn, conditions[0], account_names)
    for current, following in zip(conditions, conditions[1:]):
        if current.next_logic is Connector.OR:
            result = result or evaluate_condition(txn, following, account_names)
        else:
            result = result and evaluate_condition(txn, following, account_names)
    return result


def rule_in_scope(rule: Rule, txn: Transaction) -> bool:
    """Return True if the rule's scope covers the transaction's account."""
    scope = (rule.scope or "").strip()
    if not scope or scope.lower() == GLOBAL_SCOPE:
        return True
    return scope == str(txn.account_id)


def matches_rule(
    txn: Transaction, rule: Rule, account_names: Optional[Mapping[int, str]] = None
) -> bool:
    """Return True if the rule applies to the transaction."""
    return rule_in_scope(rule, txn) and evaluate_chain(txn, rule.conditions, account_names)


def apply_rule(txn: Transaction, rule: Rule) -> Transaction:
    """Return a copy of the transaction with the rule's actions applied."""
    changes: dict[str, Any] = {"applied_rule_id": rule.id}
    if rule.set_category_id is not None:
        changes["category_id"] = rule.set_category_id
    if rule.set_payee_id is not None:
        changes["payee_id"] = rule.set_payee_id
    if rule.set_type_id is not None:
        changes["type_id"] = rule.set_type_id
    if rule.set_description:
        changes["description"] = rule.set_description
    if rule.skip_import:
        changes["skip_import"] = True
    return replace(txn, **changes)


def classify(
    txn: Transaction,
    rules: Sequence[Rule],
    account_names: Optional[Mapping[int, str]] = None,
) -> Transaction:
    """Apply the first matching rule, or return the transaction unchanged."""
    for rule in rules:
        if matches_rule(txn, rule, account_names):
            return apply_rule(txn, rule)
    return txn


def apply_rules(
    transactions: Sequence[Transaction],
    rules: Sequence[Rule],
    account_names: Optional[Mapping[int, str]] = None,
) -> list[Transaction]:
    """Classify a batch of transactions against an ordered rule set.

    Args:
        transactions: Canonical transactions, typically fresh from the normalizer
        rules: Rules in stored (priority) order
        account_names: Optional account id -> name lookup

    Returns:
        New list with one (possibly updated) transaction per input
    """
    classified = [classify(txn, rules, account_names) for txn in transactions]
    matched = sum(1 for txn in classified if txn.applied_rule_id is not None)
    logger.debug("Rules matched %d of %d transactions", matched, len(classified))
    return classified


def find_matching_transactions(
    transactions: Sequence[Transaction],
    rule: Rule,
    account_names: Optional[Mapping[int, str]] = None,
) -> list[tuple[Transaction, Transaction]]:
    """Preview a rule against existing ledger transactions.

    Returns (original, updated) pairs for transactions the rule matches and
    would actually change. ``skip_import`` has no meaning for ledger records
    and is not considered a change.
    """
    pairs = []
    for txn in transactions:
        if not matches_rule(txn, rule, account_names):
            continue
        updated = replace(apply_rule(txn, rule), skip_import=txn.skip_import)
        if (
            updated.category_id != txn.category_id
            or updated.payee_id != txn.payee_id
            or updated.type_id != txn.type_id
            or updated.description != txn.description
        ):
            pairs.append((txn, updated))
    return pairs


def _get(definition: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in definition and definition[key] is not None:
            return definition[key]
    return None


def _optional_id(name: str, value: Any, key: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(invalid_rule(name, f"{key} must be an integer id, got {value!r}"))


def parse_condition_definition(definition: Mapping[str, Any]) -> Condition:
    """Build a condition from its external definition.

    Unknown fields and operators are kept as strings; they evaluate False.
    """
    field = parse_field(str(_get(definition, "field") or ""))
    connector = str(_get(definition, "nextLogic", "next_logic", "next") or "AND").upper()
    condition_id = _get(definition, "id")
    return Condition(
        id=condition_id if isinstance(condition_id, int) else None,
        field=field,
        operator=parse_operator(str(_get(definition, "operator", "op") or "")),
        value=coerce_condition_value(field, _get(definition, "value")),
        next_logic=Connector.OR if connector == "OR" else Connector.AND,
    )


def parse_rule_definition(definition: Mapping[str, Any]) -> Rule:
    """Build a rule from the external rule contract.

    Accepts camelCase keys (``nextLogic``, ``setCategoryId``,
    ``setTransactionTypeId``, ``skipImport``) and their snake_case forms.

    Raises:
        ValidationError: If the definition is not a usable rule
    """
    if not isinstance(definition, Mapping):
        raise ValidationError(f"Rule definition must be an object, got {type(definition).__name__}")

    name = str(_get(definition, "name") or "").strip()
    if not name:
        raise ValidationError("Rule definition is missing a name")

    raw_conditions = _get(definition, "conditions") or []
    if not isinstance(raw_conditions, list):
        raise ValidationError(invalid_rule(name, "conditions must be a list"))
    conditions = []
    for raw in raw_conditions:
        if not isinstance(raw, Mapping):
            raise ValidationError(invalid_rule(name, "each condition must be an object"))
        conditions.append(parse_condition_definition(raw))

    rule_id = _get(definition, "id")
    if isinstance(rule_id, bool) or not isinstance(rule_id, (int, str)) or rule_id == "":
        rule_id = None
    scope = _get(definition, "scope")
    return Rule(
        id=rule_id,
        name=name,
        conditions=tuple(conditions),
        scope=None if scope is None else str(scope),
        set_category_id=_optional_id(
            name, _get(definition, "setCategoryId", "set_category_id"), "setCategoryId"
        ),
        set_payee_id=_optional_id(
            name, _get(definition, "setPayeeId", "set_payee_id"), "setPayeeId"
        ),
        set_type_id=_optional_id(
            name,
            _get(definition, "setTransactionTypeId", "set_transaction_type_id", "set_type_id"),
            "setTransactionTypeId",
        ),
        set_description=_get(definition, "setDescription", "set_description") or None,
        skip_import=bool(_get(definition, "skipImport", "skip_import")),
    )
