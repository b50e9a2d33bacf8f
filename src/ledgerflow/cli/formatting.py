"""Shared table formatting for transaction listings."""

from ledgerflow.domain.entities import Condition, Rule, Transaction
from ledgerflow.domain.conditions import value_to_text

DESCRIPTION_WIDTH = 32


def format_amount(txn: Transaction) -> str:
    """Signed amount with the account currency, debits negative."""
    return f"{txn.signed_amount:,.2f} {txn.currency}"


def format_transaction(txn: Transaction) -> str:
    description = txn.description[:DESCRIPTION_WIDTH]
    return f"{txn.date.isoformat():<12} {format_amount(txn):>16}  {description:<{DESCRIPTION_WIDTH}}"


def format_condition(condition: Condition) -> str:
    field = getattr(condition.field, "value", condition.field)
    operator = getattr(condition.operator, "value", condition.operator)
    return f"{field} {operator} '{value_to_text(condition.value)}'"


def format_rule(rule: Rule) -> str:
    """One-line summary: conditions joined by their connectors, then actions."""
    if rule.conditions:
        parts = []
        for i, condition in enumerate(rule.conditions):
            if i > 0:
                parts.append(rule.conditions[i - 1].next_logic.value)
            parts.append(format_condition(condition))
        when = " ".join(parts)
    else:
        when = "always"

    actions = []
    if rule.set_category_id is not None:
        actions.append(f"category={rule.set_category_id}")
    if rule.set_payee_id is not None:
        actions.append(f"payee={rule.set_payee_id}")
    if rule.set_type_id is not None:
        actions.append(f"type={rule.set_type_id}")
    if rule.set_description:
        actions.append(f"description='{rule.set_description}'")
    if rule.skip_import:
        actions.append("skip import")
    scope = f" [account {rule.scope}]" if rule.scope not in (None, "global") else ""
    return f"{rule.name}{scope}: when {when} -> {', '.join(actions) or 'no actions'}"
