"""Rule domain service: storing, ordering and previewing classification rules."""

import json
from pathlib import Path
from typing import Any, Optional

from ledgerflow.database.base import Database
from ledgerflow.domain.entities import Rule, Transaction
from ledgerflow.domain.errors import NotFoundError, ValidationError, rule_not_found
from ledgerflow.domain.rules import find_matching_transactions, parse_rule_definition
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)


class RuleService:
    """Service for managing the ordered rule set."""

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(self, rule: Rule) -> int:
        """Store a rule at the end of the evaluation order.

        Returns:
            Rule ID
        """
        return self.db.create_rule(rule)

    def import_definitions(self, definitions: Any) -> list[int]:
        """Store rules from their external definitions, in the given order.

        Args:
            definitions: A list of rule objects, a ``{"rules": [...]}``
                wrapper, or a single rule object

        Returns:
            IDs of the stored rules

        Raises:
            ValidationError: If any definition is invalid. Nothing is stored
                in that case.
        """
        if isinstance(definitions, dict) and "rules" in definitions:
            definitions = definitions["rules"]
        if isinstance(definitions, dict):
            definitions = [definitions]
        if not isinstance(definitions, list):
            raise ValidationError("Rule file must contain a rule object or a list of rules")

        rules = [parse_rule_definition(definition) for definition in definitions]
        rule_ids = [self.db.create_rule(rule) for rule in rules]
        logger.info("Imported %d rules", len(rule_ids))
        return rule_ids

    def import_file(self, path: str | Path) -> list[int]:
        """Load rule definitions from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValidationError: If the file is not valid JSON or holds invalid rules
        """
        rule_path = Path(path)
        if not rule_path.exists():
            raise FileNotFoundError(f"Rule file not found: {path}")
        try:
            with open(rule_path, "r", encoding="utf-8") as f:
                definitions = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Rule file '{path}' is not valid JSON: {e}")
        return self.import_definitions(definitions)

    def get_rule(self, rule_id: int) -> Optional[Rule]:
        return self.db.get_rule(rule_id)

    def require_rule(self, rule_id: int) -> Rule:
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def list_rules(self) -> list[Rule]:
        """List rules in evaluation order."""
        return self.db.list_rules()

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        self.require_rule(rule_id)
        self.db.delete_rule(rule_id)

    def move_rule(self, rule_id: int, position: int) -> None:
        """Move a rule to a 1-based position in the evaluation order.

        Raises:
            NotFoundError: If the rule does not exist
            ValidationError: If position is less than 1
        """
        if position < 1:
            raise ValidationError("Rule position must be 1 or greater")
        self.require_rule(rule_id)
        self.db.move_rule(rule_id, position)

    def preview_rule(
        self, rule_id: int, account_id: Optional[int] = None
    ) -> list[tuple[Transaction, Transaction]]:
        """Show what a stored rule would change in the existing ledger.

        Returns:
            (original, updated) pairs; the ledger is not modified
        """
        rule = self.require_rule(rule_id)
        ledger = self.db.list_transactions(account_id=account_id)
        account_names = {a.id: a.name for a in self.db.list_accounts()}
        return find_matching_transactions(ledger, rule, account_names)
