"""Domain layer for ledgerflow application."""

from ledgerflow.domain.account import AccountService
from ledgerflow.domain.lookups import CategoryService, PayeeService, TransactionTypeService
from ledgerflow.domain.rule_service import RuleService
from ledgerflow.domain.import_service import ImportService
from ledgerflow.domain.reconcile_service import ReconciliationService

__all__ = [
    "AccountService",
    "CategoryService",
    "PayeeService",
    "TransactionTypeService",
    "RuleService",
    "ImportService",
    "ReconciliationService",
]
