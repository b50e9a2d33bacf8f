"""Statement reconciliation service."""

from datetime import date
from pathlib import Path
from typing import Optional

from ledgerflow.database.base import Database
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.normalizer import StatementSource, normalize_rows
from ledgerflow.domain.reconciliation import ReconciliationResult, reconcile
from ledgerflow.domain.statement_reader import (
    ParsedStatement,
    read_statement_file,
    read_statement_text,
)


class ReconciliationService:
    """Compares a bank statement with the ledger view of one account."""

    def __init__(self, db: Database):
        self.db = db
        self.account_service = AccountService(db)

    def reconcile_text(
        self,
        text: str,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ReconciliationResult:
        """Reconcile pasted statement text against the account's ledger.

        Args:
            text: Statement text with a header row
            account_id: Account whose ledger records form the view
            start_date: Optional inclusive lower bound of the ledger view
            end_date: Optional inclusive upper bound of the ledger view

        Raises:
            NotFoundError: If the account doesn't exist
            StatementParseError: If the text cannot be parsed
            NoUsableRowsError: If no statement row is usable
        """
        return self._reconcile(read_statement_text(text), "statement", account_id, start_date, end_date)

    def reconcile_file(
        self,
        path: str | Path,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ReconciliationResult:
        """Reconcile a statement file. Raises the same errors as reconcile_text."""
        return self._reconcile(
            read_statement_file(path), Path(path).name, account_id, start_date, end_date
        )

    def _reconcile(
        self,
        parsed: ParsedStatement,
        source_label: str,
        account_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> ReconciliationResult:
        account = self.account_service.require_account(account_id)
        source = StatementSource(
            account_id=account.id,
            account_category=account.category,
            source_label=source_label,
            currency=account.currency,
        )
        statement = normalize_rows(
            parsed.headers, parsed.rows, source, self.db.list_transaction_types()
        )
        ledger_view = self.db.list_transactions(
            account_id=account.id, start_date=start_date, end_date=end_date
        )
        return reconcile(statement, ledger_view)
