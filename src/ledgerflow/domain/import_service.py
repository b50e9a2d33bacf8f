"""Statement import service.

Wires the pure pipeline stages to persistence: read, normalize, classify,
stage against the account's ledger, then merge the confirmed records and
store what was added.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from ledgerflow.database.base import Database
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.entities import Account
from ledgerflow.domain.errors import ValidationError, no_transaction_types
from ledgerflow.domain.merge import MergeResult, merge_transactions
from ledgerflow.domain.normalizer import StatementSource, normalize_rows
from ledgerflow.domain.rules import apply_rules
from ledgerflow.domain.staging import StagingBatch, stage_transactions
from ledgerflow.domain.statement_reader import (
    ParsedStatement,
    read_statement_file,
    read_statement_text,
)
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

PASTED_SOURCE_LABEL = "pasted statement"


@dataclass(frozen=True)
class StagedImport:
    """A staged batch together with the account it is destined for."""

    account: Account
    source_label: str
    batch: StagingBatch


class ImportService:
    """Service for importing statement exports into the ledger."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_service = AccountService(db)

    def stage_file(
        self,
        path: str | Path,
        account_id: int,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> StagedImport:
        """Read and stage a CSV/TSV statement export.

        Raises:
            FileNotFoundError: If the file doesn't exist
            NotFoundError: If the account doesn't exist
            StatementParseError: If no header or rows can be read
            NoUsableRowsError: If no row survives normalization
        """
        parsed = read_statement_file(path)
        return self._stage(parsed, Path(path).name, account_id, user_id, start_date, end_date)

    def stage_text(
        self,
        text: str,
        account_id: int,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        source_label: str = PASTED_SOURCE_LABEL,
    ) -> StagedImport:
        """Stage pasted statement text. Raises the same errors as stage_file."""
        parsed = read_statement_text(text)
        return self._stage(parsed, source_label, account_id, user_id, start_date, end_date)

    def _stage(
        self,
        parsed: ParsedStatement,
        source_label: str,
        account_id: int,
        user_id: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> StagedImport:
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")

        account = self.account_service.require_account(account_id)
        transaction_types = self.db.list_transaction_types()
        if not transaction_types:
            logger.warning(no_transaction_types())

        source = StatementSource(
            account_id=account.id,
            account_category=account.category,
            source_label=source_label,
            currency=account.currency,
            user_id=user_id,
        )
        normalized = normalize_rows(parsed.headers, parsed.rows, source, transaction_types)
        classified = apply_rules(
            normalized, self.db.list_rules(), self.account_service.account_names()
        )

        window = None
        if start_date is not None or end_date is not None:
            window = (start_date, end_date)
        batch = stage_transactions(
            classified, self.db.list_transactions(account_id=account.id), window
        )
        return StagedImport(account=account, source_label=source_label, batch=batch)

    def commit(self, staged: StagedImport) -> MergeResult:
        """Merge the batch's confirmed records and persist the additions.

        Merge runs against a fresh ledger snapshot, so records stored since
        staging are reported as duplicates instead of being inserted twice.

        Returns:
            MergeResult with ``added`` (now persisted) and ``duplicates``
        """
        confirmed = staged.batch.confirmed()
        ledger = self.db.list_transactions(account_id=staged.account.id)
        result = merge_transactions(ledger, confirmed)
        if result.added:
            self.db.add_transactions(result.added)
        logger.info(
            "Imported %d transactions from '%s' into account '%s'",
            len(result.added),
            staged.source_label,
            staged.account.name,
        )
        return result
