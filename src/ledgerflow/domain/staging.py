"""Import staging and conflict detection.

A staged batch is a flat tuple of records plus a staging-id -> position
index. Conflict classes are computed once when the batch is built; later
operations only flip ignore flags and return new batches.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ledgerflow.domain.entities import ConflictType, Transaction
from ledgerflow.domain.errors import NotFoundError
from ledgerflow.domain.signatures import (
    build_ledger_index,
    loose_signature,
    strict_signature,
    transaction_id,
)
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_IGNORED_CONFLICTS = frozenset({ConflictType.DATABASE, ConflictType.BATCH})


@dataclass(frozen=True)
class StagedTransaction:
    """A canonical transaction annotated for the verification step.

    ``conflict_with`` is the ledger record (database conflicts) or the
    earlier batch record (batch conflicts) that triggered the class; for
    reversals it is the first opposite-direction record in the batch.
    """

    staging_id: int
    transaction: Transaction
    conflict: ConflictType = ConflictType.NONE
    is_ignored: bool = False
    conflict_with: Optional[Transaction] = None
    outside_window: bool = False


@dataclass(frozen=True)
class StagingBatch:
    records: tuple[StagedTransaction, ...] = ()
    index: Mapping[int, int] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[StagedTransaction]) -> "StagingBatch":
        records = tuple(records)
        return cls(records=records, index={r.staging_id: pos for pos, r in enumerate(records)})

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def get(self, staging_id: int) -> StagedTransaction:
        """Return a staged record by staging ID.

        Raises:
            NotFoundError: If no record has that ID
        """
        try:
            return self.records[self.index[staging_id]]
        except KeyError:
            raise NotFoundError(f"Staged transaction {staging_id} not found")

    def set_ignored(self, staging_ids: Iterable[int], ignored: bool) -> "StagingBatch":
        """Return a new batch with the given records marked (un)ignored."""
        positions = {self.index[self.get(s).staging_id] for s in staging_ids}
        records = tuple(
            replace(record, is_ignored=ignored) if pos in positions else record
            for pos, record in enumerate(self.records)
        )
        return StagingBatch(records=records, index=self.index)

    def toggle_ignore(self, staging_id: int) -> "StagingBatch":
        """Return a new batch with one record's ignore flag flipped."""
        return self.set_ignored([staging_id], not self.get(staging_id).is_ignored)

    def confirmed(self) -> list[Transaction]:
        """Transactions the user wants imported, in staging order."""
        return [r.transaction for r in self.records if not r.is_ignored]

    def with_conflict(self, conflict: ConflictType) -> list[StagedTransaction]:
        return [r for r in self.records if r.conflict is conflict]

    def reversal_candidates(self) -> list[StagedTransaction]:
        """Records that may be reversed by an opposite entry in the same batch.

        Advisory only: nothing is resolved automatically.
        """
        return self.with_conflict(ConflictType.REVERSAL)

    def conflict_counts(self) -> dict[ConflictType, int]:
        counts = Counter(r.conflict for r in self.records)
        return {conflict: counts.get(conflict, 0) for conflict in ConflictType}

    @property
    def ignored_count(self) -> int:
        return sum(1 for r in self.records if r.is_ignored)


def _in_window(txn_date: date, window: Optional[tuple[Optional[date], Optional[date]]]) -> bool:
    if window is None:
        return True
    start, end = window
    if start is not None and txn_date < start:
        return False
    if end is not None and txn_date > end:
        return False
    return True


def stage_transactions(
    transactions: Sequence[Transaction],
    ledger: Iterable[Transaction],
    date_window: Optional[tuple[Optional[date], Optional[date]]] = None,
) -> StagingBatch:
    """Classify each transaction of a batch against a ledger snapshot.

    Conflict classes:
    - ``database``: the strict signature already exists in the ledger
    - ``batch``: the strict signature appeared earlier in this batch
    - ``reversal``: same date, account and cents amount as an
      opposite-direction record elsewhere in the batch, when neither of the
      above applies

    ``database`` and ``batch`` records default to ignored, as do records a
    rule marked ``skip_import`` and records outside ``date_window``.
    Reversals stay selected. The ledger is only read.

    Args:
        transactions: Classified transactions in input order
        ledger: Ledger snapshot to check against
        date_window: Optional inclusive (start, end); either side may be None

    Returns:
        New staging batch; staging IDs count up from 1 in input order
    """
    ledger_index = build_ledger_index(ledger)
    first_seen: dict[str, Transaction] = {}
    conflicts: list[tuple[ConflictType, Optional[Transaction]]] = []

    for txn in transactions:
        existing = ledger_index.get(transaction_id(txn))
        signature = strict_signature(txn)
        if existing is not None:
            conflicts.append((ConflictType.DATABASE, existing))
        elif signature in first_seen:
            conflicts.append((ConflictType.BATCH, first_seen[signature]))
        else:
            first_seen[signature] = txn
            conflicts.append((ConflictType.NONE, None))

    loose_groups: dict[str, list[int]] = defaultdict(list)
    for pos, txn in enumerate(transactions):
        loose_groups[loose_signature(txn)].append(pos)

    records = []
    for pos, txn in enumerate(transactions):
        conflict, other = conflicts[pos]
        if conflict is ConflictType.NONE:
            for other_pos in loose_groups[loose_signature(txn)]:
                candidate = transactions[other_pos]
                if other_pos != pos and candidate.direction is txn.direction.opposite:
                    conflict, other = ConflictType.REVERSAL, candidate
                    break

        outside = not _in_window(txn.date, date_window)
        records.append(
            StagedTransaction(
                staging_id=pos + 1,
                transaction=txn,
                conflict=conflict,
                is_ignored=txn.skip_import or outside or conflict in DEFAULT_IGNORED_CONFLICTS,
                conflict_with=other,
                outside_window=outside,
            )
        )

    batch = StagingBatch.from_records(records)
    counts = batch.conflict_counts()
    logger.info(
        "Staged %d transactions: %d database, %d batch, %d reversal, %d ignored",
        len(batch),
        counts[ConflictType.DATABASE],
        counts[ConflictType.BATCH],
        counts[ConflictType.REVERSAL],
        batch.ignored_count,
    )
    return batch
