"""Idempotent ledger merge."""

from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from ledgerflow.domain.entities import DuplicatePair, Transaction
from ledgerflow.domain.signatures import build_ledger_index, merge_signature, transaction_id
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge.

    ``ledger`` is the input snapshot plus ``added``, newest first.
    """

    added: list[Transaction] = field(default_factory=list)
    duplicates: list[DuplicatePair] = field(default_factory=list)
    ledger: list[Transaction] = field(default_factory=list)


def sort_ledger(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by date, newest first; same-day records keep their order."""
    return sorted(transactions, key=lambda txn: txn.date, reverse=True)


def _signature_pools(ledger: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    pools: dict[str, list[Transaction]] = defaultdict(list)
    for txn in ledger:
        pools[merge_signature(txn)].append(txn)
    return pools


def _claim(pool: list[Transaction], txn: Transaction) -> None:
    for i, candidate in enumerate(pool):
        if candidate is txn:
            del pool[i]
            return


def merge_transactions(
    ledger: Sequence[Transaction], confirmed: Iterable[Transaction]
) -> MergeResult:
    """Append confirmed transactions to a ledger snapshot.

    Each transaction gets its strict-signature ID. One whose ID is already
    in the ledger, or was added earlier in this call, goes to
    ``duplicates`` paired with the record it collided with. Merging the
    same input again therefore adds nothing.

    A second check ignores user and type. Each record in the ledger, or
    added earlier in this call, absorbs at most one incoming transaction
    with the same merge signature, so a re-import under another user or
    type is caught without rejecting more rows than the ledger holds.

    Args:
        ledger: Current ledger snapshot (not modified)
        confirmed: Staged transactions the user chose to import

    Returns:
        MergeResult with added records, rejected duplicates and the new ledger
    """
    index = build_ledger_index(ledger)
    pools = _signature_pools(ledger)
    added: list[Transaction] = []
    duplicates: list[DuplicatePair] = []

    for txn in confirmed:
        new_id = transaction_id(txn)
        candidate = replace(txn, id=new_id)
        pool = pools[merge_signature(candidate)]
        existing = index.get(new_id)
        if existing is not None:
            _claim(pool, existing)
            duplicates.append(DuplicatePair(new=candidate, existing=existing))
            continue
        if pool:
            duplicates.append(DuplicatePair(new=candidate, existing=pool.pop(0)))
            continue
        index[new_id] = candidate
        pool.append(candidate)
        added.append(candidate)

    logger.info("Merge added %d transactions, rejected %d duplicates", len(added), len(duplicates))
    return MergeResult(
        added=added,
        duplicates=duplicates,
        ledger=sort_ledger([*ledger, *added]),
    )
