"""Tests for import staging and conflict detection."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from ledgerflow.domain.entities import ConflictType, Direction
from ledgerflow.domain.errors import NotFoundError
from ledgerflow.domain.signatures import transaction_id
from ledgerflow.domain.staging import stage_transactions


def test_clean_batch(make_transaction):
    batch = stage_transactions([make_transaction(), make_transaction(description="Other")], [])

    assert [r.staging_id for r in batch] == [1, 2]
    assert all(r.conflict is ConflictType.NONE for r in batch)
    assert len(batch.confirmed()) == 2


def test_repeated_row_is_batch_conflict(make_transaction):
    first, second = make_transaction(), make_transaction()

    batch = stage_transactions([first, second], [])

    assert batch.get(1).conflict is ConflictType.NONE
    assert not batch.get(1).is_ignored
    assert batch.get(2).conflict is ConflictType.BATCH
    assert batch.get(2).is_ignored
    assert batch.get(2).conflict_with is first
    assert batch.confirmed() == [first]


def test_ledger_match_is_database_conflict(make_transaction):
    txn = make_transaction()
    stored = replace(txn, id=transaction_id(txn), category_id=3)

    batch = stage_transactions([txn], [stored])

    assert batch.get(1).conflict is ConflictType.DATABASE
    assert batch.get(1).conflict_with is stored
    assert batch.get(1).is_ignored


def test_database_beats_batch(make_transaction):
    txn = make_transaction()
    stored = replace(txn, id=transaction_id(txn))

    batch = stage_transactions([txn, txn], [stored])

    assert [r.conflict for r in batch] == [ConflictType.DATABASE, ConflictType.DATABASE]


def test_same_day_opposite_entries_are_reversal_candidates(make_transaction):
    charge = make_transaction(description="Store", amount=Decimal("20.00"))
    refund = make_transaction(description="Store Refund", amount=Decimal("20.00"), direction=Direction.CREDIT, type_id=1)
    unrelated = make_transaction(description="Coffee", amount=Decimal("3.00"))

    batch = stage_transactions([charge, refund, unrelated], [])

    assert [r.conflict for r in batch] == [ConflictType.REVERSAL, ConflictType.REVERSAL, ConflictType.NONE]
    assert [r.staging_id for r in batch.reversal_candidates()] == [1, 2]
    assert batch.get(1).conflict_with is refund
    assert not any(r.is_ignored for r in batch)


def test_skip_import_and_date_window_default_to_ignored(make_transaction):
    skipped = make_transaction(description="Sweep", skip_import=True)
    early = make_transaction(description="Early", date=date(2024, 2, 28))
    inside = make_transaction(description="Inside")

    batch = stage_transactions([skipped, early, inside], [], (date(2024, 3, 1), None))

    assert batch.get(1).is_ignored
    assert batch.get(2).is_ignored and batch.get(2).outside_window
    assert batch.confirmed() == [inside]


def test_toggles_return_new_batches(make_transaction):
    batch = stage_transactions([make_transaction(), make_transaction()], [])

    toggled = batch.toggle_ignore(2)

    assert batch.get(2).is_ignored
    assert not toggled.get(2).is_ignored
    assert len(toggled.confirmed()) == 2
    assert len(toggled.set_ignored([1, 2], True).confirmed()) == 0


def test_unknown_staging_id(make_transaction):
    batch = stage_transactions([make_transaction()], [])
    with pytest.raises(NotFoundError):
        batch.toggle_ignore(5)


def test_conflict_counts(make_transaction):
    txn = make_transaction()
    batch = stage_transactions([txn, txn], [])
    counts = batch.conflict_counts()
    assert counts[ConflictType.NONE] == 1
    assert counts[ConflictType.BATCH] == 1
    assert counts[ConflictType.REVERSAL] == 0
    assert batch.ignored_count == 1
