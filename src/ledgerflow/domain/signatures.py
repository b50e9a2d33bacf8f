"""Deterministic transaction signatures.

The strict signature is the exact-duplicate key and, encoded, the
transaction's persistent ID:

    date | normalized description | magnitude | type | account | user

The loose signature flags possible same-day reversals:

    date | magnitude rounded to cents | account

The merge signature catches re-imports whose user or type changed:

    date | magnitude rounded to cents | direction | normalized description | account

All are pure functions of the listed fields. Nothing else about a
transaction (category, payee, memo, flags, original row) affects them.
"""

import base64
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from ledgerflow.domain.entities import Transaction
from ledgerflow.utils.text import normalize_text

SIGNATURE_SEPARATOR = "|"
CENTS = Decimal("0.01")


def _magnitude_text(amount: Decimal) -> str:
    """Canonical text for a magnitude: 45.9, 45.90 and 45.900 agree."""
    normalized = abs(amount).normalize()
    return format(normalized, "f")


def _part(value: object) -> str:
    return "" if value is None else str(value)


def strict_signature(txn: Transaction) -> str:
    """Exact-duplicate key for a transaction."""
    return SIGNATURE_SEPARATOR.join(
        (
            txn.date.isoformat(),
            normalize_text(txn.description),
            _magnitude_text(txn.amount),
            _part(txn.type_id),
            _part(txn.account_id),
            _part(txn.user_id),
        )
    )


def transaction_id(txn: Transaction) -> str:
    """Persistent ID: URL-safe base64 of the strict signature.

    The encoding is reversible, so the composite behind an ID can always be
    inspected with :func:`decode_transaction_id`.
    """
    return base64.urlsafe_b64encode(strict_signature(txn).encode("utf-8")).decode("ascii")


def decode_transaction_id(txn_id: str) -> str:
    """Recover the strict signature an ID was generated from."""
    return base64.urlsafe_b64decode(txn_id.encode("ascii")).decode("utf-8")


def loose_signature(txn: Transaction) -> str:
    """Direction-agnostic key for possible reversal pairs."""
    cents = abs(txn.amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return SIGNATURE_SEPARATOR.join((txn.date.isoformat(), str(cents), _part(txn.account_id)))


def merge_signature(txn: Transaction) -> str:
    """Duplicate key that ignores user and type."""
    cents = abs(txn.amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return SIGNATURE_SEPARATOR.join(
        (
            txn.date.isoformat(),
            str(cents),
            txn.direction.value,
            normalize_text(txn.description),
            _part(txn.account_id),
        )
    )


def ledger_key(txn: Transaction) -> str:
    """ID under which a ledger record is indexed.

    Records persisted by merge carry their ID already; records supplied by
    other producers without one are indexed by their computed ID.
    """
    return txn.id or transaction_id(txn)


def build_ledger_index(ledger: Iterable[Transaction]) -> dict[str, Transaction]:
    """Index a ledger snapshot by ID.

    Each record is reachable both by its stored ID and by the ID its current
    fields produce, so an edited record still blocks a re-import of the row
    it came from. The first record wins on collisions.
    """
    index: dict[str, Transaction] = {}
    for txn in ledger:
        index.setdefault(ledger_key(txn), txn)
        index.setdefault(transaction_id(txn), txn)
    return index
