"""Mini README: Tagged transaction view over receipts and payments.

Structure:
    * Transaction - frozen wrapper pairing a record with its kind.
    * aggregate - merge per-kind record sequences into one dated view.
    * net_total - signed sum of a transaction view.

Merge rules: records are tagged, concatenated in ``RecordKind`` order
(receipts, then payments, each in backend order) and sorted newest first.
Python's sort is stable, also with ``reverse=True``, so records sharing a
date keep their concatenation order. Undated records go last.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from ..records import Record, RecordKind

LOGGER = get_logger(__name__)

INFLOW_KINDS = frozenset({RecordKind.RECEIPT})


@dataclass(frozen=True, slots=True)
class Transaction:
    """Display-oriented wrapper around a receipt or payment."""

    kind: RecordKind
    record: Record

    @property
    def date(self) -> Optional[date]:
        return self.record.date

    @property
    def amount(self) -> Optional[Decimal]:
        return self.record.amount

    @property
    def is_inflow(self) -> bool:
        return self.kind in INFLOW_KINDS

    @property
    def signed_amount(self) -> Decimal:
        """Amount with direction applied; missing amounts count as zero."""

        amount = self.record.amount or Decimal("0")
        return amount if self.is_inflow else -amount

    @property
    def display_name(self) -> str:
        return self.record.display_name

    @property
    def number(self) -> str:
        return self.record.number

    @property
    def reason(self) -> str:
        return self.record.reason


def _sort_key(transaction: Transaction) -> Tuple[bool, date]:
    occurred = transaction.date
    return (occurred is not None, occurred or date.min)


def aggregate(sequences: Mapping[RecordKind, Sequence[Record]]) -> Tuple[Transaction, ...]:
    """Merge record sequences into one newest-first tuple of transactions.

    Kinds absent from ``sequences`` contribute nothing. The inputs are not
    modified.
    """

    tagged = [
        Transaction(kind=kind, record=record)
        for kind in RecordKind
        for record in sequences.get(kind, ())
    ]
    merged = tuple(sorted(tagged, key=_sort_key, reverse=True))
    LOGGER.debug(
        "Aggregated %s transactions (%s)",
        len(merged),
        ", ".join(f"{kind.value}={len(sequences.get(kind, ()))}" for kind in RecordKind),
    )
    return merged


def net_total(transactions: Iterable[Transaction]) -> Decimal:
    """Signed sum: receipts add, payments subtract."""

    return sum((transaction.signed_amount for transaction in transactions), Decimal("0"))
