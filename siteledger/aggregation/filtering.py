"""Mini README: Per-kind inclusion filter over an aggregated view.

Structure:
    * FilterFlags - immutable inclusion switch per record kind.
    * apply_filter - pure function producing the visible subset.

The filter never fetches or re-merges; it only selects from what the
aggregator already produced, preserving order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence, Tuple

from ..records import RecordKind
from .transactions import Transaction


@dataclass(frozen=True, slots=True)
class FilterFlags:
    """Kinds currently shown in the transaction view."""

    included: FrozenSet[RecordKind] = frozenset(RecordKind)

    @classmethod
    def all_on(cls) -> "FilterFlags":
        return cls(frozenset(RecordKind))

    @classmethod
    def all_off(cls) -> "FilterFlags":
        return cls(frozenset())

    @classmethod
    def only(cls, *kinds: RecordKind) -> "FilterFlags":
        return cls(frozenset(kinds))

    @classmethod
    def from_toggles(cls, *, show_receipts: bool = True, show_payments: bool = True) -> "FilterFlags":
        """Build flags from the two checkbox toggles of the transactions tab."""

        toggles = {RecordKind.RECEIPT: show_receipts, RecordKind.PAYMENT: show_payments}
        return cls(frozenset(kind for kind, shown in toggles.items() if shown))

    def shows(self, kind: RecordKind) -> bool:
        return kind in self.included

    def toggled(self, kind: RecordKind, shown: bool) -> "FilterFlags":
        """Return new flags with one kind switched on or off."""

        included = set(self.included)
        if shown:
            included.add(kind)
        else:
            included.discard(kind)
        return FilterFlags(frozenset(included))

    def as_dict(self) -> Dict[str, bool]:
        return {kind.value: kind in self.included for kind in RecordKind}


def apply_filter(
    transactions: Optional[Sequence[Transaction]], flags: FilterFlags
) -> Tuple[Transaction, ...]:
    """Return the transactions whose kind is included, in the same order.

    ``None`` stands for an aggregate that has not loaded yet and yields an
    empty view.
    """

    if not transactions:
        return ()
    return tuple(transaction for transaction in transactions if flags.shows(transaction.kind))
