"""Mini README: Render contract for transaction cards.

Structure:
    * TransactionCard - display-ready fields for one transaction.
    * build_cards - map a filtered view onto cards.

Cards carry plain text. Numbers and dates are formatted here through
``siteledger.formatting``; escaping is left to the template, which runs
free-text fields through the ``escape_html`` filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..aggregation import Transaction
from ..formatting import format_currency, format_date, format_signed
from ..records import RecordKind

KIND_LABELS = {
    RecordKind.RECEIPT: "Είσπραξη",
    RecordKind.PAYMENT: "Πληρωμή",
}
KIND_CSS = {
    RecordKind.RECEIPT: "type-receipt",
    RecordKind.PAYMENT: "type-payment",
}
EMPTY_STATE = "Δεν υπάρχουν κινήσεις"


@dataclass(frozen=True, slots=True)
class TransactionCard:
    kind: str
    label: str
    css_class: str
    name: str
    date: str
    amount: str
    signed_amount: str
    caption: str

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionCard":
        return cls(
            kind=transaction.kind.value,
            label=KIND_LABELS[transaction.kind],
            css_class=KIND_CSS[transaction.kind],
            name=transaction.display_name,
            date=format_date(transaction.date),
            amount=format_currency(transaction.amount),
            signed_amount=format_signed(transaction.amount, inflow=transaction.is_inflow),
            caption=f"#{transaction.number} - {transaction.reason}",
        )

    def as_dict(self) -> Dict[str, str]:
        return {
            "kind": self.kind,
            "label": self.label,
            "css_class": self.css_class,
            "name": self.name,
            "date": self.date,
            "amount": self.amount,
            "signed_amount": self.signed_amount,
            "caption": self.caption,
        }


def build_cards(transactions: Iterable[Transaction]) -> List[TransactionCard]:
    return [TransactionCard.from_transaction(transaction) for transaction in transactions]
