"""Mini README: Typed records exchanged with the back-office REST backend.

Structure:
    * RecordKind - enum of the record streams merged into the transaction view.
    * ReceiptRecord - money received from a customer.
    * PaymentRecord - money paid out to a payee.
    * FinancialSettings - user-editable starting capital and floor area.
    * CompanyProfile - the company payload plus typed access to its settings.
    * FinancialSummary - server-side summary, unknown fields ignored.

Records are parsed from JSON with ``from_payload`` and exported with
``as_payload``. Parsing is lenient: missing optional text becomes ``""``,
missing references become ``None``, and malformed dates or amounts are
logged and stored as ``None`` so one bad row never breaks a whole listing.
Stored amounts are always non-negative; direction comes from the kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Record = Union["ReceiptRecord", "PaymentRecord"]


class RecordKind(str, Enum):
    """Enumerate the record streams. Declaration order is merge order."""

    RECEIPT = "receipt"
    PAYMENT = "payment"

    @classmethod
    def from_str(cls, value: str) -> "RecordKind":
        """Coerce arbitrary casing into a valid record kind."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported record kind: {value}") from error

    @property
    def collection(self) -> str:
        """Backend collection path segment, e.g. ``receipts``."""

        return f"{self.value}s"


def parse_amount(value: Any, *, context: str = "") -> Optional[Decimal]:
    """Parse a JSON number or numeric string into a Decimal.

    Returns ``None`` for missing or malformed values. Floats go through
    ``str`` so ``0.1`` stays ``Decimal('0.1')``.
    """

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        LOGGER.warning("Ignoring boolean amount %r %s", value, context)
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        LOGGER.warning("Malformed amount %r %s", value, context)
        return None
    if not amount.is_finite():
        LOGGER.warning("Non-finite amount %r %s", value, context)
        return None
    return amount


def parse_date(value: Any, *, context: str = "") -> Optional[date]:
    """Parse an ISO calendar date, tolerating datetimes and blanks."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            LOGGER.warning("Malformed date %r %s", value, context)
            return None
    LOGGER.warning("Unsupported date value %r %s", value, context)
    return None


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def _optional_int(payload: Mapping[str, Any], key: str) -> Optional[int]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring non-integer %s=%r", key, value)
        return None


def _number(value: Optional[Decimal]) -> Optional[float]:
    """Serialise a Decimal as a JSON number."""

    return None if value is None else float(value)


@dataclass(frozen=True, slots=True)
class ReceiptRecord:
    """A receipt issued to a customer."""

    id: Optional[int]
    receipt_number: str
    customer_id: Optional[int]
    customer_name: str
    date: Optional[date]
    amount: Optional[Decimal]
    reason: str = ""
    signature1: str = ""
    signature2: str = ""

    kind = RecordKind.RECEIPT

    @property
    def number(self) -> str:
        return self.receipt_number

    @property
    def display_name(self) -> str:
        return self.customer_name

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ReceiptRecord":
        """Build a receipt from backend JSON."""

        context = f"(receipt id={payload.get('id')})"
        return cls(
            id=_optional_int(payload, "id"),
            receipt_number=_text(payload, "receiptNumber"),
            customer_id=_optional_int(payload, "customerId"),
            customer_name=_text(payload, "customerName"),
            date=parse_date(payload.get("date"), context=context),
            amount=parse_amount(payload.get("amount"), context=context),
            reason=_text(payload, "reason"),
            signature1=_text(payload, "signature1"),
            signature2=_text(payload, "signature2"),
        )

    def as_payload(self) -> Dict[str, object]:
        """Export the receipt in the backend's JSON shape."""

        payload: Dict[str, object] = {
            "receiptNumber": self.receipt_number,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "date": self.date.isoformat() if self.date else None,
            "amount": _number(self.amount),
            "reason": self.reason,
            "signature1": self.signature1,
            "signature2": self.signature2,
        }
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    """A payment made to a payee.

    ``payee_name`` is the canonical counterparty. Older backend rows only
    carry ``customer_id``/``customer_name``, which ``display_name`` falls
    back to.
    """

    id: Optional[int]
    payment_number: str
    payee_name: str
    date: Optional[date]
    amount: Optional[Decimal]
    reason: str = ""
    signature1: str = ""
    signature2: str = ""
    customer_id: Optional[int] = None
    customer_name: str = ""

    kind = RecordKind.PAYMENT

    @property
    def number(self) -> str:
        return self.payment_number

    @property
    def display_name(self) -> str:
        return self.payee_name or self.customer_name

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PaymentRecord":
        """Build a payment from backend JSON."""

        context = f"(payment id={payload.get('id')})"
        return cls(
            id=_optional_int(payload, "id"),
            payment_number=_text(payload, "paymentNumber"),
            payee_name=_text(payload, "payeeName"),
            date=parse_date(payload.get("date"), context=context),
            amount=parse_amount(payload.get("amount"), context=context),
            reason=_text(payload, "reason"),
            signature1=_text(payload, "signature1"),
            signature2=_text(payload, "signature2"),
            customer_id=_optional_int(payload, "customerId"),
            customer_name=_text(payload, "customerName"),
        )

    def as_payload(self) -> Dict[str, object]:
        """Export the payment in the backend's JSON shape."""

        payload: Dict[str, object] = {
            "paymentNumber": self.payment_number,
            "payeeName": self.payee_name,
            "date": self.date.isoformat() if self.date else None,
            "amount": _number(self.amount),
            "reason": self.reason,
            "signature1": self.signature1,
            "signature2": self.signature2,
        }
        if self.customer_id is not None:
            payload["customerId"] = self.customer_id
            payload["customerName"] = self.customer_name
        if self.id is not None:
            payload["id"] = self.id
        return payload


RECORD_TYPES = {
    RecordKind.RECEIPT: ReceiptRecord,
    RecordKind.PAYMENT: PaymentRecord,
}


def record_from_payload(kind: RecordKind, payload: Mapping[str, Any]) -> Record:
    """Parse a payload into the record class registered for ``kind``."""

    return RECORD_TYPES[kind].from_payload(payload)


@dataclass(frozen=True, slots=True)
class FinancialSettings:
    """Starting capital and floor area used by the metrics calculator."""

    starting_capital: Optional[Decimal] = None
    square_meters: Optional[Decimal] = None

    def as_payload(self) -> Dict[str, Optional[float]]:
        return {
            "startingCapital": _number(self.starting_capital),
            "squareMeters": _number(self.square_meters),
        }


@dataclass(frozen=True, slots=True)
class CompanyProfile:
    """The company aggregate as returned by ``GET /api/company``.

    The full payload is kept so an update sends back every field the
    backend knows about, not only the financial settings.
    """

    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CompanyProfile":
        return cls(payload=dict(payload or {}))

    @property
    def company_name(self) -> str:
        return _text(self.payload, "companyName")

    @property
    def settings(self) -> FinancialSettings:
        return FinancialSettings(
            starting_capital=parse_amount(
                self.payload.get("startingCapital"), context="(company.startingCapital)"
            ),
            square_meters=parse_amount(
                self.payload.get("squareMeters"), context="(company.squareMeters)"
            ),
        )

    def with_settings(self, settings: FinancialSettings) -> Dict[str, Any]:
        """Return the update payload with the new settings merged in."""

        merged = dict(self.payload)
        merged.update(settings.as_payload())
        return merged


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    """Server-computed summary from ``/api/company/financial-summary``."""

    starting_capital: Optional[Decimal]
    square_meters: Optional[Decimal]
    total_expenses: Optional[Decimal]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "FinancialSummary":
        return cls(
            starting_capital=parse_amount(payload.get("startingCapital")),
            square_meters=parse_amount(payload.get("squareMeters")),
            total_expenses=parse_amount(payload.get("totalExpenses")),
        )
