"""Mini README: Derived financial metrics.

Structure:
    * DerivedMetrics - ephemeral result of one calculation.
    * total_expenses - exact Decimal sum of payment amounts.
    * cost_per_square_meter - expenses divided by floor area, when defined.
    * compute_metrics - convenience wrapper combining both.

Payments with a missing or malformed amount count as zero. They are
logged and listed in ``DerivedMetrics.skipped_records`` so the condition is
visible without failing the calculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ..errors import MetricUnavailableError
from ..logging_utils import get_logger
from ..records import FinancialSettings, PaymentRecord

LOGGER = get_logger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class DerivedMetrics:
    total_expenses: Decimal
    cost_per_square_meter: Optional[Decimal]
    payment_count: int = 0
    skipped_records: Tuple[str, ...] = ()

    @property
    def has_cost_per_square_meter(self) -> bool:
        return self.cost_per_square_meter is not None

    def require_cost_per_square_meter(self) -> Decimal:
        """Return the metric or raise when the floor area is not usable."""

        if self.cost_per_square_meter is None:
            raise MetricUnavailableError(
                "Cost per square metre needs a saved floor area greater than zero"
            )
        return self.cost_per_square_meter


def _label(payment: PaymentRecord) -> str:
    if payment.id is not None:
        return f"payment:{payment.id}"
    return f"payment:{payment.payment_number or '?'}"


def _summed(payments: Iterable[PaymentRecord]) -> Tuple[Decimal, int, Tuple[str, ...]]:
    total = ZERO
    count = 0
    skipped = []
    for payment in payments:
        count += 1
        amount = payment.amount
        if not isinstance(amount, Decimal) or not amount.is_finite():
            LOGGER.warning("Treating %s amount %r as 0", _label(payment), amount)
            skipped.append(_label(payment))
            continue
        total += amount
    return total, count, tuple(skipped)


def total_expenses(payments: Iterable[PaymentRecord]) -> Decimal:
    """Sum of all payment amounts."""

    total, _, _ = _summed(payments)
    return total


def cost_per_square_meter(
    expenses: Decimal, square_meters: Optional[Decimal]
) -> Optional[Decimal]:
    """``expenses / square_meters``, or ``None`` when the area is unset or not positive."""

    if square_meters is None or not square_meters.is_finite() or square_meters <= ZERO:
        return None
    return expenses / square_meters


def compute_metrics(
    payments: Iterable[PaymentRecord], settings: Optional[FinancialSettings]
) -> DerivedMetrics:
    total, count, skipped = _summed(payments)
    square_meters = settings.square_meters if settings else None
    metrics = DerivedMetrics(
        total_expenses=total,
        cost_per_square_meter=cost_per_square_meter(total, square_meters),
        payment_count=count,
        skipped_records=skipped,
    )
    LOGGER.debug(
        "Metrics -> expenses: %s over %s payments, cost/m2: %s",
        metrics.total_expenses,
        count,
        metrics.cost_per_square_meter,
    )
    return metrics
