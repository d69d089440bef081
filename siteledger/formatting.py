"""Mini README: Shared formatting and sanitisation helpers.

Structure:
    * escape_html - escape text for HTML bodies and attribute values.
    * format_currency - Greek euro amounts, e.g. ``1.234,56 €``.
    * format_date - Greek long dates, e.g. ``10 Ιανουαρίου 2024``.
    * format_signed - amount prefixed with ``+`` or ``-`` by direction.

Every view uses these helpers; there is one definition of each.
``escape_html`` builds on markupsafe and also escapes backticks. The
console templates apply it as a filter to free-text record fields.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Union

from markupsafe import Markup, escape

# Genitive month names as used in Greek long dates.
_GREEK_MONTHS = (
    "Ιανουαρίου",
    "Φεβρουαρίου",
    "Μαρτίου",
    "Απριλίου",
    "Μαΐου",
    "Ιουνίου",
    "Ιουλίου",
    "Αυγούστου",
    "Σεπτεμβρίου",
    "Οκτωβρίου",
    "Νοεμβρίου",
    "Δεκεμβρίου",
)

MISSING_DATE = "N/A"
MISSING_AMOUNT = "—"
CENT = Decimal("0.01")


def escape_html(text: Any) -> Markup:
    """Escape ``text`` for safe HTML output; ``None`` becomes ``""``.

    Returns ``Markup`` so Jinja2 autoescaping does not escape it twice.
    """

    if text is None:
        return Markup("")
    return Markup(str(escape(text)).replace("`", "&#96;"))


def _group_thousands(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ".".join(groups)


def format_currency(amount: Union[Decimal, float, int, str, None]) -> str:
    """Format an amount the way the Greek locale shows euros."""

    if amount is None or amount == "":
        return MISSING_AMOUNT
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return MISSING_AMOUNT
    if not value.is_finite():
        return MISSING_AMOUNT

    rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    whole, _, cents = f"{abs(rounded):.2f}".partition(".")
    return f"{sign}{_group_thousands(whole)},{cents} €"


def format_date(value: Union[date, datetime, str, None]) -> str:
    """Format a calendar date as ``<day> <genitive month> <year>``."""

    if value is None or value == "":
        return MISSING_DATE
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value.strip()[:10])
        except ValueError:
            return MISSING_DATE
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day} {_GREEK_MONTHS[value.month - 1]} {value.year}"


def format_signed(amount: Optional[Decimal], *, inflow: bool) -> str:
    """``+ 200,00 €`` for inflows, ``- 80,00 €`` for outflows."""

    return f"{'+' if inflow else '-'} {format_currency(amount)}"
