"""Mini README: Tests for the shared formatting helpers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from siteledger.formatting import escape_html, format_currency, format_date, format_signed


def test_escape_html_covers_quotes_and_backticks() -> None:
    assert escape_html("<b>\"O'Neil\" & `x`</b>") == (
        "&lt;b&gt;&#34;O&#39;Neil&#34; &amp; &#96;x&#96;&lt;/b&gt;"
    )
    assert escape_html(None) == ""
    assert escape_html(42) == "42"


def test_format_currency_uses_greek_grouping() -> None:
    assert format_currency(Decimal("1234.5")) == "1.234,50 €"
    assert format_currency(Decimal("1234567.005")) == "1.234.567,01 €"
    assert format_currency(0) == "0,00 €"
    assert format_currency(Decimal("-80")) == "-80,00 €"
    assert format_currency(None) == "—"
    assert format_currency("not a number") == "—"


def test_format_date_long_greek_form() -> None:
    assert format_date(date(2024, 1, 10)) == "10 Ιανουαρίου 2024"
    assert format_date("2024-05-03") == "3 Μαΐου 2024"
    assert format_date(None) == "N/A"
    assert format_date("garbage") == "N/A"


def test_format_signed_prefixes_direction() -> None:
    assert format_signed(Decimal("200"), inflow=True) == "+ 200,00 €"
    assert format_signed(Decimal("80"), inflow=False) == "- 80,00 €"
