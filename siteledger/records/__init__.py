"""Mini README: Record types shared by the sources, aggregation and metrics layers.

The backend owns every record; the console only parses what it receives and
serialises what it sends. See ``models`` for parsing rules.
"""

from .models import (
    CompanyProfile,
    FinancialSettings,
    FinancialSummary,
    PaymentRecord,
    ReceiptRecord,
    Record,
    RecordKind,
    parse_amount,
    parse_date,
    record_from_payload,
)

__all__ = [
    "CompanyProfile",
    "FinancialSettings",
    "FinancialSummary",
    "PaymentRecord",
    "ReceiptRecord",
    "Record",
    "RecordKind",
    "parse_amount",
    "parse_date",
    "record_from_payload",
]
