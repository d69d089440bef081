"""Mini README: Tests for the REST adapters.

Structure:
    * Status and connectivity failures map onto the error taxonomy.
    * Endpoint paths for lookups, sequence numbers and mutations.
    * Registry lookups by record kind.
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from siteledger.errors import NetworkError, ServerError
from siteledger.records import PaymentRecord, ReceiptRecord, RecordKind
from siteledger.sources import CompanyClient, HttpRecordSource, SourceRegistry


def _run(backend, action):
    async def scenario():
        async with backend.client() as client:
            return await action(client)

    return asyncio.run(scenario())


def test_non_2xx_raises_server_error_with_status(backend) -> None:
    backend.routes[("GET", "/api/receipts/9")] = (404, {"error": "missing"})

    with pytest.raises(ServerError) as excinfo:
        _run(backend, lambda client: HttpRecordSource(RecordKind.RECEIPT, client).fetch_one(9))

    assert excinfo.value.status_code == 404
    assert excinfo.value.path == "/api/receipts/9"


def test_transport_failure_raises_network_error(backend) -> None:
    backend.routes[("GET", "/api/payments")] = httpx.ReadTimeout("timed out")

    with pytest.raises(NetworkError):
        _run(backend, lambda client: HttpRecordSource(RecordKind.PAYMENT, client).fetch_all())


def test_non_list_listing_is_a_server_error(backend) -> None:
    backend.routes[("GET", "/api/receipts")] = (200, {"unexpected": "object"})

    with pytest.raises(ServerError):
        _run(backend, lambda client: HttpRecordSource(RecordKind.RECEIPT, client).fetch_all())


def test_next_number_is_plain_text(backend) -> None:
    backend.routes[("GET", "/api/receipts/next-number")] = (200, "R-0042\n")

    number = _run(backend, lambda client: HttpRecordSource(RecordKind.RECEIPT, client).next_number())

    assert number == "R-0042"


def test_fetch_for_customer_uses_customer_path(backend) -> None:
    backend.routes[("GET", "/api/receipts/customer/3")] = (
        200,
        [{"id": 1, "customerId": 3, "amount": 10, "date": "2024-01-01"}],
    )

    records = _run(
        backend, lambda client: HttpRecordSource(RecordKind.RECEIPT, client).fetch_for_customer(3)
    )

    assert [record.customer_id for record in records] == [3]


def test_create_posts_payload_without_id(backend) -> None:
    backend.routes[("POST", "/api/receipts")] = lambda request: httpx.Response(
        201, json={**json.loads(request.content), "id": 11, "receiptNumber": "R-11"}
    )
    receipt = ReceiptRecord(
        id=99,
        receipt_number="",
        customer_id=1,
        customer_name="Α",
        date=date(2024, 1, 2),
        amount=Decimal("40"),
    )

    stored = _run(backend, lambda client: HttpRecordSource(RecordKind.RECEIPT, client).create(receipt))

    assert "id" not in json.loads(backend.calls[0].content)
    assert stored.id == 11
    assert stored.receipt_number == "R-11"


def test_update_and_delete_target_record_path(backend) -> None:
    backend.routes[("PUT", "/api/payments/4")] = (200, {"id": 4, "amount": 5})
    backend.routes[("DELETE", "/api/payments/4")] = (204, "")

    payment = PaymentRecord.from_payload({"id": 4, "amount": 5})

    async def action(client):
        source = HttpRecordSource(RecordKind.PAYMENT, client)
        record = await source.update(4, payment)
        await source.delete(4)
        return record

    stored = _run(backend, action)

    assert stored.id == 4
    assert backend.paths() == ["/api/payments/4", "/api/payments/4"]


def test_company_client_reads_summary(backend) -> None:
    backend.routes[("GET", "/api/company/financial-summary")] = (
        200,
        {"startingCapital": 1000, "squareMeters": 50, "totalExpenses": 150, "extra": 1},
    )

    summary = _run(backend, lambda client: CompanyClient(client).fetch_financial_summary())

    assert summary.total_expenses == Decimal("150")


def test_registry_lookup(backend) -> None:
    client = backend.client()
    registry = SourceRegistry.over_http(client)

    assert list(registry.available_kinds()) == [RecordKind.RECEIPT, RecordKind.PAYMENT]
    assert registry.get(RecordKind.PAYMENT).path == "/api/payments"
    with pytest.raises(KeyError):
        SourceRegistry().get(RecordKind.RECEIPT)
