"""Mini README: Tests for the financials controller and console state.

Structure:
    * Load is all-or-nothing across company and transactions.
    * Failures queue notifications and keep the last good state.
    * Settings and record writes respect validation and the submit guard.
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from siteledger.controller import FinancialsController
from siteledger.errors import DuplicateSubmissionError, ServerError, ValidationError
from siteledger.records import PaymentRecord, RecordKind
from siteledger.state import ConsoleState, SubmissionGuard

COMPANY = {"id": 1, "companyName": "Korovesis Development", "squareMeters": 50, "startingCapital": 0}
RECEIPTS = [{"id": 1, "receiptNumber": "R-1", "date": "2024-01-10", "amount": 200}]
PAYMENTS = [
    {"id": 2, "paymentNumber": "P-2", "date": "2024-01-10", "amount": 100},
    {"id": 3, "paymentNumber": "P-3", "date": "2024-01-09", "amount": 50},
]


def _seed(backend) -> None:
    backend.routes[("GET", "/api/company")] = (200, COMPANY)
    backend.routes[("GET", "/api/receipts")] = (200, RECEIPTS)
    backend.routes[("GET", "/api/payments")] = (200, PAYMENTS)


def _run(backend, action, state=None):
    async def scenario():
        async with backend.client() as client:
            controller = FinancialsController.over_http(client, state)
            return await action(controller)

    return asyncio.run(scenario())


def test_load_populates_state_and_metrics(backend) -> None:
    _seed(backend)

    async def action(controller):
        await controller.load()
        return controller

    controller = _run(backend, action)

    assert controller.state.company.company_name == "Korovesis Development"
    assert len(controller.state.aggregate) == 3
    metrics = controller.metrics()
    assert metrics.total_expenses == Decimal("150")
    assert metrics.cost_per_square_meter == Decimal("3")


def test_failed_load_keeps_previous_view_and_notifies(backend) -> None:
    _seed(backend)
    state = ConsoleState()

    async def action(controller):
        await controller.load()
        backend.routes[("GET", "/api/payments")] = (503, {"error": "down"})
        backend.routes[("GET", "/api/company")] = (200, {"companyName": "Changed"})
        with pytest.raises(ServerError):
            await controller.load()

    _run(backend, action, state)

    assert len(state.aggregate) == 3
    assert state.company.company_name == "Korovesis Development"
    assert [note.level for note in state.notifications] == ["error"]


def test_visible_transactions_follow_filter(backend) -> None:
    _seed(backend)

    async def action(controller):
        await controller.reload_transactions()
        controller.set_filter(show_receipts=False, show_payments=True)
        return controller.visible_transactions()

    visible = _run(backend, action)

    assert [t.kind for t in visible] == [RecordKind.PAYMENT, RecordKind.PAYMENT]


def test_invalid_settings_never_reach_backend(backend) -> None:
    state = ConsoleState()

    async def action(controller):
        await controller.save_settings("-1", "10")

    with pytest.raises(ValidationError) as excinfo:
        _run(backend, action, state)

    assert "starting_capital" in excinfo.value.fields
    assert backend.calls == []
    assert state.settings_form == {"starting_capital": "-1", "square_meters": "10"}


def test_failed_settings_write_keeps_form_for_retry(backend) -> None:
    _seed(backend)
    backend.routes[("PUT", "/api/company")] = (500, {"error": "boom"})
    state = ConsoleState()

    async def action(controller):
        await controller.load()
        await controller.save_settings("1000", "75")

    with pytest.raises(ServerError):
        _run(backend, action, state)

    assert state.settings_form == {"starting_capital": "1000", "square_meters": "75"}
    assert state.company.settings.square_meters == Decimal("50")
    assert state.notifications[-1].level == "error"


def test_successful_settings_save_updates_company(backend) -> None:
    _seed(backend)
    backend.routes[("PUT", "/api/company")] = lambda request: httpx.Response(
        200, json=json.loads(request.content)
    )

    async def action(controller):
        await controller.load()
        await controller.save_settings("1000", "75")
        return controller

    controller = _run(backend, action)

    assert controller.state.company.settings.square_meters == Decimal("75.0")
    assert controller.state.settings_form == {}
    assert controller.metrics().cost_per_square_meter == Decimal("2")


def test_submission_guard_rejects_concurrent_claim() -> None:
    guard = SubmissionGuard()

    async def scenario() -> None:
        async with guard.claim("save_settings"):
            assert guard.is_pending("save_settings")
            with pytest.raises(DuplicateSubmissionError):
                async with guard.claim("save_settings"):
                    pass
        assert not guard.is_pending("save_settings")

    asyncio.run(scenario())


def test_save_record_creates_then_reloads(backend) -> None:
    _seed(backend)
    backend.routes[("POST", "/api/payments")] = (201, {"id": 9, "paymentNumber": "P-9", "amount": 30})
    payment = PaymentRecord(
        id=None, payment_number="", payee_name="ΔΕΗ", date=date(2024, 2, 1), amount=Decimal("30")
    )

    async def action(controller):
        return await controller.save_record(payment)

    stored = _run(backend, action)

    assert stored.id == 9
    assert backend.paths("POST") == ["/api/payments"]
    assert sorted(backend.paths("GET")) == ["/api/payments", "/api/receipts"]


def test_save_record_updates_when_editing(backend) -> None:
    _seed(backend)
    backend.routes[("GET", "/api/payments/2")] = (200, PAYMENTS[0])
    backend.routes[("PUT", "/api/payments/2")] = (200, {**PAYMENTS[0], "amount": 120})
    state = ConsoleState()

    async def action(controller):
        record = await controller.begin_edit(RecordKind.PAYMENT, 2)
        return await controller.save_record(record)

    stored = _run(backend, action, state)

    assert stored.amount == Decimal("120")
    assert state.editing[RecordKind.PAYMENT] is None
    assert backend.paths("PUT") == ["/api/payments/2"]


def test_save_record_rejects_non_positive_amount(backend) -> None:
    payment = PaymentRecord(
        id=None, payment_number="", payee_name="X", date=None, amount=Decimal("0")
    )

    with pytest.raises(ValidationError) as excinfo:
        _run(backend, lambda controller: controller.save_record(payment))

    assert set(excinfo.value.fields) == {"date", "amount"}
    assert backend.calls == []


def test_failed_delete_notifies(backend) -> None:
    backend.routes[("DELETE", "/api/receipts/1")] = (500, {"error": "locked"})
    state = ConsoleState()

    with pytest.raises(ServerError):
        _run(backend, lambda controller: controller.delete_record(RecordKind.RECEIPT, 1), state)

    assert state.drain_notifications()[0].level == "error"
    assert state.notifications == []


def test_failed_refresh_after_save_still_returns_stored_record(backend) -> None:
    _seed(backend)
    backend.routes[("POST", "/api/payments")] = (201, {"id": 9, "paymentNumber": "P-9", "amount": 30})
    backend.routes[("GET", "/api/payments")] = (500, {"error": "boom"})
    state = ConsoleState()
    payment = PaymentRecord(
        id=None, payment_number="", payee_name="ΔΕΗ", date=date(2024, 2, 1), amount=Decimal("30")
    )

    stored = _run(backend, lambda controller: controller.save_record(payment), state)

    assert stored.id == 9
    assert [note.level for note in state.notifications] == ["warning"]
    assert state.editing[RecordKind.PAYMENT] is None


def test_failed_refresh_after_delete_is_only_a_warning(backend) -> None:
    _seed(backend)
    backend.routes[("DELETE", "/api/receipts/1")] = (204, "")
    backend.routes[("GET", "/api/receipts")] = httpx.ConnectError("offline")
    state = ConsoleState()

    _run(backend, lambda controller: controller.delete_record(RecordKind.RECEIPT, 1), state)

    assert [note.level for note in state.notifications] == ["warning"]


def test_superseded_load_still_stores_company(backend) -> None:
    """A newer reload only owns the aggregate; the company record is kept."""

    _seed(backend)
    state = ConsoleState()

    def _company_then_newer_reload(request):
        state.begin_aggregate_load()
        return httpx.Response(200, json=COMPANY)

    backend.routes[("GET", "/api/company")] = _company_then_newer_reload

    async def action(controller):
        await controller.load()

    _run(backend, action, state)

    assert state.company.company_name == "Korovesis Development"
    assert state.aggregate_loaded is False
