"""Mini README: FastAPI console for the back-office financials.

Structure:
    * create_application - application factory wiring the backend client,
      controller, tab dispatcher and routes.
    * Route error mapping - ``ValidationError`` -> 422, duplicate submit ->
      409, unknown tab -> 404, backend failures -> 502.

The console keeps one ``ConsoleState`` per application. Reads that fail
leave the last good view in place and queue a notification that the page
shows on its next render (or that clients poll from ``/notifications``).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from ..aggregation import net_total
from ..configuration import SiteLedgerSettings, get_settings
from ..controller import FinancialsController
from ..errors import BackendError, DuplicateSubmissionError, ValidationError
from ..formatting import escape_html, format_currency
from ..logging_utils import get_logger
from ..metrics import DerivedMetrics
from ..records import RecordKind
from ..sources import BackendClient
from .presentation import EMPTY_STATE, build_cards
from .tabs import Tab, TabDispatcher

LOGGER = get_logger(__name__)


def _backend_failure(error: BackendError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(error))


def _metrics_payload(metrics: DerivedMetrics) -> Dict[str, Any]:
    cost = metrics.cost_per_square_meter
    return {
        "total_expenses": float(metrics.total_expenses),
        "total_expenses_display": format_currency(metrics.total_expenses),
        "cost_per_square_meter": None if cost is None else float(cost),
        "cost_per_square_meter_display": None if cost is None else format_currency(cost),
        "cost_per_square_meter_available": cost is not None,
        "payment_count": metrics.payment_count,
        "skipped_records": list(metrics.skipped_records),
    }


def _toggles_from_query(
    receipts: Optional[bool], payments: Optional[bool], submitted: Optional[str]
) -> Optional[Dict[str, bool]]:
    """Read filter toggles from a query string.

    Browsers omit unchecked checkboxes, so once any toggle or the form's
    ``filter`` marker is present, a missing toggle means "off". ``None``
    means no filter was submitted at all.
    """

    if receipts is None and payments is None and submitted is None:
        return None
    return {"show_receipts": bool(receipts), "show_payments": bool(payments)}


def create_application(
    client: Optional[BackendClient] = None,
    settings: Optional[SiteLedgerSettings] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    backend = client or BackendClient.from_settings(settings)
    controller = FinancialsController.over_http(backend)
    state = controller.state

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        await backend.close()

    app = FastAPI(title="siteledger console", version="0.1.0", lifespan=lifespan)
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    templates.env.filters["escape_html"] = escape_html

    async def _list_records(kind: RecordKind) -> List[Dict[str, object]]:
        records = await controller.sources.get(kind).fetch_all()
        return [record.as_payload() for record in records]

    async def _customers() -> Any:
        return await backend.get_json("/api/customers") or []

    async def _transactions() -> Dict[str, Any]:
        await controller.reload_transactions()
        return {"transactions": [card.as_dict() for card in build_cards(controller.visible_transactions())]}

    async def _financials() -> Dict[str, Any]:
        await controller.load()
        return {"metrics": _metrics_payload(controller.metrics())}

    dispatcher = TabDispatcher(
        {
            Tab.CUSTOMERS: _customers,
            Tab.RECEIPTS: lambda: _list_records(RecordKind.RECEIPT),
            Tab.PAYMENTS: lambda: _list_records(RecordKind.PAYMENT),
            Tab.TRANSACTIONS: _transactions,
            Tab.FINANCIALS: _financials,
        }
    )

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(
        request: Request,
        receipts: Optional[bool] = None,
        payments: Optional[bool] = None,
        filter: Optional[str] = None,
    ) -> HTMLResponse:
        """Render the financials page, loading data on first visit."""

        toggles = _toggles_from_query(receipts, payments, filter)
        if toggles is not None:
            controller.set_filter(**toggles)
        if not state.aggregate_loaded:
            try:
                await controller.load()
            except BackendError:
                LOGGER.warning("Rendering dashboard without fresh data")
        visible = controller.visible_transactions()
        company_settings = state.company.settings if state.company else None
        return templates.TemplateResponse(
            request,
            "console.html",
            {
                "cards": build_cards(visible),
                "empty_message": EMPTY_STATE,
                "filters": state.filter_flags.as_dict(),
                "metrics": _metrics_payload(controller.metrics()),
                "net_total": format_currency(net_total(visible)),
                "settings_form": state.settings_form
                or {
                    "starting_capital": ""
                    if not company_settings or company_settings.starting_capital is None
                    else str(company_settings.starting_capital),
                    "square_meters": ""
                    if not company_settings or company_settings.square_meters is None
                    else str(company_settings.square_meters),
                },
                "notifications": [item.as_dict() for item in state.drain_notifications()],
            },
        )

    @app.get("/tabs/{tab_name}")
    async def activate_tab(tab_name: str) -> JSONResponse:
        """Reload the data behind a tab."""

        try:
            tab = Tab.from_str(tab_name)
        except ValueError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        try:
            payload = await dispatcher.activate(tab)
        except BackendError as error:
            raise _backend_failure(error) from error
        return JSONResponse({"tab": tab.value, "data": payload})

    @app.get("/transactions")
    async def transactions(
        receipts: Optional[bool] = None,
        payments: Optional[bool] = None,
        filter: Optional[str] = None,
    ) -> JSONResponse:
        """Return the filtered view of the current aggregate.

        Without any toggle in the query every kind is shown.
        """

        toggles = _toggles_from_query(receipts, payments, filter) or {}
        flags = controller.set_filter(**toggles)
        visible = controller.visible_transactions(flags)
        return JSONResponse(
            {
                "filters": flags.as_dict(),
                "loaded": state.aggregate_loaded,
                "count": len(visible),
                "net_total": float(net_total(visible)),
                "transactions": [card.as_dict() for card in build_cards(visible)],
            }
        )

    @app.post("/transactions/reload")
    async def reload_transactions() -> JSONResponse:
        try:
            applied = await controller.reload_transactions()
        except BackendError as error:
            raise _backend_failure(error) from error
        LOGGER.info("Transactions reloaded (%s items)", len(state.aggregate))
        return JSONResponse({"applied": applied, "count": len(state.aggregate)})

    @app.get("/metrics")
    async def metrics() -> JSONResponse:
        return JSONResponse(_metrics_payload(controller.metrics()))

    @app.post("/settings")
    async def save_settings(
        starting_capital: str = Form(""),
        square_meters: str = Form(""),
    ) -> JSONResponse:
        """Validate and persist starting capital and floor area."""

        try:
            company = await controller.save_settings(starting_capital, square_meters)
        except ValidationError as error:
            raise HTTPException(status_code=422, detail={"fields": error.fields}) from error
        except DuplicateSubmissionError as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        except BackendError as error:
            raise _backend_failure(error) from error
        saved = company.settings
        return JSONResponse(
            {
                "starting_capital": None
                if saved.starting_capital is None
                else float(saved.starting_capital),
                "square_meters": None if saved.square_meters is None else float(saved.square_meters),
                "metrics": _metrics_payload(controller.metrics()),
            }
        )

    @app.get("/records/{kind_name}/next-number")
    async def next_number(kind_name: str) -> JSONResponse:
        """Sequence number the backend will assign to the next record."""

        try:
            kind = RecordKind.from_str(kind_name)
        except ValueError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        try:
            number = await controller.sources.get(kind).next_number()
        except BackendError as error:
            raise _backend_failure(error) from error
        return JSONResponse({"kind": kind.value, "next_number": number})

    @app.get("/customers/{customer_id}/receipts")
    async def customer_receipts(customer_id: int) -> JSONResponse:
        try:
            records = await controller.sources.get(RecordKind.RECEIPT).fetch_for_customer(customer_id)
        except BackendError as error:
            raise _backend_failure(error) from error
        return JSONResponse(
            {
                "customer_id": customer_id,
                "receipts": [record.as_payload() for record in records],
                "total": format_currency(sum(record.amount or 0 for record in records)),
            }
        )

    @app.get("/summary")
    async def financial_summary() -> JSONResponse:
        """Server-side summary next to the locally derived metrics."""

        try:
            summary = await controller.company_client.fetch_financial_summary()
        except BackendError as error:
            raise _backend_failure(error) from error
        return JSONResponse(
            {
                "server": {
                    "starting_capital": None
                    if summary.starting_capital is None
                    else float(summary.starting_capital),
                    "square_meters": None
                    if summary.square_meters is None
                    else float(summary.square_meters),
                    "total_expenses": None
                    if summary.total_expenses is None
                    else float(summary.total_expenses),
                },
                "local": _metrics_payload(controller.metrics()),
            }
        )

    @app.get("/notifications")
    async def notifications() -> JSONResponse:
        return JSONResponse({"notifications": [item.as_dict() for item in state.drain_notifications()]})

    app.state.controller = controller
    return app
