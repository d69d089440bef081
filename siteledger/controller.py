"""Mini README: Financials controller tying sources, state and metrics together.

Structure:
    * FinancialsController - the operations behind the transactions and
      financials views.

Failure policy:
    * ``ValidationError`` blocks the action before any request is sent.
    * Backend failures on reads keep the last good aggregate and company.
    * Backend failures on writes keep the form draft for a retry.
    * A refresh that fails after a successful write is only a warning; the
      write itself is reported as done.
    * Every failure is pushed to ``state.notifications`` and re-raised so
      callers can map it to a response. Nothing is retried.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import List, Optional, Tuple

from .aggregation import FilterFlags, Transaction, TransactionAggregator, apply_filter
from .errors import BackendError, ValidationError
from .logging_utils import get_logger
from .metrics import DerivedMetrics, SettingsService, compute_metrics
from .records import CompanyProfile, PaymentRecord, Record, RecordKind
from .sources import BackendClient, CompanyClient, SourceRegistry
from .state import ConsoleState

LOGGER = get_logger(__name__)

LOAD_FAILED = "Αποτυχία φόρτωσης οικονομικών στοιχείων"
TRANSACTIONS_FAILED = "Αποτυχία φόρτωσης κινήσεων"
SETTINGS_SAVED = "Οι παράμετροι αποθηκεύτηκαν επιτυχώς!"
SETTINGS_FAILED = "Αποτυχία αποθήκευσης παραμέτρων"
SETTINGS_INVALID = "Μη έγκυρες παράμετροι"
RECORD_SAVE_FAILED = "Αποτυχία αποθήκευσης εγγραφής"
RECORD_DELETE_FAILED = "Αποτυχία διαγραφής εγγραφής"
RECORD_LOAD_FAILED = "Αποτυχία φόρτωσης εγγραφής"
RECORD_INVALID = "Μη έγκυρη εγγραφή"
SAVED_REFRESH_FAILED = "Η εγγραφή αποθηκεύτηκε, αλλά η ανανέωση των κινήσεων απέτυχε"
DELETED_REFRESH_FAILED = "Η εγγραφή διαγράφηκε, αλλά η ανανέωση των κινήσεων απέτυχε"


def check_record(record: Record) -> None:
    """Reject records the backend would store with a wrong sign or no date."""

    errors = {}
    if record.date is None:
        errors["date"] = "is required"
    if record.amount is None:
        errors["amount"] = "is required"
    elif record.amount <= Decimal("0"):
        errors["amount"] = "must be greater than zero"
    if errors:
        raise ValidationError(errors)


class FinancialsController:
    """Operations behind the console views; owns no state of its own."""

    def __init__(
        self,
        sources: SourceRegistry,
        company_client: CompanyClient,
        state: Optional[ConsoleState] = None,
    ) -> None:
        self.sources = sources
        self.company_client = company_client
        self.aggregator = TransactionAggregator(sources)
        self.settings_service = SettingsService(company_client)
        self.state = state or ConsoleState()

    @classmethod
    def over_http(
        cls, client: BackendClient, state: Optional[ConsoleState] = None
    ) -> "FinancialsController":
        return cls(SourceRegistry.over_http(client), CompanyClient(client), state)

    async def load(self) -> None:
        """Load the company record and the aggregate together, all-or-nothing."""

        token = self.state.begin_aggregate_load()
        try:
            company, transactions = await asyncio.gather(
                self.company_client.fetch_company(), self.aggregator.fetch()
            )
        except BackendError as error:
            LOGGER.error("Financial data load failed: %s", error)
            self.state.notify("error", LOAD_FAILED)
            raise
        self.state.company = company
        self.state.publish_aggregate(token, transactions)
        LOGGER.debug("Loaded %s transactions", len(transactions))

    async def reload_transactions(self) -> bool:
        """Re-fetch the aggregate only. Returns ``False`` if superseded."""

        try:
            return await self.aggregator.load_into(self.state)
        except BackendError as error:
            LOGGER.error("Transaction reload failed: %s", error)
            self.state.notify("error", TRANSACTIONS_FAILED)
            raise

    def set_filter(self, *, show_receipts: bool = True, show_payments: bool = True) -> FilterFlags:
        self.state.filter_flags = FilterFlags.from_toggles(
            show_receipts=show_receipts, show_payments=show_payments
        )
        return self.state.filter_flags

    def visible_transactions(self, flags: Optional[FilterFlags] = None) -> Tuple[Transaction, ...]:
        return apply_filter(self.state.aggregate, flags or self.state.filter_flags)

    def payments(self) -> List[PaymentRecord]:
        return [
            transaction.record
            for transaction in self.state.aggregate
            if transaction.kind is RecordKind.PAYMENT
        ]

    def metrics(self) -> DerivedMetrics:
        settings = self.state.company.settings if self.state.company else None
        return compute_metrics(self.payments(), settings)

    async def save_settings(self, starting_capital, square_meters) -> CompanyProfile:
        """Validate and persist the financial settings."""

        self.state.settings_form = {
            "starting_capital": "" if starting_capital is None else str(starting_capital),
            "square_meters": "" if square_meters is None else str(square_meters),
        }
        async with self.state.guard.claim("save_settings"):
            try:
                stored = await self.settings_service.save(
                    self.state.company, starting_capital, square_meters
                )
            except ValidationError:
                self.state.notify("warning", SETTINGS_INVALID)
                raise
            except BackendError as error:
                LOGGER.error("Saving settings failed: %s", error)
                self.state.notify("error", SETTINGS_FAILED)
                raise
        self.state.company = stored
        self.state.settings_form = {}
        self.state.notify("success", SETTINGS_SAVED)
        return stored

    async def begin_edit(self, kind: RecordKind, record_id: int) -> Record:
        try:
            record = await self.sources.get(kind).fetch_one(record_id)
        except BackendError:
            self.state.notify("error", RECORD_LOAD_FAILED)
            raise
        self.state.editing[kind] = record_id
        return record

    def cancel_edit(self, kind: RecordKind) -> None:
        self.state.editing[kind] = None

    async def save_record(self, record: Record) -> Record:
        """Create or update depending on the edit tracker, then re-fetch."""

        kind = record.kind
        try:
            check_record(record)
        except ValidationError:
            self.state.notify("warning", RECORD_INVALID)
            raise
        source = self.sources.get(kind)
        editing_id = self.state.editing[kind]
        async with self.state.guard.claim(f"save_{kind.value}"):
            try:
                if editing_id is None:
                    stored = await source.create(record)
                else:
                    stored = await source.update(editing_id, record)
            except BackendError:
                self.state.notify("error", RECORD_SAVE_FAILED)
                raise
        self.state.editing[kind] = None
        await self._refresh_after_write(SAVED_REFRESH_FAILED)
        return stored

    async def delete_record(self, kind: RecordKind, record_id: int) -> None:
        async with self.state.guard.claim(f"delete_{kind.value}"):
            try:
                await self.sources.get(kind).delete(record_id)
            except BackendError:
                self.state.notify("error", RECORD_DELETE_FAILED)
                raise
        await self._refresh_after_write(DELETED_REFRESH_FAILED)

    async def _refresh_after_write(self, message: str) -> None:
        """Re-fetch after a successful write without reporting the write as failed."""

        try:
            await self.aggregator.load_into(self.state)
        except BackendError as error:
            LOGGER.warning("Write succeeded but refresh failed: %s", error)
            self.state.notify("warning", message)
