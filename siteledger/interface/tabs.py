"""Mini README: Tab identifiers and their activation handlers.

Structure:
    * Tab - the finite set of console tabs.
    * TabDispatcher - lookup table from tab to async handler, checked for
      completeness when it is built.

Switching to a tab reloads its data through the registered handler. A
dispatcher missing a handler for any ``Tab`` cannot be constructed.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

TabHandler = Callable[[], Awaitable[Any]]


class Tab(str, Enum):
    CUSTOMERS = "customers"
    RECEIPTS = "receipts"
    PAYMENTS = "payments"
    TRANSACTIONS = "transactions"
    FINANCIALS = "financials"

    @classmethod
    def from_str(cls, value: str) -> "Tab":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unknown tab: {value}") from error


class TabDispatcher:
    """Dispatch tab activations to their handlers."""

    def __init__(self, handlers: Mapping[Tab, TabHandler]) -> None:
        missing = [tab.value for tab in Tab if tab not in handlers]
        if missing:
            raise ValueError(f"No handler registered for tabs: {', '.join(missing)}")
        self._handlers: Dict[Tab, TabHandler] = dict(handlers)

    async def activate(self, tab: Tab) -> Any:
        LOGGER.debug("Activating tab '%s'", tab.value)
        return await self._handlers[tab]()
