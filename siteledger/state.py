"""Mini README: Application state owned by the console.

Structure:
    * Notification - user-visible, non-blocking message.
    * SubmissionGuard - blocks a second concurrent submit of one action.
    * ConsoleState - every piece of mutable console state in one object.

Writers per field:
    * ``aggregate`` - only ``publish_aggregate``, called by the aggregator.
    * ``company`` - the load flow and the settings-save flow.
    * ``filter_flags`` - filter toggles.
    * ``settings_form`` / ``editing`` - form handlers.
Readers (the filter view and the metrics calculator) never mutate.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional, Set, Tuple

from .aggregation import FilterFlags, Transaction
from .errors import DuplicateSubmissionError
from .logging_utils import get_logger
from .records import CompanyProfile, RecordKind

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Notification:
    level: str
    message: str
    created_at: datetime = field(default_factory=datetime.now)

    def as_dict(self) -> Dict[str, str]:
        return {
            "level": self.level,
            "message": self.message,
            "created_at": self.created_at.isoformat(timespec="seconds"),
        }


class SubmissionGuard:
    """Track in-flight actions so double clicks do not submit twice."""

    def __init__(self) -> None:
        self._pending: Set[str] = set()

    def is_pending(self, action: str) -> bool:
        return action in self._pending

    @asynccontextmanager
    async def claim(self, action: str) -> AsyncIterator[None]:
        if action in self._pending:
            LOGGER.warning("Ignoring duplicate submit of '%s'", action)
            raise DuplicateSubmissionError(action)
        self._pending.add(action)
        try:
            yield
        finally:
            self._pending.discard(action)


class ConsoleState:
    """Mutable state shared by the console views."""

    def __init__(self) -> None:
        self._aggregate: Tuple[Transaction, ...] = ()
        self._aggregate_loaded = False
        self._issued_loads = 0
        self.company: Optional[CompanyProfile] = None
        self.filter_flags = FilterFlags.all_on()
        self.settings_form: Dict[str, str] = {}
        self.editing: Dict[RecordKind, Optional[int]] = {kind: None for kind in RecordKind}
        self.notifications: List[Notification] = []
        self.guard = SubmissionGuard()

    @property
    def aggregate(self) -> Tuple[Transaction, ...]:
        return self._aggregate

    @property
    def aggregate_loaded(self) -> bool:
        return self._aggregate_loaded

    def begin_aggregate_load(self) -> int:
        """Register a new load request and return its token."""

        self._issued_loads += 1
        return self._issued_loads

    def publish_aggregate(self, token: int, transactions: Tuple[Transaction, ...]) -> bool:
        """Store ``transactions`` unless a newer load has been issued since."""

        if token != self._issued_loads:
            LOGGER.debug(
                "Discarding stale aggregate (token %s, latest %s)", token, self._issued_loads
            )
            return False
        self._aggregate = tuple(transactions)
        self._aggregate_loaded = True
        return True

    def notify(self, level: str, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self.notifications.append(notification)
        return notification

    def drain_notifications(self) -> List[Notification]:
        drained, self.notifications = self.notifications, []
        return drained
