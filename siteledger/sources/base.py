"""Mini README: Abstract record source contract.

Structure:
    * RecordSource - interface every record adapter implements.

Every call either succeeds completely or raises ``NetworkError`` /
``ServerError``; adapters never return partial collections.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..logging_utils import get_logger
from ..records import Record, RecordKind

LOGGER = get_logger(__name__)


class RecordSource(ABC):
    """Base interface for typed record collections."""

    kind: RecordKind

    def __init__(self, kind: RecordKind) -> None:
        self.kind = kind
        LOGGER.debug("Initialising %s source for %s records", type(self).__name__, kind.value)

    @abstractmethod
    async def fetch_all(self) -> List[Record]:
        """Return every record of this kind in backend order."""

    @abstractmethod
    async def fetch_one(self, record_id: int) -> Record:
        """Return a single record."""

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Persist a new record and return the stored version."""

    @abstractmethod
    async def update(self, record_id: int, record: Record) -> Record:
        """Replace an existing record and return the stored version."""

    @abstractmethod
    async def delete(self, record_id: int) -> None:
        """Remove a record."""

    async def fetch_for_customer(self, customer_id: int) -> List[Record]:
        """Records linked to a customer. Optional for adapters."""

        raise NotImplementedError(f"{self.kind.value} source does not support customer lookups")

    async def next_number(self) -> Optional[str]:
        """Next server-assigned sequence number, if the source issues them."""

        return None
