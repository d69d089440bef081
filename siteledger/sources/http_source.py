"""Mini README: REST adapter for receipts and payments.

Structure:
    * HttpRecordSource - implements ``RecordSource`` over ``/api/{kind}s``.

Endpoints used, with ``{collection}`` being ``receipts`` or ``payments``:
    GET    /api/{collection}
    GET    /api/{collection}/{id}
    GET    /api/{collection}/customer/{customer_id}
    GET    /api/{collection}/next-number   (plain text)
    POST   /api/{collection}
    PUT    /api/{collection}/{id}
    DELETE /api/{collection}/{id}
"""

from __future__ import annotations

from typing import Any, List

from ..errors import ServerError
from ..logging_utils import get_logger
from ..records import Record, RecordKind, record_from_payload
from .base import RecordSource
from .client import BackendClient

LOGGER = get_logger(__name__)


class HttpRecordSource(RecordSource):
    """Record source backed by the REST API."""

    def __init__(self, kind: RecordKind, client: BackendClient) -> None:
        super().__init__(kind)
        self.client = client
        self.path = f"/api/{kind.collection}"

    def _parse_many(self, rows: Any, path: str) -> List[Record]:
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise ServerError(200, method="GET", path=path, detail="expected a JSON array")
        return [record_from_payload(self.kind, row) for row in rows if isinstance(row, dict)]

    async def fetch_all(self) -> List[Record]:
        rows = await self.client.get_json(self.path)
        records = self._parse_many(rows, self.path)
        LOGGER.debug("Fetched %s %s records", len(records), self.kind.value)
        return records

    async def fetch_one(self, record_id: int) -> Record:
        path = f"{self.path}/{record_id}"
        payload = await self.client.get_json(path)
        if not isinstance(payload, dict):
            raise ServerError(200, method="GET", path=path, detail="expected a JSON object")
        return record_from_payload(self.kind, payload)

    async def fetch_for_customer(self, customer_id: int) -> List[Record]:
        path = f"{self.path}/customer/{customer_id}"
        rows = await self.client.get_json(path)
        return self._parse_many(rows, path)

    async def next_number(self) -> str:
        return await self.client.get_text(f"{self.path}/next-number")

    async def create(self, record: Record) -> Record:
        payload = record.as_payload()
        payload.pop("id", None)
        stored = await self.client.post_json(self.path, payload)
        LOGGER.info("Created %s %s", self.kind.value, record.number or "(unnumbered)")
        return record_from_payload(self.kind, stored or payload)

    async def update(self, record_id: int, record: Record) -> Record:
        path = f"{self.path}/{record_id}"
        stored = await self.client.put_json(path, record.as_payload())
        LOGGER.info("Updated %s %s", self.kind.value, record_id)
        return record_from_payload(self.kind, stored or record.as_payload())

    async def delete(self, record_id: int) -> None:
        await self.client.delete(f"{self.path}/{record_id}")
        LOGGER.info("Deleted %s %s", self.kind.value, record_id)
