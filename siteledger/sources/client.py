"""Mini README: Async HTTP client for the back-office REST backend.

Structure:
    * BackendClient - wraps ``httpx.AsyncClient`` and maps transport and
      status failures onto ``NetworkError`` and ``ServerError``.

Usage:
    async with BackendClient.from_settings() as client:
        rows = await client.get_json("/api/receipts")

There is no retry logic. A failed call raises, and the caller decides what
the user sees.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ..configuration import SiteLedgerSettings, get_settings
from ..errors import NetworkError, ServerError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class BackendClient:
    """Thin JSON client bound to one backend base URL."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        LOGGER.debug("Backend client bound to %s (timeout=%ss)", self.base_url, timeout)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[SiteLedgerSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "BackendClient":
        settings = settings or get_settings()
        return cls(
            settings.api_base_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release pooled connections."""

        await self._client.aclose()

    async def request(
        self, method: str, path: str, *, json: Any = None
    ) -> httpx.Response:
        """Issue a request, raising on connectivity or non-2xx failures."""

        LOGGER.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as error:
            LOGGER.error("%s %s failed: %s", method, path, error)
            raise NetworkError(
                f"{method} {path} could not reach {self.base_url}: {error}",
                method=method,
                path=path,
            ) from error

        if not response.is_success:
            LOGGER.error("%s %s returned HTTP %s", method, path, response.status_code)
            raise ServerError(
                response.status_code,
                method=method,
                path=path,
                detail=response.text[:200] or None,
            )
        return response

    async def get_json(self, path: str) -> Any:
        response = await self.request("GET", path)
        return self._decode(response, "GET", path)

    async def get_text(self, path: str) -> str:
        response = await self.request("GET", path)
        return response.text.strip()

    async def post_json(self, path: str, payload: Any) -> Any:
        response = await self.request("POST", path, json=payload)
        return self._decode(response, "POST", path)

    async def put_json(self, path: str, payload: Any) -> Any:
        response = await self.request("PUT", path, json=payload)
        return self._decode(response, "PUT", path)

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)

    @staticmethod
    def _decode(response: httpx.Response, method: str, path: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as error:
            raise ServerError(
                response.status_code,
                method=method,
                path=path,
                detail="response body is not valid JSON",
            ) from error
