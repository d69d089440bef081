"""Mini README: Shared fixtures faking the back-office REST backend.

Structure:
    * FakeBackend - ``httpx.MockTransport`` handler with canned routes and a
      call log, so tests can assert which requests were (not) issued.
    * backend - fixture returning a fresh ``FakeBackend``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from siteledger.sources import BackendClient

BASE_URL = "http://backend.test"

RouteSpec = Union[Tuple[int, Any], Exception, Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Serve canned responses keyed by ``(method, path)``."""

    def __init__(self, routes: Optional[Dict[Tuple[str, str], RouteSpec]] = None) -> None:
        self.routes: Dict[Tuple[str, str], RouteSpec] = dict(routes or {})
        self.calls: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        spec = self.routes.get((request.method, request.url.path))
        if spec is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(spec, Exception):
            raise spec
        if callable(spec):
            return spec(request)
        status, body = spec
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self) -> BackendClient:
        return BackendClient(BASE_URL, transport=httpx.MockTransport(self))

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [
            request.url.path
            for request in self.calls
            if method is None or request.method == method
        ]


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()
