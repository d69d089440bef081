"""Mini README: Error taxonomy shared by every siteledger layer.

Structure:
    * ConsoleError - base for everything the console raises on purpose.
    * ValidationError - local, pre-network rejection listing failing fields.
    * BackendError - base for failed backend calls.
        * NetworkError - the request never produced an HTTP response.
        * ServerError - the backend answered with a non-2xx status.
    * MetricUnavailableError - a derived metric cannot be computed.
    * DuplicateSubmissionError - the same action is already in flight.

Adapters raise these at the HTTP seam; the web layer turns them into HTTP
responses and the controller turns them into user notifications.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional


class ConsoleError(Exception):
    """Base class for expected console failures."""


class ValidationError(ConsoleError):
    """Raised before any network call when user input is invalid."""

    def __init__(self, fields: Mapping[str, str]) -> None:
        self.fields: Dict[str, str] = dict(fields)
        summary = "; ".join(f"{name}: {reason}" for name, reason in self.fields.items())
        super().__init__(f"Invalid input ({summary})")


class BackendError(ConsoleError):
    """Base class for backend call failures."""

    def __init__(self, message: str, *, method: str = "", path: str = "") -> None:
        self.method = method
        self.path = path
        super().__init__(message)


class NetworkError(BackendError):
    """Connectivity failure: DNS, refused connection, timeout."""


class ServerError(BackendError):
    """The backend answered with a non-2xx HTTP status."""

    def __init__(
        self,
        status_code: int,
        *,
        method: str = "",
        path: str = "",
        detail: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"{method} {path} returned HTTP {status_code}".strip()
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, method=method, path=path)


class MetricUnavailableError(ConsoleError):
    """Raised when a caller demands a metric whose inputs are missing."""


class DuplicateSubmissionError(ConsoleError):
    """Raised when an action is submitted again while still in flight."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Action '{action}' is already in progress")
