"""Mini README: Backend adapters package initialiser.

``client`` holds the HTTP transport, ``base`` the abstract record source,
``http_source`` the REST implementation, ``registry`` the per-kind lookup
and ``company`` the company/settings endpoint.
"""

from .base import RecordSource
from .client import BackendClient
from .company import CompanyClient
from .http_source import HttpRecordSource
from .registry import SourceRegistry

__all__ = [
    "BackendClient",
    "CompanyClient",
    "HttpRecordSource",
    "RecordSource",
    "SourceRegistry",
]
