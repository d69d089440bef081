"""Mini README: Company endpoint adapter.

Structure:
    * CompanyClient - reads and updates ``/api/company`` and reads the
      server-side financial summary.
"""

from __future__ import annotations

from typing import Any, Dict

from ..logging_utils import get_logger
from ..records import CompanyProfile, FinancialSummary
from .client import BackendClient

LOGGER = get_logger(__name__)

COMPANY_PATH = "/api/company"
SUMMARY_PATH = "/api/company/financial-summary"


class CompanyClient:
    def __init__(self, client: BackendClient) -> None:
        self.client = client

    async def fetch_company(self) -> CompanyProfile:
        payload = await self.client.get_json(COMPANY_PATH)
        return CompanyProfile.from_payload(payload if isinstance(payload, dict) else {})

    async def update_company(self, payload: Dict[str, Any]) -> CompanyProfile:
        stored = await self.client.put_json(COMPANY_PATH, payload)
        LOGGER.info("Company record updated")
        return CompanyProfile.from_payload(stored if isinstance(stored, dict) else payload)

    async def fetch_financial_summary(self) -> FinancialSummary:
        payload = await self.client.get_json(SUMMARY_PATH)
        return FinancialSummary.from_payload(payload if isinstance(payload, dict) else {})
