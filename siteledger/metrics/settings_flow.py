"""Mini README: Validation and persistence of the financial settings.

Structure:
    * validate_settings - turn raw form input into ``FinancialSettings``.
    * SettingsService - validate, merge into the company record and save.

Validation runs entirely locally. When it fails, a single
``ValidationError`` lists every failing field and no request is sent.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Tuple, Union

from ..errors import ValidationError
from ..logging_utils import get_logger
from ..records import CompanyProfile, FinancialSettings
from ..sources import CompanyClient

LOGGER = get_logger(__name__)

SettingInput = Union[str, int, float, Decimal, None]


def _parse_field(value: SettingInput) -> Tuple[Optional[Decimal], Optional[str]]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, "is required"
    if isinstance(value, bool):
        return None, "must be a number"
    try:
        parsed = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return None, "must be a number"
    if not parsed.is_finite():
        return None, "must be a finite number"
    return parsed, None


def validate_settings(
    starting_capital: SettingInput, square_meters: SettingInput
) -> FinancialSettings:
    """Validate raw settings input.

    Starting capital must be zero or more; square metres must be greater
    than zero. Both fields are checked before raising so the error names
    every problem at once.
    """

    errors: Dict[str, str] = {}

    capital, problem = _parse_field(starting_capital)
    if problem:
        errors["starting_capital"] = problem
    elif capital < 0:
        errors["starting_capital"] = "must be zero or greater"

    area, problem = _parse_field(square_meters)
    if problem:
        errors["square_meters"] = problem
    elif area <= 0:
        errors["square_meters"] = "must be greater than zero"

    if errors:
        LOGGER.warning("Rejected financial settings: %s", errors)
        raise ValidationError(errors)
    return FinancialSettings(starting_capital=capital, square_meters=area)


class SettingsService:
    """Persist financial settings as part of the company record."""

    def __init__(self, company_client: CompanyClient) -> None:
        self.company_client = company_client

    async def save(
        self,
        company: Optional[CompanyProfile],
        starting_capital: SettingInput,
        square_meters: SettingInput,
    ) -> CompanyProfile:
        """Validate and save; returns the company record the backend stored.

        The update replaces the whole company record, so when no record has
        been loaded yet it is fetched first. A failed fetch aborts the save.
        """

        settings = validate_settings(starting_capital, square_meters)
        if company is None:
            LOGGER.debug("Company record not loaded; fetching before save")
            company = await self.company_client.fetch_company()
        stored = await self.company_client.update_company(company.with_settings(settings))
        LOGGER.info(
            "Saved financial settings (capital=%s, m2=%s)",
            settings.starting_capital,
            settings.square_meters,
        )
        return stored
