"""Mini README: Centralised configuration for the siteledger console.

Structure:
    * SiteLedgerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Values are read from ``SITELEDGER_*`` environment variables or a local
    ``.env`` file. ``api_base_url`` points at the back-office REST backend
    that owns receipts, payments and the company record.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class SiteLedgerSettings(BaseSettings):
    """Runtime configuration for the console and its backend client."""

    environment: str = Field(
        "development",
        description="Environment label controlling auto-reload and logging levels.",
    )
    api_base_url: str = Field(
        "http://localhost:8080",
        description="Base URL of the REST backend serving /api/receipts, /api/payments and /api/company.",
    )
    request_timeout_seconds: float = Field(
        10.0,
        description="Timeout applied to every backend call. There are no retries.",
        gt=0,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface the console binds to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the console exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level.")

    class Config:
        env_prefix = "SITELEDGER_"
        env_file = ".env"
        case_sensitive = False

    @validator("api_base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        """Keep path joins predictable by dropping trailing slashes."""

        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("api_base_url must be an http(s) URL")
        return value.rstrip("/")


@lru_cache()
def get_settings() -> SiteLedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return SiteLedgerSettings()
