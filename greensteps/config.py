# greensteps/config.py
from __future__ import annotations
from functools import lru_cache
from typing import Any, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GEO_PROVIDERS = ("geojs", "ipinfo")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_ignore_empty=True)

    carbon_interface_api_key: Optional[str] = None
    carbon_country: str = "US"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    geo_provider: str = "geojs"  # geojs | ipinfo
    local_advice_only: bool = False
    http_timeout: float = 20.0
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, v: Any) -> str:
        level = str(v or "").strip().upper()
        return level if level in LOG_LEVELS else "INFO"

    @property
    def remote_advice_enabled(self) -> bool:
        return bool(self.openai_api_key) and not self.local_advice_only


@lru_cache
def get_settings() -> Settings:
    return Settings()


def missing_credentials(settings: Settings) -> List[str]:
    """Names of the provider credentials that are not configured."""
    missing = []
    if not settings.carbon_interface_api_key:
        missing.append("CARBON_INTERFACE_API_KEY")
    if not settings.openai_api_key:
        missing.append("OPENAI_API_KEY")
    return missing
