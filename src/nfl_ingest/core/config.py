from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nfl_ingest.db.enums import AuthModeEnum


class ProviderConfig(BaseModel):
    """Connection settings for one external data provider."""

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    auth_mode: AuthModeEnum = AuthModeEnum.NONE
    api_key: str | None = Field(default=None, repr=False)
    auth_header_name: str | None = None
    custom_headers: dict[str, str] = Field(default_factory=dict)
    request_delay_ms: int = Field(default=1000, ge=0)

    @field_validator("auth_mode", mode="before")
    @classmethod
    def _lower_auth_mode(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def min_interval_s(self) -> float:
        return self.request_delay_ms / 1000.0


def _default_providers() -> dict[str, ProviderConfig]:
    return {
        "espn": ProviderConfig(
            base_url="https://site.api.espn.com/apis/site/v2/sports/football/nfl",
            auth_mode=AuthModeEnum.NONE,
            request_delay_ms=1000,
        ),
        "sportsdataio": ProviderConfig(
            base_url="https://api.sportsdata.io/v3/nfl",
            auth_mode=AuthModeEnum.HEADER,
            auth_header_name="Ocp-Apim-Subscription-Key",
            request_delay_ms=1000,
        ),
        "mysportsfeeds": ProviderConfig(
            base_url="https://api.mysportsfeeds.com/v2.1/pull/nfl",
            auth_mode=AuthModeEnum.BASIC,
            request_delay_ms=1000,
        ),
        # PFR blocks clients that exceed 20 requests a minute.
        "profootballreference": ProviderConfig(
            base_url="https://www.pro-football-reference.com",
            auth_mode=AuthModeEnum.NONE,
            request_delay_ms=3000,
        ),
    }


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # DB
    database_url: str = Field(
        default="sqlite+pysqlite:///./nfl_ingest.db",
        validation_alias="DATABASE_URL",
    )
    db_echo: bool = False

    # Provider selection
    data_provider: str = "espn"
    providers: dict[str, ProviderConfig] = Field(default_factory=_default_providers)

    # Outbound HTTP
    max_retry_attempts: int = Field(default=3, ge=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    retry_base_delay_s: float = Field(default=2.0, ge=0)
    user_agent: str = "NFLScraper/1.0 (educational project)"

    # Circuit breaker
    breaker_failure_ratio: float = Field(default=0.7, gt=0, le=1)
    breaker_min_throughput: int = Field(default=3, ge=1)
    breaker_sampling_s: float = Field(default=30.0, gt=0)
    breaker_break_s: float = Field(default=15.0, ge=0)

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("providers", mode="before")
    @classmethod
    def _merge_provider_defaults(cls, value: object) -> object:
        # Partial env overrides (PROVIDERS__SPORTSDATAIO__API_KEY=...) keep the default base_url.
        if not isinstance(value, Mapping):
            return value
        merged: dict[str, dict[str, Any]] = {
            name: cfg.model_dump() for name, cfg in _default_providers().items()
        }
        for name, cfg in value.items():
            key = str(name).strip().lower()
            raw = cfg.model_dump() if isinstance(cfg, ProviderConfig) else dict(cfg)
            merged[key] = {**merged.get(key, {}), **raw}
        return merged

    # -----------------------------
    # Provider helpers
    # -----------------------------

    def provider_config(self, name: str) -> ProviderConfig:
        """Config for a provider, or an empty config when none is set."""
        return self.providers.get(name.strip().lower(), ProviderConfig())


settings = Settings()
