"""Configuration module for the opening-extreme screener.

This module centralizes the reading of environment variables and provides a
`Settings` object that other modules can import.  It uses Pydantic's
`BaseSettings` to automatically read values from a `.env` file when present.

Thresholds that define the full screener are fixed constants rather than
settings; only operational knobs are environment driven.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    approx_tolerance: float = Field(
        default=1e-6,
        gt=0.0,
        validation_alias=AliasChoices("APPROX_TOLERANCE", "approx_tolerance"),
    )
    chart_exchange: str = Field(default="NSE", validation_alias=AliasChoices("CHART_EXCHANGE", "chart_exchange"))
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        validation_alias=AliasChoices("MAX_UPLOAD_BYTES", "max_upload_bytes"),
    )
    allowed_origins: str = Field(default="*", validation_alias=AliasChoices("ALLOWED_ORIGINS", "allowed_origins"))

    @field_validator("log_level", "chart_exchange", mode="before")
    @classmethod
    def _upper_token(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def origins(self) -> list[str]:
        return [token.strip() for token in self.allowed_origins.split(",") if token.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the application settings.

    Pydantic caches the parsed environment variables so that repeated calls
    throughout the application are inexpensive.
    """

    return Settings()


# Full screener gates. Fixed by the screening rules, not tunable per deploy.
FULL_VOLUME_MULTIPLE: float = 1.5
FULL_MIN_CLOSE: float = 200.0
FULL_MIN_MARKET_CAP_CRORES: float = 10000.0

LABEL_COLUMN: str = "Label"
LABEL_BUY: str = "BUY"
LABEL_SELL: str = "SELL"
