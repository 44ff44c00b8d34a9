"""Environment-driven configuration for the bookshop operations service.

Every tunable the core relies on lives here so business rules (zakat rate,
unique-code range, the marketplace delivery type) are not scattered as magic
values across the services.
"""

from __future__ import annotations

from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read once from the environment (and ``.env`` when present)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Bookshop Ops"
    LOG_LEVEL: str = "INFO"
    # Date-range filters and naive timestamps are interpreted in this zone.
    TZ: str = "Asia/Jakarta"

    DB_URL: str = Field(default="sqlite:///./data/bookshop.db", validation_alias="DATABASE_URL")

    ZAKAT_RATE: float = 0.025
    UNIQUE_CODE_MIN: int = 1
    UNIQUE_CODE_MAX: int = 100
    # Marketplace deliveries settle shipping through the marketplace itself.
    SHOPEE_DELIVERY_TYPE: str = "Shopee"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value or "INFO").strip().upper()

    @field_validator("UNIQUE_CODE_MAX")
    @classmethod
    def validate_unique_code_range(cls, value: int, info) -> int:
        minimum = info.data.get("UNIQUE_CODE_MIN", 1)
        if value < minimum:
            raise ValueError("UNIQUE_CODE_MAX must be >= UNIQUE_CODE_MIN")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
