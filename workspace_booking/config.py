"""Environment-driven configuration for the booking service."""

from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache

from dateutil import tz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``BOOKING_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKING_", env_file=".env", env_file_encoding="utf-8"
    )

    app_name: str = "Workspace Booking API"
    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA zone used for peak classification, slot boundaries and display.",
    )
    max_booking_hours: float = Field(default=12, gt=0)
    cancellation_window_hours: float = Field(default=2, ge=0)
    store_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Upper bound on waiting for a per-room lock."
    )
    seed_rooms: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3001"])

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if tz.gettz(value) is None:
            raise ValueError(f"unknown timezone {value!r}")
        return value

    @property
    def zone(self) -> tzinfo:
        return tz.gettz(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
