from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, field_validator

from .payments.donation_amounts import DEFAULT_DONATION_AMOUNTS


def resolve_encryption_secret(
    encryption_key: Optional[str], fallback_secret: Optional[str]
) -> str:
    """Pick the account-number secret, falling back to the shared app secret.

    Both missing yields the empty string; the cipher still works with the
    degenerate key derived from it.
    """
    return encryption_key or fallback_secret or ""


class Settings(BaseModel):
    """Typed application settings built from environment variables."""

    encryption_secret: str = ""

    # Storage settings
    database_url: str = "redis://localhost:6379/0"

    # Logging settings
    log_level: str = "INFO"

    # Donation settings
    default_donation_amounts: list[int] = list(DEFAULT_DONATION_AMOUNTS)

    # Rate limit settings (general API window)
    rate_limit_window_seconds: float = 60.0
    rate_limit_max_requests: int = 60

    # Application settings
    app_name: str = "WishMoa"
    app_version: str = "1.0.0"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("default_donation_amounts")
    @classmethod
    def validate_default_donation_amounts(cls, v: list[int]) -> list[int]:
        if not v or any(amount <= 0 for amount in v):
            raise ValueError("Default donation amounts must be positive integers")
        return v


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    amounts_str = os.environ.get("DEFAULT_DONATION_AMOUNTS")
    return Settings(
        encryption_secret=resolve_encryption_secret(
            os.environ.get("ENCRYPTION_KEY"), os.environ.get("SECRET")
        ),
        database_url=os.environ.get("DATABASE_URL", "redis://localhost:6379/0"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        default_donation_amounts=[int(a) for a in amounts_str.split(",") if a.strip()]
        if amounts_str
        else list(DEFAULT_DONATION_AMOUNTS),
        rate_limit_window_seconds=float(
            os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "60")
        ),
        rate_limit_max_requests=int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "60")),
        app_name=os.environ.get("APP_NAME", "WishMoa"),
        app_version=os.environ.get("APP_VERSION", "1.0.0"),
    )
