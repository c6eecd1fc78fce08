"""Application configuration settings."""

import os
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using a mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/smartmeter.db"
    return "sqlite:///./smartmeter.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "SmartMeter"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database - defaults to volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # JWT verification of the caller identity
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"

    # Billing
    TARIFF_RATE_PER_KWH: Decimal = Decimal("0.20")

    # "active_meter" or "owner"
    ACCESS_POLICY: str = "active_meter"


settings = Settings()
