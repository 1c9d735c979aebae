"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Simple Bank"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/simple_bank"
    )
    # Seconds a SQLite writer waits for the database lock
    SQLITE_BUSY_TIMEOUT: float = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))

    # Transfers
    # Deadline in seconds for one transfer; unset means no deadline
    TRANSFER_TIMEOUT: float | None = _optional_float("TRANSFER_TIMEOUT")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
