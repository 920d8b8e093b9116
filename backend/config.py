"""
Host configuration - all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Auth
    JWT_SECRET: str = os.environ.get("JWT_SECRET", "")
    JWT_ALGORITHM: str = os.environ.get("JWT_ALGORITHM", "HS256")
    JWT_EXPIRY_HOURS: int = int(os.environ.get("JWT_EXPIRY_HOURS", "24"))

    # Update requests
    MAX_PARAMS: int = int(os.environ.get("MAX_PARAMS", "32"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


# Singleton instance
settings = Settings()

if not settings.JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is required")
