"""Application configuration.

Purpose:
- Centralize runtime configuration (storage url, auth, seeding, server bind).
- Avoid hard-coding values in the rest of the codebase.

Notes:
- Default values are safe for local development.
- Values can be overridden with environment variables.
- The default DATABASE_URL is an in-memory SQLite database: the whole
  dataset lives for the process lifetime and is discarded on restart.
"""
from __future__ import annotations

import logging
import os
from datetime import timedelta

from pydantic import BaseModel, Field

# JWT CONFIGURATION
JWT_ALGORITHM = "HS256"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# APPLICATION SETTINGS
class Settings(BaseModel):
    """Typed config object for all application settings."""

    # Storage backend (in-memory SQLite by default)
    DATABASE_URL: str = Field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite://"))

    # Token signing
    JWT_SECRET: str = Field(
        default_factory=lambda: os.getenv("BIZDESK_JWT_SECRET", "change-me-in-prod")
    )
    JWT_HOURS: int = Field(default_factory=lambda: int(os.getenv("BIZDESK_JWT_HOURS", "8")))

    # bcrypt cost factor (4 is the minimum accepted by bcrypt)
    BCRYPT_ROUNDS: int = Field(
        default_factory=lambda: int(os.getenv("BIZDESK_BCRYPT_ROUNDS", "10")), ge=4, le=31
    )

    # Demo records loaded at startup
    SEED_SAMPLE_DATA: bool = Field(
        default_factory=lambda: _env_flag("BIZDESK_SEED_SAMPLE_DATA", "1")
    )

    # HTTP server
    HOST: str = Field(default_factory=lambda: os.getenv("BIZDESK_HOST", "0.0.0.0"))
    PORT: int = Field(default_factory=lambda: int(os.getenv("PORT", "5000")))
    ENV: str = Field(default_factory=lambda: os.getenv("BIZDESK_ENV", "development"))

    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Optional Sentry DSN for error tracking
    SENTRY_DSN: str | None = Field(default_factory=lambda: os.getenv("SENTRY_DSN"))

    # Environment name used by Sentry
    SENTRY_ENV: str = Field(default_factory=lambda: os.getenv("SENTRY_ENV", "development"))

    # Sample rate for tracing
    SENTRY_TRACES: float = Field(
        default_factory=lambda: float(os.getenv("SENTRY_TRACES", "0.0"))
    )

    @property
    def jwt_exp_delta(self) -> timedelta:
        return timedelta(hours=self.JWT_HOURS)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the server and the CLI."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Shared settings instance
settings = Settings()
