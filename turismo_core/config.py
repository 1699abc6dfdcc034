"""
Unified configuration for the turismo access-control service.

This module provides a single Settings class loaded from the environment
and an optional .env file at the project root. The signing secret has no
usable default: token services refuse to start without one.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Settings for the turismo API.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "turismo-auth"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # PostgreSQL (credential store)
    POSTGRES_DSN: str = "host=localhost port=5432 dbname=sistema_turismo user=postgres password=postgres"

    # Bearer tokens
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    # Password hashing
    BCRYPT_ROUNDS: int = Field(default=10, ge=10)

    # Login responses: when False, inactive accounts look like bad credentials
    EXPOSE_INACTIVE_ACCOUNT: bool = False

    # Optional store re-validation of bound principals
    REVALIDATION_TTL_SECONDS: int = 30

    # Rate limiting
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    LOGIN_RATE_LIMIT: str = "10/minute"

    # CORS
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 3000

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )


# Global settings instance
settings = Settings()  # type: ignore
