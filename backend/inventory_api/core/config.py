"""Centralized application settings using pydantic settings."""

from __future__ import annotations

import re
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inventory_api.core.security import AdminCredential

# Load environment variables from .env file
# Look for .env in the backend directory or project root
env_path = Path(__file__).parent.parent.parent / ".env"
if not env_path.exists():
    env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d)?\s*$")
_DURATION_UNITS = {
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str | int) -> timedelta:
    """Parse token lifetimes such as ``"1h"``, ``"30m"`` or ``3600``.

    A bare number is read as seconds.
    """
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(
            f"Invalid duration '{value}'. Use <number>[ms|s|m|h|d], e.g. '1h'"
        )
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit or "s"]: int(amount)})


class Settings(BaseSettings):
    """Environment-aware configuration (secrets, admin accounts, database)."""

    # Application settings
    app_name: str = "Inventory Management System API"
    log_level: str = "INFO"
    log_dir: str | None = Field(
        default="logs",
        description="Directory for app/error/access log files; empty disables file logging",
    )
    host: str = "0.0.0.0"
    port: int = 3000

    # Token settings
    jwt_secret: str = Field(..., min_length=1, description="Token signing secret")
    jwt_expiration: str = Field(
        default="1h",
        description="Token lifetime, e.g. '1h', '30m', '3600'",
    )
    jwt_algorithm: str = "HS256"

    # Admin accounts
    admin1_username: str = "admin1"
    admin1_password: str = ""
    admin2_username: str = "admin2"
    admin2_password: str = ""

    # Database settings
    database_url: str = Field(
        ...,
        min_length=1,
        description="Document store connection URL",
    )

    # CORS settings - stored as string, converted to list via property
    cors_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins",
        exclude=True,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated string to list."""
        if self.cors_origins_raw is None or not self.cors_origins_raw.strip():
            return ["*"]
        origins = [
            origin.strip().rstrip("/")
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
        return origins or ["*"]

    @property
    def token_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_expiration)

    @property
    def admin_credentials(self) -> tuple[AdminCredential, ...]:
        return (
            AdminCredential(self.admin1_username, self.admin1_password),
            AdminCredential(self.admin2_username, self.admin2_password),
        )

    @field_validator("jwt_expiration", mode="after")
    @classmethod
    def validate_jwt_expiration(cls, v: str) -> str:
        parse_duration(v)
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v: str | None) -> str | None:
        """Fix Heroku DATABASE_URL format (postgres:// -> postgresql+psycopg://)."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+psycopg://", 1)
        return v

    @field_validator("log_dir", mode="after")
    @classmethod
    def blank_log_dir(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Settings for the process entrypoint; tests build ``Settings`` directly."""
    return Settings()
