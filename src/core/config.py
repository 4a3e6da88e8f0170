"""Application configuration using Pydantic Settings."""

import json
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost:5432/taxdesk"
    """PostgreSQL connection URL (asyncpg driver)."""

    # Error Tracking
    sentry_dsn: str | None = None
    """Sentry DSN for error tracking. Optional."""

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Admin API
    admin_api_key: str | None = None
    """API key required for admin endpoints (X-Admin-Api-Key)."""

    # NoDecode lets us accept either JSON arrays or CSV strings.
    allowed_origins: Annotated[list[str], NoDecode] = DEFAULT_ALLOWED_ORIGINS
    """CORS origins allowed to call the API."""

    # Tax estimator
    tax_year: int = 2025
    """Default tax year for federal bracket lookups."""

    state_rates: Annotated[dict[str, Decimal] | None, NoDecode] = None
    """Optional JSON object overriding the built-in state flat-rate table."""

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: object) -> list[str]:
        """Parse allowed origins from JSON array, CSV, or list."""
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return DEFAULT_ALLOWED_ORIGINS.copy()

            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None

            if isinstance(decoded, list):
                return _normalize_origins(decoded)
            if isinstance(decoded, str):
                text = decoded
            elif decoded is not None:
                raise ValueError(
                    "ALLOWED_ORIGINS must be a JSON array or comma-separated string."
                )

            return _normalize_origins(item.strip() for item in text.split(","))

        if isinstance(value, (list, tuple, set)):
            return _normalize_origins(value)

        raise ValueError("ALLOWED_ORIGINS must be a string, list, tuple, or set.")

    @field_validator("state_rates", mode="before")
    @classmethod
    def parse_state_rates(cls, value: object) -> dict[str, Decimal] | None:
        """Parse the state rate override from a JSON object or mapping."""
        if value is None:
            return None
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                value = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError("STATE_RATES must be a JSON object.") from exc

        if not isinstance(value, dict):
            raise ValueError("STATE_RATES must be a JSON object.")

        rates: dict[str, Decimal] = {}
        for raw_key, raw_rate in value.items():
            key = str(raw_key).strip().upper()
            try:
                rate = Decimal(str(raw_rate))
            except InvalidOperation as exc:
                raise ValueError(f"STATE_RATES[{key}] is not a number.") from exc
            if not rate.is_finite() or rate < 0:
                raise ValueError(f"STATE_RATES[{key}] must be a non-negative number.")
            rates[key] = rate
        return rates


def _normalize_origins(values: Iterable[object]) -> list[str]:
    """Normalize and dedupe origins while preserving declaration order."""
    normalized: list[str] = []
    seen: set[str] = set()
    for raw_item in values:
        item = str(raw_item).strip().strip("'").strip('"').rstrip("/")
        if not item or item in seen:
            continue
        normalized.append(item)
        seen.add(item)

    if not normalized:
        return DEFAULT_ALLOWED_ORIGINS.copy()
    return normalized


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    root_error = str(exc)
    suggestions = [
        "Ensure DATABASE_URL is a valid SQLAlchemy async URL.",
        "ALLOWED_ORIGINS accepts a JSON array or a comma-separated list.",
        'STATE_RATES accepts a JSON object, e.g. {"CA": "13.3", "TX": "0"}.',
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {root_error}\n"
        + "\n".join(suggestions)
    ) from exc
