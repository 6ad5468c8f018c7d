"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class SalesIngestionSettings:
    """
    Runtime settings for spreadsheet sales ingestion.
    """

    batch_size: int = 1000
    max_validation_errors: int = 500
    log_validation_errors: bool = True
    max_upload_bytes: int = 10 * 1024 * 1024


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 10.0
    max_retries: int = 2
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 0.0


@dataclass(frozen=True)
class GeocodingSettings:
    """
    Google Geocoding API connector settings.

    ``api_key`` is None when no credential is configured; the pipeline then
    degrades every row to sentinel coordinates without touching the network.
    """

    api_key: str | None = None
    base_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    country: str = "India"
    concurrency: int = 10


@lru_cache(maxsize=1)
def get_sales_ingestion_settings() -> SalesIngestionSettings:
    """
    Return cached sales ingestion settings from environment variables.
    """

    return SalesIngestionSettings(
        batch_size=max(1, _get_int_env("SALES_INGEST_BATCH_SIZE", 1000)),
        max_validation_errors=max(1, _get_int_env("SALES_INGEST_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("SALES_INGEST_LOG_VALIDATION_ERRORS", True),
        max_upload_bytes=max(1, _get_int_env("SALES_UPLOAD_MAX_BYTES", 10 * 1024 * 1024)),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("GEOCODE_TIMEOUT_SECONDS", 10.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 2)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.0, _get_float_env("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 0.0)),
    )


@lru_cache(maxsize=1)
def get_geocoding_settings() -> GeocodingSettings:
    """
    Return geocoding connector settings from environment variables.

    The API key is read from GOOGLE_MAP_API, falling back to GOOGLE_GEOCODING_API.
    """

    api_key = _get_optional_str_env("GOOGLE_MAP_API") or _get_optional_str_env("GOOGLE_GEOCODING_API")
    return GeocodingSettings(
        api_key=api_key,
        base_url=_get_str_env("GEOCODE_BASE_URL", "https://maps.googleapis.com/maps/api/geocode/json"),
        country=_get_str_env("GEOCODE_COUNTRY", "India"),
        concurrency=max(1, _get_int_env("GEOCODE_CONCURRENCY", 10)),
    )
