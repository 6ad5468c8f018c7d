"""
app/connectors/base.py

Geocode provider abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from app.config import ExternalHTTPSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector cannot fetch data after retries.
    """


class GeocodeLookupError(ConnectorRequestError):
    """
    Raised when a locality cannot be resolved to coordinates.
    """


@dataclass(frozen=True)
class GeocodeResult:
    """
    Coordinates returned by a successful lookup.
    """

    latitude: float
    longitude: float
    formatted_address: str | None = None


class GeocodeProvider(Protocol):
    """
    Anything that can resolve a locality within a region to coordinates.
    """

    @property
    def is_configured(self) -> bool: ...

    def lookup(self, locality: str, region: str) -> GeocodeResult: ...


class BaseConnector(ABC):
    """
    Geocode connector interface with retrying, rate-limited HTTP access.

    Instances are shared across worker threads, so the rate limiter state is
    guarded by a lock.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._min_request_interval_seconds = (
            1.0 / http_settings.rate_limit_per_second if http_settings.rate_limit_per_second > 0 else 0.0
        )
        self._last_request_monotonic: float = 0.0
        self._rate_lock = threading.Lock()

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """
        Return True when the connector has the credentials it needs.
        """

    @abstractmethod
    def lookup(self, locality: str, region: str) -> GeocodeResult:
        """
        Resolve a locality to coordinates or raise GeocodeLookupError.
        """

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON with retry support.
        """

        response = self._request(method=method, url=url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Execute an HTTP request with rate limiting and exponential backoff.
        """

        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            self._apply_rate_limit()
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    timeout=self._timeout_seconds,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                is_retryable = status_code in RETRYABLE_STATUS_CODES
                if not is_retryable:
                    logger.error(
                        "Connector request failed source=%s status=%s error=%s",
                        self.source,
                        status_code,
                        exc,
                    )
                    raise ConnectorRequestError(f"{self.source}: non-retryable request failure.") from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Connector request retry source=%s attempt=%s/%s wait_seconds=%.2f",
                self.source,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
            )
            time.sleep(backoff_seconds)

        logger.warning(
            "Connector request exhausted retries source=%s error=%s",
            self.source,
            last_error,
        )
        raise ConnectorRequestError(f"{self.source}: request failed after retries.") from last_error

    def _apply_rate_limit(self) -> None:
        """
        Enforce minimum interval between outbound requests.
        """

        if self._min_request_interval_seconds <= 0:
            return

        with self._rate_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_monotonic
            remaining = self._min_request_interval_seconds - elapsed
            if remaining > 0:
                time.sleep(remaining)
            self._last_request_monotonic = time.monotonic()
