"""
app/connectors/google_geocode_connector.py

Google Geocoding API connector.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import ExternalHTTPSettings, GeocodingSettings
from app.connectors.base import BaseConnector, GeocodeLookupError, GeocodeResult

logger = logging.getLogger(__name__)


class GoogleGeocodeConnector(BaseConnector):
    """
    Resolves ``"<city>, <state>, <country>"`` addresses through Google Geocoding.
    """

    def __init__(
        self,
        *,
        settings: GeocodingSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="google_geocode", http_settings=http_settings, session=session)
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    def lookup(self, locality: str, region: str) -> GeocodeResult:
        if not self.is_configured:
            raise GeocodeLookupError(f"{self.source}: API key is not configured.")
        if not locality or not region:
            raise GeocodeLookupError(f"{self.source}: locality and region are required.")

        address = self.build_address(locality, region)
        payload = self.geocode_address(address)

        status = payload.get("status") if isinstance(payload, dict) else None
        results = payload.get("results") if isinstance(payload, dict) else None
        if status != "OK" or not isinstance(results, list) or not results:
            raise GeocodeLookupError(f"{self.source}: no match for {address!r} (status={status}).")

        return self._parse_result(results[0], address=address)

    def geocode_address(self, address: str) -> Any:
        """
        Return the raw Geocoding API payload for one free-form address.
        """

        if not self.is_configured:
            raise GeocodeLookupError(f"{self.source}: API key is not configured.")
        return self._request_json(
            method="GET",
            url=self._settings.base_url,
            params={"address": address, "key": self._settings.api_key},
        )

    def build_address(self, locality: str, region: str) -> str:
        parts = [locality.strip(), region.strip(), self._settings.country.strip()]
        return ", ".join(part for part in parts if part)

    def _parse_result(self, result: Any, *, address: str) -> GeocodeResult:
        try:
            location = result["geometry"]["location"]
            return GeocodeResult(
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
                formatted_address=result.get("formatted_address"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeLookupError(
                f"{self.source}: malformed result for {address!r}."
            ) from exc
