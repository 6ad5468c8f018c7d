"""
app/connectors package marker.
"""

from app.connectors.base import (
    BaseConnector,
    ConnectorRequestError,
    GeocodeLookupError,
    GeocodeProvider,
    GeocodeResult,
)
from app.connectors.google_geocode_connector import GoogleGeocodeConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "GeocodeLookupError",
    "GeocodeProvider",
    "GeocodeResult",
    "GoogleGeocodeConnector",
]
