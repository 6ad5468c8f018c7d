"""
app/api/routers/geocoding.py

Geocoding proxy and map configuration endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_geocode_connector
from app.config import get_geocoding_settings
from app.connectors.base import ConnectorRequestError
from app.connectors.google_geocode_connector import GoogleGeocodeConnector
from app.schemas.sales_data import GeocodeRequest, MapsConfigResponse

router = APIRouter(prefix="/api", tags=["geocoding"])


@router.post("/geocode")
def geocode(
    body: GeocodeRequest,
    connector: GoogleGeocodeConnector = Depends(get_geocode_connector),
) -> Any:
    """
    Forward one address to the geocoding provider and return its raw payload.
    """

    if not connector.is_configured:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Google Maps API key not configured",
        )

    try:
        return connector.geocode_address(body.address)
    except ConnectorRequestError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Geocoding failed",
        ) from exc


@router.get("/maps-config", response_model=MapsConfigResponse)
def maps_config() -> MapsConfigResponse:
    return MapsConfigResponse(api_key=get_geocoding_settings().api_key)
