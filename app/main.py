from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import load_env_files
from app.connectors.google_geocode_connector import GoogleGeocodeConnector
from app.repositories.sales_record_store import SalesRecordStore
from app.services.sales_ingestion_service import build_geocode_connector, build_sales_ingestion_service


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log geocoder availability on boot and the final store size on exit."""
    log = logging.getLogger(__name__)
    connector: GoogleGeocodeConnector = application.state.geocode_connector
    if connector.is_configured:
        log.info("Geocoding enabled via %s", connector.source)
    else:
        log.warning(
            "Geocoding API key not configured; records will use (0, 0) sentinel coordinates"
        )
    try:
        yield
    finally:
        log.info(
            "Shutting down with %d records in memory",
            application.state.record_store.count(),
        )


def create_app(
    *,
    store: SalesRecordStore | None = None,
    geocode_connector: GoogleGeocodeConnector | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The record store and geocode connector are built once here and shared by
    every request through ``app.state``.
    """

    load_env_files()
    _configure_logging()

    application = FastAPI(
        title="Sales Geo Insights API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    record_store = store or SalesRecordStore()
    connector = geocode_connector or build_geocode_connector()
    application.state.record_store = record_store
    application.state.geocode_connector = connector
    application.state.sales_ingestion_service = build_sales_ingestion_service(
        record_store,
        geocoder=connector,
    )

    from app.api.routers import geocoding_router, sales_data_router

    application.include_router(sales_data_router)
    application.include_router(geocoding_router)

    @application.get("/health")
    def healthcheck() -> dict[str, object]:
        return {"status": "ok", "records": record_store.count()}

    return application


app = create_app()
