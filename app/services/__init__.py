"""
app/services package marker.
"""

from app.services.analytics_service import AnalyticsService, calculate_growth_rate
from app.services.batch_writer import BatchWriter, NoValidRowsError, SalesIngestionError
from app.services.sales_ingestion_service import (
    SalesIngestionService,
    build_geocode_connector,
    build_sales_ingestion_service,
)

__all__ = [
    "AnalyticsService",
    "BatchWriter",
    "NoValidRowsError",
    "SalesIngestionError",
    "SalesIngestionService",
    "build_geocode_connector",
    "build_sales_ingestion_service",
    "calculate_growth_rate",
]
