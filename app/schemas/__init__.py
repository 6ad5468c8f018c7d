"""
app/schemas package marker.
"""

from app.schemas.sales_data import (
    AnalyticsResponse,
    GeocodeRequest,
    MapsConfigResponse,
    MessageResponse,
    SalesRecordResponse,
    UploadResponse,
)

__all__ = [
    "AnalyticsResponse",
    "GeocodeRequest",
    "MapsConfigResponse",
    "MessageResponse",
    "SalesRecordResponse",
    "UploadResponse",
]
