"""
app/api/routers package marker.
"""

from app.api.routers.geocoding import router as geocoding_router
from app.api.routers.sales_data import router as sales_data_router

__all__ = [
    "geocoding_router",
    "sales_data_router",
]
