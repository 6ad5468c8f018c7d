"""
app/geocoding package marker.
"""

from app.geocoding.worker_pool import GeocodeRunStats, GeocodeWorkerPool

__all__ = ["GeocodeRunStats", "GeocodeWorkerPool"]
