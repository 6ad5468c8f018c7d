"""
app/repositories package marker.
"""

from app.repositories.sales_record_store import SalesRecordStore

__all__ = ["SalesRecordStore"]
