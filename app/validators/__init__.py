"""
app/validators package marker.
"""

from app.validators.sales_record_validator import SalesRecordValidator

__all__ = ["SalesRecordValidator"]
