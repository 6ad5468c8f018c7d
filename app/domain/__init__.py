"""
app/domain package marker.
"""

from app.domain.sales_record import (
    MONTH_CODES,
    SUPPORTED_YEARS,
    AnalyticsSummary,
    IngestionResult,
    RowValidationError,
    SalesRecord,
    SalesRecordDraft,
)

__all__ = [
    "AnalyticsSummary",
    "IngestionResult",
    "MONTH_CODES",
    "RowValidationError",
    "SUPPORTED_YEARS",
    "SalesRecord",
    "SalesRecordDraft",
]
