"""
app/domain/sales_record.py

Domain models used by the sales ingestion pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

SUPPORTED_YEARS: Final[tuple[int, ...]] = (2022, 2023, 2024, 2025)

MONTH_CODES: Final[tuple[str, ...]] = (
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
)

SENTINEL_LATITUDE: Final[float] = 0.0
SENTINEL_LONGITUDE: Final[float] = 0.0
"""(0, 0) marks a record whose geocoding was unavailable or failed."""


@dataclass(frozen=True)
class SalesRecordDraft:
    """
    Normalized sales row that has not been assigned a store identity yet.
    """

    year: int
    state: str
    city: str
    district: str = ""
    maker: str = ""
    rto: str = ""
    rto_name: str = ""
    latitude: float = SENTINEL_LATITUDE
    longitude: float = SENTINEL_LONGITUDE
    sales_2022: int = 0
    sales_2023: int = 0
    sales_2024: int = 0
    sales_2025: int = 0
    total: int = 0
    monthly: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SalesRecord:
    """
    Stored sales record with a store-assigned, immutable identity.
    """

    id: int
    state: str
    city: str
    district: str
    maker: str
    rto: str
    rto_name: str
    latitude: float
    longitude: float
    sales_2022: int
    sales_2023: int
    sales_2024: int
    sales_2025: int
    total: int
    monthly: dict[str, int] = field(default_factory=dict)

    @property
    def is_geocoded(self) -> bool:
        return (self.latitude, self.longitude) != (SENTINEL_LATITUDE, SENTINEL_LONGITUDE)

    def sales_for_year(self, year: int) -> int:
        return {
            2022: self.sales_2022,
            2023: self.sales_2023,
            2024: self.sales_2024,
            2025: self.sales_2025,
        }.get(year, 0)

    @classmethod
    def from_draft(cls, record_id: int, draft: SalesRecordDraft) -> SalesRecord:
        return cls(
            id=record_id,
            state=draft.state,
            city=draft.city,
            district=draft.district,
            maker=draft.maker,
            rto=draft.rto,
            rto_name=draft.rto_name,
            latitude=draft.latitude,
            longitude=draft.longitude,
            sales_2022=draft.sales_2022,
            sales_2023=draft.sales_2023,
            sales_2024=draft.sales_2024,
            sales_2025=draft.sales_2025,
            total=draft.total,
            monthly=dict(draft.monthly),
        )


@dataclass(frozen=True)
class RowValidationError:
    """
    One row-level validation error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class IngestionResult:
    """
    End-of-run ingestion summary.
    """

    inserted_count: int
    rows_received: int = 0
    rows_skipped: int = 0
    rows_rejected: int = 0
    geocode_failures: int = 0
    validation_errors: list[RowValidationError] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsSummary:
    """
    Summary statistics recomputed from the full record set on each query.
    """

    total_markets: int = 0
    total_sales_2024: int = 0
    avg_growth_rate: float = 0.0
    market_penetration: float = 0.0
    active_markets: int = 0
    growth_markets: int = 0
    emerging_markets: int = 0
