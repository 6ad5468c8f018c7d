"""
app/schemas/sales_data.py

Request and response schemas for the sales data endpoints.

Field aliases follow the camelCase JSON shape the dashboard consumes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.sales_record import AnalyticsSummary, SalesRecord


class SalesRecordResponse(BaseModel):
    """
    API response model for one stored sales record.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    state: str
    city: str
    district: str = ""
    maker: str = ""
    rto: str = ""
    rto_name: str = Field(default="", alias="rtoName")
    latitude: float
    longitude: float
    sales_2022: int = Field(default=0, ge=0, alias="sales2022")
    sales_2023: int = Field(default=0, ge=0, alias="sales2023")
    sales_2024: int = Field(default=0, ge=0, alias="sales2024")
    sales_2025: int = Field(default=0, ge=0, alias="sales2025")
    total: int = Field(default=0, ge=0)
    jan: int = Field(default=0, alias="JAN")
    feb: int = Field(default=0, alias="FEB")
    mar: int = Field(default=0, alias="MAR")
    apr: int = Field(default=0, alias="APR")
    may: int = Field(default=0, alias="MAY")
    jun: int = Field(default=0, alias="JUN")
    jul: int = Field(default=0, alias="JUL")
    aug: int = Field(default=0, alias="AUG")
    sep: int = Field(default=0, alias="SEP")
    oct: int = Field(default=0, alias="OCT")
    nov: int = Field(default=0, alias="NOV")
    dec: int = Field(default=0, alias="DEC")

    @classmethod
    def from_record(cls, record: SalesRecord) -> SalesRecordResponse:
        return cls(
            id=record.id,
            state=record.state,
            city=record.city,
            district=record.district,
            maker=record.maker,
            rto=record.rto,
            rto_name=record.rto_name,
            latitude=record.latitude,
            longitude=record.longitude,
            sales_2022=record.sales_2022,
            sales_2023=record.sales_2023,
            sales_2024=record.sales_2024,
            sales_2025=record.sales_2025,
            total=record.total,
            **{code.lower(): value for code, value in record.monthly.items()},
        )


class UploadResponse(BaseModel):
    """
    API response model for a spreadsheet upload.
    """

    message: str
    count: int = Field(..., ge=0)
    rows_received: int = Field(default=0, ge=0, alias="rowsReceived")
    rows_skipped: int = Field(default=0, ge=0, alias="rowsSkipped")
    rows_rejected: int = Field(default=0, ge=0, alias="rowsRejected")
    geocode_failures: int = Field(default=0, ge=0, alias="geocodeFailures")

    model_config = ConfigDict(populate_by_name=True)


class AnalyticsResponse(BaseModel):
    """
    API response model for the analytics summary.

    Rates are rounded to one decimal place.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_markets: int = Field(..., ge=0, alias="totalMarkets")
    total_sales_2024: int = Field(..., ge=0, alias="totalSales2024")
    avg_growth_rate: float = Field(..., alias="avgGrowthRate")
    market_penetration: float = Field(..., ge=0, alias="marketPenetration")
    active_markets: int = Field(..., ge=0, alias="activeMarkets")
    growth_markets: int = Field(..., ge=0, alias="growthMarkets")
    emerging_markets: int = Field(..., ge=0, alias="emergingMarkets")

    @classmethod
    def from_summary(cls, summary: AnalyticsSummary) -> AnalyticsResponse:
        return cls(
            total_markets=summary.total_markets,
            total_sales_2024=summary.total_sales_2024,
            avg_growth_rate=round(summary.avg_growth_rate, 1),
            market_penetration=round(summary.market_penetration, 1),
            active_markets=summary.active_markets,
            growth_markets=summary.growth_markets,
            emerging_markets=summary.emerging_markets,
        )


class MessageResponse(BaseModel):
    message: str


class GeocodeRequest(BaseModel):
    address: str = Field(..., min_length=1)


class MapsConfigResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(default=None, alias="apiKey")
