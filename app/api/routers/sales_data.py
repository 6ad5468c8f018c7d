"""
app/api/routers/sales_data.py

Sales data ingestion, listing, and analytics endpoints.

Handlers are plain ``def`` functions so FastAPI runs them in its threadpool;
a long upload does not block concurrent listing or analytics requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from app.api.dependencies import get_sales_ingestion_service, get_spreadsheet_upload
from app.config import get_sales_ingestion_settings
from app.parsers.spreadsheet_reader import SpreadsheetReadError, read_spreadsheet_rows
from app.schemas.sales_data import AnalyticsResponse, MessageResponse, SalesRecordResponse, UploadResponse
from app.services.batch_writer import NoValidRowsError
from app.services.sales_ingestion_service import SalesIngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["sales"])


@router.get("/sales-data", response_model=list[SalesRecordResponse])
def list_sales_data(
    years: list[int] | None = Query(default=None, description="Only records with sales in these years"),
    service: SalesIngestionService = Depends(get_sales_ingestion_service),
) -> list[SalesRecordResponse]:
    """
    Return every stored sales record.
    """

    return [SalesRecordResponse.from_record(record) for record in service.list_records(years)]


@router.post("/upload-excel", response_model=UploadResponse)
def upload_excel(
    file: UploadFile = Depends(get_spreadsheet_upload),
    service: SalesIngestionService = Depends(get_sales_ingestion_service),
) -> UploadResponse:
    """
    Replace the stored dataset with the rows of one uploaded workbook.
    """

    max_bytes = get_sales_ingestion_settings().max_upload_bytes
    try:
        content = file.file.read(max_bytes + 1)
    finally:
        file.file.close()

    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds the {max_bytes} byte upload limit.",
        )

    try:
        rows = read_spreadsheet_rows(
            content,
            filename=file.filename,
            content_type=file.content_type,
        )
        result = service.ingest(rows)
    except SpreadsheetReadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except NoValidRowsError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "count": 0},
        ) from exc

    return UploadResponse(
        message=f"Successfully imported {result.inserted_count} records",
        count=result.inserted_count,
        rows_received=result.rows_received,
        rows_skipped=result.rows_skipped,
        rows_rejected=result.rows_rejected,
        geocode_failures=result.geocode_failures,
    )


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    service: SalesIngestionService = Depends(get_sales_ingestion_service),
) -> AnalyticsResponse:
    return AnalyticsResponse.from_summary(service.get_analytics())


@router.post("/clear-sales-data", response_model=MessageResponse)
def clear_sales_data(
    service: SalesIngestionService = Depends(get_sales_ingestion_service),
) -> MessageResponse:
    service.clear()
    return MessageResponse(message="Sales data cleared")
