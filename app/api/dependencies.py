"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and service access.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Request, UploadFile, status

from app.connectors.google_geocode_connector import GoogleGeocodeConnector
from app.parsers.spreadsheet_reader import is_supported_spreadsheet
from app.services.sales_ingestion_service import SalesIngestionService


def get_spreadsheet_upload(file: UploadFile | None = File(default=None)) -> UploadFile:
    """
    Validate that a workbook was uploaded, by extension or MIME type.
    """

    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    if not is_supported_spreadsheet(filename=file.filename, content_type=file.content_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Please upload an Excel file.",
        )

    return file


def get_sales_ingestion_service(request: Request) -> SalesIngestionService:
    """
    Return the process-wide ingestion service built at app startup.
    """

    return request.app.state.sales_ingestion_service


def get_geocode_connector(request: Request) -> GoogleGeocodeConnector:
    return request.app.state.geocode_connector
