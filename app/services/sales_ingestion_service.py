"""
app/services/sales_ingestion_service.py

Service layer for the sales ingestion-enrichment pipeline.

Pipeline order for one ingestion:

    1. RowNormalizer      : raw rows -> drafts (unsupported rows become None)
    2. GeocodeWorkerPool  : bounded-concurrency coordinate lookup
    3. SalesRecordValidator: storage contract; absent/invalid drafts dropped
    4. BatchWriter        : full replace of the record store, chunked

Row-level problems are absorbed by the stage that detects them. The only
failure surfaced to callers is NoValidRowsError, raised before the store is
cleared so a bad upload never destroys existing data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Mapping

from app.config import get_external_http_settings, get_geocoding_settings, get_sales_ingestion_settings
from app.connectors.base import GeocodeProvider
from app.connectors.google_geocode_connector import GoogleGeocodeConnector
from app.domain.sales_record import (
    SUPPORTED_YEARS,
    AnalyticsSummary,
    IngestionResult,
    RowValidationError,
    SalesRecord,
)
from app.geocoding.worker_pool import GeocodeWorkerPool
from app.logging_utils import log_event
from app.normalizers.row_normalizer import RowNormalizer
from app.repositories.sales_record_store import SalesRecordStore
from app.services.analytics_service import AnalyticsService
from app.services.batch_writer import BatchWriter, NoValidRowsError
from app.validators.sales_record_validator import SalesRecordValidator

logger = logging.getLogger(__name__)

NO_VALID_ROWS_MESSAGE = (
    "No valid data found in the Excel file. Please check the format and required columns."
)


class SalesIngestionService:
    """
    Coordinates normalization, geocoding, validation, and storage.
    """

    def __init__(
        self,
        *,
        store: SalesRecordStore,
        geocoder: GeocodeProvider | None,
        concurrency: int = 10,
        batch_size: int = 1000,
        max_validation_errors: int = 500,
        log_validation_errors: bool = True,
        normalizer: RowNormalizer | None = None,
        validator: SalesRecordValidator | None = None,
        writer: BatchWriter | None = None,
    ) -> None:
        self._store = store
        self._geocoder = geocoder
        self._normalizer = normalizer or RowNormalizer()
        self._pool = GeocodeWorkerPool(provider=geocoder, concurrency=concurrency)
        self._validator = validator or SalesRecordValidator()
        self._writer = writer or BatchWriter(store=store, batch_size=batch_size)
        self._analytics = AnalyticsService(store)
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors

    @property
    def geocoder(self) -> GeocodeProvider | None:
        return self._geocoder

    def ingest(self, raw_rows: Iterable[Mapping[str, Any]]) -> IngestionResult:
        """
        Replace the stored dataset with the valid, enriched subset of ``raw_rows``.

        Raises:
            NoValidRowsError: nothing survived; the store is left untouched.
        """

        rows = list(raw_rows)
        drafts = self._normalizer.normalize_many(rows)
        rows_skipped = sum(1 for draft in drafts if draft is None)

        enriched, geocode_stats = self._pool.run(drafts)
        valid, row_errors = self._validator.validate_many(enriched)
        rows_rejected = len(rows) - rows_skipped - len(valid)

        captured_errors: list[RowValidationError] = []
        for error in row_errors:
            self._record_error(captured_errors, error)

        if not valid:
            log_event(
                logger,
                logging.WARNING,
                "sales_ingestion_rejected",
                rows_received=len(rows),
                rows_skipped=rows_skipped,
                rows_rejected=rows_rejected,
            )
            raise NoValidRowsError(NO_VALID_ROWS_MESSAGE)

        inserted = self._writer.replace_all(valid)
        result = IngestionResult(
            inserted_count=inserted,
            rows_received=len(rows),
            rows_skipped=rows_skipped,
            rows_rejected=rows_rejected,
            geocode_failures=geocode_stats.failed,
            validation_errors=captured_errors,
        )
        log_event(
            logger,
            logging.INFO,
            "sales_ingestion_completed",
            inserted=result.inserted_count,
            rows_received=result.rows_received,
            rows_skipped=result.rows_skipped,
            rows_rejected=result.rows_rejected,
            geocode_failures=result.geocode_failures,
        )
        return result

    def list_records(self, years: Iterable[int] | None = None) -> list[SalesRecord]:
        """
        Return stored records, optionally only those with sales in ``years``.
        """

        records = self._store.list_all()
        selected = {year for year in (years or ()) if year in SUPPORTED_YEARS}
        if not selected:
            return records
        return [
            record
            for record in records
            if any(record.sales_for_year(year) > 0 for year in selected)
        ]

    def clear(self) -> None:
        self._store.clear()
        logger.info("Sales record store cleared")

    def get_analytics(self) -> AnalyticsSummary:
        return self._analytics.get_summary()

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Sales validation error row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_geocode_connector() -> GoogleGeocodeConnector:
    """
    Build the Google geocoding connector from env-driven settings.
    """

    return GoogleGeocodeConnector(
        settings=get_geocoding_settings(),
        http_settings=get_external_http_settings(),
    )


def build_sales_ingestion_service(
    store: SalesRecordStore,
    geocoder: GeocodeProvider | None = None,
) -> SalesIngestionService:
    """
    Build the ingestion service around an explicitly owned store.
    """

    settings = get_sales_ingestion_settings()
    geocoding_settings = get_geocoding_settings()
    return SalesIngestionService(
        store=store,
        geocoder=geocoder if geocoder is not None else build_geocode_connector(),
        concurrency=geocoding_settings.concurrency,
        batch_size=settings.batch_size,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )
