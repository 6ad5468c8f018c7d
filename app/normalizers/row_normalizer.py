"""
app/normalizers/row_normalizer.py

Turns raw spreadsheet rows into canonical sales record drafts.

Header lookup is case- and whitespace-insensitive. Rows that cannot become a
record (unsupported year, missing state or city) are skipped by returning
``None``; nothing here raises for bad row content.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from app.domain.sales_record import MONTH_CODES, SUPPORTED_YEARS, SalesRecordDraft

logger = logging.getLogger(__name__)

# Candidate header names per canonical field, already lowercased.
YEAR_COLUMNS: tuple[str, ...] = ("year",)
STATE_COLUMNS: tuple[str, ...] = ("state",)
CITY_COLUMNS: tuple[str, ...] = ("city",)
DISTRICT_COLUMNS: tuple[str, ...] = ("district",)
MAKER_COLUMNS: tuple[str, ...] = ("maker",)
RTO_CODE_COLUMNS: tuple[str, ...] = ("rto", "rto code", "rto_code")
RTO_NAME_COLUMNS: tuple[str, ...] = ("rto name", "rto_name")
TOTAL_COLUMNS: tuple[str, ...] = ("total",)

# Cells with more integer digits than this are treated as non-numeric.
MAX_CELL_DIGITS = 18


class RowNormalizer:
    """
    Normalizes one raw row mapping into a ``SalesRecordDraft``.
    """

    def __init__(self, *, supported_years: tuple[int, ...] = SUPPORTED_YEARS) -> None:
        self._supported_years = frozenset(supported_years)

    def normalize(self, raw_row: Mapping[str, Any]) -> SalesRecordDraft | None:
        row = self.normalize_keys(raw_row)

        year = self._coerce_int(self._first(row, YEAR_COLUMNS))
        if year is None or year not in self._supported_years:
            logger.debug("Skipping row with unsupported year=%r", self._first(row, YEAR_COLUMNS))
            return None

        state = self._text(self._first(row, STATE_COLUMNS))
        city = self._text(self._first(row, CITY_COLUMNS))
        if not state or not city:
            logger.debug("Skipping row missing state/city state=%r city=%r", state, city)
            return None

        monthly = {
            code: self._coerce_int(row.get(code.lower())) or 0
            for code in MONTH_CODES
        }
        year_total = sum(monthly.values())

        # Zero and non-numeric totals fall back to the month sum.
        explicit_total = self._coerce_int(self._first(row, TOTAL_COLUMNS))
        total = explicit_total or year_total

        yearly = {f"sales_{supported}": 0 for supported in SUPPORTED_YEARS}
        yearly[f"sales_{year}"] = total

        return SalesRecordDraft(
            year=year,
            state=state,
            city=city,
            district=self._text(self._first(row, DISTRICT_COLUMNS)),
            maker=self._text(self._first(row, MAKER_COLUMNS)),
            rto=self._text(self._first(row, RTO_CODE_COLUMNS)),
            rto_name=self._text(self._first(row, RTO_NAME_COLUMNS)),
            total=total,
            monthly=monthly,
            **yearly,
        )

    def normalize_many(self, raw_rows: list[Mapping[str, Any]]) -> list[SalesRecordDraft | None]:
        """
        Normalize every row, keeping positions; skipped rows become ``None``.
        """

        return [self.normalize(raw_row) for raw_row in raw_rows]

    @staticmethod
    def normalize_keys(raw_row: Mapping[str, Any]) -> dict[str, Any]:
        return {str(key).strip().lower(): value for key, value in raw_row.items()}

    @staticmethod
    def _first(row: Mapping[str, Any], candidates: tuple[str, ...]) -> Any:
        for candidate in candidates:
            value = row.get(candidate)
            if value is not None:
                return value
        return None

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, float):
            if math.isnan(value):
                return ""
            if value.is_integer():
                return str(int(value))
        return str(value).strip()

    @staticmethod
    def _coerce_int(value: Any) -> int | None:
        """
        Parse an integer from spreadsheet cell content, or None when not numeric.
        """

        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return None
            return int(value)

        raw = str(value).strip().replace(",", "")
        if not raw:
            return None
        try:
            parsed = Decimal(raw)
        except InvalidOperation:
            return None
        if not parsed.is_finite() or parsed.adjusted() >= MAX_CELL_DIGITS:
            return None
        return int(parsed)
