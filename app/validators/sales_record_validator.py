"""
app/validators/sales_record_validator.py

Storage-contract validation for enriched sales drafts.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Sequence

from app.domain.sales_record import MONTH_CODES, RowValidationError, SalesRecordDraft

YEARLY_FIELDS: tuple[str, ...] = ("sales_2022", "sales_2023", "sales_2024", "sales_2025")
OPTIONAL_TEXT_FIELDS: tuple[str, ...] = ("district", "maker", "rto", "rto_name")


class SalesRecordValidator:
    """
    Validates enriched drafts and fills defaults for optional fields.
    """

    def validate_many(
        self,
        drafts: Sequence[SalesRecordDraft | None],
    ) -> tuple[list[SalesRecordDraft], list[RowValidationError]]:
        """
        Drop absent and invalid entries; return the survivors in input order.

        Row numbers in the returned errors are 1-based input positions.
        """

        valid: list[SalesRecordDraft] = []
        errors: list[RowValidationError] = []
        for index, draft in enumerate(drafts, start=1):
            if draft is None:
                continue
            parsed, row_errors = self.validate_draft(draft=draft, row_number=index)
            if row_errors:
                errors.extend(row_errors)
                continue
            if parsed is not None:
                valid.append(parsed)
        return valid, errors

    def validate_draft(
        self,
        *,
        draft: SalesRecordDraft,
        row_number: int,
    ) -> tuple[SalesRecordDraft | None, list[RowValidationError]]:
        errors: list[RowValidationError] = []

        state = self._parse_required_string(
            value=draft.state,
            row_number=row_number,
            column="state",
            errors=errors,
        )
        city = self._parse_required_string(
            value=draft.city,
            row_number=row_number,
            column="city",
            errors=errors,
        )

        for column in (*YEARLY_FIELDS, "total"):
            self._check_non_negative_int(
                value=getattr(draft, column),
                row_number=row_number,
                column=column,
                errors=errors,
            )

        monthly: dict[str, int] = {}
        for code in MONTH_CODES:
            value = draft.monthly.get(code, 0)
            self._check_non_negative_int(
                value=value,
                row_number=row_number,
                column=code.lower(),
                errors=errors,
            )
            monthly[code] = value

        self._check_coordinate(
            value=draft.latitude,
            limit=90.0,
            row_number=row_number,
            column="latitude",
            errors=errors,
        )
        self._check_coordinate(
            value=draft.longitude,
            limit=180.0,
            row_number=row_number,
            column="longitude",
            errors=errors,
        )

        if errors:
            return None, errors

        defaults = {
            field_name: self._parse_optional_string(getattr(draft, field_name))
            for field_name in OPTIONAL_TEXT_FIELDS
        }
        return replace(draft, state=state, city=city, monthly=monthly, **defaults), []

    def _parse_required_string(
        self,
        *,
        value: Any,
        row_number: int,
        column: str,
        errors: list[RowValidationError],
    ) -> str:
        if self._is_blank(value):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Required value is missing.",
                    value=self._stringify_value(value),
                )
            )
            return ""
        return str(value).strip()

    def _parse_optional_string(self, value: Any) -> str:
        if self._is_blank(value):
            return ""
        return str(value).strip()

    def _check_non_negative_int(
        self,
        *,
        value: Any,
        row_number: int,
        column: str,
        errors: list[RowValidationError],
    ) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Value must be an integer.",
                    value=self._stringify_value(value),
                )
            )
            return
        if value < 0:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Value must not be negative.",
                    value=self._stringify_value(value),
                )
            )

    def _check_coordinate(
        self,
        *,
        value: Any,
        limit: float,
        row_number: int,
        column: str,
        errors: list[RowValidationError],
    ) -> None:
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
            or abs(value) > limit
        ):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message=f"Coordinate must be a finite number within ±{limit:g}.",
                    value=self._stringify_value(value),
                )
            )

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)
