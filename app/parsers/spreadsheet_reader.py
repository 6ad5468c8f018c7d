"""
app/parsers/spreadsheet_reader.py

Reads uploaded sales workbooks into raw row mappings.
"""

from __future__ import annotations

import io
import logging
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

EXCEL_CONTENT_TYPES: dict[str, str] = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "openpyxl",
    "application/vnd.ms-excel": "xlrd",
    "application/vnd.oasis.opendocument.spreadsheet": "odf",
}

EXCEL_EXTENSIONS: dict[str, str] = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
    ".ods": "odf",
}

CSV_CONTENT_TYPES = {"text/csv", "application/csv"}


class SpreadsheetReadError(ValueError):
    """
    Raised when an upload cannot be parsed as a supported spreadsheet.
    """


def is_supported_spreadsheet(*, filename: str | None, content_type: str | None) -> bool:
    return _detect_format(filename=filename, content_type=content_type) is not None


def _detect_format(*, filename: str | None, content_type: str | None) -> str | None:
    name = (filename or "").strip().lower()
    for extension, engine in EXCEL_EXTENSIONS.items():
        if name.endswith(extension):
            return engine
    if name.endswith(".csv"):
        return "csv"

    mime = (content_type or "").strip().lower()
    if mime in EXCEL_CONTENT_TYPES:
        return EXCEL_CONTENT_TYPES[mime]
    if mime in CSV_CONTENT_TYPES:
        return "csv"
    return None


def read_spreadsheet_rows(
    content: bytes,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> list[dict[str, Any]]:
    """
    Parse the first sheet of a workbook (or a CSV file) into row dicts.

    Keys are trimmed and lowercased; empty cells become None.
    """

    file_format = _detect_format(filename=filename, content_type=content_type)
    if file_format is None:
        raise SpreadsheetReadError("Invalid file type. Please upload an Excel file.")
    if not content:
        raise SpreadsheetReadError("Uploaded file is empty.")

    try:
        if file_format == "csv":
            frame = pd.read_csv(io.BytesIO(content), dtype=object, encoding="utf-8-sig")
        else:
            frame = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object, engine=file_format)
    except UnicodeDecodeError as exc:
        raise SpreadsheetReadError("CSV must be UTF-8 encoded.") from exc
    except ImportError as exc:
        raise SpreadsheetReadError(f"Spreadsheet engine '{file_format}' is not installed.") from exc
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to parse spreadsheet filename=%r error=%s", filename, exc)
        raise SpreadsheetReadError(f"Could not read spreadsheet: {exc}") from exc

    return frame_to_rows(frame)


def frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    frame = frame.rename(columns=lambda column: str(column).strip().lower())
    frame = frame.astype(object).where(pd.notna(frame), None)
    return frame.to_dict(orient="records")
