"""
app/parsers package marker.
"""

from app.parsers.spreadsheet_reader import SpreadsheetReadError, is_supported_spreadsheet, read_spreadsheet_rows

__all__ = ["SpreadsheetReadError", "is_supported_spreadsheet", "read_spreadsheet_rows"]
