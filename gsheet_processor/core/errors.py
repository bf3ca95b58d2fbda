"""Custom exceptions used across gsheet_processor."""

from __future__ import annotations

from typing import Any


class GSheetError(Exception):
    """Base error for the application."""


class ConfigError(GSheetError):
    """Configuration related error."""


class FetchError(GSheetError):
    """Raised when the spreadsheet values cannot be retrieved."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class ProcessingError(GSheetError):
    """Raised when the API payload does not have the expected grid shape."""


class ExportError(GSheetError):
    """Raised when records cannot be written to disk."""
