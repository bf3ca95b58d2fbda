"""Fetch public Google Sheets ranges as keyed, filterable records."""

from .core.errors import ConfigError, ExportError, FetchError, GSheetError, ProcessingError
from .core.pipeline import ProcessorOptions, fetch_records, gsheet_processor

__all__ = [
    "ConfigError",
    "ExportError",
    "FetchError",
    "GSheetError",
    "ProcessingError",
    "ProcessorOptions",
    "fetch_records",
    "gsheet_processor",
]
