"""Google Sheets values API integration."""

from .client import SheetsClient, fetch_sheet
from .config import SheetConfig, resolve_config

__all__ = [
    "SheetConfig",
    "SheetsClient",
    "fetch_sheet",
    "resolve_config",
]
