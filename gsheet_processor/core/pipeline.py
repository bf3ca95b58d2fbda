from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

import requests
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from gsheet_processor.services.records.models import FilterOptions, Record
from gsheet_processor.services.records.processor import process_response
from gsheet_processor.services.sheets.client import fetch_sheet
from gsheet_processor.services.sheets.config import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    SheetConfig,
    validate_api_key,
)

from .errors import ConfigError, GSheetError
from .logger import get_logger


SuccessCB = Callable[[List[Record]], None]
ErrorCB = Callable[[str], None]

LOGGER = get_logger()


class ProcessorOptions(BaseModel):
    """Everything one fetch -> process -> filter run needs.

    Accepts snake_case keys as well as the camelCase names used by browser
    callers (``apiKey``, ``sheetId``, ``returnAllResults`` ...).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("api_key", "apiKey"))
    sheet_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("sheet_id", "sheetId"))
    sheet_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("sheet_name", "sheetName"))
    sheet_number: int = Field(default=1, validation_alias=AliasChoices("sheet_number", "sheetNumber"))
    timeout_sec: float = Field(default=DEFAULT_TIMEOUT, validation_alias=AliasChoices("timeout_sec", "timeoutSec"))
    return_all_results: bool = Field(
        default=False,
        validation_alias=AliasChoices("return_all_results", "returnAllResults"),
    )
    base_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("base_url", "baseUrl"))
    filter: Optional[Dict[str, Any]] = None
    filter_options: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("filter_options", "filterOptions"),
    )

    def to_sheet_config(self) -> SheetConfig:
        validate_api_key(self.api_key)
        return SheetConfig(
            api_key=self.api_key or "",
            sheet_id=self.sheet_id or "",
            sheet_name=self.sheet_name or None,
            sheet_number=self.sheet_number,
            timeout_sec=self.timeout_sec,
            base_url=self.base_url or DEFAULT_BASE_URL,
        )

    def to_filter_options(self) -> FilterOptions:
        return FilterOptions.from_mapping(self.filter_options)


def build_options(options: ProcessorOptions | Mapping[str, Any]) -> ProcessorOptions:
    """Validate raw caller options, raising ``ConfigError`` on bad input."""

    if isinstance(options, ProcessorOptions):
        return options
    try:
        return ProcessorOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigError(f"Invalid processor options: {exc}") from exc


def _run(opts: ProcessorOptions, config: SheetConfig, session: requests.Session | None) -> List[Record]:
    LOGGER.info("1/2 fetch - sheet_id=%s sheet=%s", config.sheet_id, config.resolved_sheet_name)
    payload = fetch_sheet(config, session=session)
    records = process_response(
        payload,
        opts.return_all_results,
        opts.filter,
        opts.to_filter_options(),
    )
    LOGGER.info("2/2 process - %d records", len(records))
    return records


def fetch_records(
    options: ProcessorOptions | Mapping[str, Any],
    *,
    session: requests.Session | None = None,
) -> List[Record]:
    """Fetch, reshape and filter one sheet, raising ``GSheetError`` on failure."""

    opts = build_options(options)
    config = opts.to_sheet_config()
    return _run(opts, config, session)


def gsheet_processor(
    options: ProcessorOptions | Mapping[str, Any],
    on_success: SuccessCB,
    on_error: ErrorCB,
    *,
    session: requests.Session | None = None,
) -> None:
    """Callback flavour of :func:`fetch_records`.

    Configuration problems (e.g. a missing API key) raise ``ConfigError``
    before any request is made. Fetch and processing failures are passed to
    ``on_error`` as a message.
    """

    opts = build_options(options)
    config = opts.to_sheet_config()
    try:
        records = _run(opts, config, session)
    except GSheetError as exc:
        LOGGER.error("gsheet processing failed: %s", exc)
        on_error(str(exc))
        return
    on_success(records)


__all__ = ["ProcessorOptions", "build_options", "fetch_records", "gsheet_processor"]
