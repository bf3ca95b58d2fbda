"""HTTP client for the Google Sheets values endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, Timeout

from gsheet_processor.core.errors import FetchError
from gsheet_processor.core.logger import get_logger

from .config import SheetConfig, load_timeout

LOGGER = get_logger()

USER_AGENT = "gsheet-processor/1.0"
STATUS_ERROR_MESSAGE = "Error fetching GSheet"
UNAVAILABLE_MESSAGE = (
    "Failed to fetch from GSheets API. Check your Sheet Id and the public availability of your GSheet."
)
GENERAL_ERROR_PREFIX = "General error when fetching GSheet"

# encodeURIComponent leaves these unescaped
_SHEET_NAME_SAFE = "-_.!~*'()"

VALUES_QUERY: Mapping[str, str] = {
    "dateTimeRenderOption": "FORMATTED_STRING",
    "majorDimension": "ROWS",
    "valueRenderOption": "FORMATTED_VALUE",
}


def encode_sheet_name(config: SheetConfig) -> str:
    """Return the URL path segment for the configured sheet."""

    if config.sheet_name:
        return quote(config.sheet_name, safe=_SHEET_NAME_SAFE)
    return f"Sheet{config.sheet_number}"


def build_sheet_url(config: SheetConfig) -> str:
    """Return the values endpoint URL (without query string)."""

    base = config.base_url.rstrip("/")
    return f"{base}/{config.sheet_id}/values/{encode_sheet_name(config)}"


def build_query(config: SheetConfig) -> dict[str, str]:
    params = dict(VALUES_QUERY)
    params["key"] = config.api_key
    return params


class SheetsClient:
    """Single-shot reader for a public spreadsheet range.

    One GET per call, no retries. Sessions created by the client are closed by
    :meth:`close`; injected sessions are left to the caller.
    """

    def __init__(
        self,
        config: SheetConfig,
        *,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._owns_session = session is None
        self._session = session or self._build_session()
        self._logger = logger or LOGGER
        self._timeout = load_timeout(config)

    @property
    def config(self) -> SheetConfig:
        return self._config

    def fetch_sheet(self) -> dict[str, Any]:
        """Fetch the configured sheet and return the decoded JSON body.

        Raises:
            FetchError: On a non-success status or a network-level failure.
        """

        try:
            url = build_sheet_url(self._config)
            params = build_query(self._config)
        except Exception as exc:  # noqa: BLE001 - surfaced as FetchError
            raise FetchError(f"{GENERAL_ERROR_PREFIX}: {exc}") from exc

        self._logger.info(
            "sheets.http request method=GET url=%s sheet=%s",
            url,
            self._config.resolved_sheet_name,
        )
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except Timeout as exc:
            self._logger.warning("sheets.http timeout url=%s", url, exc_info=exc)
            raise FetchError(UNAVAILABLE_MESSAGE) from exc
        except RequestException as exc:
            self._logger.warning(
                "sheets.http connection_error url=%s error=%s",
                url,
                type(exc).__name__,
                exc_info=exc,
            )
            raise FetchError(UNAVAILABLE_MESSAGE) from exc

        status = response.status_code
        if not 200 <= status < 300:
            payload = self._safe_json(response)
            self._logger.error(
                "sheets.http bad_status url=%s status=%d payload_status=%s",
                url,
                status,
                self._error_status(payload),
            )
            raise FetchError(STATUS_ERROR_MESSAGE, status_code=status, payload=payload)

        try:
            body = response.json()
        except ValueError as exc:
            self._logger.warning("sheets.http invalid_json url=%s status=%d", url, status, exc_info=exc)
            raise FetchError(UNAVAILABLE_MESSAGE, status_code=status) from exc

        self._logger.debug("sheets.http ok url=%s status=%d", url, status)
        return body

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "SheetsClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Internal helpers -------------------------------------------------

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.setdefault("User-Agent", USER_AGENT)
        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _error_status(self, payload: Mapping[str, Any]) -> str | None:
        error = payload.get("error")
        if isinstance(error, Mapping):
            return error.get("status") or error.get("message")
        return None

    def _safe_json(self, response: Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            text = response.text
            if len(text) > 200:
                text = text[:200] + "..."
            return {"body": text}
        if isinstance(data, dict):
            return data
        return {"body": data}


def fetch_sheet(config: SheetConfig, *, session: requests.Session | None = None) -> dict[str, Any]:
    """Fetch one sheet with a short-lived client."""

    with SheetsClient(config, session=session) as client:
        return client.fetch_sheet()


__all__ = [
    "SheetsClient",
    "STATUS_ERROR_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "build_query",
    "build_sheet_url",
    "encode_sheet_name",
    "fetch_sheet",
]
