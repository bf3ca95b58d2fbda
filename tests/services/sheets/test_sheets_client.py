from __future__ import annotations

import pytest
from requests.exceptions import ConnectionError, Timeout

from conftest import MockResponse
from gsheet_processor.core.errors import FetchError
from gsheet_processor.services.sheets.client import (
    STATUS_ERROR_MESSAGE,
    UNAVAILABLE_MESSAGE,
    SheetsClient,
    build_query,
    build_sheet_url,
    fetch_sheet,
)
from gsheet_processor.services.sheets.config import SheetConfig


def _config(**overrides) -> SheetConfig:
    data = {"api_key": "key-123", "sheet_id": "sheet-abc", "timeout_sec": 1.0}
    data.update(overrides)
    return SheetConfig(**data)


def test_url_uses_default_sheet_number() -> None:
    url = build_sheet_url(_config(sheet_number=3))
    assert url == "https://sheets.googleapis.com/v4/spreadsheets/sheet-abc/values/Sheet3"


def test_url_percent_encodes_sheet_name() -> None:
    url = build_sheet_url(_config(sheet_name="Modules 2024/25 (draft)"))
    assert url.endswith("/values/Modules%202024%2F25%20(draft)")


def test_empty_sheet_name_falls_back_to_number() -> None:
    url = build_sheet_url(_config(sheet_name="", sheet_number=2))
    assert url.endswith("/values/Sheet2")


def test_query_requests_formatted_rows() -> None:
    assert build_query(_config()) == {
        "dateTimeRenderOption": "FORMATTED_STRING",
        "majorDimension": "ROWS",
        "valueRenderOption": "FORMATTED_VALUE",
        "key": "key-123",
    }


def test_fetch_returns_json_body(fake_session, course_payload) -> None:
    session = fake_session(MockResponse(json_data=course_payload))
    body = fetch_sheet(_config(), session=session)
    assert body == course_payload
    assert session.calls == [("GET", "https://sheets.googleapis.com/v4/spreadsheets/sheet-abc/values/Sheet1")]
    assert session.call_kwargs[0]["params"]["key"] == "key-123"
    assert session.call_kwargs[0]["timeout"] == 1.0


def test_non_success_status_raises_status_error(fake_session) -> None:
    session = fake_session(
        MockResponse(status_code=403, json_data={"error": {"code": 403, "status": "PERMISSION_DENIED"}}),
    )
    with pytest.raises(FetchError) as excinfo:
        fetch_sheet(_config(), session=session)
    assert str(excinfo.value) == STATUS_ERROR_MESSAGE
    assert excinfo.value.status_code == 403
    assert excinfo.value.payload["error"]["status"] == "PERMISSION_DENIED"


def test_server_error_is_not_retried(fake_session) -> None:
    session = fake_session(
        MockResponse(status_code=500, text_data="backend error"),
        MockResponse(json_data={"values": []}),
    )
    with pytest.raises(FetchError, match=STATUS_ERROR_MESSAGE):
        fetch_sheet(_config(), session=session)
    assert len(session.calls) == 1


@pytest.mark.parametrize("exc", [ConnectionError("dns failure"), Timeout("read timed out")])
def test_network_failure_raises_availability_error(fake_session, exc: Exception) -> None:
    session = fake_session(exc)
    with pytest.raises(FetchError) as excinfo:
        fetch_sheet(_config(), session=session)
    assert str(excinfo.value) == UNAVAILABLE_MESSAGE
    assert excinfo.value.status_code is None


def test_malformed_body_raises_availability_error(fake_session) -> None:
    session = fake_session(MockResponse(status_code=200, text_data="<html>not json</html>"))
    with pytest.raises(FetchError, match="public availability"):
        fetch_sheet(_config(), session=session)


def test_injected_session_is_left_open(fake_session) -> None:
    session = fake_session(MockResponse(json_data={"values": []}))
    with SheetsClient(_config(), session=session) as client:
        client.fetch_sheet()
    assert session.closed is False


def test_timeout_env_override(fake_session, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GSHEETS_TIMEOUT_SEC", "2.5")
    session = fake_session(MockResponse(json_data={"values": []}))
    fetch_sheet(_config(), session=session)
    assert session.call_kwargs[0]["timeout"] == 2.5
