from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gsheet_processor.services.sheets import config as sheets_config  # noqa: E402


@dataclass
class MockResponse:
    status_code: int = 200
    json_data: Any = None
    text_data: str | None = None

    def json(self) -> Any:
        if self.json_data is None:
            raise ValueError("JSON body not set")
        return self.json_data

    @property
    def text(self) -> str:
        if self.text_data is not None:
            return self.text_data
        if self.json_data is not None:
            return json.dumps(self.json_data)
        return ""


class FakeSession:
    """Stands in for ``requests.Session``; queued exceptions are raised instead of returned."""

    def __init__(self, responses: list[MockResponse | Exception]) -> None:
        self._responses = responses
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.call_kwargs: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> MockResponse:
        if not self._responses:
            raise AssertionError("No more responses queued")
        self.calls.append(("GET", url))
        self.call_kwargs.append(kwargs)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> Callable[..., FakeSession]:
    def _factory(*responses: MockResponse | Exception) -> FakeSession:
        return FakeSession(list(responses))

    return _factory


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shells and .env files from leaking into tests."""

    for key in (
        sheets_config.API_KEY_ENV,
        sheets_config.SHEET_ID_ENV,
        sheets_config.TIMEOUT_ENV,
        "GSHEET_PROCESSOR_CONFIG",
    ):
        monkeypatch.delenv(key, raising=False)


COURSE_GRID = [
    ["Dept", "Desc"],
    ["Archaeology", "Introduction to digs"],
    ["Physics", "Intro to mechanics"],
]


@pytest.fixture
def course_payload() -> dict[str, Any]:
    return {"range": "Sheet1!A1:Z1000", "majorDimension": "ROWS", "values": [list(r) for r in COURSE_GRID]}
