from __future__ import annotations

from typing import Any, List

import pytest
import requests

from issue_radar.config import Settings
from issue_radar.ingest import issues_api
from issue_radar.ingest.issues_api import IssuesApiError, fetch_issues_payload


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, *, bad_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._bad_json:
            raise ValueError("no json")
        return self._payload


class _FakeSession:
    def __init__(self, responses: List[Any]) -> None:
        self._responses = list(responses)
        self.calls: List[tuple[str, Any]] = []

    def get(self, url: str, timeout: Any = None) -> Any:
        self.calls.append((url, timeout))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def _no_retry_sleep(monkeypatch: Any) -> None:
    monkeypatch.setattr(issues_api._request.retry, "sleep", lambda _seconds: None)


def _settings() -> Settings:
    return Settings(ISSUES_API_BASE_URL="http://api.local", ISSUES_API_TIMEOUT_SECONDS=5)


def test_fetch_returns_payload_unchanged() -> None:
    session = _FakeSession([_FakeResponse(200, {"issues": [{"id": 1}]})])
    payload = fetch_issues_payload(_settings(), session=session)  # type: ignore[arg-type]
    assert payload == {"issues": [{"id": 1}]}
    assert session.calls == [("http://api.local/issues", 5)]


def test_fetch_retries_rate_limited_responses() -> None:
    session = _FakeSession([_FakeResponse(429), _FakeResponse(503), _FakeResponse(200, [])])
    assert fetch_issues_payload(_settings(), session=session) == []  # type: ignore[arg-type]
    assert len(session.calls) == 3


def test_fetch_gives_up_after_three_rate_limited_attempts() -> None:
    session = _FakeSession([_FakeResponse(429)] * 3)
    with pytest.raises(IssuesApiError):
        fetch_issues_payload(_settings(), session=session)  # type: ignore[arg-type]
    assert len(session.calls) == 3


def test_fetch_raises_on_http_error_without_retry() -> None:
    session = _FakeSession([_FakeResponse(401)])
    with pytest.raises(IssuesApiError, match="HTTP 401"):
        fetch_issues_payload(_settings(), session=session)  # type: ignore[arg-type]
    assert len(session.calls) == 1


def test_fetch_wraps_transport_and_json_errors() -> None:
    session = _FakeSession([requests.ConnectionError("refused")])
    with pytest.raises(IssuesApiError, match="refused"):
        fetch_issues_payload(_settings(), session=session)  # type: ignore[arg-type]

    session = _FakeSession([_FakeResponse(200, bad_json=True)])
    with pytest.raises(IssuesApiError, match="not valid JSON"):
        fetch_issues_payload(_settings(), session=session)  # type: ignore[arg-type]


def test_session_sends_bearer_token() -> None:
    sess = issues_api._session(Settings(ISSUES_API_TOKEN="tok"))
    assert sess.headers["Authorization"] == "Bearer tok"
    assert "Authorization" not in issues_api._session(Settings()).headers
