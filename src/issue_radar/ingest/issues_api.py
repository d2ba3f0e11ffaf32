"""Raw issues payload retrieval from the analytics API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from issue_radar.config import Settings, issues_api_url

logger = logging.getLogger(__name__)


class IssuesApiError(RuntimeError):
    pass


class _RetryableResponse(IssuesApiError):
    pass


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    retry=retry_if_exception_type(_RetryableResponse),
    reraise=True,
)
def _request(session: requests.Session, url: str, *, timeout: int) -> requests.Response:
    r = session.get(url, timeout=timeout)
    if r.status_code in (429, 503):
        raise _RetryableResponse(f"{url}: HTTP {r.status_code}")
    return r


def _session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    token = str(settings.ISSUES_API_TOKEN or "").strip()
    if token:
        session.headers.update({"Authorization": f"Bearer {token}"})
    return session


def fetch_issues_payload(settings: Settings, *, session: Optional[requests.Session] = None) -> Any:
    """GET the issues endpoint and return the decoded JSON body unchanged."""
    url = issues_api_url(settings)
    sess = session or _session(settings)
    logger.debug("Fetching issues from %s", url)
    try:
        r = _request(sess, url, timeout=int(settings.ISSUES_API_TIMEOUT_SECONDS))
    except requests.RequestException as e:
        raise IssuesApiError(f"{url}: {e}") from e

    if not r.ok:
        raise IssuesApiError(f"{url}: HTTP {r.status_code}")
    try:
        return r.json()
    except ValueError as e:
        raise IssuesApiError(f"{url}: response is not valid JSON") from e

