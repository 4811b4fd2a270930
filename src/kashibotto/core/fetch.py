"""
HTTP fetching for lyrics and dictionary providers.

This module intentionally contains only network logic:
- requests
- status handling

No parsing. No retries (call sites wrap these in a RetryPolicy).
"""

from typing import Optional

import requests  # type: ignore[import-untyped]

from ..config import HTTP_TIMEOUT, USER_AGENT
from ..exceptions import RateLimitedError

BROWSER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def _get(
    url: str,
    *,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: float = HTTP_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    sess = session or requests
    resp = sess.get(url, params=params, headers=headers, timeout=timeout)
    if resp.status_code == 429:
        raise RateLimitedError(f"Rate limited by {url}")
    resp.raise_for_status()
    return resp


def fetch_html(
    url: str,
    *,
    headers: Optional[dict] = None,
    timeout: float = HTTP_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Fetch a page and return raw HTML.

    Raises requests.RequestException on network or HTTP errors and
    RateLimitedError on a 429 response.
    """
    resp = _get(url, headers=headers or BROWSER_HEADERS, timeout=timeout, session=session)
    return resp.text


def fetch_json(
    url: str,
    *,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: float = HTTP_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> dict:
    """
    Fetch JSON from a URL and return it as a dict.

    Raises requests.RequestException on network or HTTP errors, ValueError on
    an undecodable body and RateLimitedError on a 429 response.
    """
    resp = _get(
        url,
        params=params,
        headers=headers or {"User-Agent": USER_AGENT, "Accept": "application/json"},
        timeout=timeout,
        session=session,
    )
    return resp.json()
