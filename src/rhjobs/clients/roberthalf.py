# src/rhjobs/clients/roberthalf.py

"""
Plain-function client for roberthalf.com (no classes, no session objects).

Design goals:
- Keep *all* HTTP details here: URLs, headers, timeouts, proxies, retries.
- Hand back raw payloads (status + JSON body, or HTML text). Deciding what a
  response *means* (auth wall? empty page?) happens in rhjobs.pipeline.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import urllib.parse

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

API_URL = "https://prd-dr.jps.api.roberthalfonline.com/search"
SEARCH_URL = "https://www.roberthalf.com/us/en/jobs"

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

API_TIMEOUT = 30
PAGE_TIMEOUT = 30
DETAIL_TIMEOUT = 60
DETAIL_RETRIES = 3


# ---- Internal helpers ---------------------------------------------------------

def _api_headers() -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
        "Referer": "https://www.roberthalf.com/",
    }


def _html_headers() -> Dict[str, str]:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml",
    }


def _client(timeout: float, headers: Dict[str, str], proxy: Optional[str] = None) -> httpx.Client:
    """One place to build clients so tests can swap in a MockTransport."""
    return httpx.Client(timeout=timeout, headers=headers, proxy=proxy, follow_redirects=True)


def search_page_url(keyword: str, location: str, page: int) -> str:
    """The public search-results page for a query (what a browser would load)."""
    query = urllib.parse.urlencode(
        {"keywords": keyword or "", "location": location or "", "pagenumber": page},
        quote_via=urllib.parse.quote,
    )
    return f"{SEARCH_URL}?{query}"


# ---- Public API ---------------------------------------------------------------

@retry(
    # Only connection-level trouble is retried. An HTTP status of any kind is
    # an answer, and the caller decides what it means.
    wait=wait_exponential(min=1, max=8),
    stop=stop_after_attempt(3),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def search_api(payload: Dict[str, Any], *, proxy: Optional[str] = None) -> Tuple[int, Any]:
    """
    POST one search payload to the job-search API.

    Returns (status_code, body) where body is the decoded JSON, or None if
    the response wasn't JSON. 4xx/5xx do NOT raise.
    """
    with _client(API_TIMEOUT, _api_headers(), proxy) as client:
        resp = client.post(API_URL, json=payload)
        try:
            body = resp.json()
        except ValueError:
            body = None
        return resp.status_code, body


@retry(
    wait=wait_exponential(min=1, max=8),
    stop=stop_after_attempt(3),
    retry=retry_if_exception_type(httpx.HTTPError),
    reraise=True,
)
def fetch_html(url: str, *, proxy: Optional[str] = None, timeout: float = PAGE_TIMEOUT) -> str:
    """GET a page and return its text. Raises httpx.HTTPStatusError on 4xx/5xx."""
    with _client(timeout, _html_headers(), proxy) as client:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.text


def fetch_search_page(keyword: str, location: str, page: int, *, proxy: Optional[str] = None) -> str:
    return fetch_html(search_page_url(keyword, location, page), proxy=proxy)


@retry(
    # Detail pages are fetched from the worker pool: a few retries, then the
    # caller falls back to listing-stage data.
    wait=wait_exponential(min=1, max=10),
    stop=stop_after_attempt(DETAIL_RETRIES + 1),
    retry=retry_if_exception_type(httpx.HTTPError),
    reraise=True,
)
def fetch_detail_page(url: str, *, proxy: Optional[str] = None) -> str:
    with _client(DETAIL_TIMEOUT, _html_headers(), proxy) as client:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.text
