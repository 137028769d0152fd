# src/rhjobs/pipeline/sources.py
"""
Extraction strategies. Each one answers a single question:
"what listings can you give me for page N?"

The run loop tries them in order and stops at the first one that returns
listings. A strategy never raises for network or parse trouble; it logs and
returns an empty PageResult instead.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Tuple

import httpx

from rhjobs.clients import roberthalf
from rhjobs.models import PageResult, SearchQuery
from rhjobs.pipeline.listing import reconcile_html
from rhjobs.pipeline.normalize import listing_from_api_job
from rhjobs.pipeline.parsers import build_search_payload, parse_api_response

logger = logging.getLogger(__name__)


class Source(Protocol):
    name: str

    def attempt(self, page: int) -> PageResult:
        ...


class ApiSource:
    """The JSON search API. Fast and rich, but sometimes walled off."""

    name = "api"

    def __init__(
        self,
        query: SearchQuery,
        page_size: int,
        *,
        proxy: Optional[str] = None,
        search: Callable[..., Tuple[int, object]] = roberthalf.search_api,
    ) -> None:
        self.query = query
        self.page_size = page_size
        self.proxy = proxy
        self._search = search

    def attempt(self, page: int) -> PageResult:
        payload = build_search_payload(self.query, page, self.page_size)
        logger.info(
            "Fetching page %d from API with keywords: %r, location: %r",
            page, self.query.keyword, self.query.location,
        )
        try:
            status, body = self._search(payload, proxy=self.proxy)
        except httpx.HTTPError as e:
            logger.error("API fetch failed for page %d: %s", page, e)
            return PageResult()

        parsed = parse_api_response(status, body)
        if parsed.requires_auth:
            return PageResult(requires_auth=True)
        if not parsed.jobs:
            logger.info("API returned no jobs for page %d", page)
            return PageResult()
        listings = [listing_from_api_job(job) for job in parsed.jobs]
        return PageResult(listings=listings, total_count=parsed.total_count or len(listings))


class HtmlSource:
    """The public search page: embedded JSON, JSON-LD and links, merged."""

    name = "html"

    def __init__(
        self,
        query: SearchQuery,
        *,
        proxy: Optional[str] = None,
        fetch: Callable[..., str] = roberthalf.fetch_search_page,
    ) -> None:
        self.query = query
        self.proxy = proxy
        self._fetch = fetch

    def attempt(self, page: int) -> PageResult:
        logger.info("Fetching page %d from HTML fallback", page)
        try:
            html = self._fetch(self.query.keyword, self.query.location, page, proxy=self.proxy)
        except httpx.HTTPError as e:
            logger.error("HTML fetch failed for page %d: %s", page, e)
            return PageResult()

        listings, total = reconcile_html(html)
        logger.info("Found %d jobs on HTML page %d", len(listings), page)
        return PageResult(listings=listings, total_count=total)


def default_sources(query: SearchQuery, page_size: int, proxy: Optional[str] = None) -> list:
    """API first, HTML when the API is walled off or comes back empty."""
    return [ApiSource(query, page_size, proxy=proxy), HtmlSource(query, proxy=proxy)]
