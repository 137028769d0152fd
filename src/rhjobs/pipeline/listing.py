# src/rhjobs/pipeline/listing.py
"""
Merge what the HTML parsers found on one search page.

The embedded JSON, the JSON-LD blocks and the plain links often describe the
same job. We key everything by resolved detail URL and let each parser
overlay the fields it knows, in this order:

    embedded JSON -> JSON-LD -> DOM links

so the last parser's non-null values win and nothing it doesn't know about
gets wiped.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

from rhjobs.models import ListingMeta
from rhjobs.pipeline import normalize, parsers

logger = logging.getLogger(__name__)

# (name, parser, adapter) in overlay order
HTML_LAYERS: Tuple[Tuple[str, Callable[[str], parsers.ParsedPage], Callable[[dict], ListingMeta]], ...] = (
    ("embedded-json", parsers.parse_embedded_json, normalize.from_api_job),
    ("json-ld", parsers.parse_jsonld, normalize.from_posting),
    ("dom-links", parsers.parse_dom_links, normalize.from_anchor),
)


class ListingReconciler:
    """Collects partial listings for one page, keyed by detail URL."""

    def __init__(self) -> None:
        self._entries: Dict[str, ListingMeta] = {}
        self._unkeyed = 0

    def _key(self, partial: ListingMeta) -> str:
        url = partial.get("url")
        if url:
            return url
        # No URL to merge on: give it a slot of its own.
        self._unkeyed += 1
        return f"#unkeyed-{self._unkeyed}"

    def add(self, partial: ListingMeta) -> None:
        key = self._key(partial)
        current = self._entries.get(key)
        self._entries[key] = normalize.merge_partial(current, partial) if current else dict(partial)  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._entries)

    def listings(self) -> List[ListingMeta]:
        return [normalize.finalize(entry) for entry in self._entries.values()]


def reconcile_html(html: str) -> Tuple[List[ListingMeta], int]:
    """
    Run every HTML layer over one page and return (listings, total_count).

    total_count is the best count any layer reported (the embedded JSON
    usually knows the real total; links only know what's on the page).
    """
    reconciler = ListingReconciler()
    total = 0
    for name, parse, adapt in HTML_LAYERS:
        try:
            parsed = parse(html)
        except (ValueError, RecursionError) as e:
            logger.debug("%s parser failed: %s", name, e)
            continue
        for raw in parsed.jobs:
            reconciler.add(adapt(raw))
        total = max(total, parsed.total_count)
        logger.debug("%s layer contributed %d raw listings", name, len(parsed.jobs))
    listings = reconciler.listings()
    return listings, max(total, len(listings))
