# src/rhjobs/pipeline/detail.py
"""
Build the final record for one job from its detail page.

Precedence per field (first non-null wins):

    listing-stage data  >  JSON-LD on the detail page  >  DOM selectors

description_text is only copied when a source gave it to us directly;
otherwise it is recomputed from whichever description_html won.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

from rhjobs.models import COMPANY_NAME, RECORD_FIELDS, SOURCE_NAME, JobRecord, ListingMeta
from rhjobs.pipeline import normalize
from rhjobs.pipeline.parsers import find_job_postings
from rhjobs.pipeline.text import clean_text, collapse_ws, normalize_title

DEFAULTS = {"company": COMPANY_NAME, "source": SOURCE_NAME}

# field -> CSS selectors tried in order; first element with text wins
FALLBACK_SELECTORS = {
    "title": ("h1", "[class*='job-title']"),
    "salary": ("[class*='salary']", "[class*='pay']"),
    "location": ("[class*='location']",),
    "job_type": ("[class*='job-type']", "[class*='employment']"),
    "date_posted": ("[class*='date']", "[class*='posted']"),
}


def extract_structured(soup: BeautifulSoup) -> Optional[ListingMeta]:
    """First JobPosting in the page's JSON-LD, adapted; None if there isn't one."""
    postings = find_job_postings(soup)
    if not postings:
        return None
    return normalize.from_posting(postings[0])


def _select_text(soup: BeautifulSoup, selectors) -> Optional[str]:
    for selector in selectors:
        for node in soup.select(selector):
            text = collapse_ws(node.get_text(" "))
            if text:
                return text
    return None


def extract_fallback(soup: BeautifulSoup) -> ListingMeta:
    """Whatever the usual page markup gives us, by class-name sniffing."""
    found: Dict[str, Any] = {
        field: _select_text(soup, selectors) for field, selectors in FALLBACK_SELECTORS.items()
    }
    found["title"] = normalize_title(found["title"])
    desc = soup.select_one("[class*='description']")
    if desc is not None:
        found["description_html"] = desc.decode_contents().strip() or None
    return {k: v for k, v in found.items() if v is not None}  # type: ignore[return-value]


def reconcile_detail(
    job_meta: Optional[ListingMeta],
    structured: Optional[ListingMeta],
    fallback: Optional[ListingMeta],
    url: Optional[str],
) -> JobRecord:
    layers = [layer for layer in (job_meta, structured, fallback) if layer]
    record: Dict[str, Any] = {}
    for key in RECORD_FIELDS:
        # listing data already carries the fill-in company/source, which must
        # not shadow a real value from the detail page
        skip = (None, DEFAULTS.get(key))
        record[key] = next((layer[key] for layer in layers if layer.get(key) not in skip), None)

    # job_meta's description_text comes from its own html, which outranks the
    # other layers, so text and html always describe the same description.
    if not record["description_text"] and record["description_html"]:
        record["description_text"] = clean_text(record["description_html"])

    for key, default in DEFAULTS.items():
        record[key] = record[key] or default
    record["url"] = record["url"] or url
    record["job_id"] = normalize.derive_job_id(record["job_id"], record["url"])
    return record  # type: ignore[return-value]


def collect_detail(html: str, job_meta: Optional[ListingMeta], url: str) -> JobRecord:
    soup = BeautifulSoup(html or "", "html.parser")
    return reconcile_detail(job_meta, extract_structured(soup), extract_fallback(soup), url)
