# src/rhjobs/pipeline/text.py
"""
Small pure helpers for cleaning values scraped from the site.

None of these raise on bad input: they return None and let the caller move
on to the next source.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

SITE_BASE = "https://www.roberthalf.com"

_WS = re.compile(r"\s+")
_BRAND_SUFFIX = re.compile(r"\s*\|\s*robert\s+half\s*$", re.IGNORECASE)
_JOB_IN_CLAUSE = re.compile(r"\s+job\s+in\s+.*$", re.IGNORECASE)
_NON_NUMERIC = re.compile(r"[^\d.\-]")

BLOCK_TAGS = (
    "p", "div", "li", "ul", "ol", "section", "article", "header", "footer",
    "h1", "h2", "h3", "h4", "h5", "h6", "tr", "td", "th", "table", "blockquote",
)


def collapse_ws(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    out = _WS.sub(" ", str(value)).strip()
    return out or None


def clean_text(html: Optional[str]) -> Optional[str]:
    """
    HTML -> plain text. Drops script/style/noscript/iframe, squashes every
    whitespace run to one space. Empty in, None out.
    """
    if not html:
        return None
    soup = BeautifulSoup(str(html), "html.parser")
    for tag in soup(["script", "style", "noscript", "iframe"]):
        tag.decompose()
    # "<li>GAAP</li><li>Excel</li>" should read "GAAP Excel", but "<b>pay</b>roll" stays one word
    for br in soup.find_all("br"):
        br.replace_with(" ")
    for tag in soup.find_all(list(BLOCK_TAGS)):
        tag.append(" ")
    return collapse_ws(soup.get_text())


def normalize_title(raw: Optional[str]) -> Optional[str]:
    """'Senior Accountant Job in Chicago, IL | Robert Half' -> 'Senior Accountant'"""
    if raw is None:
        return None
    title = _WS.sub(" ", str(raw)).strip()
    title = _BRAND_SUFFIX.sub("", title)
    title = _JOB_IN_CLAUSE.sub("", title)
    return collapse_ws(title)


def resolve_url(href: Optional[str], base: str = SITE_BASE) -> Optional[str]:
    """Absolute hrefs pass through untouched; relative ones are joined to the site."""
    if not href or not str(href).strip():
        return None
    href = str(href).strip()
    try:
        if urlsplit(href).scheme:
            return href
        resolved = urljoin(base, href)
    except ValueError:
        return None
    return resolved or None


def to_number(value: Any) -> Optional[float]:
    """
    '$52,500.00' -> 52500.0, 70000 -> 70000.0, 'n/a' -> None.
    Booleans are not salaries.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        stripped = _NON_NUMERIC.sub("", str(value))
        if not stripped:
            return None
        try:
            num = float(stripped)
        except ValueError:
            return None
    if not math.isfinite(num):
        return None
    return num
