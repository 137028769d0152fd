# src/rhjobs/pipeline/parsers.py
"""
Source parsers: raw payload in, raw listings out.

Each parser knows exactly one shape (API JSON, the JSON blob the search page
embeds in a <script>, JSON-LD, or plain <a href="/job/..."> links). They do
NOT normalize anything: that's `rhjobs.pipeline.normalize`'s job.

A parser that can't make sense of its input logs at debug level and returns
nothing, so the other parsers still get their turn.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from bs4 import BeautifulSoup

from rhjobs.models import SearchQuery
from rhjobs.pipeline.text import collapse_ws, resolve_url

logger = logging.getLogger(__name__)

AUTH_MESSAGE = re.compile(r"missing authentication token", re.IGNORECASE)
AUTH_STATUSES = (401, 403)

EMBEDDED_JSON = re.compile(
    r"aemSettings\.rh_job_search\.\w+\s*=\s*JSON\.parse\('(.*?)'\);",
    re.DOTALL,
)
JOB_HREF = re.compile(r"/job/", re.IGNORECASE)

_JS_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.DOTALL)
_JS_SIMPLE = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


@dataclass
class ParsedPage:
    jobs: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    requires_auth: bool = False


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ---- API ---------------------------------------------------------------------

def build_search_payload(query: SearchQuery, page: int, page_size: int) -> Dict[str, Any]:
    """The body the job-search endpoint expects. Shape is fixed; only values vary."""
    return {
        "country": "us",
        "city": None,
        "distance": "50",
        "emptype": query.job_type or None,
        "includedoe": "",
        "jobtype": None,
        "keywords": query.keyword or "",
        "languagecodes": [],
        "lobid": query.specialization or None,
        "location": query.location or "",
        "mode": "",
        "pagenumber": page,
        "pagesize": page_size,
        "postedwithin": "",
        "remote": query.remote or "Any",
        "remoteText": "",
        "source": ["Salesforce"],
        "timetype": "",
    }


def parse_api_response(status_code: int, body: Any) -> ParsedPage:
    """
    Decide what an API response means.

    Auth failures (401/403, or a 200 whose `message` says the token is
    missing) are not errors to retry: they tell the caller to use another
    source.
    """
    if isinstance(body, dict) and AUTH_MESSAGE.search(str(body.get("message") or "")):
        logger.warning("API requires authentication token, switching to HTML fallback")
        return ParsedPage(requires_auth=True)
    if status_code in AUTH_STATUSES:
        logger.warning("API responded with %s, switching to HTML fallback", status_code)
        return ParsedPage(requires_auth=True)

    jobs = body.get("jobs") if isinstance(body, dict) else None
    if isinstance(jobs, list) and jobs:
        kept = [j for j in jobs if isinstance(j, dict)]
        return ParsedPage(jobs=kept, total_count=_as_int(body.get("totalCount")))
    return ParsedPage()


# ---- embedded page JSON -------------------------------------------------------

def _unescape_js(literal: str) -> str:
    """Undo JavaScript string-literal escapes (\\', \\", \\uXXXX, \\n, ...)."""

    def _sub(m: re.Match) -> str:
        esc = m.group(1)
        if esc[0] == "u" and len(esc) == 5:
            return chr(int(esc[1:], 16))
        if esc[0] == "x" and len(esc) == 3:
            return chr(int(esc[1:], 16))
        return _JS_SIMPLE.get(esc, esc)

    return _JS_ESCAPE.sub(_sub, literal)


def _script_bodies(soup: BeautifulSoup) -> Iterator[str]:
    for script in soup.find_all("script"):
        text = script.string if script.string is not None else script.get_text()
        if text:
            yield text


def parse_embedded_json(html: str) -> ParsedPage:
    """
    The search page ships its results as
    `aemSettings.rh_job_search.<name> = JSON.parse('...')`. The quoted part
    is JSON inside a JS string, so: unescape, parse, and parse again if it
    was double-encoded.
    """
    if not html:
        return ParsedPage()
    soup = BeautifulSoup(html, "html.parser")
    for body in _script_bodies(soup):
        for match in EMBEDDED_JSON.finditer(body):
            try:
                payload: Any = json.loads(_unescape_js(match.group(1)))
                if isinstance(payload, str):
                    payload = json.loads(payload)
            except (ValueError, RecursionError) as e:
                logger.debug("Embedded JSON parse failed: %s", e)
                continue
            jobs = payload.get("jobs") if isinstance(payload, dict) else None
            if isinstance(jobs, list) and jobs:
                kept = [j for j in jobs if isinstance(j, dict)]
                logger.info("Extracted %d jobs from embedded JSON", len(kept))
                return ParsedPage(jobs=kept, total_count=_as_int(payload.get("totalCount"), len(kept)))
    return ParsedPage()


# ---- JSON-LD ------------------------------------------------------------------

def _is_job_posting(item: Dict[str, Any]) -> bool:
    kind = item.get("@type")
    kinds = kind if isinstance(kind, list) else [kind]
    return any(isinstance(k, str) and k.lower() == "jobposting" for k in kinds)


def _walk_postings(node: Any, out: List[Dict[str, Any]]) -> None:
    # iterative: page JSON can nest deeper than the recursion limit
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(reversed(current))
        elif isinstance(current, dict):
            if _is_job_posting(current):
                out.append(current)
            stack.extend(v for v in reversed(list(current.values())) if isinstance(v, (list, dict)))


def _load_jsonld(raw: str) -> Optional[Any]:
    try:
        return json.loads(raw)
    except ValueError:
        pass
    except RecursionError as e:
        logger.debug("JSON-LD block nested too deeply: %s", e)
        return None
    try:
        return json.loads(raw.replace("&quot;", '"'))
    except (ValueError, RecursionError) as e:
        logger.debug("Unparsable JSON-LD block: %s", e)
        return None


def find_job_postings(soup: BeautifulSoup) -> List[Dict[str, Any]]:
    postings: List[Dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string if script.string is not None else script.get_text()
        if not raw or not raw.strip():
            continue
        data = _load_jsonld(raw)
        if data is not None:
            _walk_postings(data, postings)
    return postings


def parse_jsonld(html: str) -> ParsedPage:
    """Every schema.org JobPosting on the page, however deeply it is nested."""
    if not html:
        return ParsedPage()
    postings = find_job_postings(BeautifulSoup(html, "html.parser"))
    return ParsedPage(jobs=postings, total_count=len(postings))


# ---- plain links --------------------------------------------------------------

def parse_dom_links(html: str) -> ParsedPage:
    """Last resort: any <a> pointing at /job/... , anchor text as the title."""
    if not html:
        return ParsedPage()
    soup = BeautifulSoup(html, "html.parser")
    links: Dict[str, Dict[str, Any]] = {}
    for a in soup.find_all("a", href=True):
        href = a.get("href")
        if not href or not JOB_HREF.search(href):
            continue
        url = resolve_url(href)
        title = collapse_ws(a.get_text(" "))
        if not url or not title:
            continue
        links[url] = {"jobtitle": title, "job_detail_url": url}
    jobs = list(links.values())
    return ParsedPage(jobs=jobs, total_count=len(jobs))
