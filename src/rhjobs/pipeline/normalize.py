# src/rhjobs/pipeline/normalize.py
"""
Adapt each raw listing shape into our ListingMeta.

There is one adapter per shape:
- `from_api_job`   API objects and the embedded search JSON (same schema)
- `from_posting`   schema.org JobPosting (JSON-LD)
- `from_anchor`    {jobtitle, job_detail_url} dicts from the link scraper

Adapters return a *partial* record: only the fields they actually found.
`finalize` fills in defaults, derives description_text and the job id.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional
from urllib.parse import urlsplit

from rhjobs.models import COMPANY_NAME, RECORD_FIELDS, SOURCE_NAME, ListingMeta
from rhjobs.pipeline.formatters import (
    format_location_from_job,
    format_location_from_posting,
    format_salary,
)
from rhjobs.pipeline.text import clean_text, collapse_ws, normalize_title, resolve_url

# API field aliases, first one present wins.
ID_KEYS = ("unique_job_number", "sf_jo_number", "job_id", "jobId", "id")
TITLE_KEYS = ("jobtitle", "title", "job_title")
URL_KEYS = ("job_detail_url", "url", "jobUrl")
DESCRIPTION_KEYS = ("description", "description_html", "summary")
DATE_KEYS = ("date_posted", "datePosted", "posted_date", "date_posted_str")
JOB_TYPE_KEYS = ("emptype", "job_type", "jobtype")
SPECIALIZATION_KEYS = ("functional_role", "specialization", "lob")

REMOTE_LABELS = {
    "yes": "Remote",
    "true": "Remote",
    "remote": "Remote",
    "no": "On-site",
    "false": "On-site",
    "hybrid": "Hybrid",
}


def _first(raw: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, "", [], {}):
            return value
    return None


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    return collapse_ws(str(value))


def _text_list(value: Any) -> Optional[str]:
    if isinstance(value, list):
        return collapse_ws(", ".join(str(v) for v in value if v not in (None, "")))
    return _text(value)


def _compact(fields: Dict[str, Any]) -> ListingMeta:
    # Keep only what was actually found so a later source can't blank it out.
    return {k: v for k, v in fields.items() if v is not None}  # type: ignore[return-value]


def _text_html(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def remote_label(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "Remote" if value else "On-site"
    text = _text(value)
    if not text:
        return None
    return REMOTE_LABELS.get(text.lower(), text)


def derive_job_id(explicit: Any, url: Optional[str]) -> Optional[str]:
    """Provider id if we have one, else the URL's path+query, else None."""
    if explicit not in (None, "") and not isinstance(explicit, (dict, list, bool)):
        return str(explicit).strip() or None
    if not url:
        return None
    parts = urlsplit(url)
    key = parts.path + (f"?{parts.query}" if parts.query else "")
    return key if key and key != "/" else None


def from_api_job(job: Dict[str, Any]) -> ListingMeta:
    """API / embedded-JSON object -> partial ListingMeta."""
    skills = job.get("skills")
    if isinstance(skills, list):
        skills = ", ".join(str(s) for s in skills if s)
    url = resolve_url(_text(_first(job, URL_KEYS)))
    return _compact({
        "title": normalize_title(_text(_first(job, TITLE_KEYS))),
        "location": format_location_from_job(job),
        "salary": format_salary(job),
        "job_type": _text(_first(job, JOB_TYPE_KEYS)),
        "date_posted": _text(_first(job, DATE_KEYS)),
        "description_html": _text_html(_first(job, DESCRIPTION_KEYS)),
        "skills": clean_text(skills) if isinstance(skills, str) else None,
        "specialization": _text(_first(job, SPECIALIZATION_KEYS)),
        "remote": remote_label(job.get("remote")),
        "url": url,
        "job_id": derive_job_id(_first(job, ID_KEYS), None),
    })


def _posting_identifier(posting: Dict[str, Any]) -> Any:
    ident = posting.get("identifier")
    if isinstance(ident, dict):
        return ident.get("value") or ident.get("@id")
    return ident


def _organization_name(org: Any) -> Optional[str]:
    if isinstance(org, dict):
        return _text(org.get("name") or org.get("legalName"))
    return _text(org)


def from_posting(posting: Dict[str, Any]) -> ListingMeta:
    """schema.org JobPosting -> partial ListingMeta."""
    remote = None
    if str(posting.get("jobLocationType") or "").upper() == "TELECOMMUTE":
        remote = "Remote"
    return _compact({
        "title": normalize_title(_text(posting.get("title") or posting.get("name"))),
        "company": _organization_name(posting.get("hiringOrganization")),
        "location": format_location_from_posting(posting),
        "salary": format_salary(posting),
        "job_type": _text_list(posting.get("employmentType")),
        "date_posted": _text(posting.get("datePosted")),
        "description_html": _text_html(posting.get("description")),
        "skills": _text_list(posting.get("skills")),
        "specialization": _text_list(posting.get("occupationalCategory") or posting.get("industry")),
        "remote": remote,
        "url": resolve_url(_text(posting.get("url"))),
        "job_id": derive_job_id(_posting_identifier(posting), None),
    })


def from_anchor(link: Dict[str, Any]) -> ListingMeta:
    return _compact({
        "title": normalize_title(link.get("jobtitle")),
        "url": resolve_url(link.get("job_detail_url")),
    })


def merge_partial(base: ListingMeta, overlay: ListingMeta) -> ListingMeta:
    """Later source's non-null fields win; everything else survives."""
    merged = dict(base)
    merged.update({k: v for k, v in overlay.items() if v is not None})
    return merged  # type: ignore[return-value]


def finalize(partial: ListingMeta) -> ListingMeta:
    """Partial -> full ListingMeta with every output key present."""
    record: Dict[str, Any] = {key: partial.get(key) for key in RECORD_FIELDS}
    if not record["description_text"] and record["description_html"]:
        record["description_text"] = clean_text(record["description_html"])
    record["company"] = record["company"] or COMPANY_NAME
    record["source"] = record["source"] or SOURCE_NAME
    record["job_id"] = derive_job_id(record["job_id"], record["url"])
    return record  # type: ignore[return-value]


def listing_from_api_job(job: Dict[str, Any]) -> ListingMeta:
    return finalize(from_api_job(job))
