# src/rhjobs/models.py
"""
Typed shapes for everything that moves through the harvester.

Records are plain dicts with type hints (TypedDict), same as before: what we
write to the dataset is exactly what we build here, no conversion step.
Run inputs and per-page results are small frozen dataclasses because they
never change once created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, TypedDict

COMPANY_NAME = "Robert Half"
SOURCE_NAME = "roberthalf.com"
PAGE_SIZE = 25

# Order matters: this is the column order of the output dataset.
RECORD_FIELDS = (
    "title",
    "company",
    "location",
    "salary",
    "job_type",
    "date_posted",
    "description_html",
    "description_text",
    "skills",
    "specialization",
    "remote",
    "url",
    "job_id",
    "source",
)


class ListingMeta(TypedDict, total=False):
    """
    Canonical listing-stage record, built from one or more raw listings that
    share a detail URL.

    - `url` is absolute or None.
    - `job_id` is the provider id, else the URL path+query, else None
      (None means we can't dedupe this one).
    """

    title: Optional[str]
    company: Optional[str]
    location: Optional[str]
    salary: Optional[str]
    job_type: Optional[str]
    date_posted: Optional[str]
    description_html: Optional[str]
    description_text: Optional[str]
    skills: Optional[str]
    specialization: Optional[str]
    remote: Optional[str]
    url: Optional[str]
    job_id: Optional[str]
    source: Optional[str]


# The final output has the same keys; detail data just fills more of them in.
JobRecord = ListingMeta


@dataclass(frozen=True)
class SearchQuery:
    keyword: str = ""
    location: str = ""
    specialization: str = ""
    job_type: str = ""
    remote: str = "Any"


@dataclass(frozen=True)
class RunBudget:
    results_wanted: int = 100
    max_pages: int = 20
    page_size: int = PAGE_SIZE


@dataclass(frozen=True)
class PageResult:
    """What one source strategy found on one page."""

    listings: List[ListingMeta] = field(default_factory=list)
    total_count: int = 0
    requires_auth: bool = False


@dataclass
class RunState:
    """Saved counter + seen ids. Owned by the run loop, nobody else writes it."""

    saved: int = 0
    seen: Set[str] = field(default_factory=set)
    pages_visited: int = 0
