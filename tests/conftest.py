from __future__ import annotations

from typing import Dict, List

import pytest

from rhjobs.models import ListingMeta, PageResult
from rhjobs.pipeline.normalize import finalize


class FakeSource:
    """Serves canned listings per page and remembers which pages were asked for."""

    def __init__(self, name: str, pages: Dict[int, List[ListingMeta]], requires_auth: bool = False):
        self.name = name
        self.pages = pages
        self.requires_auth = requires_auth
        self.calls: List[int] = []

    def attempt(self, page: int) -> PageResult:
        self.calls.append(page)
        listings = list(self.pages.get(page, []))
        return PageResult(
            listings=listings,
            total_count=len(listings),
            requires_auth=self.requires_auth and not listings,
        )


class ListSink:
    def __init__(self):
        self.records: List[dict] = []

    def append(self, record):
        self.records.append(record)


def listing(job_id=None, title="Staff Accountant", url=None, **extra) -> ListingMeta:
    partial = {"title": title, "url": url, "job_id": job_id, **extra}
    return finalize({k: v for k, v in partial.items() if v is not None})


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def make_listing():
    return listing
