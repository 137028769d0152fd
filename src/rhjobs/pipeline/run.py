# src/rhjobs/pipeline/run.py
"""
The page loop: pick a source, dedupe, respect the budget, emit.

Pages are processed strictly one after another. Detail pages for a single
page's jobs go to a small thread pool, and we wait for all of them before
touching the next page, so `state.saved` and `state.seen` are always settled
when the budget is checked again. Only this module writes to RunState.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Protocol, Sequence, Set

from rhjobs.models import JobRecord, ListingMeta, PageResult, RunBudget, RunState
from rhjobs.pipeline.detail import collect_detail
from rhjobs.pipeline.filter import is_usable, register_new
from rhjobs.pipeline.sources import Source

logger = logging.getLogger(__name__)

DETAIL_WORKERS = 5


class Sink(Protocol):
    def append(self, record: JobRecord) -> None:
        ...


def _detail_task(fetch_detail: Callable[[str], str], meta: ListingMeta) -> JobRecord:
    """Detail page -> full record; any failure degrades to the listing data."""
    url = meta["url"]
    try:
        html = fetch_detail(url)
        return collect_detail(html, meta, url)
    except Exception as e:  # noqa: BLE001
        logger.warning("Detail page failed, saving listing data instead for %s: %s", url, e)
        return meta


def fetch_page(
    sources: Sequence[Source], page: int, disabled: Set[str], *, remember_auth: bool = False
) -> PageResult:
    """
    First source with listings wins. Auth walls and empty pages fall through
    to the next source; nothing ever falls back *up* the list.
    """
    result = PageResult()
    for source in sources:
        if source.name in disabled:
            continue
        result = source.attempt(page)
        if result.listings:
            return result
        if result.requires_auth:
            if remember_auth:
                logger.warning("Source %r requires auth, skipping it for the rest of the run", source.name)
                disabled.add(source.name)
            else:
                logger.info("Source %r requires auth for page %d", source.name, page)
        else:
            logger.info("Source %r returned no jobs for page %d", source.name, page)
    return result


def run_search(
    sources: Sequence[Source],
    budget: RunBudget,
    sink: Sink,
    *,
    fetch_detail: Optional[Callable[[str], str]] = None,
    detail_workers: int = DETAIL_WORKERS,
    skip_api_after_auth: bool = False,
) -> RunState:
    """
    Harvest up to `budget.results_wanted` records over at most
    `budget.max_pages` pages.

    - `fetch_detail=None` means "don't collect details": listings are emitted
      as they are.
    - `skip_api_after_auth=True` stops asking a source again once it has
      reported an auth wall. By default every page re-tries it.
    """
    state = RunState()
    disabled: Set[str] = set()

    def emit(record: JobRecord) -> None:
        sink.append(record)
        state.saved += 1
        logger.info("Saved job %d/%d: %s", state.saved, budget.results_wanted, record.get("title"))

    with ThreadPoolExecutor(max_workers=max(1, detail_workers)) as pool:
        for page in range(1, budget.max_pages + 1):
            if state.saved >= budget.results_wanted:
                break

            state.pages_visited += 1
            result = fetch_page(sources, page, disabled, remember_auth=skip_api_after_auth)
            if not result.listings:
                logger.info("No more jobs found on page %d", page)
                break

            logger.info("Processing %d jobs from page %d", len(result.listings), page)
            pending: List[Future] = []
            for meta in result.listings:
                # in-flight detail tasks will each emit exactly one record
                if state.saved + len(pending) >= budget.results_wanted:
                    break
                if not is_usable(meta):
                    continue
                if not register_new(meta, state.seen):
                    continue
                if fetch_detail is not None and meta.get("url"):
                    pending.append(pool.submit(_detail_task, fetch_detail, meta))
                else:
                    emit(meta)

            for fut in pending:
                emit(fut.result())

            logger.info(
                "Completed page %d. Total jobs saved: %d/%d",
                page, state.saved, budget.results_wanted,
            )

    logger.info("Scraping completed. Total jobs saved: %d", state.saved)
    return state
