# src/rhjobs/pipeline/filter.py
from typing import Set

from rhjobs.models import ListingMeta


def is_usable(job: ListingMeta) -> bool:
    """A listing with neither a title nor any description is useless to us."""
    return bool(job.get("title") or job.get("description_html") or job.get("description_text"))


def register_new(job: ListingMeta, seen: Set[str]) -> bool:
    """
    True if this job hasn't been seen yet (and remember it).
    Jobs without a job_id can't be deduped: they always count as new.
    """
    jid = job.get("job_id")
    if jid is None:
        return True
    if jid in seen:
        return False
    seen.add(jid)
    return True
