"""Cross-source deduplication.

Two passes, both order preserving (the first occurrence wins):

1. Exact: records sharing an apply URL, or when there is none a
   company|title|location key, collapse to the first one seen.
2. Fuzzy: a record is dropped when an already accepted record has both a
   title and a company similarity of at least 0.85.

The similarity is a cheap character-containment ratio, not edit distance
or token overlap. Swapping in another metric changes which postings merge.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .models import JobRecord

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.85


def exact_key(job: JobRecord) -> str:
    url = (job.apply_url or "").strip().lower()
    if url:
        return f"url:{url}"
    parts = [(p or "").strip().lower() for p in (job.company, job.title, job.location)]
    return "key:" + "|".join(parts)


def similarity(a: str, b: str) -> float:
    """Share of characters of the shorter string that occur in the longer one.

    Returns 1 when both are equal after lowercasing and trimming (two empty
    strings included), otherwise 0 when either is empty. Each character of
    the shorter string counts once per occurrence; on equal length `a` is
    treated as the shorter.
    """
    sa = (a or "").strip().lower()
    sb = (b or "").strip().lower()
    if sa == sb:
        return 1.0
    if not sa or not sb:
        return 0.0
    longer, shorter = (sa, sb) if len(sa) > len(sb) else (sb, sa)
    matches = sum(1 for ch in shorter if ch in longer)
    return (2 * matches) / (len(longer) + len(shorter))


def is_fuzzy_duplicate(candidate: JobRecord, accepted: JobRecord, threshold: float = FUZZY_THRESHOLD) -> bool:
    return (
        similarity(candidate.title, accepted.title) >= threshold
        and similarity(candidate.company, accepted.company) >= threshold
    )


def dedupe(jobs: Iterable[JobRecord], threshold: float = FUZZY_THRESHOLD) -> List[JobRecord]:
    by_key: Dict[str, JobRecord] = {}
    total = 0
    for job in jobs:
        total += 1
        by_key.setdefault(exact_key(job), job)

    out: List[JobRecord] = []
    for job in by_key.values():
        if any(is_fuzzy_duplicate(job, other, threshold) for other in out):
            continue
        out.append(job)

    logger.info("Dedupe: %d -> %d after exact keys -> %d after fuzzy match", total, len(by_key), len(out))
    return out
