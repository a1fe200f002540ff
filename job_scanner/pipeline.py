"""End-to-end pipeline: normalize -> enrich -> dedupe -> filter -> score -> sort.

`run_pipeline` works on already fetched batches and never raises for bad
data. `scan` adds the fetch step in front of it; that is the only place a
run can fail, when a source is still down after every retry.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .config import ScanConfig
from .dedupe import dedupe
from .enrich import enrich_all
from .fetch import FetchOrchestrator
from .filter import filter_jobs
from .models import PipelineResult, RunCounts, SourceBatch
from .normalize import normalize_batches
from .rank import score_jobs, sort_jobs
from .sources.base import JobSource
from .utils import utc_now_iso

logger = logging.getLogger(__name__)


def count_fetched(batches: Sequence[SourceBatch]) -> RunCounts:
    by_source = {}
    for batch in batches:
        by_source[batch.source] = by_source.get(batch.source, 0) + len(batch.raw)
    return RunCounts(fetched=sum(by_source.values()), by_source=by_source)


def run_pipeline(
    batches: Sequence[SourceBatch],
    config: ScanConfig,
    scraped_at: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PipelineResult:
    """Turn raw batches into the ordered result set plus rejection reasons.

    `scraped_at` is stamped on every record of the run; it defaults to the
    time this function is called.
    """
    scraped_at = scraped_at or utc_now_iso()
    counts = count_fetched(batches)

    jobs = normalize_batches(batches, scraped_at)
    jobs = enrich_all(jobs)
    jobs = dedupe(jobs)
    counts.after_dedupe = len(jobs)

    filtered = filter_jobs(jobs, config, now=now)
    counts.after_filter = len(filtered.kept)

    ranked = sort_jobs(score_jobs(filtered.kept, config), config)
    return PipelineResult(jobs=ranked, reasons=filtered.reasons, counts=counts)


def scan(
    sources: Sequence[JobSource],
    config: ScanConfig,
    orchestrator: Optional[FetchOrchestrator] = None,
) -> PipelineResult:
    """Fetch every source, then run the pipeline over what came back."""
    scraped_at = utc_now_iso()
    orchestrator = orchestrator or FetchOrchestrator()
    batches: List[SourceBatch] = orchestrator.fetch_all(sources)
    return run_pipeline(batches, config, scraped_at=scraped_at)
