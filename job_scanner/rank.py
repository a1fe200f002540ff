"""Scoring and ordering of kept records."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List

from .config import ScanConfig
from .models import JobRecord
from .utils import parse_timestamp

logger = logging.getLogger(__name__)


def score_job(job: JobRecord, config: ScanConfig) -> float:
    """Additive relevance score. Signals the record lacks contribute nothing."""
    w = config.scoring_weights
    include_kw = [k.lower() for k in config.keywords_include if k]
    exclude_kw = [k.lower() for k in config.keywords_exclude if k]
    required_tags = {t.lower() for t in config.required_tags if t}
    seniority_allowed = {s.lower() for s in config.seniority_allowed if s}

    text = job.search_text
    score = 0.0
    if include_kw and any(k in text for k in include_kw):
        score += w.keyword_match
    if exclude_kw and any(k in text for k in exclude_kw):
        score += w.exclude_penalty
    if required_tags and any(t.lower() in required_tags for t in job.tech_tags):
        score += w.tag_match
    if job.seniority and job.seniority.lower() in seniority_allowed:
        score += w.seniority_match
    if config.min_salary is not None and job.has_salary and job.effective_salary >= config.min_salary:
        score += w.salary_match
    return score


def score_jobs(jobs: Iterable[JobRecord], config: ScanConfig) -> List[JobRecord]:
    return [job.model_copy(update={"score": score_job(job, config)}) for job in jobs]


def _posted_ts(job: JobRecord) -> float:
    posted = parse_timestamp(job.posted_at)
    return posted.timestamp() if posted else 0.0


SORT_KEYS: Dict[str, Callable[[JobRecord], float]] = {
    "score": lambda job: job.score or 0.0,
    "posted_at": _posted_ts,
    "salary_max": lambda job: job.salary_max or 0.0,
}


def sort_jobs(jobs: Iterable[JobRecord], config: ScanConfig) -> List[JobRecord]:
    """Stable sort by the configured key; missing values compare as 0.

    `sorted(..., reverse=True)` keeps equal elements in input order, so ties
    never reorder in either direction.
    """
    key = SORT_KEYS[config.sort_by]
    return sorted(jobs, key=key, reverse=config.sort_order == "desc")
