"""Rule-based filtering with one rejection reason per record.

Rules run in a fixed order and the first one a record fails is its reason.
A rule only looks at data the record actually has: a record without a
company, region, seniority or employment type passes the corresponding
rule. The exceptions are the posting-age rule (needs a date to reject) and
the missing-salary branch, which rejects only when explicitly disallowed.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from .config import ScanConfig
from .models import FilterResult, JobRecord
from .utils import parse_timestamp

logger = logging.getLogger(__name__)

EXCLUDED_COMPANY = "excluded_company"
NOT_REMOTE = "not_remote"
REGION_NOT_ALLOWED = "region_not_allowed"
MISSING_KEYWORD = "missing_keyword"
EXCLUDED_KEYWORD = "excluded_keyword"
MISSING_TAG = "missing_tag"
SENIORITY = "seniority"
EMPLOYMENT_TYPE = "employment_type"
POSTED_TOO_OLD = "posted_too_old"
SALARY_BELOW_MIN = "salary_below_min"
MISSING_SALARY = "missing_salary"


def _lower(values: Iterable[str]) -> List[str]:
    return [v.strip().lower() for v in values if v and v.strip()]


def _overlaps(value: str, candidates: Iterable[str]) -> bool:
    """Substring match in either direction."""
    return any(value in c or c in value for c in candidates)


class _Rules:
    """Config values pre-lowered once per filter call."""

    def __init__(self, config: ScanConfig, now: datetime) -> None:
        self.config = config
        self.excluded_companies = _lower(config.excluded_companies)
        self.allowed_regions = _lower(config.allowed_regions)
        self.include_kw = _lower(config.keywords_include)
        self.exclude_kw = _lower(config.keywords_exclude)
        self.required_tags = set(_lower(config.required_tags))
        self.seniority_allowed = set(_lower(config.seniority_allowed))
        self.employment_allowed = set(_lower(config.employment_types_allowed))
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self.min_posted: Optional[datetime] = None
        if config.posted_within_days > 0:
            self.min_posted = now - timedelta(days=config.posted_within_days)

    def reason_for(self, job: JobRecord) -> Optional[str]:
        config = self.config

        company = job.company.strip().lower()
        if self.excluded_companies and company and _overlaps(company, self.excluded_companies):
            return EXCLUDED_COMPANY

        if config.remote_only and not job.is_remote:
            return NOT_REMOTE

        region = (job.remote_region or "").strip().lower()
        if self.allowed_regions and region and not _overlaps(region, self.allowed_regions):
            return REGION_NOT_ALLOWED

        text = job.search_text
        if self.include_kw and not any(k in text for k in self.include_kw):
            return MISSING_KEYWORD
        if self.exclude_kw and any(k in text for k in self.exclude_kw):
            return EXCLUDED_KEYWORD

        if self.required_tags:
            tags = {t.lower() for t in job.tech_tags}
            if not tags or not (tags & self.required_tags):
                return MISSING_TAG

        if self.seniority_allowed and job.seniority:
            if job.seniority.strip().lower() not in self.seniority_allowed:
                return SENIORITY

        if self.employment_allowed and job.employment_type:
            if job.employment_type.strip().lower() not in self.employment_allowed:
                return EMPLOYMENT_TYPE

        if self.min_posted is not None and job.posted_at:
            posted = parse_timestamp(job.posted_at)
            if posted is not None and posted < self.min_posted:
                return POSTED_TOO_OLD

        if config.min_salary is not None and config.min_salary > 0:
            if job.has_salary:
                if job.effective_salary < config.min_salary:
                    return SALARY_BELOW_MIN
            elif not config.allow_missing_salary:
                return MISSING_SALARY

        return None


def filter_jobs(
    jobs: Iterable[JobRecord],
    config: ScanConfig,
    now: Optional[datetime] = None,
) -> FilterResult:
    """Split records into kept ones and a record id -> reason mapping.

    `now` anchors the posting-age rule; it defaults to the current UTC time.
    """
    rules = _Rules(config, now or datetime.now(timezone.utc))
    kept: List[JobRecord] = []
    reasons: Dict[str, str] = {}
    for job in jobs:
        reason = rules.reason_for(job)
        if reason is None:
            kept.append(job)
        else:
            reasons[job.id] = reason

    if reasons:
        logger.info("Filter kept %d, rejected %d: %s", len(kept), len(reasons), dict(Counter(reasons.values())))
    else:
        logger.info("Filter kept %d, rejected 0", len(kept))
    return FilterResult(kept=kept, reasons=reasons)
