"""Normalization: raw, source-shaped records -> canonical `JobRecord`.

Each source family has one mapping function. Mappings are total: missing
or wrong-typed fields fall back to safe defaults (empty string, None,
False), so a structurally broken raw record still yields a valid record.

The scrape timestamp is passed in by the caller, once per run, rather than
read from the clock here.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .models import JobRecord, SourceBatch
from .utils import new_id, strip_html, to_iso_timestamp

logger = logging.getLogger(__name__)

Mapper = Callable[[Mapping[str, Any], str, str], JobRecord]

REMOTE_TAG_RE = re.compile(r"remote|worldwide|anywhere", re.IGNORECASE)


def _text(raw: Mapping[str, Any], *keys: str) -> str:
    """First non-empty value among `keys`, as trimmed text."""
    for key in keys:
        val = raw.get(key)
        if val is None or isinstance(val, (dict, list)):
            continue
        val = str(val).strip()
        if val:
            return val
    return ""


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        val = raw.get(key)
        if val not in (None, ""):
            return val
    return None


def _number(val: Any) -> Optional[float]:
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        num = float(val)
    elif isinstance(val, str):
        try:
            num = float(val.replace(",", "").strip())
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def _tags(val: Any) -> List[str]:
    if isinstance(val, str):
        return [t.strip() for t in val.split(",") if t.strip()]
    if isinstance(val, (list, tuple)):
        return [str(t).strip() for t in val if t is not None and not isinstance(t, (dict, list))]
    return []


def map_structured_api(raw: Mapping[str, Any], source: str, scraped_at: str) -> JobRecord:
    """RemoteOK-style JSON: position/company/epoch/salary bounds/tags."""
    own_id = _text(raw, "id", "slug")
    title = _text(raw, "position", "title")
    company = _text(raw, "company", "company_name")
    location = _text(raw, "location", "candidate_required_location")
    apply_url = _text(raw, "url", "apply_url")
    if not apply_url and own_id:
        apply_url = f"https://remoteok.com/l/{own_id}"

    tags = _tags(raw.get("tags"))
    on_site = "on-site" in location.lower()
    is_remote = not on_site or any(REMOTE_TAG_RE.search(t) for t in tags)

    return JobRecord(
        id=new_id(),
        source=source,
        source_id=own_id or apply_url or new_id(),
        title=title,
        company=company,
        location=location,
        is_remote=is_remote,
        remote_region=location or "Worldwide",
        salary_min=_number(raw.get("salary_min")),
        salary_max=_number(raw.get("salary_max")),
        salary_currency=_text(raw, "salary_currency") or None,
        tech_tags=tags,
        description_text=strip_html(_first(raw, "description", "description_html")),
        apply_url=apply_url,
        posted_at=to_iso_timestamp(_first(raw, "epoch", "date")),
        scraped_at=scraped_at,
        raw=raw,
    )


def map_job_board_api(raw: Mapping[str, Any], source: str, scraped_at: str) -> JobRecord:
    """Working Nomads-style JSON: company_name/published_at/tags or categories."""
    apply_url = _text(raw, "url", "apply_url", "link")
    location = _text(raw, "location", "candidate_required_location")
    tags = _tags(raw.get("tags")) or _tags(raw.get("categories"))

    return JobRecord(
        id=new_id(),
        source=source,
        source_id=_text(raw, "id") or apply_url or new_id(),
        title=_text(raw, "title", "position"),
        company=_text(raw, "company_name", "company"),
        location=location,
        remote_region=location or "Worldwide",
        employment_type=_text(raw, "job_type", "employment_type") or None,
        tech_tags=tags,
        description_text=strip_html(_first(raw, "description", "summary")),
        apply_url=apply_url,
        posted_at=to_iso_timestamp(_first(raw, "published_at", "pub_date", "date")),
        scraped_at=scraped_at,
        raw=raw,
    )


def map_feed(raw: Mapping[str, Any], source: str, scraped_at: str) -> JobRecord:
    """RSS-shaped items: title/link/description/pubDate, optional company/location."""
    link = _text(raw, "link", "applyUrl", "url")
    location = _text(raw, "location", "region")

    return JobRecord(
        id=new_id(),
        source=source,
        source_id=link or _text(raw, "guid") or new_id(),
        title=_text(raw, "title"),
        company=_text(raw, "company", "author"),
        location=location,
        remote_region=location or "Worldwide",
        description_text=strip_html(_first(raw, "description", "summary", "content")),
        apply_url=link,
        posted_at=to_iso_timestamp(_first(raw, "pubDate", "postedAt", "published")),
        scraped_at=scraped_at,
        raw=raw,
    )


FAMILY_MAPPERS: Dict[str, Mapper] = {
    "structured_api": map_structured_api,
    "job_board_api": map_job_board_api,
    "feed": map_feed,
}

SOURCE_FAMILIES: Dict[str, str] = {
    "remoteok": "structured_api",
    "workingnomads": "job_board_api",
    "weworkremotely": "feed",
    "rss": "feed",
    "linkedin-feeds": "feed",
}

DEFAULT_FAMILY = "feed"


def mapper_for(source: str) -> Mapper:
    """Look up the mapping for a source name; unknown names map as feeds."""
    return FAMILY_MAPPERS[SOURCE_FAMILIES.get(source, DEFAULT_FAMILY)]


def normalize_record(raw: Any, source: str, scraped_at: str) -> JobRecord:
    raw_map: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    record = mapper_for(source)(raw_map, source, scraped_at)
    if raw_map is not raw:
        record = record.model_copy(update={"raw": raw})
    return record


def normalize_batches(batches: Iterable[SourceBatch], scraped_at: str) -> List[JobRecord]:
    """Normalize every raw record of every batch, in batch then record order."""
    out: List[JobRecord] = []
    for batch in batches:
        for raw in batch.raw:
            out.append(normalize_record(raw, batch.source, scraped_at))
    logger.info("Normalized %d records", len(out))
    return out
