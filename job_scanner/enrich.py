"""Enrichment heuristics.

Fills attributes a source did not supply:
- seniority inferred from the title
- remote status / region inferred from title, location and description
- technology tags found in title and description

Enrichment only ever adds information. It never overrides a seniority or
tag list the source provided, never turns a remote record on-site, and
returns a new record instead of changing the one it was given.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from .models import JobRecord

logger = logging.getLogger(__name__)


# Leftmost whole-word hit in the title wins.
SENIORITY_RE = re.compile(r"\b(intern|junior|mid|senior|staff|lead|principal)\b", re.IGNORECASE)

REMOTE_RE = re.compile(
    r"remote|worldwide|anywhere|distributed|work[\s-]from[\s-]home|wfh",
    re.IGNORECASE,
)

DEFAULT_REMOTE_REGION = "Worldwide"

# Matched as plain substrings: short terms such as "go" also hit inside longer words.
TECH_TAGS = [
    "react",
    "next.js",
    "node",
    "node.js",
    "typescript",
    "javascript",
    "python",
    "go",
    "rust",
    "java",
    "fullstack",
    "frontend",
    "backend",
    "devops",
    "aws",
    "graphql",
    "postgres",
    "mongodb",
]


def infer_seniority(title: str) -> Optional[str]:
    """Return a capitalized seniority label ("Senior") or None."""
    m = SENIORITY_RE.search(title or "")
    if not m:
        return None
    return m.group(1).lower().capitalize()


def infer_remote(job: JobRecord) -> Tuple[bool, Optional[str]]:
    """Return (is_remote, remote_region) after looking for remote signals."""
    text = f"{job.title} {job.location} {job.description_text}"
    if REMOTE_RE.search(text):
        return True, job.remote_region or DEFAULT_REMOTE_REGION
    if "remote" in job.location.lower():
        return True, DEFAULT_REMOTE_REGION
    return job.is_remote, job.remote_region


def extract_tech_tags(title: str, description: str, vocabulary: Iterable[str] = TECH_TAGS) -> List[str]:
    """Vocabulary terms found in title + description, duplicate-free, vocabulary order."""
    combined = f"{title or ''} {description or ''}".lower()
    found: List[str] = []
    for tag in vocabulary:
        if tag in combined and tag not in found:
            found.append(tag)
    return found


def enrich(job: JobRecord) -> JobRecord:
    seniority = job.seniority or infer_seniority(job.title)
    is_remote, region = infer_remote(job)
    tags = job.tech_tags or extract_tech_tags(job.title, job.description_text)
    return job.model_copy(
        update={
            "seniority": seniority,
            "is_remote": is_remote,
            "remote_region": region,
            "tech_tags": list(tags),
        }
    )


def enrich_all(jobs: Iterable[JobRecord]) -> List[JobRecord]:
    out = [enrich(j) for j in jobs]
    logger.info("Enriched %d records", len(out))
    return out
