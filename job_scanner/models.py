"""Data models for the job scanner.

Every source maps into one canonical `JobRecord`. Records are frozen: each
pipeline stage returns new values via `model_copy(update=...)`, so a record
handed to one stage is never changed underneath another.

This file uses Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import uniq_preserve_order


class JobRecord(BaseModel):
    """A normalized job posting.

    `id` is generated per run and is not stable across runs. `raw` keeps the
    original payload for diagnostics and output; the filter, scorer and
    sorter never read it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Run-scoped unique id (uuid4 hex).")
    source: str = Field(..., description="Source name, e.g. 'remoteok'.")
    source_id: str = Field(..., description="Source's own id, else apply URL, else generated.")

    title: str = ""
    company: str = ""
    company_domain: Optional[str] = None
    location: str = ""

    is_remote: bool = True
    remote_region: Optional[str] = None
    employment_type: Optional[str] = None
    seniority: Optional[str] = None

    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    salary_period: Optional[str] = None

    tech_tags: List[str] = Field(default_factory=list)
    description_text: str = ""
    apply_url: str = ""

    posted_at: Optional[str] = Field(default=None, description="ISO-8601 timestamp, None if unknown.")
    scraped_at: str = Field(..., description="ISO-8601 timestamp shared by every record of a run.")

    raw: Any = None
    score: Optional[float] = None

    @field_validator("tech_tags", mode="before")
    @classmethod
    def _lowercase_tags(cls, value: Any) -> List[str]:
        if not value:
            return []
        tags = [str(t).strip().lower() for t in value if t is not None]
        return uniq_preserve_order(tags)

    @property
    def has_salary(self) -> bool:
        return self.salary_min is not None or self.salary_max is not None

    @property
    def effective_salary(self) -> float:
        """Upper bound if known, else lower bound, else 0."""
        if self.salary_max is not None:
            return self.salary_max
        if self.salary_min is not None:
            return self.salary_min
        return 0.0

    @property
    def search_text(self) -> str:
        """Lowercased title + description used for keyword matching."""
        return f"{self.title} {self.description_text}".lower()


class SourceBatch(NamedTuple):
    """Raw records fetched (or read from cache) for one named source."""

    source: str
    raw: List[Any]


class FilterResult(BaseModel):
    kept: List[JobRecord] = Field(default_factory=list)
    reasons: Dict[str, str] = Field(default_factory=dict, description="Rejected record id -> reason.")


class RunCounts(BaseModel):
    fetched: int = 0
    by_source: Dict[str, int] = Field(default_factory=dict)
    after_dedupe: int = 0
    after_filter: int = 0


class PipelineResult(BaseModel):
    jobs: List[JobRecord] = Field(default_factory=list)
    reasons: Dict[str, str] = Field(default_factory=dict)
    counts: RunCounts = Field(default_factory=RunCounts)
