"""Run configuration.

The configuration file is YAML with camelCase keys (snake_case is accepted
too). A missing file means defaults; anything unreadable or invalid raises
`ConfigError`. The resulting `ScanConfig` is frozen for the whole run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

SortKey = Literal["score", "posted_at", "salary_max"]

_SORT_KEY_ALIASES = {"postedAt": "posted_at", "salaryMax": "salary_max"}


class _ConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class ScoringWeights(_ConfigModel):
    keyword_match: float = 1
    tag_match: float = 2
    seniority_match: float = 1
    salary_match: float = 1
    exclude_penalty: float = -10


class FeedList(_ConfigModel):
    feeds: List[str] = Field(default_factory=list)


class SourcesConfig(_ConfigModel):
    remoteok: bool = True
    weworkremotely: bool = True
    workingnomads: bool = True
    linkedin_feeds: FeedList = Field(default_factory=FeedList)
    rss: FeedList = Field(default_factory=FeedList)


class ScanConfig(_ConfigModel):
    """Rule toggles, weights, ordering and enabled sources for one run."""

    keywords_include: List[str] = Field(default_factory=list)
    keywords_exclude: List[str] = Field(default_factory=list)
    required_tags: List[str] = Field(default_factory=list)
    excluded_companies: List[str] = Field(default_factory=list)
    remote_only: bool = True
    allowed_regions: List[str] = Field(default_factory=lambda: ["Worldwide", "EU", "APAC", "Asia"])
    min_salary: Optional[float] = None
    allow_missing_salary: bool = True
    seniority_allowed: List[str] = Field(default_factory=lambda: ["Senior", "Staff", "Lead"])
    employment_types_allowed: List[str] = Field(default_factory=list)
    posted_within_days: int = 21
    scoring_weights: ScoringWeights = Field(default_factory=ScoringWeights)
    sort_by: SortKey = "score"
    sort_order: Literal["asc", "desc"] = "desc"
    sources: SourcesConfig = Field(default_factory=SourcesConfig)

    @field_validator(
        "keywords_include",
        "keywords_exclude",
        "required_tags",
        "excluded_companies",
        "allowed_regions",
        "seniority_allowed",
        "employment_types_allowed",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        # An empty YAML key (`requiredTags:`) parses as None.
        return [] if value is None else value

    @field_validator("sort_by", mode="before")
    @classmethod
    def _snake_sort_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _SORT_KEY_ALIASES.get(value, value)
        return value


def load_config(path: Optional[Union[str, Path]] = None) -> ScanConfig:
    """Load a `ScanConfig` from YAML, falling back to defaults if the file is absent."""
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser().resolve()
    if not config_path.exists():
        logger.info("No config file at %s; using defaults", config_path)
        return ScanConfig()

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"could not read config {config_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} must be a mapping, got {type(data).__name__}")

    try:
        config = ScanConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config {config_path}: {exc}") from exc

    logger.info("Loaded config from %s", config_path)
    return config
