"""Source connectors and the registry that builds them from configuration."""

from __future__ import annotations

import logging
from typing import List

from ..config import ScanConfig
from .base import REQUEST_TIMEOUT_S, HttpSource, JobSource
from .remoteok import RemoteOkSource
from .rss import RssSource, WeWorkRemotelySource
from .workingnomads import WorkingNomadsSource

logger = logging.getLogger(__name__)

__all__ = [
    "HttpSource",
    "JobSource",
    "RemoteOkSource",
    "RssSource",
    "WeWorkRemotelySource",
    "WorkingNomadsSource",
    "build_sources",
]


def build_sources(config: ScanConfig, timeout_s: float = REQUEST_TIMEOUT_S) -> List[JobSource]:
    """Return the enabled sources in a fixed order.

    `timeout_s` becomes each HTTP client's timeout; pass the fetch timeout
    so a request gives up no later than the attempt waiting on it.
    """
    enabled = config.sources
    out: List[JobSource] = []
    if enabled.remoteok:
        out.append(RemoteOkSource(timeout_s=timeout_s))
    if enabled.weworkremotely:
        out.append(WeWorkRemotelySource(timeout_s=timeout_s))
    if enabled.workingnomads:
        out.append(WorkingNomadsSource(timeout_s=timeout_s))
    if enabled.linkedin_feeds.feeds:
        out.append(RssSource(enabled.linkedin_feeds.feeds, name="linkedin-feeds", timeout_s=timeout_s))
    if enabled.rss.feeds:
        out.append(RssSource(enabled.rss.feeds, name="rss", timeout_s=timeout_s))
    logger.debug("Enabled sources: %s", [s.name for s in out])
    return out
