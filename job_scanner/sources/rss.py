"""RSS feed source connectors.

Feeds are parsed with feedparser into flat, RSS-shaped raw items
(``title``, ``link``, ``description``, ``pubDate``, ...). The normalizer's
feed mapping understands that shape.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import feedparser
import httpx

from .base import REQUEST_TIMEOUT_S, HttpSource

logger = logging.getLogger(__name__)


def parse_feed_items(text: str, source: str) -> List[Dict[str, Any]]:
    """Parse RSS/Atom text into raw items; malformed feeds yield what feedparser salvages."""
    feed = feedparser.parse(text)
    items: List[Dict[str, Any]] = []
    for entry in feed.entries:
        items.append(
            {
                "source": source,
                "title": entry.get("title", ""),
                "link": entry.get("link", ""),
                "description": entry.get("description") or entry.get("summary", ""),
                "pubDate": entry.get("published") or entry.get("updated"),
                "company": entry.get("author", ""),
                "location": entry.get("location") or entry.get("region", ""),
                "guid": entry.get("id", ""),
            }
        )
    return items


class WeWorkRemotelySource(HttpSource):
    """Fetch raw jobs from the We Work Remotely RSS feed.

    Item titles look like ``"Acme Inc: Senior Backend Engineer"``; the company
    prefix is split off into its own field.
    """

    name = "weworkremotely"
    base_url = "https://weworkremotely.com/remote-jobs.rss"

    def fetch(self) -> List[Dict[str, Any]]:
        with self._client() as client:
            resp = client.get(self.base_url)
            resp.raise_for_status()
            text = resp.text

        items = parse_feed_items(text, self.name)
        for item in items:
            company, sep, title = item["title"].partition(":")
            if sep and not item["company"] and company.strip() and title.strip():
                item["company"] = company.strip()
                item["title"] = title.strip()
        return items


class RssSource(HttpSource):
    """Fetch several RSS feeds and merge their items under one source name.

    A feed that fails or answers non-2xx is skipped with a warning so one
    dead feed does not take the others down.
    """

    def __init__(
        self,
        feeds: Sequence[str],
        name: str = "rss",
        timeout_s: float = REQUEST_TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(timeout_s=timeout_s, transport=transport)
        self.name = name
        self._feeds = list(feeds)

    def fetch(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        with self._client() as client:
            for url in self._feeds:
                try:
                    resp = client.get(url)
                    resp.raise_for_status()
                except httpx.HTTPError as exc:
                    logger.warning("%s: skipping feed %s: %s", self.name, url, exc)
                    continue
                for item in parse_feed_items(resp.text, self.name):
                    item["feedUrl"] = url
                    out.append(item)
        return out
