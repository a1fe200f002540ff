"""Tests for the source connectors, using httpx.MockTransport."""

import httpx
import pytest

from job_scanner.config import ScanConfig
from job_scanner.sources import (
    RemoteOkSource,
    RssSource,
    WeWorkRemotelySource,
    WorkingNomadsSource,
    build_sources,
)
from job_scanner.sources.rss import parse_feed_items

WWR_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>We Work Remotely</title>
    <item>
      <title>Acme Inc: Senior Backend Engineer</title>
      <link>https://weworkremotely.com/remote-jobs/acme-senior-backend-engineer</link>
      <description>&lt;p&gt;Build APIs in Python&lt;/p&gt;</description>
      <pubDate>Mon, 23 Feb 2026 10:00:00 +0000</pubDate>
    </item>
    <item>
      <title>No company prefix here</title>
      <link>https://weworkremotely.com/remote-jobs/2</link>
    </item>
  </channel>
</rss>
"""


def _transport(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        return routes.get(str(request.url), httpx.Response(404))

    return httpx.MockTransport(handler)


def test_remoteok_drops_legal_notice_item():
    routes = {
        RemoteOkSource.base_url: httpx.Response(
            200, json=[{"legal": "API terms"}, {"id": "1", "position": "Dev"}, {"id": 2, "position": "Ops"}]
        )
    }
    items = RemoteOkSource(transport=_transport(routes)).fetch()
    assert [i["position"] for i in items] == ["Dev", "Ops"]


def test_remoteok_non_success_raises():
    routes = {RemoteOkSource.base_url: httpx.Response(503)}
    with pytest.raises(httpx.HTTPStatusError):
        RemoteOkSource(transport=_transport(routes)).fetch()


def test_remoteok_invalid_json_is_empty():
    routes = {RemoteOkSource.base_url: httpx.Response(200, text="<html>maintenance</html>")}
    assert RemoteOkSource(transport=_transport(routes)).fetch() == []


def test_workingnomads_returns_dict_items_only():
    routes = {WorkingNomadsSource.base_url: httpx.Response(200, json=[{"title": "A"}, "junk", {"title": "B"}])}
    items = WorkingNomadsSource(transport=_transport(routes)).fetch()
    assert [i["title"] for i in items] == ["A", "B"]


def test_parse_feed_items_shape():
    items = parse_feed_items(WWR_FEED, "rss")
    assert len(items) == 2
    first = items[0]
    assert first["source"] == "rss"
    assert first["link"] == "https://weworkremotely.com/remote-jobs/acme-senior-backend-engineer"
    assert "Build APIs in Python" in first["description"]
    assert first["pubDate"]


def test_weworkremotely_splits_company_from_title():
    routes = {WeWorkRemotelySource.base_url: httpx.Response(200, text=WWR_FEED)}
    items = WeWorkRemotelySource(transport=_transport(routes)).fetch()

    assert items[0]["company"] == "Acme Inc"
    assert items[0]["title"] == "Senior Backend Engineer"
    assert items[1]["company"] == ""
    assert items[1]["title"] == "No company prefix here"


def test_rss_source_skips_failing_feed():
    good = "https://feeds.example.com/good.rss"
    bad = "https://feeds.example.com/bad.rss"
    routes = {good: httpx.Response(200, text=WWR_FEED), bad: httpx.Response(500)}
    source = RssSource([bad, good], name="linkedin-feeds", transport=_transport(routes))

    items = source.fetch()

    assert source.name == "linkedin-feeds"
    assert len(items) == 2
    assert {i["feedUrl"] for i in items} == {good}
    assert {i["source"] for i in items} == {"linkedin-feeds"}


def test_build_sources_respects_config():
    config = ScanConfig.model_validate(
        {
            "sources": {
                "remoteok": True,
                "weworkremotely": False,
                "workingnomads": True,
                "linkedinFeeds": {"feeds": ["https://a.example.com/feed"]},
                "rss": {"feeds": []},
            }
        }
    )
    assert [s.name for s in build_sources(config)] == ["remoteok", "workingnomads", "linkedin-feeds"]


def test_build_sources_nothing_enabled():
    config = ScanConfig.model_validate({"sources": {"remoteok": False, "weworkremotely": False, "workingnomads": False}})
    assert build_sources(config) == []


def test_build_sources_passes_timeout_to_http_clients():
    config = ScanConfig.model_validate({"sources": {"rss": {"feeds": ["https://a.example.com/feed"]}}})
    sources = build_sources(config, timeout_s=3.0)
    assert len(sources) == 4
    for source in sources:
        with source._client() as client:
            assert client.timeout == httpx.Timeout(3.0)
