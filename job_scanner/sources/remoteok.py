"""RemoteOK jobs source connector.

RemoteOK exposes a public JSON endpoint that returns an array. The first
element is a legal notice without an ``id``; only items with an id are kept.

Docs: https://remoteok.com/api
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .base import HttpSource

logger = logging.getLogger(__name__)


class RemoteOkSource(HttpSource):
    """Fetch raw jobs from RemoteOK."""

    name = "remoteok"
    base_url = "https://remoteok.com/api"

    def fetch(self) -> List[Dict[str, Any]]:
        with self._client() as client:
            resp = client.get(self.base_url)
            resp.raise_for_status()
            try:
                payload = resp.json()
            except ValueError as exc:
                logger.warning("%s: response is not JSON (%s); treating as empty", self.name, exc)
                return []

        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict) and item.get("id") is not None]
