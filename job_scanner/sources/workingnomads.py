"""Working Nomads jobs source connector.

The exposed_jobs endpoint returns a flat JSON array of postings.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .base import HttpSource

logger = logging.getLogger(__name__)


class WorkingNomadsSource(HttpSource):
    """Fetch raw jobs from Working Nomads."""

    name = "workingnomads"
    base_url = "https://www.workingnomads.com/api/exposed_jobs"

    def fetch(self) -> List[Dict[str, Any]]:
        with self._client() as client:
            resp = client.get(self.base_url)
            resp.raise_for_status()
            try:
                payload = resp.json()
            except ValueError as exc:
                logger.warning("%s: response is not JSON (%s); treating as empty", self.name, exc)
                return []

        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]
