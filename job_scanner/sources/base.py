"""Base classes for source connectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

USER_AGENT = "JobScanner/1.0 (+https://github.com/job-scanner)"
REQUEST_TIMEOUT_S = 10.0


class JobSource(ABC):
    """Abstract base class for a job source connector.

    A source only produces raw, source-shaped records. Caching, retries and
    pacing are applied around it by the fetch orchestrator.
    """

    name: str

    @abstractmethod
    def fetch(self) -> List[Dict[str, Any]]:
        """Fetch raw job records. May raise; the caller retries."""
        raise NotImplementedError


class HttpSource(JobSource):
    """A source that talks HTTP through httpx."""

    def __init__(self, timeout_s: float = REQUEST_TIMEOUT_S, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._timeout = timeout_s
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )
