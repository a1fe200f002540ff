"""Fetch orchestration: cache, retry with backoff, timeout and pacing.

Sources are fetched one after another in the order given. A fresh cache
entry short-circuits the network entirely. A live call is retried up to
three times with exponential backoff (1s, 2s, capped at 10s); if it still
fails the error propagates and the run stops. Between live fetches we
pause for a second to stay polite with upstream services.

Each attempt waits at most the fetch timeout. A call that overruns is
left running and the next attempt waits on that same call, so a source
never has more than one request in flight.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from tenacity import Retrying, RetryError, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from .cache import CacheStore, FileCache
from .errors import SourceFetchError, SourceTimeoutError
from .models import SourceBatch
from .sources.base import REQUEST_TIMEOUT_S, JobSource

logger = logging.getLogger(__name__)

CACHE_TTL_S = 60 * 60
FETCH_TIMEOUT_S = REQUEST_TIMEOUT_S
MAX_ATTEMPTS = 3
BACKOFF_MAX_S = 10.0
PACING_DELAY_S = 1.0


class FetchOrchestrator:
    """Wrap each source's `fetch()` with caching, retry, timeout and pacing."""

    def __init__(
        self,
        cache: Optional[CacheStore] = None,
        *,
        ttl_s: float = CACHE_TTL_S,
        timeout_s: float = FETCH_TIMEOUT_S,
        max_attempts: int = MAX_ATTEMPTS,
        pacing_s: float = PACING_DELAY_S,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cache = cache if cache is not None else FileCache()
        self._ttl_s = ttl_s
        self._timeout_s = timeout_s
        self._max_attempts = max_attempts
        self._pacing_s = pacing_s
        self._clock = clock
        self._sleep = sleep
        self._in_flight: Dict[str, _PendingCall] = {}

    def fetch_all(self, sources: Sequence[JobSource]) -> List[SourceBatch]:
        """Return one `SourceBatch` per source, preserving input order."""
        batches: List[SourceBatch] = []
        last = len(sources) - 1

        for idx, source in enumerate(sources):
            cached = self._get_cached(source.name)
            if cached is not None:
                logger.info("%s: %d raw records from cache", source.name, len(cached))
                batches.append(SourceBatch(source.name, cached))
                continue

            raw = self._fetch_with_retry(source)
            logger.info("%s: fetched %d raw records", source.name, len(raw))
            batches.append(SourceBatch(source.name, raw))
            self._put_cached(source.name, raw)

            if idx < last:
                self._sleep(self._pacing_s)

        return batches

    def _get_cached(self, name: str) -> Optional[List[Any]]:
        try:
            entry = self._cache.get(name)
        except Exception as exc:  # treated as a miss
            logger.debug("Cache read failed for %s: %s", name, exc)
            return None
        if entry is None:
            logger.debug("Cache miss for %s", name)
            return None
        if self._clock() - entry.captured_at >= self._ttl_s:
            logger.debug("Cache entry for %s expired", name)
            return None
        return entry.payload

    def _put_cached(self, name: str, payload: List[Any]) -> None:
        try:
            self._cache.put(name, payload)
        except Exception as exc:
            logger.debug("Cache write failed for %s: %s", name, exc)

    def _fetch_with_retry(self, source: JobSource) -> List[Any]:
        retrying = Retrying(
            # attempt n waits min(1s * 2**(n-1), 10s) before attempt n+1
            wait=wait_exponential(multiplier=1, max=BACKOFF_MAX_S),
            stop=stop_after_attempt(self._max_attempts),
            retry=retry_if_exception_type(Exception),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        try:
            raw = retrying(self._call_with_timeout, source)
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            raise SourceFetchError(source.name, self._max_attempts) from last_error
        return list(raw) if isinstance(raw, list) else []

    def _call_with_timeout(self, source: JobSource) -> List[Any]:
        # A call that timed out keeps running; the next attempt waits on it
        # instead of starting a second request to the same upstream.
        call = self._in_flight.get(source.name)
        if call is None:
            call = _PendingCall(source)
            self._in_flight[source.name] = call
        else:
            logger.debug("%s: waiting on the call that timed out", source.name)

        if not call.wait(self._timeout_s):
            raise SourceTimeoutError(source.name, self._timeout_s)
        del self._in_flight[source.name]
        return call.result()


class _PendingCall:
    """One `source.fetch()` on a daemon thread; a hung adapter never blocks interpreter exit."""

    def __init__(self, source: JobSource) -> None:
        self._done = threading.Event()
        self._value: Any = None
        self._error: Optional[Exception] = None
        self._thread = threading.Thread(
            target=self._run, args=(source,), name=f"fetch-{source.name}", daemon=True
        )
        self._thread.start()

    def _run(self, source: JobSource) -> None:
        try:
            self._value = source.fetch()
        except Exception as exc:
            self._error = exc
        finally:
            self._done.set()

    def wait(self, timeout_s: float) -> bool:
        return self._done.wait(timeout_s)

    def result(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._value
