"""Fetch cache stores.

The orchestrator only talks to the `CacheStore` interface, so tests can use
`MemoryCache` and runs use `FileCache`. Neither implementation raises on
I/O problems: a bad read is a miss, a bad write is dropped.
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = ".cache"


class CacheEntry(NamedTuple):
    payload: List[Any]
    captured_at: float  # epoch seconds


class CacheStore(ABC):
    """Per-source store of the last successful raw payload."""

    @abstractmethod
    def get(self, name: str) -> Optional[CacheEntry]:
        """Return the stored entry for `name`, or None if absent or unreadable."""
        raise NotImplementedError

    @abstractmethod
    def put(self, name: str, payload: List[Any]) -> None:
        """Store `payload` for `name` stamped with the current time."""
        raise NotImplementedError


class MemoryCache(CacheStore):
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, name: str) -> Optional[CacheEntry]:
        return self._entries.get(name)

    def put(self, name: str, payload: List[Any]) -> None:
        self._entries[name] = CacheEntry(list(payload), self._clock())


class FileCache(CacheStore):
    """One JSON file per source: ``{"cached_at": <epoch s>, "payload": [...]}``."""

    def __init__(self, cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR, clock: Callable[[], float] = time.time) -> None:
        self._dir = Path(cache_dir)
        self._clock = clock

    def _path(self, name: str) -> Path:
        return self._dir / f"{name}.json"

    def get(self, name: str) -> Optional[CacheEntry]:
        path = self._path(name)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            payload = data["payload"]
            captured_at = float(data["cached_at"])
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.debug("Ignoring unreadable cache entry %s: %s", path, exc)
            return None
        if not isinstance(payload, list):
            logger.debug("Ignoring cache entry %s: payload is not a list", path)
            return None
        return CacheEntry(payload, captured_at)

    def put(self, name: str, payload: List[Any]) -> None:
        path = self._path(name)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            text = json.dumps({"cached_at": self._clock(), "payload": payload}, ensure_ascii=False)
            path.write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.debug("Could not write cache entry %s: %s", path, exc)
