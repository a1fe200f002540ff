"""Utility helpers shared across the scanner."""

from __future__ import annotations

import html
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from dateutil import parser as date_parser

TAG_RE = re.compile(r"<[^>]+>")
WS_RE = re.compile(r"\s+")


def new_id() -> str:
    """Create a fresh, run-scoped identifier."""
    return uuid.uuid4().hex


def uniq_preserve_order(items: Iterable[str]) -> List[str]:
    """Deduplicate while preserving first-seen order."""
    seen = set()
    out: List[str] = []
    for it in items:
        if not it:
            continue
        key = it.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(it)
    return out


def strip_html(text: Any) -> str:
    """Remove tag-like substrings, unescape entities and collapse whitespace."""
    if not isinstance(text, str) or not text:
        return ""
    cleaned = TAG_RE.sub(" ", text)
    cleaned = html.unescape(cleaned)
    return WS_RE.sub(" ", cleaned).strip()


def to_iso_timestamp(value: Any) -> Optional[str]:
    """Normalize epoch numbers or date strings to an ISO-8601 UTC timestamp.

    Epoch values above 1e12 are taken as milliseconds. Naive datetimes are
    assumed to be UTC. Returns None for anything absent or unparseable.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        ts = float(value)
        if ts <= 0:
            return None
        if ts > 1e12:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if value.isdigit():
            return to_iso_timestamp(int(value))
        parsed = parse_timestamp(value)
        return parsed.isoformat() if parsed else None

    return None


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a date string into an aware UTC datetime, or None."""
    if not value:
        return None
    try:
        dt = date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
