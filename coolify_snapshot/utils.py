"""Utility helpers for string normalization and timestamps."""

from __future__ import annotations

import datetime as dt
import re
import time
from typing import List, Optional

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("_", normalized).strip("_")
    return normalized or fallback


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis() -> int:
    return int(time.time() * 1000)


def split_lines(value: Optional[str]) -> Optional[List[str]]:
    """Split multi-line text into lines; empty or missing text yields None."""
    if not value:
        return None
    return value.split("\n")
