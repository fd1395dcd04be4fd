# fleettrack/util/timeutils.py
"""
Timestamp parsing shared by record conversion and the GPX reader.
"""

from __future__ import annotations

import datetime as _dt
from typing import Optional


def parse_time_utc(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp into a tz-aware UTC datetime.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"

    Returns None for empty or unparseable input.
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Naive timestamps are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def from_epoch_seconds(value: float) -> _dt.datetime:
    """Convert Unix epoch seconds to a tz-aware UTC datetime."""
    return _dt.datetime.fromtimestamp(float(value), tz=_dt.timezone.utc)
