from __future__ import annotations

from typing import Optional

import pandas as pd


def parse_date(value: object) -> Optional[pd.Timestamp]:
    """Parse an ISO-8601-like date or date-time string.

    Returns None for empty input and for anything that is not a valid calendar
    date/time (``"not-a-date"``, ``"2024-02-30"``, ``"2024-1-"``). Never raises.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        ts = pd.to_datetime(text, format="ISO8601", errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts


def month_bucket(value: object) -> Optional[str]:
    """``YYYY-MM`` key from the timestamp's own calendar fields."""
    ts = parse_date(value)
    if ts is None:
        return None
    return f"{ts.year:04d}-{ts.month:02d}"


def _as_utc(ts: pd.Timestamp) -> pd.Timestamp:
    # Naive values are read as UTC so they can be compared with offset-aware ones.
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def elapsed_hours(start: object, end: object) -> Optional[float]:
    start_ts = parse_date(start)
    end_ts = parse_date(end)
    if start_ts is None or end_ts is None:
        return None
    delta = _as_utc(end_ts) - _as_utc(start_ts)
    return abs(delta.total_seconds()) / 3600.0
