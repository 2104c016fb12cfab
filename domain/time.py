"""
Domain time utilities (pure).

Centralized timestamp parsing for deadlines, payment stamps and roster
snapshots.

Contract:
- Every datetime returned here is timezone-aware.
- Naive datetimes supplied by callers are local wall-clock time.
- Parsing never raises for malformed input; it returns None.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

_DATE_ONLY = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def as_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime; aware values pass through."""

    if value.tzinfo is None or value.utcoffset() is None:
        return value.astimezone()
    return value


def resolve_reference_date(value: Optional[datetime] = None) -> datetime:
    """Return `value` as an aware datetime, or the current local time when omitted."""

    if value is None:
        return datetime.now().astimezone()
    return as_aware(value)


def parse_timestamp(value: object) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp the way a browser `Date` would.

    - "YYYY-MM-DD" (date only) is midnight UTC.
    - A date-time without an offset is local time.
    - "Z" and explicit offsets are honoured.

    Returns None for empty, non-string or non-ISO input.
    """

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if _DATE_ONLY.fullmatch(text):
        return parsed.replace(tzinfo=timezone.utc)
    return as_aware(parsed)


def parse_local_deadline(value: object) -> Optional[datetime]:
    """
    Parse a "YYYY-MM-DD" deadline as the end of that local calendar day.

    The deadline is inclusive: the returned instant is 23:59:59.999 local time.
    Month is clamped to [1, 12] and day to [1, 31]; a day past the end of the
    month rolls over into the next month (Feb 31 becomes early March).

    Only the first three "-" separated components are read and an empty
    component counts as 0, so "2026-03-" is March 1st and "2026-03-01-x" is
    March 1st. If the first three components are not integers, the value is
    parsed with `parse_timestamp` instead, so a full timestamp keeps its own
    time of day. Returns None when neither form parses.
    """

    if not isinstance(value, str):
        return None

    parts = value.split("-")
    try:
        if len(parts) < 3:
            raise ValueError("deadline must have year, month and day")
        year, month, day = (int(part) if part.strip() else 0 for part in parts[:3])
    except ValueError:
        return parse_timestamp(value)

    safe_month = max(1, min(12, month or 1))
    safe_day = max(1, min(31, day or 1))

    try:
        first_of_month = datetime(year, safe_month, 1, 23, 59, 59, 999000)
        naive = first_of_month + timedelta(days=safe_day - 1)
    except (ValueError, OverflowError):
        return parse_timestamp(value)

    return as_aware(naive)


__all__ = [
    "as_aware",
    "parse_local_deadline",
    "parse_timestamp",
    "resolve_reference_date",
]
