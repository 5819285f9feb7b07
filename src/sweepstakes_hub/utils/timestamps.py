"""
ISO-8601 helpers shared by the mapper, the form boundary and the in-memory filter.
All parsed values are timezone-aware UTC; naive inputs are taken to be UTC already.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Best-effort parse to an aware UTC datetime. Returns None for blank or invalid input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_timestamp(value: str) -> bool:
    return parse_timestamp(value) is not None


def format_timestamp(value: Any) -> str:
    """Render as ISO-8601 text; anything unparseable renders as an empty string."""
    dt = parse_timestamp(value)
    return dt.isoformat() if dt is not None else ""
