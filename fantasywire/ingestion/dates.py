"""Publication-date resolution."""

import calendar
import time
from datetime import datetime
from typing import Optional

import pendulum


def from_struct_time(value: Optional[time.struct_time]) -> Optional[datetime]:
    """Convert a UTC struct_time (as produced by feedparser) to an aware datetime."""
    if not value:
        return None
    try:
        return pendulum.from_timestamp(calendar.timegm(value), tz="UTC")
    except (OverflowError, ValueError, TypeError):
        return None


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse ISO 8601, RFC 2822 and the other shapes feeds and pages use.

    Unparseable input yields ``None``; a bad date never rejects an item.
    """
    if not raw or not raw.strip():
        return None
    try:
        parsed = pendulum.parse(raw.strip(), strict=False, tz="UTC")
    except (ValueError, OverflowError, TypeError):
        return None
    if not isinstance(parsed, datetime):
        # Bare dates and times come back as Date/Time objects
        return None
    return pendulum.instance(parsed, tz="UTC").in_timezone("UTC")


def resolve_published(*candidates: Optional[datetime]) -> Optional[datetime]:
    """First non-empty candidate, in priority order."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
