"""Timestamp helpers shared by the providers and the segment form.

Two shapes are in play: absolute timestamps (ISO 8601, ideally UTC with a
``Z`` suffix) as stored on segments, and wall-clock ``YYYY-MM-DDTHH:MM``
strings as edited in a form. Helpers take an optional ``tz``; when it is
omitted the process local timezone is used.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import List, Optional

import dateparser

LOCAL_INPUT_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")
_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_COMPACT_FORMAT = "%Y%m%dT%H%M%S"


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 or Navitia compact timestamp.

    Date-only values are read as midnight UTC. Returns None when the
    value cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        if _DATE_ONLY_PATTERN.match(text):
            return parsed.replace(tzinfo=timezone.utc)
        return parsed
    try:
        return datetime.strptime(text, _COMPACT_FORMAT)
    except ValueError:
        return None


def normalize_travel_date(value: str, languages: Optional[List[str]] = None) -> Optional[str]:
    """Read a typed travel date ("tomorrow", "1 March 2025") as ``YYYY-MM-DD``.

    ISO values are returned as their day without going through dateparser.
    """
    text = value.strip()
    if not text:
        return None
    dt = parse_datetime(text)
    if dt is None:
        dt = dateparser.parse(
            text,
            languages=languages,
            settings={"PREFER_DATES_FROM": "future", "DATE_ORDER": "DMY"},
        )
    return dt.date().isoformat() if dt else None


def format_utc_iso(dt: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def to_utc_iso(value: Optional[str]) -> Optional[str]:
    """Normalize a provider timestamp to UTC ISO form.

    Naive timestamps carry no offset to convert from and are returned in
    plain ISO form; unparsable values are returned unchanged.
    """
    if not value:
        return None
    dt = parse_datetime(value)
    if dt is None:
        return value
    if dt.tzinfo is None:
        return dt.isoformat()
    return format_utc_iso(dt)


def iso_to_local_input(value: Optional[str], tz: Optional[tzinfo] = None) -> str:
    """Convert a timestamp to wall-clock form-input shape.

    Aware timestamps are converted to ``tz``; naive ones are taken as
    already being wall-clock time. Returns "" when parsing fails.
    """
    dt = parse_datetime(value)
    if dt is None:
        return ""
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.strftime("%Y-%m-%dT%H:%M")


def local_input_to_iso(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[str]:
    """Convert a wall-clock form value to a UTC ISO timestamp.

    Empty input gives None; unparsable input is passed through as-is.
    """
    if not value:
        return None
    dt = parse_datetime(value)
    if dt is None:
        return value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz) if tz is not None else dt.astimezone()
    return format_utc_iso(dt)


def normalize_leg_time_input(value: Optional[str], tz: Optional[tzinfo] = None) -> str:
    """Bring a leg time into form-input shape.

    Values already in ``YYYY-MM-DDTHH:MM`` shape are returned untouched so
    they are not converted twice.
    """
    if not value:
        return ""
    if LOCAL_INPUT_PATTERN.match(value):
        return value
    return iso_to_local_input(value, tz) or value
