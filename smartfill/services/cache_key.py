"""Deterministic cache keys for Smart Fill requests.

Key format: ``type|query|date|lat|lng|radiusMeters``. The query is trimmed
and lowercased, the date is cut to its first ten characters (day
precision), and the context is folded in a fixed field order. Pipes and
backslashes inside free-text components are backslash-escaped so user
input can never shift the component boundaries.
"""

from __future__ import annotations

from typing import Optional

from ..domain.models import AutofillRequest, GeoContext

DELIMITER = "|"


def _escape(component: str) -> str:
    return component.replace("\\", "\\\\").replace(DELIMITER, "\\" + DELIMITER)


def _format_number(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def context_tuple(context: Optional[GeoContext]) -> str:
    """Fold a context into ``lat|lng|radiusMeters`` ("" when absent)."""
    if context is None:
        return ""
    return DELIMITER.join(
        _format_number(v) for v in (context.lat, context.lng, context.radius_meters)
    )


def build_cache_key(request: AutofillRequest) -> str:
    """Build the cache key for a normalized request."""
    query = _escape(request.query.strip().lower())
    date = _escape(request.date[:10]) if request.date else ""
    return DELIMITER.join(
        (request.type.value, query, date, context_tuple(request.context))
    )
