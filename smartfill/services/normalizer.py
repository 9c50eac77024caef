"""Request normalization for Smart Fill.

Turns an arbitrary decoded JSON body into a typed AutofillRequest, or
None when the body cannot describe a Smart Fill request. All functions
here are pure.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Mapping, Optional

from ..domain.models import AutofillRequest, GeoContext, SegmentType

TYPE_SYNONYMS: Dict[str, SegmentType] = {
    "flight": SegmentType.FLIGHT,
    "flights": SegmentType.FLIGHT,
    "train": SegmentType.TRAIN,
    "transport": SegmentType.TRANSPORT,
    "ground": SegmentType.TRANSPORT,
    "hotel": SegmentType.HOTEL,
    "lodging": SegmentType.HOTEL,
    "stay": SegmentType.HOTEL,
    "meal": SegmentType.MEAL,
    "dining": SegmentType.MEAL,
    "restaurant": SegmentType.MEAL,
    "activity": SegmentType.ACTIVITY,
    "event": SegmentType.ACTIVITY,
    "custom": SegmentType.CUSTOM,
}

# Leading decimal number, as a lenient float parser would accept it
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_number(value: Any) -> Optional[float]:
    """Coerce a finite number or numeric string to float.

    Strings are read by their leading numeric prefix ("12.5km" -> 12.5).
    Booleans, non-finite values and anything else give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if match is None:
            return None
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    return None


def sanitize_context(value: Any) -> Optional[GeoContext]:
    """Keep the numeric lat/lng/radiusMeters of a context object.

    Unknown fields are dropped. Returns None rather than an empty context
    when none of the three fields is usable.
    """
    if not isinstance(value, Mapping):
        return None
    lat = coerce_number(value.get("lat"))
    lng = coerce_number(value.get("lng"))
    radius = coerce_number(value.get("radiusMeters"))
    if lat is None and lng is None and radius is None:
        return None
    return GeoContext(lat=lat, lng=lng, radius_meters=radius)


def normalize_type(value: Any) -> Optional[SegmentType]:
    """Map a type name or synonym to its canonical SegmentType."""
    if not isinstance(value, str):
        return None
    return TYPE_SYNONYMS.get(value.strip().lower())


def normalize_request(raw: Any) -> Optional[AutofillRequest]:
    """Normalize a decoded JSON body into an AutofillRequest.

    Args:
        raw: Whatever the client sent, already JSON-decoded.

    Returns:
        The typed request, or None if the type is unknown or the query
        is missing or blank.
    """
    if not isinstance(raw, Mapping):
        return None

    request_type = normalize_type(raw.get("type"))
    query = raw.get("query")
    query = query.strip() if isinstance(query, str) else ""
    if request_type is None or not query:
        return None

    date = raw.get("date")
    metadata = raw.get("metadata")

    return AutofillRequest(
        type=request_type,
        query=query,
        date=date if isinstance(date, str) else None,
        context=sanitize_context(raw.get("context")),
        metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
    )
