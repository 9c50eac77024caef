"""Immutable domain models for the Smart Fill service.

All models are frozen dataclasses with slots. They have no external
dependencies and represent the request, suggestion and leg concepts
shared by the resolver, the providers and the segment form helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SegmentType(str, Enum):
    """Canonical segment types understood by Smart Fill."""

    FLIGHT = "flight"
    TRAIN = "train"
    TRANSPORT = "transport"
    HOTEL = "hotel"
    MEAL = "meal"
    ACTIVITY = "activity"
    CUSTOM = "custom"


PLACE_SEGMENT_TYPES = frozenset(
    {SegmentType.HOTEL, SegmentType.MEAL, SegmentType.ACTIVITY}
)


class CacheStatus(str, Enum):
    """Whether a suggestion was served from the cache."""

    HIT = "hit"
    MISS = "miss"


@dataclass(frozen=True, slots=True)
class GeoContext:
    """Optional geographic hint attached to a place search.

    Each coordinate is independently optional; at least one is set
    whenever a GeoContext exists.
    """

    lat: Optional[float] = None
    lng: Optional[float] = None
    radius_meters: Optional[float] = None

    @property
    def has_point(self) -> bool:
        """Check if both coordinates are known."""
        return self.lat is not None and self.lng is not None

    def to_dict(self) -> Dict[str, float]:
        out: Dict[str, float] = {}
        if self.lat is not None:
            out["lat"] = self.lat
        if self.lng is not None:
            out["lng"] = self.lng
        if self.radius_meters is not None:
            out["radiusMeters"] = self.radius_meters
        return out


@dataclass(frozen=True, slots=True)
class AutofillRequest:
    """A normalized Smart Fill request.

    Attributes:
        type: Canonical segment type
        query: Trimmed, non-empty free-text query
        date: Optional date or datetime string as sent by the client
        context: Optional geographic hint
        metadata: Optional opaque client metadata
    """

    type: SegmentType
    query: str
    date: Optional[str] = None
    context: Optional[GeoContext] = None
    metadata: Optional[Dict[str, Any]] = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class SuggestionHighlight:
    """A labelled fact shown next to a suggestion, e.g. ("Airline", "United")."""

    label: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


def collect_highlights(
    *pairs: Tuple[str, Optional[str]],
) -> Optional[Tuple[SuggestionHighlight, ...]]:
    """Build highlights from (label, value) pairs, skipping empty values.

    Returns None rather than an empty tuple.
    """
    highlights = tuple(
        SuggestionHighlight(label, str(value)) for label, value in pairs if value
    )
    return highlights or None


@dataclass(frozen=True, slots=True)
class AutofillSuggestion:
    """Normalized provider output, ready to be merged into a segment form.

    Field names follow the JSON wire format. ``type`` is the segment type
    the provider resolved the query as; ``highlights`` are display-only
    facts and are never merged into the form.
    """

    type: Optional[SegmentType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_all_day: Optional[bool] = None
    provider_name: Optional[str] = None
    confirmation_code: Optional[str] = None
    transport_number: Optional[str] = None
    timezone: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    highlights: Optional[Tuple[SuggestionHighlight, ...]] = None
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format; every key is always present."""
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        if self.type is not None:
            out["type"] = self.type.value
        if self.metadata is not None:
            out["metadata"] = dict(self.metadata)
        if self.highlights is not None:
            out["highlights"] = [h.to_dict() for h in self.highlights]
        return out

@dataclass(frozen=True, slots=True)
class SegmentLeg:
    """One origin-to-destination hop of a multi-stop journey.

    Times are kept exactly as the provider reported them; conversion to
    form-input shape happens in the form helpers.
    """

    origin: str = ""
    destination: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    carrier: str = ""
    number: str = ""
    seat: str = ""

    def to_metadata(self) -> Dict[str, Optional[str]]:
        """Serialize as a flat leg record, blank values as null."""
        return {
            "origin": self.origin or None,
            "destination": self.destination or None,
            "departure_time": self.departure_time or None,
            "arrival_time": self.arrival_time or None,
            "carrier": self.carrier or None,
            "number": self.number or None,
            "seat": self.seat or None,
        }


@dataclass(frozen=True, slots=True)
class AutofillResult:
    """A resolved suggestion together with how it was obtained."""

    suggestion: AutofillSuggestion
    cache: CacheStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.suggestion.to_dict(),
            "meta": {"cache": self.cache.value},
        }


@dataclass(frozen=True, slots=True)
class AutofillResponse:
    """Transport-agnostic response: an HTTP status and a JSON body."""

    status_code: int
    body: Dict[str, Any]

    @property
    def is_success(self) -> bool:
        return self.status_code == 200
