"""Multi-leg extraction from provider metadata.

Providers describe multi-hop journeys in incompatible shapes. Each shape
has one parser below; the parsers are tried in a fixed priority order
and the first one producing at least one leg wins:

1. flat_legs: ``legs`` is a list of flat leg records
   (origin / destination / departure_time / ...)
2. flight_legs: ``leg`` or ``legs`` holds flight-shaped entries with
   ``departure`` and ``arrival`` objects
3. stop_time_legs: ``stop_times`` lists two or more transit stops;
   consecutive stops become legs
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from ..domain.models import AutofillSuggestion, SegmentLeg

logger = logging.getLogger(__name__)

LegStrategy = Callable[[Mapping[str, Any], AutofillSuggestion], Optional[List[SegmentLeg]]]

_FLAT_KEYS = frozenset(
    {
        "origin",
        "destination",
        "departure_time",
        "departureTime",
        "arrival_time",
        "arrivalTime",
        "carrier",
        "number",
        "seat",
    }
)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _is_flight_shaped(entry: Any) -> bool:
    return isinstance(entry, Mapping) and (
        isinstance(entry.get("departure"), Mapping)
        or isinstance(entry.get("arrival"), Mapping)
    )


def _is_flat(entry: Any) -> bool:
    return (
        isinstance(entry, Mapping)
        and not _is_flight_shaped(entry)
        and any(key in entry for key in _FLAT_KEYS)
    )


def _scheduled_time(endpoint: Mapping[str, Any]) -> str:
    """Scheduled time of a flight endpoint, local time preferred over UTC."""
    nested = _mapping(endpoint.get("scheduledTime"))
    return (
        _text(endpoint.get("scheduledTimeLocal"))
        or _text(nested.get("local"))
        or _text(endpoint.get("scheduledTimeUtc"))
        or _text(nested.get("utc"))
    )


def _airport_name(endpoint: Mapping[str, Any]) -> str:
    return _text(_mapping(endpoint.get("airport")).get("name")) or _text(
        endpoint.get("airportName")
    )


def flat_legs(
    metadata: Mapping[str, Any], suggestion: AutofillSuggestion
) -> Optional[List[SegmentLeg]]:
    entries = metadata.get("legs")
    if not isinstance(entries, list):
        return None
    legs = [
        SegmentLeg(
            origin=_text(entry.get("origin")),
            destination=_text(entry.get("destination")),
            departure_time=_text(entry.get("departure_time"))
            or _text(entry.get("departureTime")),
            arrival_time=_text(entry.get("arrival_time"))
            or _text(entry.get("arrivalTime")),
            carrier=_text(entry.get("carrier")),
            number=_text(entry.get("number")),
            seat=_text(entry.get("seat")),
        )
        for entry in entries
        if _is_flat(entry)
    ]
    return legs or None


def flight_legs(
    metadata: Mapping[str, Any], suggestion: AutofillSuggestion
) -> Optional[List[SegmentLeg]]:
    candidate = metadata.get("leg") or metadata.get("legs")
    if isinstance(candidate, Mapping):
        entries: Sequence[Any] = [candidate]
    elif isinstance(candidate, list):
        entries = candidate
    else:
        return None

    legs = []
    for entry in entries:
        if not _is_flight_shaped(entry):
            continue
        departure = _mapping(entry.get("departure"))
        arrival = _mapping(entry.get("arrival"))
        legs.append(
            SegmentLeg(
                origin=_airport_name(departure),
                destination=_airport_name(arrival),
                departure_time=_scheduled_time(departure),
                arrival_time=_scheduled_time(arrival),
                carrier=suggestion.provider_name or "",
                number=suggestion.transport_number or "",
            )
        )
    return legs or None


def stop_time_legs(
    metadata: Mapping[str, Any], suggestion: AutofillSuggestion
) -> Optional[List[SegmentLeg]]:
    stops = metadata.get("stop_times")
    if not isinstance(stops, list) or len(stops) < 2:
        return None

    legs = []
    for current, following in zip(stops, stops[1:]):
        current, following = _mapping(current), _mapping(following)
        legs.append(
            SegmentLeg(
                origin=_text(_mapping(current.get("stop_point")).get("name"))
                or _text(current.get("name")),
                destination=_text(_mapping(following.get("stop_point")).get("name"))
                or _text(following.get("name")),
                departure_time=_text(current.get("departure_date_time")),
                arrival_time=_text(following.get("arrival_date_time")),
                carrier=suggestion.provider_name or "",
                number=suggestion.transport_number or "",
            )
        )
    return legs or None


LEG_STRATEGIES: Tuple[Tuple[str, LegStrategy], ...] = (
    ("flat_legs", flat_legs),
    ("flight_legs", flight_legs),
    ("stop_time_legs", stop_time_legs),
)


def extract_legs(suggestion: AutofillSuggestion) -> Optional[List[SegmentLeg]]:
    """Extract legs from a suggestion's metadata.

    Returns:
        The legs from the first strategy that yields any, or None.
    """
    metadata = suggestion.metadata
    if not isinstance(metadata, Mapping):
        return None
    for name, strategy in LEG_STRATEGIES:
        legs = strategy(metadata, suggestion)
        if legs:
            logger.debug("Legs extracted", extra={"strategy": name, "legs": len(legs)})
            return legs
    return None


def normalize_suggestion_legs(suggestion: AutofillSuggestion) -> AutofillSuggestion:
    """Rewrite ``metadata.legs`` as flat leg records when legs are found.

    Suggestions without extractable legs are returned unchanged.
    """
    legs = extract_legs(suggestion)
    if legs is None:
        return suggestion
    metadata = dict(suggestion.metadata or {})
    metadata["legs"] = [leg.to_metadata() for leg in legs]
    return replace(suggestion, metadata=metadata)
