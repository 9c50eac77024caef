"""Editable legs of a segment form.

Form legs hold wall-clock ``YYYY-MM-DDTHH:MM`` times; when written back to
segment metadata they become flat records with UTC ISO timestamps.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..dates import local_input_to_iso, normalize_leg_time_input
from ..domain.models import SegmentLeg


def create_leg_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class SegmentLegForm:
    """One editable leg; every field is a (possibly empty) string."""

    id: str = field(default_factory=create_leg_id)
    origin: str = ""
    destination: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    carrier: str = ""
    number: str = ""
    seat: str = ""

    @classmethod
    def from_leg(cls, leg: SegmentLeg, tz: Optional[tzinfo] = None) -> SegmentLegForm:
        """Build a form leg from an extracted leg, converting its times."""
        return cls(
            origin=leg.origin,
            destination=leg.destination,
            departure_time=normalize_leg_time_input(leg.departure_time, tz),
            arrival_time=normalize_leg_time_input(leg.arrival_time, tz),
            carrier=leg.carrier,
            number=leg.number,
            seat=leg.seat,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "origin": self.origin,
            "destination": self.destination,
            "departureTime": self.departure_time,
            "arrivalTime": self.arrival_time,
            "carrier": self.carrier,
            "number": self.number,
            "seat": self.seat,
        }


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_legs_from_metadata(
    metadata: Optional[Mapping[str, Any]], tz: Optional[tzinfo] = None
) -> List[SegmentLegForm]:
    """Read the flat ``legs`` records stored on a segment back into form legs."""
    if not isinstance(metadata, Mapping):
        return []
    raw_legs = metadata.get("legs")
    if not isinstance(raw_legs, list):
        return []

    legs = []
    for record in raw_legs:
        if not isinstance(record, Mapping):
            continue
        departure = record.get("departure_time") or record.get("departureTime")
        arrival = record.get("arrival_time") or record.get("arrivalTime")
        legs.append(
            SegmentLegForm(
                origin=_text(record.get("origin")),
                destination=_text(record.get("destination")),
                departure_time=normalize_leg_time_input(_text(departure), tz),
                arrival_time=normalize_leg_time_input(_text(arrival), tz),
                carrier=_text(record.get("carrier")),
                number=_text(record.get("number")),
                seat=_text(record.get("seat")),
            )
        )
    return legs


def serialize_legs(
    legs: Sequence[SegmentLegForm], tz: Optional[tzinfo] = None
) -> Optional[List[Dict[str, Optional[str]]]]:
    """Serialize form legs as flat metadata records.

    Legs with no value at all are dropped and blank strings become None.

    Returns:
        The records, or None when no leg carries any value.
    """
    serialized = []
    for leg in legs:
        record = {
            "origin": leg.origin.strip() or None,
            "destination": leg.destination.strip() or None,
            "departure_time": local_input_to_iso(leg.departure_time, tz),
            "arrival_time": local_input_to_iso(leg.arrival_time, tz),
            "carrier": leg.carrier.strip() or None,
            "number": leg.number.strip() or None,
            "seat": leg.seat.strip() or None,
        }
        if any(record.values()):
            serialized.append(record)
    return serialized or None
