"""Segment edit form state and Smart Fill merging.

A form state is immutable: every operation returns a new state so the
editing session can keep previous states for undo/redo.

Merging follows one rule per field, listed in MERGE_RULES: the
suggestion's value wins when it is not None, otherwise the form keeps
its own value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import tzinfo
from typing import Any, Callable, Dict, Optional, Tuple

from ..dates import iso_to_local_input
from ..domain.models import AutofillSuggestion, SegmentType
from ..services.leg_extraction import extract_legs
from ..services.normalizer import coerce_number
from .legs import SegmentLegForm, serialize_legs

DEFAULT_TIMEZONE = "UTC"

LEG_SEGMENT_TYPES = frozenset(
    {SegmentType.FLIGHT, SegmentType.TRAIN, SegmentType.TRANSPORT}
)


def supports_legs(segment_type: SegmentType) -> bool:
    return segment_type in LEG_SEGMENT_TYPES


@dataclass(frozen=True, slots=True)
class SegmentFormState:
    """The editable fields of a travel segment.

    Text inputs are strings (empty when unset), mirroring what an edit
    form holds.
    """

    type: SegmentType = SegmentType.FLIGHT
    title: str = ""
    description: str = ""
    location_name: str = ""
    location_address: str = ""
    location_lat: str = ""
    location_lng: str = ""
    start_time: str = ""
    end_time: str = ""
    timezone: str = DEFAULT_TIMEZONE
    is_all_day: bool = False
    provider_name: str = ""
    confirmation_code: str = ""
    transport_number: str = ""
    seat_info: str = ""
    cost_amount: str = ""
    legs: Tuple[SegmentLegForm, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used by the client."""
        return {
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "locationName": self.location_name,
            "locationAddress": self.location_address,
            "locationLat": self.location_lat,
            "locationLng": self.location_lng,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "timezone": self.timezone,
            "isAllDay": self.is_all_day,
            "providerName": self.provider_name,
            "confirmationCode": self.confirmation_code,
            "transportNumber": self.transport_number,
            "seatInfo": self.seat_info,
            "costAmount": self.cost_amount,
            "legs": [leg.to_dict() for leg in self.legs],
            "metadata": dict(self.metadata),
        }


def initial_segment_form(
    segment_type: SegmentType = SegmentType.FLIGHT,
    timezone: str = DEFAULT_TIMEZONE,
) -> SegmentFormState:
    return SegmentFormState(type=segment_type, timezone=timezone)


Converter = Callable[[Any, Optional[tzinfo]], Any]


def _same(value: Any, tz: Optional[tzinfo]) -> Any:
    return value


def _coordinate(value: Any, tz: Optional[tzinfo]) -> Optional[str]:
    number = coerce_number(value)
    if number is None:
        return None
    return str(int(number)) if number.is_integer() else repr(number)


def _local_time(value: Any, tz: Optional[tzinfo]) -> Optional[str]:
    return iso_to_local_input(value, tz) or None


def _boolean(value: Any, tz: Optional[tzinfo]) -> Optional[bool]:
    return value if isinstance(value, bool) else None


@dataclass(frozen=True, slots=True)
class MergeRule:
    """Copy ``suggestion_field`` into ``form_field`` when it converts to non-None."""

    form_field: str
    suggestion_field: str
    convert: Converter = _same


MERGE_RULES: Tuple[MergeRule, ...] = (
    MergeRule("title", "title"),
    MergeRule("description", "description"),
    MergeRule("location_name", "location_name"),
    MergeRule("location_address", "location_address"),
    MergeRule("location_lat", "location_lat", _coordinate),
    MergeRule("location_lng", "location_lng", _coordinate),
    MergeRule("start_time", "start_time", _local_time),
    MergeRule("end_time", "end_time", _local_time),
    MergeRule("is_all_day", "is_all_day", _boolean),
    MergeRule("provider_name", "provider_name"),
    MergeRule("confirmation_code", "confirmation_code"),
    MergeRule("transport_number", "transport_number"),
    MergeRule("timezone", "timezone"),
)


def merge_suggestion(
    form: SegmentFormState,
    suggestion: AutofillSuggestion,
    tz: Optional[tzinfo] = None,
) -> SegmentFormState:
    """Merge a Smart Fill suggestion into a form, returning a new form.

    Args:
        form: The current form state (left untouched).
        suggestion: The suggestion to apply.
        tz: Timezone for wall-clock times (process local zone by default).

    Returns:
        The merged form state.
    """
    updates: Dict[str, Any] = {}
    for rule in MERGE_RULES:
        value = rule.convert(getattr(suggestion, rule.suggestion_field), tz)
        if value is not None:
            updates[rule.form_field] = value

    metadata = {**form.metadata, **(suggestion.metadata or {})}
    if suggestion.source:
        metadata["smartFillSource"] = suggestion.source
    updates["metadata"] = metadata

    legs = extract_legs(suggestion)
    if legs and supports_legs(form.type):
        updates["legs"] = tuple(SegmentLegForm.from_leg(leg, tz) for leg in legs)

    return replace(form, **updates)


def build_metadata_payload(
    form: SegmentFormState, tz: Optional[tzinfo] = None
) -> Optional[Dict[str, Any]]:
    """Build the metadata to persist for a form.

    Legs are written for leg-capable types and dropped otherwise.

    Returns:
        The metadata, or None when it would be empty.
    """
    payload = dict(form.metadata)
    serialized = serialize_legs(form.legs, tz) if supports_legs(form.type) else None
    if serialized:
        payload["legs"] = serialized
    else:
        payload.pop("legs", None)
    return payload or None


_NON_NUMERIC = re.compile(r"[^0-9.,\-]")
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)")


def parse_usd_cost_input(value: str) -> Optional[float]:
    """Parse a typed cost such as "$1,234.50" into 1234.5."""
    if not value:
        return None
    normalized = _NON_NUMERIC.sub("", value).replace(",", "").strip()
    match = _LEADING_FLOAT.match(normalized)
    return float(match.group(0)) if match else None
