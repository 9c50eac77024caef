"""Departure/arrival details stored in segment metadata.

An endpoint field can live under a direct key (``departure_terminal``) or
inside the provider's endpoint object (``metadata["departure"]``). Direct
keys are what the user edits, so they take precedence.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Literal, Mapping, Optional

from .segment_form import SegmentFormState

Endpoint = Literal["departure", "arrival"]
EndpointField = Literal["airport", "terminal", "timezone", "gate"]


def _string(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _first(*values: Any) -> Optional[str]:
    for value in values:
        text = _string(value)
        if text:
            return text
    return None


def endpoint_field_from_metadata(
    metadata: Mapping[str, Any], endpoint: Endpoint, field_name: EndpointField
) -> Optional[str]:
    direct = _string(metadata.get(f"{endpoint}_{field_name}"))
    if direct:
        return direct

    raw = metadata.get(endpoint)
    if not raw:
        return None
    if isinstance(raw, str):
        return raw if field_name == "airport" else None
    if not isinstance(raw, Mapping):
        return None

    airport = raw.get("airport")
    airport = airport if isinstance(airport, Mapping) else {}

    if field_name == "airport":
        return _first(
            airport.get("name"),
            airport.get("shortName"),
            raw.get("airportName"),
            raw.get("name"),
        )
    if field_name == "terminal":
        return _first(raw.get("terminal"), raw.get("terminalName"))
    if field_name == "timezone":
        return _first(
            raw.get("timezone"), airport.get("timeZone"), airport.get("timezone")
        )
    if field_name == "gate":
        return _first(raw.get("gate"), raw.get("gateNumber"), raw.get("gate_number"))
    return None


def endpoint_field_value(
    form: SegmentFormState,
    endpoint: Endpoint,
    field_name: EndpointField,
    fallback: str = "",
) -> str:
    """Return an endpoint detail from the form metadata, or ``fallback``."""
    return endpoint_field_from_metadata(form.metadata, endpoint, field_name) or fallback


def update_endpoint_field(
    form: SegmentFormState,
    endpoint: Endpoint,
    field_name: EndpointField,
    value: str,
) -> SegmentFormState:
    """Set (or clear, when blank) the direct metadata key of an endpoint detail."""
    key = f"{endpoint}_{field_name}"
    metadata = dict(form.metadata)
    trimmed = value.strip()
    if trimmed:
        metadata[key] = trimmed
    else:
        metadata.pop(key, None)
    return replace(form, metadata=metadata)
