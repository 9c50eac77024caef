"""Segment form helpers - merge Smart Fill suggestions into edit forms."""

from .endpoints import endpoint_field_value, update_endpoint_field
from .legs import SegmentLegForm, parse_legs_from_metadata, serialize_legs
from .segment_form import (
    MERGE_RULES,
    SegmentFormState,
    build_metadata_payload,
    initial_segment_form,
    merge_suggestion,
    parse_usd_cost_input,
    supports_legs,
)

__all__ = [
    "SegmentFormState",
    "SegmentLegForm",
    "MERGE_RULES",
    "initial_segment_form",
    "merge_suggestion",
    "supports_legs",
    "build_metadata_payload",
    "parse_usd_cost_input",
    "parse_legs_from_metadata",
    "serialize_legs",
    "endpoint_field_value",
    "update_endpoint_field",
]
