"""Domain layer - Core models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    InvalidRequestError,
    ProviderError,
    ProviderRequestError,
    ProviderUnavailableError,
    SmartFillError,
    SuggestionNotFoundError,
)
from .models import (
    PLACE_SEGMENT_TYPES,
    AutofillRequest,
    AutofillResponse,
    AutofillResult,
    AutofillSuggestion,
    CacheStatus,
    GeoContext,
    SegmentLeg,
    SegmentType,
)

__all__ = [
    # Models
    "SegmentType",
    "PLACE_SEGMENT_TYPES",
    "CacheStatus",
    "GeoContext",
    "AutofillRequest",
    "AutofillSuggestion",
    "SegmentLeg",
    "AutofillResult",
    "AutofillResponse",
    # Errors
    "SmartFillError",
    "InvalidRequestError",
    "SuggestionNotFoundError",
    "ProviderError",
    "ProviderUnavailableError",
    "ProviderRequestError",
    "ConfigurationError",
]
