"""Provider adapters - Implementations of the provider ports.

Available implementations:
- AeroDataBoxFlightAdapter: flight schedules by flight number
- NavitiaTrainAdapter: train journeys by train number
- FoursquarePlaceAdapter: hotels, restaurants and activities (API key)
- NominatimPlaceAdapter: hotels, restaurants and activities (open data)
- FallbackPlaceProvider: Foursquare first, Nominatim when it has no answer
"""

from .aerodatabox import AeroDataBoxFlightAdapter
from .foursquare import FoursquarePlaceAdapter
from .navitia import NavitiaTrainAdapter
from .nominatim import NominatimPlaceAdapter
from .place_fallback import FallbackPlaceProvider

__all__ = [
    "AeroDataBoxFlightAdapter",
    "FallbackPlaceProvider",
    "FoursquarePlaceAdapter",
    "NavitiaTrainAdapter",
    "NominatimPlaceAdapter",
]
